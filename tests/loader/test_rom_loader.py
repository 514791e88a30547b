# tests/loader/test_rom_loader.py
"""
retro_chip8.loader.loaderモジュールの単体テスト。
"""
import logging
import pytest

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.common.errors import MemoryOverflowError
from retro_chip8.loader.loader import RomLoader

# @intent:test_suite ROMファイルの読み込みとCPUへの配置を検証します。

class TestRomLoader:
    @pytest.fixture
    def cpu(self):
        return Chip8Cpu(random_source=lambda: 0)

    def test_read_rom(self, tmp_path):
        path = tmp_path / "test.ch8"
        path.write_bytes(b"\x00\xE0\x12\x00")
        assert RomLoader().read_rom(path) == b"\x00\xE0\x12\x00"

    # @intent:test_case_load ROMが0x200から配置され、ロードがINFOで記録されることを検証します。
    def test_load_rom(self, tmp_path, cpu, caplog):
        path = tmp_path / "test.ch8"
        path.write_bytes(b"\x60\x0A\x61\x05")

        with caplog.at_level(logging.INFO, logger="retro_chip8.loader.loader"):
            data = RomLoader().load_rom(str(path), cpu)

        assert data == b"\x60\x0A\x61\x05"
        assert cpu.read_memory(0x200, 4) == data
        assert "4 bytes" in caplog.text

    def test_load_rom_too_large(self, tmp_path, cpu):
        path = tmp_path / "huge.ch8"
        path.write_bytes(b"\xFF" * 0xE01)
        with pytest.raises(MemoryOverflowError):
            RomLoader().load_rom(path, cpu)
        assert cpu.read_memory(0x200, 1) == b"\x00"

    def test_missing_file(self, tmp_path, cpu):
        with pytest.raises(FileNotFoundError):
            RomLoader().load_rom(tmp_path / "missing.ch8", cpu)
