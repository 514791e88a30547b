# tests/transport/test_bus.py
"""
retro_chip8.transport.busモジュールの単体テスト。
"""
import pytest
from retro_chip8.common.errors import AddressOutOfRangeError
from retro_chip8.transport.bus import Bus, BusAccess, BusAccessType, Device, RAM

# @intent:test_suite 共通バスとRAMデバイスの基本的な機能とエラーハンドリングを検証します。

class TestRAM:
    """
    RAMデバイスの単体テスト。
    """
    # @intent:test_case_init RAMクラスが正しいサイズで初期化されることを検証します。
    def test_ram_init_valid_size(self):
        ram = RAM(16)
        assert ram.get_size() == 16
        assert all(ram.read(a) == 0 for a in range(16))

    # @intent:test_case_init 無効なサイズでRAMを初期化するとValueErrorが発生することを検証します。
    def test_ram_init_invalid_size(self):
        with pytest.raises(ValueError, match="RAM size must be a positive integer"):
            RAM(0)
        with pytest.raises(ValueError, match="RAM size must be a positive integer"):
            RAM(1.5)

    def test_ram_read_write_within_bounds(self):
        ram = RAM(4)
        ram.write(0, 0x12)
        ram.write(3, 0x78)
        assert ram.read(0) == 0x12
        assert ram.read(3) == 0x78

    # @intent:test_case_oob 境界外アドレスへのアクセスはAddressOutOfRangeError（IndexErrorの一種）となることを検証します。
    def test_ram_read_write_out_of_bounds(self):
        ram = RAM(4)
        with pytest.raises(AddressOutOfRangeError):
            ram.read(4)
        with pytest.raises(IndexError):
            ram.write(-1, 0x00)

    def test_ram_write_invalid_data(self):
        ram = RAM(1)
        with pytest.raises(ValueError, match="Cannot store 256"):
            ram.write(0, 0x100)

    # @intent:test_case ゼロクリアで全てのバイトが0に戻ることを検証します。
    def test_ram_clear(self):
        ram = RAM(8)
        for address in range(8):
            ram.write(address, 0xAA)
        ram.clear()
        assert all(ram.read(a) == 0 for a in range(8))


class TestBus:
    """
    Busの単体テスト。
    """
    @pytest.fixture
    def bus(self):
        bus = Bus()
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        return bus

    def test_register_device_size_mismatch(self):
        bus = Bus()
        with pytest.raises(ValueError, match="does not match"):
            bus.register_device(0x000, 0x0FF, RAM(0x1000))

    def test_register_device_invalid_range(self):
        bus = Bus()
        with pytest.raises(ValueError):
            bus.register_device(0x100, 0x0FF, RAM(1))

    def test_register_non_device(self):
        bus = Bus()
        with pytest.raises(TypeError):
            bus.register_device(0x000, 0x000, object())

    # @intent:test_case_rw 読み書きがバスアクティビティとして記録されることを検証します。
    def test_read_write_logged(self, bus):
        bus.write(0x300, 0x42)
        assert bus.read(0x300) == 0x42

        log = bus.get_and_clear_activity_log()
        assert log == [
            BusAccess(0x300, 0x42, BusAccessType.WRITE),
            BusAccess(0x300, 0x42, BusAccessType.READ),
        ]
        assert bus.get_and_clear_activity_log() == []

    # @intent:test_case peekとloadはアクティビティログを汚さないことを検証します。
    def test_peek_and_load_not_logged(self, bus):
        bus.load(0x200, [0x12, 0x34])
        assert bus.peek(0x200) == 0x12
        assert bus.peek(0x201) == 0x34
        assert bus.get_and_clear_activity_log() == []

    def test_unmapped_address(self, bus):
        with pytest.raises(AddressOutOfRangeError, match="not mapped"):
            bus.read(0x1000)
        with pytest.raises(AddressOutOfRangeError):
            bus.write(0x1000, 0)

    # @intent:test_case 範囲全体のマップ判定を検証します。
    def test_is_mapped(self, bus):
        assert bus.is_mapped(0xFFD, 3)
        assert not bus.is_mapped(0xFFE, 3)
        assert not bus.is_mapped(0x1000)
        assert bus.is_mapped(0x1000, 0)

    def test_custom_device(self):
        class ConstantDevice(Device):
            def read(self, address):
                return 0x5A

            def write(self, address, data):
                pass

            def get_size(self):
                return 16

        bus = Bus()
        bus.register_device(0x000, 0x00F, ConstantDevice())
        assert bus.read(0x00F) == 0x5A
