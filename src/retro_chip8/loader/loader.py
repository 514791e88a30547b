# retro_chip8/loader/loader.py
"""
ROMローダーモジュール。
生のバイナリ（2バイト/命令、ビッグエンディアン）をファイルから読み込みます。
"""
import logging
from pathlib import Path
from typing import Union

from retro_chip8.arch.chip8.cpu import Chip8Cpu

logger = logging.getLogger(__name__)

class RomLoader:
    """
    CHIP-8のROMファイルを読み込み、CPUのメモリへロードするローダー。
    """
    def read_rom(self, file_path: Union[str, Path]) -> bytes:
        with open(file_path, 'rb') as f:
            return f.read()

    # @intent:responsibility ファイルを読み込んでアドレス0x200から配置し、読み込んだバイト列を返します。
    # @intent:post-condition 大きすぎるROMはメモリに触れる前にMemoryOverflowErrorとなります。
    def load_rom(self, file_path: Union[str, Path], cpu: Chip8Cpu) -> bytes:
        data = self.read_rom(file_path)
        cpu.load(data)
        logger.info("loaded ROM %s (%d bytes)", file_path, len(data))
        return data
