from typing import Optional
from retro_chip8.arch.chip8.cpu import Chip8Cpu, create_bus
from retro_chip8.common.types import RandomSource
from retro_chip8.core.trace import logging_trace
from .models import SystemConfig

# @intent:responsibility システム構成（Config）に基づいて、BusとCPUを生成・接続します。
class SystemBuilder:
    def build_machine(self, config: SystemConfig, random_source: Optional[RandomSource] = None) -> Chip8Cpu:
        """
        設定に従ってCHIP-8マシンを生成します。
        machine.trace が有効な場合は logging_trace をオブザーバとして接続します。
        """
        trace = logging_trace if config.machine.trace else None
        return Chip8Cpu(create_bus(), trace=trace, random_source=random_source)
