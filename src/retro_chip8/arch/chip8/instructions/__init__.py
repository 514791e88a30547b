# src/retro_chip8/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from retro_chip8.common.errors import UnsupportedInstructionError
from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Operation
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import make_operation
from .maps import DECODE_MAP, EXECUTE_MAP, pattern_key

# @intent:responsibility CHIP-8の命令語をデコードします。
def decode_opcode(opcode: int) -> Operation:
    """
    命令語をデコードし、Operationオブジェクトを返します。
    未定義のパターンは例外にせず"UNKNOWN"として返し、実行時にエラーとします。
    """
    decoder = DECODE_MAP.get(pattern_key(opcode))
    if decoder:
        return decoder(opcode)
    return make_operation(opcode, "UNKNOWN", [f"${opcode:04X}"])

# @intent:responsibility デコードされたCHIP-8命令を実行します。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus) -> None:
    """
    デコードされた命令を実行し、CPUの状態を変更します。
    対応する実装が無い場合はUnsupportedInstructionErrorを送出します。
    """
    executor = EXECUTE_MAP.get(pattern_key(operation.opcode))
    if executor is None:
        raise UnsupportedInstructionError(
            f"Unsupported instruction {operation.opcode_hex}", opcode=operation.opcode
        )
    executor(state, bus, operation)
