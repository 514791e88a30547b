# src/retro_chip8/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
from dataclasses import dataclass
from typing import List

from retro_chip8.common.errors import AddressOutOfRangeError
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState

# @intent:data_structure 16ビット命令語を4つのニブルと頻出する即値に分解した結果。
@dataclass(frozen=True)
class InstructionFields:
    opcode: int
    n1: int    # 最上位ニブル
    x: int     # 第2ニブル（レジスタ番号）
    y: int     # 第3ニブル（レジスタ番号）
    n: int     # 最下位ニブル
    nn: int    # 下位8ビット即値
    nnn: int   # 下位12ビットアドレス

    @classmethod
    def from_word(cls, word: int) -> "InstructionFields":
        return cls(
            opcode=word,
            n1=(word & 0xF000) >> 12,
            x=(word & 0x0F00) >> 8,
            y=(word & 0x00F0) >> 4,
            n=word & 0x000F,
            nn=word & 0x00FF,
            nnn=word & 0x0FFF,
        )

# @intent:utility_function Operationに格納された命令語からフィールドを復元します。
def fields_of(op: Operation) -> InstructionFields:
    return InstructionFields.from_word(op.opcode)

# @intent:utility_function 命令語とニーモニックからOperationを組み立てます。
def make_operation(word: int, mnemonic: str, operands: List[str] = None) -> Operation:
    return Operation(f"{word:04X}", mnemonic, list(operands or []), [word >> 8, word & 0xFF], 1, 2)

def reg(index: int) -> str:
    return f"V{index:X}"

def imm8(value: int) -> str:
    return f"${value:02X}"

def addr12(value: int) -> str:
    return f"${value:03X}"

# @intent:utility_function 条件成立時に次の命令を読み飛ばします。
def skip_if(state: Chip8CpuState, condition: bool) -> None:
    if condition:
        state.pc = (state.pc + 2) & 0xFFFF

# @intent:utility_function 複数バイトを扱う命令のため、アクセス範囲全体を事前に検証します。
# @intent:post-condition 範囲外を含む場合はAddressOutOfRangeErrorを送出し、状態は一切変更されていません。
def require_range(bus: Bus, address: int, length: int) -> None:
    if not bus.is_mapped(address, length):
        raise AddressOutOfRangeError(
            f"Memory range {address:#06x}..{address + length - 1:#06x} is outside the address space."
        )
