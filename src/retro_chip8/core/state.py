# retro_chip8/core/state.py
"""
Core Layer (レジスタ状態の基底)
"""
from dataclasses import dataclass

# @intent:responsibility 全アーキテクチャに共通するPCとSP。固有のレジスタはサブクラスで追加します。
@dataclass
class CpuState:
    pc: int = 0x0000
    sp: int = 0x0000  # CHIP-8ではスタックの使用段数
