# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
import random
from dataclasses import dataclass, field
from typing import List

from retro_chip8.common.errors import IndexOutOfRangeError, StackOverflowError, StackUnderflowError
from retro_chip8.common.types import RandomSource
from retro_chip8.core.state import CpuState
from retro_chip8.arch.chip8.display import Framebuffer

# @intent:constant CHIP-8のメモリレイアウトと各資源の容量を定義します。
MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
NUM_REGISTERS = 16
STACK_SIZE = 16
NUM_KEYS = 16
FLAG_REGISTER = 0xF

# @intent:constant 16進数字0〜Fのグリフ（各5バイト）。アドレス0x000から配置されます。
FONT_GLYPH_SIZE = 5
FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

_system_random = random.Random()


# @intent:responsibility 既定の乱数源。システム乱数から1バイトを返します。
def system_random_byte() -> int:
    return _system_random.getrandbits(8)


# @intent:responsibility CHIP-8の全レジスタ、スタック、タイマ、キーパッド、ディスプレイの状態を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUの状態を保持するデータクラス。
    spはスタック上の使用中エントリ数（0〜16）を表します。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)   # V0〜VF
    i: int = 0x0000                                                     # Address Register
    delay_timer: int = 0
    sound_timer: int = 0
    stack: List[int] = field(default_factory=lambda: [0] * STACK_SIZE)
    keys: List[bool] = field(default_factory=lambda: [False] * NUM_KEYS)
    display: Framebuffer = field(default_factory=Framebuffer)
    random_source: RandomSource = field(default=system_random_byte, compare=False, repr=False)

    # @intent:accessor フラグレジスタVFへのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    # @intent:responsibility 戻りアドレスをスタックへ積みます。
    # @intent:pre-condition spがSTACK_SIZE未満であること。満杯ならStackOverflowErrorを送出し、状態は変更しません。
    def push(self, address: int) -> None:
        if self.sp >= STACK_SIZE:
            raise StackOverflowError(f"Call stack overflow (depth {STACK_SIZE}).")
        self.stack[self.sp] = address & 0xFFFF
        self.sp += 1

    # @intent:pre-condition spが1以上であること。空ならStackUnderflowErrorを送出し、状態は変更しません。
    def pop(self) -> int:
        if self.sp <= 0:
            raise StackUnderflowError("Return with empty call stack.")
        self.sp -= 1
        return self.stack[self.sp]

    # @intent:responsibility キーの押下状態を返します。
    def is_key_pressed(self, index: int) -> bool:
        if not 0 <= index < NUM_KEYS:
            raise IndexOutOfRangeError(f"Key index {index} out of range [0, {NUM_KEYS}).")
        return self.keys[index]

    def set_key(self, index: int, pressed: bool) -> None:
        if not 0 <= index < NUM_KEYS:
            raise IndexOutOfRangeError(f"Key index {index} out of range [0, {NUM_KEYS}).")
        self.keys[index] = bool(pressed)

    # @intent:responsibility 最初に押されているキー番号を返します。押されていなければNone。
    def first_pressed_key(self):
        for index, pressed in enumerate(self.keys):
            if pressed:
                return index
        return None
