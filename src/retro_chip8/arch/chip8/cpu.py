# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。

ホストは step() を一定回数呼んだ後に tick_timers() を1回呼び、
get_display() と is_beeping() で出力を駆動する、というループを繰り返します。
"""
import logging
from typing import Dict, List, Optional

from retro_chip8.common.errors import MemoryOverflowError
from retro_chip8.common.types import DisplayView, RandomSource, RegisterLayoutInfo, RegisterInfo
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.snapshot import Operation
from retro_chip8.core.trace import TraceCallback
from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.state import (
    Chip8CpuState, FONT_SET, MEMORY_SIZE, NUM_REGISTERS, PROGRAM_START, system_random_byte,
)
from retro_chip8.arch.chip8.instructions import decode_opcode, execute_instruction

logger = logging.getLogger(__name__)

# @intent:responsibility 4KBのRAMを1つだけ接続したCHIP-8用のバスを生成します。
def create_bus() -> Bus:
    bus = Bus()
    bus.register_device(0x0000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))
    return bus

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 仮想マシン。

    Args:
        bus: 4KBのメモリを接続したバス。省略時は create_bus() で生成します。
        trace: デコードされた命令ごとに呼ばれるオブザーバ。Noneならトレースしません。
        random_source: RND命令が使う0〜255の乱数源。テストでは固定列を渡せます。
    """
    def __init__(self, bus: Optional[Bus] = None, trace: Optional[TraceCallback] = None,
                 random_source: Optional[RandomSource] = None):
        self._random_source = random_source or system_random_byte
        super().__init__(bus if bus is not None else create_bus(), trace)
        self._reset_memory()

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState(random_source=self._random_source)

    # @intent:responsibility メモリをゼロクリアし、フォントグリフを0x000から配置します。
    def _reset_memory(self) -> None:
        self._bus.load(0x0000, bytes(MEMORY_SIZE))
        self._bus.load(0x0000, FONT_SET)
        self._bus.get_and_clear_activity_log()

    # @intent:responsibility 構築直後と同じ状態へ戻します。ロード済みのプログラムは破棄されます。
    def reset(self) -> None:
        super().reset()
        self._reset_memory()
        logger.debug("machine reset")

    # @intent:responsibility プログラムをアドレス0x200から配置します。
    # @intent:pre-condition 0x200 + len(data) <= 4096。超える場合はメモリに一切触れずMemoryOverflowErrorを送出します。
    def load(self, data: bytes) -> None:
        data = bytes(data)
        if PROGRAM_START + len(data) > MEMORY_SIZE:
            raise MemoryOverflowError(
                f"Program of {len(data)} bytes does not fit in {MEMORY_SIZE - PROGRAM_START} bytes "
                f"available from {PROGRAM_START:#05x}."
            )
        self._bus.load(PROGRAM_START, data)
        logger.debug("loaded %d bytes at %#05x", len(data), PROGRAM_START)

    # @intent:responsibility PCから2バイトを読み出し、ビッグエンディアンの命令語を返します。
    # @intent:post-condition 範囲外ならAddressOutOfRangeError。PCはまだ進めていません。
    def _fetch(self) -> int:
        pc = self._state.pc
        high = self._bus.read(pc)
        low = self._bus.read(pc + 1)
        return (high << 8) | low

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus)

    # @intent:responsibility ディレイ/サウンドタイマを1ずつ減らします（0で飽和）。
    def tick_timers(self) -> None:
        s = self._state
        if s.delay_timer > 0:
            s.delay_timer -= 1
        if s.sound_timer > 0:
            s.sound_timer -= 1

    def is_beeping(self) -> bool:
        return self._state.sound_timer > 0

    # @intent:responsibility ホストからキーの押下状態を設定します。範囲外はIndexOutOfRangeError。
    def set_key(self, index: int, pressed: bool) -> None:
        self._state.set_key(index, pressed)

    def get_display(self) -> DisplayView:
        return self._state.display.view()

    # @intent:responsibility 指定範囲のメモリ内容を、バスログを汚さずに返します。
    def read_memory(self, address: int, length: int) -> bytes:
        return bytes(self._bus.peek(address + offset) for offset in range(length))

    # @intent:responsibility 指定アドレスの命令を状態を変えずにデコードします（命令インスペクション）。
    def decode_at(self, address: int) -> Operation:
        word = (self._bus.peek(address) << 8) | self._bus.peek(address + 1)
        return decode_opcode(word)

    # @intent:responsibility ホスト表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": s.v[index] for index in range(NUM_REGISTERS)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer
        })
        return registers

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{index:X}", 8) for index in range(NUM_REGISTERS)]),
            RegisterLayoutInfo("Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]
