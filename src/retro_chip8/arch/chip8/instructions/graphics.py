# src/retro_chip8/arch/chip8/instructions/graphics.py
"""
画面命令（CLS, DRW）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import InstructionFields, fields_of, make_operation, reg, require_range

# --- CLS (00E0) ---
def decode_cls(opcode: int) -> Operation:
    return make_operation(opcode, "CLS")

def execute_cls(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.display.clear()

# --- DRW Vx, Vy, n (Dxyn) ---
def decode_drw(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "DRW", [reg(f.x), reg(f.y), str(f.n)])

# @intent:responsibility アドレスIからn行のスプライトを(Vx, Vy)にXOR描画し、衝突の有無をVFに設定します。
# @intent:rationale 各ピクセルの衝突判定は、そのピクセル自身を反転する直前の値で行い、描画全体で論理和を取ります。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    origin_x = state.v[f.x]
    origin_y = state.v[f.y]
    require_range(bus, state.i, f.n)

    collision = False
    for row in range(f.n):
        pixels = bus.read(state.i + row)
        for col in range(8):
            # 最上位ビットが左端
            if pixels & (0x80 >> col):
                collision |= state.display.toggle(origin_x + col, origin_y + row)

    state.vf = 1 if collision else 0
