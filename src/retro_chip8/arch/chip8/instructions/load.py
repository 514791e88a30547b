# src/retro_chip8/arch/chip8/instructions/load.py
"""
ロード/ストア命令（レジスタ、Iレジスタ、タイマ、メモリ転送、キー待ち）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, FONT_GLYPH_SIZE
from .base import InstructionFields, fields_of, make_operation, reg, imm8, addr12, require_range

# --- LD Vx, nn (6xnn) ---
def decode_ld_imm(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "LD", [reg(f.x), imm8(f.nn)])

def execute_ld_imm(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] = f.nn

# --- LD Vx, Vy (8xy0) ---
def decode_ld_reg(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "LD", [reg(f.x), reg(f.y)])

def execute_ld_reg(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] = state.v[f.y]

# --- LD I, nnn (Annn) ---
def decode_ld_i(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "LD", ["I", addr12(f.nnn)])

def execute_ld_i(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.i = fields_of(op).nnn

# --- LD Vx, DT (Fx07) ---
def decode_ld_vx_dt(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "LD", [reg(f.x), "DT"])

def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[fields_of(op).x] = state.delay_timer

# --- LD Vx, K (Fx0A) ---
def decode_ld_vx_k(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "LD", [reg(f.x), "K"])

# @intent:responsibility キー入力待ち。押されたキーが無ければPCを2戻し、次のstepで同じ命令を再実行させます。
# @intent:post-condition スキャン前にVxへディレイタイマ値を書き込むため、キーが無い場合はその値が残ります。
def execute_ld_vx_k(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] = state.delay_timer
    key = state.first_pressed_key()
    if key is None:
        state.pc = (state.pc - 2) & 0xFFFF
    else:
        state.v[f.x] = key

# --- LD DT, Vx (Fx15) ---
def decode_ld_dt_vx(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "LD", ["DT", reg(f.x)])

def execute_ld_dt_vx(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.delay_timer = state.v[fields_of(op).x]

# --- LD ST, Vx (Fx18) ---
def decode_ld_st_vx(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "LD", ["ST", reg(f.x)])

def execute_ld_st_vx(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.sound_timer = state.v[fields_of(op).x]

# --- LD F, Vx (Fx29) ---
def decode_ld_f(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "LD", ["F", reg(f.x)])

# @intent:responsibility Vxの数字グリフの先頭アドレス（Vx * 5）をIに設定します。
def execute_ld_f(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.i = state.v[fields_of(op).x] * FONT_GLYPH_SIZE

# --- LD B, Vx (Fx33) ---
def decode_ld_b(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "LD", ["B", reg(f.x)])

# @intent:responsibility Vxの10進3桁（百、十、一）をI, I+1, I+2に格納します。
def execute_ld_b(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    value = state.v[fields_of(op).x]
    require_range(bus, state.i, 3)
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, value % 10)

# --- LD [I], Vx (Fx55) ---
def decode_store_regs(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "LD", ["[I]", reg(f.x)])

# @intent:responsibility V0〜VxをアドレスIから順にメモリへ格納します。Iは変化しません。
def execute_store_regs(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    x = fields_of(op).x
    require_range(bus, state.i, x + 1)
    for index in range(x + 1):
        bus.write(state.i + index, state.v[index])

# --- LD Vx, [I] (Fx65) ---
def decode_load_regs(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "LD", [reg(f.x), "[I]"])

def execute_load_regs(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    x = fields_of(op).x
    require_range(bus, state.i, x + 1)
    for index in range(x + 1):
        state.v[index] = bus.read(state.i + index)
