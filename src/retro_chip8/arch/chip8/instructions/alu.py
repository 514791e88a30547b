# src/retro_chip8/arch/chip8/instructions/alu.py
"""
ALU命令（算術、論理、シフト、乱数）の実装。

ADD/SUB/SUBN はVFを結果レジスタの後に書き込むため、x == 0xF ではフラグ値が残ります。
SHR/SHL はVFを先に書き込み、シフト結果を後から書き込むため、x == 0xF ではシフト結果が残ります。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import InstructionFields, fields_of, make_operation, reg, imm8

def _decode_xy(opcode: int, mnemonic: str) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, mnemonic, [reg(f.x), reg(f.y)])

# --- ADD Vx, nn (7xnn) ---
def decode_add_imm(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "ADD", [reg(f.x), imm8(f.nn)])

# @intent:responsibility 8ビットで折り返す加算。フラグは変化しません。
def execute_add_imm(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] = (state.v[f.x] + f.nn) & 0xFF

# --- OR Vx, Vy (8xy1) ---
def decode_or(opcode: int) -> Operation:
    return _decode_xy(opcode, "OR")

def execute_or(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] |= state.v[f.y]

# --- AND Vx, Vy (8xy2) ---
def decode_and(opcode: int) -> Operation:
    return _decode_xy(opcode, "AND")

def execute_and(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] &= state.v[f.y]

# --- XOR Vx, Vy (8xy3) ---
def decode_xor(opcode: int) -> Operation:
    return _decode_xy(opcode, "XOR")

def execute_xor(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] ^= state.v[f.y]

# --- ADD Vx, Vy (8xy4) ---
def decode_add_reg(opcode: int) -> Operation:
    return _decode_xy(opcode, "ADD")

# @intent:responsibility 加算し、桁あふれ（和 > 255）をVFに設定します。
def execute_add_reg(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    total = state.v[f.x] + state.v[f.y]
    state.v[f.x] = total & 0xFF
    state.vf = 1 if total > 0xFF else 0

# --- SUB Vx, Vy (8xy5) ---
def decode_sub(opcode: int) -> Operation:
    return _decode_xy(opcode, "SUB")

# @intent:responsibility Vx - Vy。借りが発生しなければ（Vx >= Vy）VF=1。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    vx, vy = state.v[f.x], state.v[f.y]
    state.v[f.x] = (vx - vy) & 0xFF
    state.vf = 1 if vx >= vy else 0

# --- SHR Vx (8xy6) ---
def decode_shr(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "SHR", [reg(f.x)])

# @intent:responsibility シフト前の最下位ビットをVFに設定してから右シフトします。Vyは使用しません。
def execute_shr(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    state.vf = state.v[f.x] & 0x01
    state.v[f.x] >>= 1

# --- SUBN Vx, Vy (8xy7) ---
def decode_subn(opcode: int) -> Operation:
    return _decode_xy(opcode, "SUBN")

# @intent:responsibility Vy - Vx。借りが発生しなければ（Vy >= Vx）VF=1。
def execute_subn(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    vx, vy = state.v[f.x], state.v[f.y]
    state.v[f.x] = (vy - vx) & 0xFF
    state.vf = 1 if vy >= vx else 0

# --- SHL Vx (8xyE) ---
def decode_shl(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "SHL", [reg(f.x)])

# @intent:responsibility シフト前の最上位ビットをVFに設定してから左シフトします。
def execute_shl(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    state.vf = (state.v[f.x] >> 7) & 0x01
    state.v[f.x] = (state.v[f.x] << 1) & 0xFF

# --- RND Vx, nn (Cxnn) ---
def decode_rnd(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "RND", [reg(f.x), imm8(f.nn)])

# @intent:responsibility 注入された乱数源の1バイトとnnの論理積をVxに設定します。
def execute_rnd(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] = (state.random_source() & 0xFF) & f.nn

# --- ADD I, Vx (Fx1E) ---
def decode_add_i(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "ADD", ["I", reg(f.x)])

# @intent:responsibility Iは16ビットで折り返します。VFは変化しません。
def execute_add_i(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    state.i = (state.i + state.v[f.x]) & 0xFFFF
