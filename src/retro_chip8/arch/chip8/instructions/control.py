# src/retro_chip8/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import InstructionFields, fields_of, make_operation, reg, imm8, addr12, skip_if

# --- NOP (0000) ---
def decode_nop(opcode: int) -> Operation:
    return make_operation(opcode, "NOP")

def execute_nop(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    # Intentional: NOP (No Operation)
    pass

# --- RET (00EE) ---
def decode_ret(opcode: int) -> Operation:
    return make_operation(opcode, "RET")

# @intent:responsibility スタックから戻りアドレスをポップしてPCに設定します。空ならStackUnderflowError。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.pc = state.pop()

# --- JP nnn (1nnn) ---
def decode_jp(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "JP", [addr12(f.nnn)])

def execute_jp(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.pc = fields_of(op).nnn

# --- CALL nnn (2nnn) ---
def decode_call(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "CALL", [addr12(f.nnn)])

# @intent:responsibility 戻りアドレスをプッシュしてからジャンプします。満杯ならStackOverflowError。
def execute_call(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    # state.pcはCpu.stepで既に次の命令を指している
    state.push(state.pc)
    state.pc = fields_of(op).nnn

# --- SE Vx, nn (3xnn) ---
def decode_se_imm(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "SE", [reg(f.x), imm8(f.nn)])

def execute_se_imm(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    skip_if(state, state.v[f.x] == f.nn)

# --- SNE Vx, nn (4xnn) ---
def decode_sne_imm(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "SNE", [reg(f.x), imm8(f.nn)])

def execute_sne_imm(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    skip_if(state, state.v[f.x] != f.nn)

# --- SE Vx, Vy (5xy0) ---
def decode_se_reg(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "SE", [reg(f.x), reg(f.y)])

def execute_se_reg(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    skip_if(state, state.v[f.x] == state.v[f.y])

# --- SNE Vx, Vy (9xy0) ---
def decode_sne_reg(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "SNE", [reg(f.x), reg(f.y)])

def execute_sne_reg(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    skip_if(state, state.v[f.x] != state.v[f.y])

# --- JP V0, nnn (Bnnn) ---
def decode_jp_v0(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "JP", ["V0", addr12(f.nnn)])

# @intent:rationale マスクしない。メモリ外を指した場合は次のフェッチでAddressOutOfRangeErrorとなる。
def execute_jp_v0(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.pc = state.v[0] + fields_of(op).nnn

# --- SKP Vx (Ex9E) ---
def decode_skp(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "SKP", [reg(f.x)])

# @intent:pre-condition Vxは0〜15のキー番号であること。範囲外はIndexOutOfRangeError。
def execute_skp(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    skip_if(state, state.is_key_pressed(state.v[f.x]))

# --- SKNP Vx (ExA1) ---
def decode_sknp(opcode: int) -> Operation:
    f = InstructionFields.from_word(opcode)
    return make_operation(opcode, "SKNP", [reg(f.x)])

def execute_sknp(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    f = fields_of(op)
    skip_if(state, not state.is_key_pressed(state.v[f.x]))
