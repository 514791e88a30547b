import unittest
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.common.errors import (
    AddressOutOfRangeError, IndexOutOfRangeError, StackOverflowError, StackUnderflowError,
    UnsupportedInstructionError,
)

class TestChip8ControlInstructions(unittest.TestCase):
    """
    制御命令をstep()経由で実行し、PCとスタックの遷移を検証します。
    """
    def setUp(self):
        self.cpu = Chip8Cpu(random_source=lambda: 0)
        self.state = self.cpu.get_state()

    def _run(self, *words, steps=1):
        program = bytearray()
        for word in words:
            program += bytes([word >> 8, word & 0xFF])
        self.cpu.load(bytes(program))
        for _ in range(steps):
            snapshot = self.cpu.step()
        return snapshot

    def test_nop(self):
        snapshot = self._run(0x0000)
        self.assertEqual(snapshot.operation.mnemonic, "NOP")
        self.assertEqual(self.state.pc, 0x202)

    def test_jp(self):
        self._run(0x1ABC)
        self.assertEqual(self.state.pc, 0xABC)

    # @intent:test_case CALLは次の命令のアドレスを積み、RETでそこへ戻ることを検証します。
    def test_call_and_ret(self):
        # 200: CALL 206 / 202: NOP / 204: NOP / 206: RET
        self._run(0x2206, 0x0000, 0x0000, 0x00EE)
        self.assertEqual(self.state.pc, 0x206)
        self.assertEqual(self.state.sp, 1)
        self.assertEqual(self.state.stack[0], 0x202)

        self.cpu.step()
        self.assertEqual(self.state.pc, 0x202)
        self.assertEqual(self.state.sp, 0)

    def test_ret_with_empty_stack(self):
        self.cpu.load(b"\x00\xEE")
        with self.assertRaises(StackUnderflowError) as ctx:
            self.cpu.step()
        self.assertEqual(ctx.exception.address, 0x200)
        self.assertEqual(ctx.exception.opcode, 0x00EE)
        self.assertEqual(self.state.pc, 0x200)
        self.assertEqual(self.state.sp, 0)

    # @intent:test_case 自分自身を呼び続けるプログラムは17回目のCALLでStackOverflowErrorとなります。
    def test_call_overflow(self):
        self.cpu.load(b"\x22\x00")
        for _ in range(16):
            self.cpu.step()
        self.assertEqual(self.state.sp, 16)

        with self.assertRaises(StackOverflowError):
            self.cpu.step()
        self.assertEqual(self.state.sp, 16)
        self.assertEqual(self.state.pc, 0x200)

    def test_se_imm(self):
        self.state.v[1] = 0x42
        self._run(0x3142)
        self.assertEqual(self.state.pc, 0x204)

    def test_se_imm_not_equal(self):
        self._run(0x3142)
        self.assertEqual(self.state.pc, 0x202)

    def test_sne_imm(self):
        self._run(0x4142)
        self.assertEqual(self.state.pc, 0x204)

    def test_se_reg_and_sne_reg(self):
        self.state.v[1] = 7
        self.state.v[2] = 7
        self._run(0x5120)
        self.assertEqual(self.state.pc, 0x204)

        self.cpu.reset()
        self.state = self.cpu.get_state()
        self.state.v[1] = 7
        self._run(0x9120)
        self.assertEqual(self.state.pc, 0x204)

    def test_jp_v0(self):
        self.state.v[0] = 0x10
        snapshot = self._run(0xB300)
        self.assertEqual(snapshot.operation.text(), "JP V0, $300")
        self.assertEqual(self.state.pc, 0x310)

    # @intent:test_case メモリ外へのジャンプは次のフェッチでAddressOutOfRangeErrorとなります。
    def test_jp_v0_beyond_memory_fails_on_fetch(self):
        self.state.v[0] = 0xFF
        self._run(0xBFFF)
        self.assertEqual(self.state.pc, 0x10FE)
        with self.assertRaises(AddressOutOfRangeError):
            self.cpu.step()
        self.assertEqual(self.state.pc, 0x10FE)

    def test_fetch_at_last_byte_fails(self):
        self._run(0x1FFF)
        with self.assertRaises(AddressOutOfRangeError):
            self.cpu.step()

    def test_skp_and_sknp(self):
        self.state.v[3] = 0xA
        self.cpu.set_key(0xA, True)
        self._run(0xE39E)
        self.assertEqual(self.state.pc, 0x204)

        self.state.pc = 0x200
        self.cpu.load(b"\xE3\xA1")
        self.cpu.step()
        self.assertEqual(self.state.pc, 0x202)

        self.cpu.set_key(0xA, False)
        self.state.pc = 0x200
        self.cpu.step()
        self.assertEqual(self.state.pc, 0x204)

    def test_skp_with_invalid_key_register(self):
        self.state.v[3] = 0x10
        self.cpu.load(b"\xE3\x9E")
        with self.assertRaises(IndexOutOfRangeError):
            self.cpu.step()
        self.assertEqual(self.state.pc, 0x200)

    # @intent:test_case 未定義パターンはUNKNOWNとしてデコードされ、実行時にUnsupportedInstructionErrorとなります。
    def test_unknown_instruction(self):
        self.cpu.load(b"\x01\x23")
        self.assertEqual(self.cpu.decode_at(0x200).mnemonic, "UNKNOWN")
        with self.assertRaises(UnsupportedInstructionError) as ctx:
            self.cpu.step()
        self.assertEqual(ctx.exception.opcode, 0x0123)
        self.assertEqual(self.state.pc, 0x200)

    def test_unknown_pattern_in_defined_group(self):
        for word in (0x5121, 0x812F, 0xE1FF, 0xF1FF, 0x9121):
            with self.subTest(word=f"{word:04X}"):
                self.cpu.reset()
                self.state = self.cpu.get_state()
                self.cpu.load(bytes([word >> 8, word & 0xFF]))
                with self.assertRaises(UnsupportedInstructionError):
                    self.cpu.step()

if __name__ == '__main__':
    unittest.main()
