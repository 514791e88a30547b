import os
import sys
import tempfile
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QKeyEvent
from PySide6.QtCore import Qt, QEvent
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import SystemConfig, MachineConfig
from retro_chip8.ui.app import build_parser
from retro_chip8.ui.main_window import MainWindow, build_qt_keymap

def key_event(event_type, key):
    return QKeyEvent(event_type, int(key.value), Qt.NoModifier)

class TestMainWindow(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        if not QApplication.instance():
            cls.app = QApplication(sys.argv)
        else:
            cls.app = QApplication.instance()

    def setUp(self):
        config = SystemConfig(machine=MachineConfig(ticks_per_frame=3))
        self.window = MainWindow(config)

    def tearDown(self):
        self.window.close()

    def test_build_qt_keymap(self):
        keymap = build_qt_keymap({"Q": 4, "1": 1, "NOPE": 2})
        self.assertEqual(keymap, {int(Qt.Key.Key_Q.value): 4, int(Qt.Key.Key_1.value): 1})

    # @intent:test_case 設定ファイルの複数文字のキー名（Space, Left）がQtのキーコードへ解決されることを検証します。
    def test_build_qt_keymap_multi_letter_names(self):
        config = ConfigLoader().load_from_string("keymap:\n  Space: 0x5\n  Left: 0x4\n")
        keymap = build_qt_keymap(config.keymap)
        self.assertEqual(keymap, {int(Qt.Key.Key_Space.value): 5, int(Qt.Key.Key_Left.value): 4})
        self.assertEqual(build_qt_keymap({"return": 1}), {int(Qt.Key.Key_Return.value): 1})

    def test_multi_letter_key_drives_keypad(self):
        config = ConfigLoader().load_from_string("keymap:\n  Space: 0x5\n")
        window = MainWindow(config)
        try:
            window.keyPressEvent(key_event(QEvent.KeyPress, Qt.Key.Key_Space))
            self.assertTrue(window.cpu.get_state().is_key_pressed(0x5))
        finally:
            window.close()

    # @intent:test_case 1フレームでticks_per_frame回のstepと1回のタイマ更新が行われることを検証します。
    def test_run_frame(self):
        # LD V0,5 / LD DT,V0 / ADD V1,1 / JP 204
        self.window.load_program(bytes([0x60, 0x05, 0xF0, 0x15, 0x71, 0x01, 0x12, 0x04]))
        self.assertTrue(self.window.is_running())

        self.window.run_frame()
        state = self.window.cpu.get_state()
        self.assertEqual(state.pc, 0x206)
        self.assertEqual(state.v[1], 1)
        self.assertEqual(state.delay_timer, 4)

    def test_run_frame_halts_on_error(self):
        self.window.load_program(b"\x00\xEE")
        self.window.run_frame()
        self.assertFalse(self.window.is_running())
        self.assertIn("Halted at 200", self.window.status_label.text())

    def test_beep_indicator(self):
        # LD V0,2 / LD ST,V0 / JP 204
        self.window.load_program(bytes([0x60, 0x02, 0xF0, 0x18, 0x12, 0x04]))
        self.window.run_frame()
        self.assertEqual(self.window.beep_label.text(), "BEEP")
        self.window.run_frame()
        self.assertEqual(self.window.beep_label.text(), "")

    def test_keypad_input(self):
        self.window.keyPressEvent(key_event(QEvent.KeyPress, Qt.Key.Key_W))
        self.assertTrue(self.window.cpu.get_state().is_key_pressed(0x5))
        self.window.keyReleaseEvent(key_event(QEvent.KeyRelease, Qt.Key.Key_W))
        self.assertFalse(self.window.cpu.get_state().is_key_pressed(0x5))

    # @intent:test_case リセットでマシンが初期化され、直前のプログラムが再ロードされることを検証します。
    def test_reset_reloads_program(self):
        self.window.load_program(bytes([0x60, 0x05, 0x12, 0x02]))
        self.window.run_frame()
        self.assertEqual(self.window.cpu.get_state().v[0], 5)

        self.window.keyReleaseEvent(key_event(QEvent.KeyRelease, Qt.Key.Key_N))
        state = self.window.cpu.get_state()
        self.assertEqual(state.pc, 0x200)
        self.assertEqual(state.v[0], 0)
        self.assertEqual(self.window.cpu.read_memory(0x200, 4), bytes([0x60, 0x05, 0x12, 0x02]))

    def test_load_rom(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "test.ch8")
            with open(path, "wb") as f:
                f.write(b"\x00\xE0")
            self.window.load_rom(path)
        self.assertTrue(self.window.is_running())
        self.assertIn("test.ch8", self.window.status_label.text())


class TestArgumentParser(unittest.TestCase):
    def test_parse_arguments(self):
        args = build_parser().parse_args(["game.ch8", "--config", "chip8.yaml", "-v"])
        self.assertEqual(args.rom, "game.ch8")
        self.assertEqual(args.config, "chip8.yaml")
        self.assertTrue(args.verbose)

    def test_rom_is_optional(self):
        args = build_parser().parse_args([])
        self.assertIsNone(args.rom)
        self.assertFalse(args.verbose)

if __name__ == '__main__':
    unittest.main()
