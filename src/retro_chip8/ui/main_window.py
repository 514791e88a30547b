# src/retro_chip8/ui/main_window.py
"""
リファレンスホストのメインウィンドウ。

QTimerでフレームを刻み、1フレームごとに ticks_per_frame 回の step() と
1回の tick_timers() を実行してから画面を更新します。
"""
import logging
from typing import Dict, Optional

from PySide6.QtWidgets import QMainWindow, QLabel, QDockWidget, QFileDialog
from PySide6.QtGui import QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QTimer, Slot

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.common.errors import Chip8Error
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.models import SystemConfig
from retro_chip8.loader.loader import RomLoader
from .display_view import DisplayView
from .register_view import RegisterView
from .fonts import get_monospace_font

logger = logging.getLogger(__name__)

# @intent:responsibility キー名（"Q", "1" など）をQtのキーコードへ変換したキーマップを生成します。
def build_qt_keymap(keymap: Dict[str, int]) -> Dict[int, int]:
    # "space", "LEFT" なども受け付けるよう、小文字化した名前で引けるようにする
    by_lower_name = {member_name[len("Key_"):].lower(): member
                     for member_name, member in Qt.Key.__members__.items()
                     if member_name.startswith("Key_")}
    qt_keymap = {}
    for name, index in keymap.items():
        qt_key = by_lower_name.get(str(name).lower())
        if qt_key is None:
            logger.warning("ignoring unknown key name '%s' in keymap", name)
            continue
        qt_keymap[int(qt_key.value)] = index
    return qt_keymap

# @intent:responsibility マシン、表示、入力、フレームループを組み立てるメインウィンドウ。
class MainWindow(QMainWindow):
    def __init__(self, config: Optional[SystemConfig] = None, parent=None):
        super().__init__(parent)
        self._config = config or SystemConfig()
        self.setWindowTitle("Retro CHIP-8")

        self.cpu: Chip8Cpu = SystemBuilder().build_machine(self._config)
        self._rom: bytes = b""
        self._keymap = build_qt_keymap(self._config.keymap)

        display = self._config.display
        self.display_view = DisplayView(display.scale, display.foreground, display.background)
        self.setCentralWidget(self.display_view)

        self._create_status_bar()
        self._create_register_dock()
        self._create_menus()

        self._timer = QTimer(self)
        self._timer.setInterval(max(1, round(1000 / self._config.machine.frame_rate)))
        self._timer.timeout.connect(self.run_frame)

    def _create_status_bar(self):
        self.status_label = QLabel("No ROM loaded")
        self.beep_label = QLabel("")
        self.beep_label.setFont(get_monospace_font(10))
        self.statusBar().addWidget(self.status_label, 1)
        self.statusBar().addPermanentWidget(self.beep_label)

    def _create_register_dock(self):
        self.register_view = RegisterView()
        self.register_view.set_cpu(self.cpu)
        dock = QDockWidget("Registers", self)
        dock.setWidget(self.register_view)
        dock.setFeatures(QDockWidget.DockWidgetMovable | QDockWidget.DockWidgetFloatable)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("&File")

        open_action = QAction("&Open ROM...", self)
        open_action.triggered.connect(self._open_rom_dialog)
        file_menu.addAction(open_action)

        reset_action = QAction("&Reset", self)
        reset_action.triggered.connect(self.reset_machine)
        file_menu.addAction(reset_action)

        file_menu.addSeparator()
        quit_action = QAction("&Quit", self)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    def is_running(self) -> bool:
        return self._timer.isActive()

    # @intent:responsibility ROMファイルを読み込み、マシンをリセットしてから実行を開始します。
    def load_rom(self, path: str) -> None:
        self.cpu.reset()
        self._rom = RomLoader().load_rom(path, self.cpu)
        self._start(f"Running {path}")

    # @intent:responsibility メモリ上のプログラムを直接ロードして実行を開始します。
    def load_program(self, data: bytes) -> None:
        self.cpu.reset()
        self.cpu.load(data)
        self._rom = bytes(data)
        self._start("Running")

    def _start(self, message: str) -> None:
        self.status_label.setText(message)
        self._refresh()
        self._timer.start()

    @Slot()
    def _open_rom_dialog(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open ROM", "", "CHIP-8 ROM (*.ch8 *.c8 *.rom);;All Files (*)")
        if not path:
            return
        try:
            self.load_rom(path)
        except (OSError, Chip8Error) as error:
            logger.error("failed to load %s: %s", path, error)
            self.status_label.setText(f"Load failed: {error}")

    # @intent:responsibility マシンをリセットし、直前のROMを再ロードします（リセットはプログラムを保持しないため）。
    @Slot()
    def reset_machine(self):
        self.cpu.reset()
        if self._rom:
            self.cpu.load(self._rom)
            logger.info("machine reset, ROM reloaded")
            self._start("Running")
        else:
            self._refresh()

    # @intent:responsibility 1フレーム分（step × ticks_per_frame → tick_timers → 表示更新）を実行します。
    # @intent:post-condition 実行エラー時はループを停止し、ステータスバーに障害内容を表示します。
    @Slot()
    def run_frame(self):
        try:
            for _ in range(self._config.machine.ticks_per_frame):
                self.cpu.step()
        except Chip8Error as error:
            self._timer.stop()
            logger.error("execution halted at %#05x: %s", error.address or 0, error)
            self.status_label.setText(f"Halted at {error.address or 0:03X}: {error}")
            self._refresh()
            return

        self.cpu.tick_timers()
        self._refresh()

    def _refresh(self) -> None:
        self.display_view.set_pixels(self.cpu.get_display())
        self.beep_label.setText("BEEP" if self.cpu.is_beeping() else "")
        self.register_view.update_registers()

    def keyPressEvent(self, event: QKeyEvent):
        if event.isAutoRepeat():
            return
        if event.key() == Qt.Key.Key_Escape.value:
            self.close()
            return
        index = self._keymap.get(event.key())
        if index is None:
            super().keyPressEvent(event)
            return
        self.cpu.set_key(index, True)

    def keyReleaseEvent(self, event: QKeyEvent):
        if event.isAutoRepeat():
            return
        index = self._keymap.get(event.key())
        if index is not None:
            self.cpu.set_key(index, False)
        elif event.key() == Qt.Key.Key_N.value:
            self.reset_machine()
        else:
            super().keyReleaseEvent(event)

    def closeEvent(self, event: QCloseEvent):
        self._timer.stop()
        super().closeEvent(event)
