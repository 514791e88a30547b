# src/retro_chip8/ui/register_view.py
"""
レジスタパネル。get_register_layout() のグループごとにラベルを並べ、
get_register_map() の値を16進で表示します。
"""
from typing import Dict, Optional
from PySide6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QGroupBox
from PySide6.QtCore import Qt

from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.ui.fonts import get_monospace_font

_COLUMNS = 4

class RegisterView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #101010; color: #C0C0C0;")
        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(4, 4, 4, 4)
        self._font = get_monospace_font(10)
        self._cpu: Optional[AbstractCpu] = None
        # レジスタ名 -> (ラベル, 16進桁数)
        self._cells: Dict[str, tuple] = {}

    # @intent:responsibility 表示対象のCPUを切り替え、そのレイアウトでパネルを組み直します。
    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._rebuild()
        self.update_registers()

    def _rebuild(self) -> None:
        while self._layout.count():
            widget = self._layout.takeAt(0).widget()
            if widget is not None:
                widget.deleteLater()
        self._cells = {}

        for group in self._cpu.get_register_layout():
            box = QGroupBox(group.group_name)
            grid = QGridLayout(box)
            grid.setHorizontalSpacing(10)
            for position, info in enumerate(group.registers):
                label = QLabel()
                label.setFont(self._font)
                label.setAlignment(Qt.AlignRight)
                label.setStyleSheet("color: #7FD88F;")
                grid.addWidget(label, *divmod(position, _COLUMNS))
                self._cells[info.name] = (label, (info.width + 3) // 4)
            self._layout.addWidget(box)
        self._layout.addStretch()

    # @intent:responsibility 現在のレジスタ値でラベルを書き換えます。
    def update_registers(self) -> None:
        if self._cpu is None:
            return
        for name, value in self._cpu.get_register_map().items():
            cell = self._cells.get(name)
            if cell is None:
                continue
            label, digits = cell
            label.setText(f"{name}={value:0{digits}X}")

    def get_register_text(self, name: str) -> str:
        return self._cells[name][0].text()
