# src/retro_chip8/ui/display_view.py
"""
CHIP-8のフレームバッファを拡大表示するウィジェット。
"""
from typing import Sequence
from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtGui import QColor, QImage, QPainter
from PySide6.QtCore import QSize

from retro_chip8.arch.chip8.display import SCREEN_WIDTH, SCREEN_HEIGHT

# @intent:responsibility 行優先のブールグリッドを、指定倍率の矩形として描画します。
class DisplayView(QWidget):
    """
    CPUの get_display() が返すビューを受け取り、表示を更新するウィジェット。
    """
    def __init__(self, scale: int = 20, foreground: str = "#32A956", background: str = "#000000",
                 width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT, parent=None):
        super().__init__(parent)
        self._scale = scale
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self._grid_width = width
        self._grid_height = height
        self._pixels: Sequence[bool] = (False,) * (width * height)
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)

    def sizeHint(self) -> QSize:
        return QSize(self._grid_width * self._scale, self._grid_height * self._scale)

    def minimumSizeHint(self) -> QSize:
        return self.sizeHint()

    # @intent:responsibility 表示するピクセル列を差し替え、再描画を要求します。
    # @intent:pre-condition pixelsの長さは width * height であること。
    def set_pixels(self, pixels: Sequence[bool]) -> None:
        if len(pixels) != self._grid_width * self._grid_height:
            raise ValueError(
                f"Expected {self._grid_width * self._grid_height} pixels, got {len(pixels)}"
            )
        self._pixels = pixels
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        self._paint(painter)
        painter.end()

    # @intent:responsibility ウィジェット外（テストやスクリーンショット）向けに現在の表示をQImageへ描画します。
    def render_image(self) -> QImage:
        size = self.sizeHint()
        image = QImage(size, QImage.Format_RGB32)
        painter = QPainter(image)
        self._paint(painter)
        painter.end()
        return image

    def _paint(self, painter: QPainter) -> None:
        painter.fillRect(0, 0, self._grid_width * self._scale, self._grid_height * self._scale, self._background)
        for index, lit in enumerate(self._pixels):
            if lit:
                # 1次元インデックスを(x, y)へ変換し、倍率分の矩形で塗る
                x = index % self._grid_width
                y = index // self._grid_width
                painter.fillRect(x * self._scale, y * self._scale, self._scale, self._scale, self._foreground)
