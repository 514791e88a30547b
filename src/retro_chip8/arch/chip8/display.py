# src/retro_chip8/arch/chip8/display.py
"""
CHIP-8のモノクロフレームバッファ。
"""
from dataclasses import dataclass, field
from typing import List

from retro_chip8.common.types import DisplayView

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

# @intent:responsibility 64x32の行優先ブールグリッドを保持し、XORによる描画を提供します。
@dataclass
class Framebuffer:
    """
    CHIP-8のディスプレイ。各ピクセルは上書きではなくXORで反転されます。
    """
    width: int = SCREEN_WIDTH
    height: int = SCREEN_HEIGHT
    pixels: List[bool] = field(init=False, repr=False)

    def __post_init__(self):
        self.pixels = [False] * (self.width * self.height)

    def clear(self) -> None:
        self.pixels = [False] * (self.width * self.height)

    def get_pixel(self, x: int, y: int) -> bool:
        return self.pixels[(y % self.height) * self.width + (x % self.width)]

    # @intent:responsibility 座標を画面端で折り返してピクセルを反転し、反転前の値を返します。
    def toggle(self, x: int, y: int) -> bool:
        index = (y % self.height) * self.width + (x % self.width)
        previous = self.pixels[index]
        self.pixels[index] = not previous
        return previous

    # @intent:responsibility ホスト向けの読み取り専用ビューを返します。
    def view(self) -> DisplayView:
        return tuple(self.pixels)

    def rows(self) -> List[DisplayView]:
        return [tuple(self.pixels[y * self.width:(y + 1) * self.width]) for y in range(self.height)]

    def lit_count(self) -> int:
        return sum(self.pixels)
