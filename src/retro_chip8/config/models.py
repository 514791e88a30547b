from dataclasses import dataclass, field
from typing import Dict

# @intent:constant 一般的な16キー配置（1234/QWER/ASDF/ZXCV）。Qtのキー名からキーパッド番号への対応。
DEFAULT_KEYMAP = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

@dataclass
class MachineConfig:
    ticks_per_frame: int = 10  # 1フレーム（タイマ1回）あたりのstep回数
    frame_rate: int = 60       # 1秒あたりのタイマ更新回数
    trace: bool = False

@dataclass
class DisplayConfig:
    scale: int = 20
    foreground: str = "#32A956"
    background: str = "#000000"

@dataclass
class SystemConfig:
    machine: MachineConfig = field(default_factory=MachineConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keymap: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))
