"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスなどを定義します。
"""
from typing import Callable, List, NamedTuple, Tuple

# @intent:data_structure 0〜255の乱数バイトを返す呼び出し可能オブジェクト。
# RND命令のテストで固定列を差し込めるように、CPU生成時に注入します。
RandomSource = Callable[[], int]

# @intent:data_structure ホストへ公開するディスプレイの読み取り専用ビュー（行優先）。
DisplayView = Tuple[bool, ...]

# @intent:data_structure 単一のレジスタの表示定義。UIが動的にフィールドを生成するために使用される。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # ビット幅 (8 or 16)

# @intent:data_structure レジスタグループの表示定義。関連するレジスタ（例: "General", "Timers"）をまとめる。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
