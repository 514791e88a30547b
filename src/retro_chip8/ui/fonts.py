"""
ステータス表示とレジスタ表示で使う等幅フォントの選択。
"""
from PySide6.QtGui import QFont, QFontDatabase

_PREFERRED_FAMILIES = ("Consolas", "Menlo", "DejaVu Sans Mono", "Courier New")

# @intent:responsibility インストール済みの候補から最初の等幅フォント名を返し、無ければシステム既定の固定幅フォントを使います。
def get_monospace_font_family() -> str:
    installed = set(QFontDatabase.families())
    for family in _PREFERRED_FAMILIES:
        if family in installed:
            return family
    return QFontDatabase.systemFont(QFontDatabase.FixedFont).family()

def get_monospace_font(size: int = 10) -> QFont:
    font = QFont(get_monospace_font_family(), size)
    font.setStyleHint(QFont.Monospace)
    return font
