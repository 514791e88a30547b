# src/retro_chip8/common/errors.py
"""
CHIP-8コアが送出する例外の定義。

`step()` や `load()` はこれらの例外を呼び出し元（ホスト）へそのまま伝播させます。
回復（命令のスキップなど）はホスト側のポリシーとして扱います。
"""
from typing import Optional


# @intent:responsibility CHIP-8コアの全ての例外の基底クラス。
class Chip8Error(Exception):
    """
    CHIP-8コアの例外基底クラス。
    障害発生時の命令アドレスとオペコードを（判明していれば）保持します。
    """
    def __init__(self, message: str, address: Optional[int] = None, opcode: Optional[int] = None):
        super().__init__(message)
        self.address = address
        self.opcode = opcode


# @intent:responsibility プログラムがメモリの空き領域に収まらない場合に送出されます。
class MemoryOverflowError(Chip8Error, ValueError):
    pass


# @intent:responsibility キー番号など、インデックスが有効範囲外の場合に送出されます。
class IndexOutOfRangeError(Chip8Error, IndexError):
    pass


# @intent:responsibility コールスタックが満杯の状態でCALLした場合に送出されます。
class StackOverflowError(Chip8Error):
    pass


# @intent:responsibility コールスタックが空の状態でRETした場合に送出されます。
class StackUnderflowError(Chip8Error):
    pass


# @intent:responsibility メモリ空間外のアドレスにアクセスした場合に送出されます。
class AddressOutOfRangeError(Chip8Error, IndexError):
    pass


# @intent:responsibility 定義されていない命令パターンをデコードした場合に送出されます。
class UnsupportedInstructionError(Chip8Error):
    pass
