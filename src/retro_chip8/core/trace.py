# retro_chip8/core/trace.py
"""
命令トレースの観測口。

CPU生成時にトレース用コールバックを注入すると、デコードされた命令ごとに
TraceRecordが1回渡されます。コールバックはCPUの状態を変更してはいけません。
"""
import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger("retro_chip8.trace")


# @intent:responsibility 1命令分のトレース情報（アドレス、命令語、ニーモニック）を保持します。
@dataclass(frozen=True)
class TraceRecord:
    address: int
    opcode: int
    text: str

    def __str__(self) -> str:
        return f"{self.address:03X}: {self.opcode:04X}  {self.text}"


TraceCallback = Callable[[TraceRecord], None]


# @intent:responsibility トレースをloggingのDEBUGレベルへ出力する標準のオブザーバ。
def logging_trace(record: TraceRecord) -> None:
    logger.debug("%s", record)


# @intent:responsibility トレースをリストに蓄積するオブザーバ。テストやツールからの検査用。
class TraceRecorder:
    def __init__(self):
        self.records = []

    def __call__(self, record: TraceRecord) -> None:
        self.records.append(record)

    def clear(self) -> None:
        self.records = []
