# retro_chip8/core/cpu.py
"""
Core Layer (命令サイクル)

フェッチ、デコード、トレース、PC更新、実行という1命令分の流れを固定し、
各段階の中身をアーキテクチャ側のサブクラスに任せます。
1回のstep()は成功してSnapshotを返すか、Chip8Errorを送出してPCを命令の先頭に戻すかのどちらかです。
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from retro_chip8.common.errors import Chip8Error
from retro_chip8.common.types import RegisterLayoutInfo
from retro_chip8.core.snapshot import Snapshot, Operation, Metadata
from retro_chip8.core.state import CpuState
from retro_chip8.core.trace import TraceCallback, TraceRecord
from retro_chip8.transport.bus import Bus

logger = logging.getLogger(__name__)

# @intent:responsibility 命令サイクルの駆動と、ホストに公開する操作の骨格を定義します。
class AbstractCpu(ABC):
    # @intent:pre-condition busには命令とデータを置くメモリが割り当て済みであること。
    def __init__(self, bus: Bus, trace: Optional[TraceCallback] = None):
        self._bus = bus
        self._trace = trace
        self._cycle_count = 0
        self._state: CpuState = self._create_initial_state()

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    # @intent:responsibility レジスタ類を構築直後の値へ戻し、サイクル数を0にします。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        """現在の状態オブジェクトを返します。返り値は実行中の状態そのものです。"""
        return self._state

    def get_trace(self) -> Optional[TraceCallback]:
        return self._trace

    # @intent:responsibility PCが指す命令語を読み出します。PCはここでは変更しません。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility 1命令を実行し、その直後の状態とバスアクセスをSnapshotとして返します。
    # @intent:post-condition 失敗時はPCを命令の先頭に戻し、例外にアドレスとオペコードを補ってから再送出します。
    def step(self) -> Snapshot:
        self._bus.get_and_clear_activity_log()
        start_pc = self._state.pc
        opcode = None

        try:
            opcode = self._fetch()
            operation = self._decode(opcode)
            # トレースの有無で実行経路は変わらない
            if self._trace is not None:
                self._trace(TraceRecord(address=start_pc, opcode=opcode, text=operation.text()))
            self._update_pc(operation)
            self._execute(operation)
        except Chip8Error as error:
            self._state.pc = start_pc
            if error.address is None:
                error.address = start_pc
            if error.opcode is None:
                error.opcode = opcode
            self._bus.get_and_clear_activity_log()
            logger.debug("step fault at %#05x: %s", start_pc, error)
            raise

        return self._create_snapshot(operation)

    # @intent:responsibility 実行前に、PCを命令長だけ進めます。分岐命令は実行時にこれを上書きします。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    def _create_snapshot(self, operation: Operation) -> Snapshot:
        self._cycle_count += operation.cycle_count
        return Snapshot(
            state=self._state,
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=operation.text()),
            bus_activity=self._bus.get_and_clear_activity_log(),
        )

    # @intent:responsibility 指定アドレスの命令を、状態を変えずにデコードします。
    @abstractmethod
    def decode_at(self, address: int) -> Operation:
        pass

    # @intent:responsibility レジスタ名から現在値への辞書。ホストが内部構造を知らずに表示するために使います。
    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        pass

    # @intent:responsibility レジスタの表示グループとビット幅の定義を返します。
    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass
