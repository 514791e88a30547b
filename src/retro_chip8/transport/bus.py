# src/retro_chip8/transport/bus.py
"""
Transport Layer (メモリバス)

CHIP-8の4KBアドレス空間を、登録されたデバイスへの8bitアクセスとして仲介します。
命令による読み書きはアクティビティとして記録され、1命令ごとにSnapshotへ渡されます。
プログラムのロードやインスペクション用の読み出しは記録しません。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, NamedTuple

from retro_chip8.common.errors import AddressOutOfRangeError


class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"


# @intent:responsibility 命令実行中に発生した1バイト分のメモリアクセス。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType


# @intent:responsibility バスに接続できる8bitデバイスのインターフェース。アドレスはデバイス先頭からのオフセット。
class Device(ABC):
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass

    @abstractmethod
    def get_size(self) -> int:
        """デバイスが占めるバイト数を返します。"""
        pass


# @intent:responsibility バイト配列によるRAM。CHIP-8ではメモリ全体をこれ1つで表します。
class RAM(Device):
    # @intent:pre-condition sizeは1以上の整数であること。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError(f"RAM size must be a positive integer, got {size!r}.")
        self._cells = bytearray(size)

    def _check(self, address: int) -> None:
        if address < 0 or address >= len(self._cells):
            raise AddressOutOfRangeError(
                f"Offset {address:#06x} is outside RAM of {len(self._cells)} bytes."
            )

    def read(self, address: int) -> int:
        self._check(address)
        return self._cells[address]

    def write(self, address: int, data: int) -> None:
        self._check(address)
        if data < 0 or data > 0xFF:
            raise ValueError(f"Cannot store {data} in a byte cell.")
        self._cells[address] = data

    def clear(self) -> None:
        self._cells[:] = bytes(len(self._cells))

    def get_size(self) -> int:
        return len(self._cells)


class _Mapping(NamedTuple):
    start: int
    end: int
    device: Device


# @intent:responsibility アドレスをデバイスへ振り分け、命令によるアクセスを記録するバス。
class Bus:
    def __init__(self):
        self._mappings: List[_Mapping] = []
        self._activity: List[BusAccess] = []

    # @intent:responsibility デバイスを [start_address, end_address] に割り当てます。
    # @intent:pre-condition 範囲の長さがデバイスのサイズと一致すること。重複は検査しません。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if start_address < 0 or end_address < start_address:
            raise ValueError(f"Invalid address range {start_address:#06x}..{end_address:#06x}.")
        if not isinstance(device, Device):
            raise TypeError(f"{type(device).__name__} is not a Device.")
        span = end_address - start_address + 1
        if device.get_size() != span:
            raise ValueError(
                f"{type(device).__name__} of {device.get_size()} bytes does not match "
                f"a {span}-byte address range."
            )
        self._mappings.append(_Mapping(start_address, end_address, device))

    def _resolve(self, address: int):
        for mapping in self._mappings:
            if mapping.start <= address <= mapping.end:
                return mapping.device, address - mapping.start
        raise AddressOutOfRangeError(f"Address {address:#06x} is not mapped.")

    # @intent:responsibility address から length バイトが全て割り当て済みかを返します。
    def is_mapped(self, address: int, length: int = 1) -> bool:
        """
        複数バイトを扱う命令が、状態を変更する前に範囲全体を検証するために使います。
        長さ0の範囲は常に割り当て済みとみなします。
        """
        if length <= 0:
            return True
        for boundary in (address, address + length - 1):
            try:
                self._resolve(boundary)
            except AddressOutOfRangeError:
                return False
        return True

    def read(self, address: int) -> int:
        device, offset = self._resolve(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    def write(self, address: int, data: int) -> None:
        device, offset = self._resolve(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))

    # @intent:responsibility 記録を残さずに1バイト読み出します（命令インスペクション、UI用）。
    def peek(self, address: int) -> int:
        device, offset = self._resolve(address)
        return device.read(offset)

    # @intent:responsibility 記録を残さずにバイト列を連続配置します（プログラムとフォントの配置用）。
    def load(self, address: int, data: Iterable[int]) -> None:
        for position, byte in enumerate(data):
            device, offset = self._resolve(address + position)
            device.write(offset, byte)

    # @intent:responsibility 記録済みのアクセスを返し、記録を空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        activity, self._activity = self._activity, []
        return activity
