# snake6502/transport/bus.py
"""
Transport Layer (共通バス)

16bitアドレス空間上のデバイス配置と、命令ごとのアクセス記録を担います。
Memoryはこのバスを通してのみバイトを読み書きします。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List

ADDRESS_MASK = 0xFFFF
ADDRESS_SPACE_SIZE = 0x10000


class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"


# @intent:responsibility 1回のバスアクセス（アドレス・値・種別）を不変に記録します。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType


# @intent:responsibility バスに接続されるデバイスの契約。アドレスは領域先頭からのオフセットで渡されます。
class Device(ABC):
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass


class RAM(Device):
    """
    ゼロで初期化されるバイト配列。値の切り詰めは行わず、範囲外の値は拒否します。
    """
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size

    def _check_offset(self, address: int) -> None:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for RAM of size {self._size}.")

    def read(self, address: int) -> int:
        self._check_offset(address)
        return self._memory[address]

    # @intent:pre-condition dataは0..255。切り詰めは上位層(Memory)の責務です。
    def write(self, address: int, data: int) -> None:
        self._check_offset(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    def get_size(self) -> int:
        return self._size


@dataclass(frozen=True)
class _Mapping:
    start: int
    end: int
    device: Device

    def contains(self, address: int) -> bool:
        return self.start <= address <= self.end


# @intent:responsibility アドレスをデバイスへ振り分け、読み書きをログに残します。
# @intent:rationale ログは CPU.step() の開始時に破棄され、終了時にSnapshotへ移されるため、1命令分のアクセスだけが残ります。
class Bus:
    def __init__(self):
        self._mappings: List[_Mapping] = []
        self._activity: List[BusAccess] = []

    @classmethod
    def with_flat_ram(cls) -> "Bus":
        """
        $0000-$FFFF を1枚のRAMで覆ったバスを返します。
        """
        bus = cls()
        bus.register_device(0x0000, ADDRESS_MASK, RAM(ADDRESS_SPACE_SIZE))
        return bus

    # @intent:pre-condition 0 <= start <= end <= $FFFF。RAMの場合はサイズが範囲と一致すること。
    # @intent:note 範囲の重複は検査しません。先に登録したデバイスが優先されます。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not (0 <= start_address <= end_address <= ADDRESS_MASK):
            raise ValueError(
                f"Invalid address range {start_address:#06x}-{end_address:#06x}: "
                "must satisfy 0 <= start <= end <= 0xFFFF."
            )
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")
        span = end_address - start_address + 1
        if isinstance(device, RAM) and device.get_size() != span:
            raise ValueError(
                f"Registered {type(device).__name__} device size ({device.get_size()} bytes) does not match "
                f"the specified address range size ({span} bytes)."
            )
        self._mappings.append(_Mapping(start_address, end_address, device))

    def _resolve(self, address: int):
        for mapping in self._mappings:
            if mapping.contains(address):
                return mapping.device, address - mapping.start
        raise IndexError(f"Address {address:#06x} not mapped to any device.")

    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log, self._activity = self._activity, []
        return log

    def read(self, address: int) -> int:
        address &= ADDRESS_MASK
        device, offset = self._resolve(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    # @intent:responsibility ログを残さずに読み出します。逆アセンブラとUIが使います。
    def peek(self, address: int) -> int:
        address &= ADDRESS_MASK
        device, offset = self._resolve(address)
        return device.read(offset)

    def write(self, address: int, data: int) -> None:
        address &= ADDRESS_MASK
        device, offset = self._resolve(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))
