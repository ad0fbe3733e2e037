# snake6502/io/mmio.py
"""
メモリマップドI/O

基底のMemoryを保持するデコレータとして、乱数・キー入力・フレームバッファの
予約アドレスへのアクセスを横取りします。それ以外のアドレスとPC/スタック操作は
基底のMemoryへそのまま委譲します。
"""
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional

from snake6502.core.memory import Memory


# @intent:responsibility 画面とキー入力を担う外部コラボレータの契約を定義します。
class IoCollaborator(ABC):
    @abstractmethod
    def update(self, x: int, y: int, color_index: int) -> None:
        """
        フレームバッファの (x, y) にパレット番号 color_index のピクセルを設定します。
        """
        pass

    @abstractmethod
    def last_keypress(self) -> int:
        """
        最後に押されたキーのコードを返します。
        """
        pass


# @intent:responsibility 予約アドレスの配置。既定値はeasy6502互換のレイアウトです。
@dataclass(frozen=True)
class IoConfig:
    random_address: int = 0xFE
    keypress_address: int = 0xFF
    framebuffer_start: int = 0x0200
    framebuffer_end: int = 0x05FF
    framebuffer_width: int = 32

    @property
    def framebuffer_height(self) -> int:
        return (self.framebuffer_end - self.framebuffer_start + 1) // self.framebuffer_width


# @intent:responsibility Memoryに対するI/Oフックを合成で提供します。
# @intent:rationale 基底Memoryを継承・改変せず保持することで、予約アドレス以外の意味論を一切変えません。
class MemoryMappedIO:
    """
    Memoryのデコレータ。read/write の予約アドレスだけを横取りします。
    """
    def __init__(self, memory: Memory, collaborator: IoCollaborator,
                 rng: Optional[random.Random] = None, config: Optional[IoConfig] = None):
        self._memory = memory
        self._collaborator = collaborator
        self._rng = rng if rng is not None else random.Random()
        self._config = config if config is not None else IoConfig()

    @property
    def base(self) -> Memory:
        return self._memory

    @property
    def collaborator(self) -> IoCollaborator:
        return self._collaborator

    @property
    def config(self) -> IoConfig:
        return self._config

    # @intent:responsibility 乱数アドレスとキー入力アドレスの読み出しを横取りします。
    def read(self, address: int) -> int:
        address &= 0xFFFF
        if address == self._config.random_address:
            return self._rng.randrange(256)
        if address == self._config.keypress_address:
            return self._collaborator.last_keypress() & 0xFF
        return self._memory.read(address)

    # @intent:responsibility 通常の書き込みを行った後、フレームバッファ範囲であれば画面を更新します。
    def write(self, address: int, value: int) -> None:
        address &= 0xFFFF
        self._memory.write(address, value)
        config = self._config
        if config.framebuffer_start <= address <= config.framebuffer_end:
            offset = address - config.framebuffer_start
            self._collaborator.update(
                address % config.framebuffer_width,
                offset // config.framebuffer_width,
                value % 16,
            )

    # --- 以下は基底Memoryへの委譲 ---

    @property
    def pc(self) -> int:
        return self._memory.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self._memory.pc = value

    @property
    def sp(self) -> int:
        return self._memory.sp

    @sp.setter
    def sp(self, value: int) -> None:
        self._memory.sp = value

    @property
    def bus(self):
        return self._memory.bus

    @property
    def origin(self) -> int:
        return self._memory.origin

    def load(self, data: Iterable[int], origin: Optional[int] = None) -> int:
        return self._memory.load(data, origin)

    def fetch_next(self) -> int:
        return self._memory.fetch_next()

    def jump(self, address: int) -> None:
        self._memory.jump(address)

    def branch(self, condition: bool, address: int) -> None:
        self._memory.branch(condition, address)

    def push_byte(self, value: int) -> None:
        self._memory.push_byte(value)

    def pull_byte(self) -> int:
        return self._memory.pull_byte()

    def call_subroutine(self, address: int) -> None:
        self._memory.call_subroutine(address)

    def return_from_subroutine(self) -> None:
        self._memory.return_from_subroutine()
