# snake6502/core/memory.py
"""
Core Layer (メモリモデル)

このモジュールは、フラットな64KBのバイト空間に加え、
プログラムカウンタとスタックポインタの管理を担うMemoryを定義します。
命令・オペランドの消費は全て fetch_next() を経由します。
"""
from typing import Iterable, Optional, Tuple

from snake6502.transport.bus import Bus

PROGRAM_ORIGIN = 0x0600
STACK_BASE = 0x0100
STACK_POINTER_START = 0xFF

# @intent:responsibility 16bitワードを下位・上位バイトから組み立てます（リトルエンディアン）。
def to_word(lo: int, hi: int) -> int:
    return ((hi & 0xFF) << 8) | (lo & 0xFF)

# @intent:responsibility 16bitワードを(下位, 上位)のバイト組に分解します。
def to_bytes(word: int) -> Tuple[int, int]:
    return word & 0xFF, (word >> 8) & 0xFF


# @intent:responsibility バイト記憶、プログラムカウンタの進行、分岐、サブルーチン連結、スタック規律を提供します。
# @intent:rationale 全ての16bit値は合法なアドレスとして扱い、例外は送出しません（固定幅演算によるラップアラウンド）。
class Memory:
    """
    6502のメモリ空間。スタック領域($0100-$01FF)とプログラムカウンタを内包します。
    """
    def __init__(self, bus: Optional[Bus] = None, origin: int = PROGRAM_ORIGIN):
        self._bus = bus if bus is not None else Bus.with_flat_ram()
        self.origin = origin
        self.pc = origin
        self.sp = STACK_POINTER_START

    @property
    def bus(self) -> Bus:
        return self._bus

    # @intent:responsibility 指定アドレスの値を読み出します。
    def read(self, address: int) -> int:
        return self._bus.read(address & 0xFFFF)

    # @intent:responsibility 値を8bitに切り詰めて書き込みます。
    def write(self, address: int, value: int) -> None:
        self._bus.write(address & 0xFFFF, value & 0xFF)

    # @intent:responsibility プログラムをorigin以降へ複写します。PCは変更しません。
    def load(self, data: Iterable[int], origin: Optional[int] = None) -> int:
        """
        バイト列を origin（省略時は $0600）から順に書き込み、書き込んだバイト数を返します。
        """
        start = self.origin if origin is None else origin
        count = 0
        for offset, value in enumerate(data):
            self.write(start + offset, value)
            count += 1
        return count

    # @intent:responsibility PCの指すバイトを返し、PCを1進めます。命令長とアドレッシング解決の同期はこの一点で保証されます。
    def fetch_next(self) -> int:
        value = self.read(self.pc)
        self.pc = (self.pc + 1) & 0xFFFF
        return value

    def jump(self, address: int) -> None:
        self.pc = address & 0xFFFF

    # @intent:responsibility 条件が真の場合のみジャンプします。条件の評価は呼び出し側の責務です。
    def branch(self, condition: bool, address: int) -> None:
        if condition:
            self.jump(address)

    # @intent:note SPは8bitでラップアラウンドし、オーバーフロー検出は行いません。
    def push_byte(self, value: int) -> None:
        self.write(STACK_BASE + self.sp, value)
        self.sp = (self.sp - 1) & 0xFF

    def pull_byte(self) -> int:
        self.sp = (self.sp + 1) & 0xFF
        return self.read(STACK_BASE + self.sp)

    # @intent:responsibility 現在のPCを下位バイト→上位バイトの順にプッシュし、指定アドレスへジャンプします。
    def call_subroutine(self, address: int) -> None:
        lo, hi = to_bytes(self.pc)
        self.push_byte(lo)
        self.push_byte(hi)
        self.jump(address)

    # @intent:responsibility call_subroutineの逆操作。上位→下位の順にプルしてPCを復元します。
    def return_from_subroutine(self) -> None:
        hi = self.pull_byte()
        lo = self.pull_byte()
        self.jump(to_word(lo, hi))

    to_word = staticmethod(to_word)
    to_bytes = staticmethod(to_bytes)
