# snake6502/core/registers.py
"""
Core Layer (レジスタ)

A/X/Yの汎用レジスタと、C/N/Zの条件フラグを保持します。
レジスタへの書き込みは全て normalize() を経由し、N/Zフラグはその結果から導出されます。
"""
from typing import Dict

from snake6502.common.errors import FlagWriteError

REGISTER_NAMES = ("A", "X", "Y")
FLAG_NAMES = ("C", "N", "Z")


# @intent:responsibility レジスタ値の保持と、書き込み時の正規化（8bit切り詰め・N/Z再計算）を担います。
# @intent:rationale フラグは常に導出値であり、公開された可変フィールドとしては持ちません。
#                  キャリー以外のフラグを変更する手段は normalize() のみです。
class Registers:
    """
    MOS 6502 のレジスタファイル（A, X, Y）と C/N/Z フラグ。
    """
    def __init__(self):
        self._values: Dict[str, int] = {name: 0 for name in REGISTER_NAMES}
        self._carry = False
        self._negative = False
        self._zero = False

    @property
    def carry(self) -> bool:
        return self._carry

    @property
    def negative(self) -> bool:
        return self._negative

    @property
    def zero(self) -> bool:
        return self._zero

    def get(self, name: str) -> int:
        if name in FLAG_NAMES:
            return int(self.get_flag(name))
        return self._values[name]

    # @intent:responsibility レジスタへ書き込みます。値は normalize() を通過し、N/Zが更新されます。
    # @intent:pre-condition nameは "A", "X", "Y" のいずれか。フラグ名はFlagWriteErrorで拒否されます。
    def set(self, name: str, value: int) -> int:
        if name in FLAG_NAMES:
            raise FlagWriteError(f"Flag '{name}' cannot be written directly.")
        if name not in self._values:
            raise KeyError(f"Unknown register: {name}")
        self._values[name] = self.normalize(value)
        return self._values[name]

    # @intent:responsibility 数値を8bitに切り詰め、Z/Nフラグを再計算して、切り詰めた値を返します。
    def normalize(self, number: int) -> int:
        value = number & 0xFF
        self._zero = value == 0
        self._negative = (value & 0x80) != 0
        return value

    def set_carry(self) -> None:
        self._carry = True

    def clear_carry(self) -> None:
        self._carry = False

    def set_carry_if(self, condition: bool) -> None:
        self._carry = bool(condition)

    def get_flag(self, name: str) -> bool:
        return {"C": self._carry, "N": self._negative, "Z": self._zero}[name]

    # @intent:responsibility UI・デバッガ向けにレジスタ値を辞書形式で返します。
    def as_dict(self) -> Dict[str, int]:
        return dict(self._values)

    def __repr__(self) -> str:
        flags = "".join(f if self.get_flag(f) else "-" for f in ("N", "Z", "C"))
        return (f"Registers(A=${self._values['A']:02X}, X=${self._values['X']:02X}, "
                f"Y=${self._values['Y']:02X}, flags={flags})")
