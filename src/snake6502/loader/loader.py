# snake6502/loader/loader.py
"""
プログラムローダーモジュール。
フラットなバイナリと、easy6502形式のHEXダンプテキストのロードをサポートします。
いずれもプログラムカウンタは変更しません。
"""
import re
from typing import List, Optional

ADDRESS_SPACE_SIZE = 0x10000
HEX_BYTE = re.compile(r"[0-9A-Fa-f]{2}")


def _check_fits(origin: int, size: int) -> None:
    if origin + size > ADDRESS_SPACE_SIZE:
        raise ValueError(
            f"Program of {size} bytes does not fit at ${origin:04X} (exceeds $FFFF)."
        )


class BinaryLoader:
    """
    ヘッダ・再配置情報を持たないバイト列をそのままメモリへロードするローダー。
    """
    def load_binary(self, file_path: str, memory, origin: Optional[int] = None) -> int:
        with open(file_path, 'rb') as f:
            data = f.read()
        return self.load_bytes(data, memory, origin)

    def load_bytes(self, data: bytes, memory, origin: Optional[int] = None) -> int:
        start = memory.origin if origin is None else origin
        _check_fits(start, len(data))
        return memory.load(data, start)


class HexDumpLoader:
    """
    空白区切りの16進数2桁の並びを解析してロードするローダー。
    `0600:` のような行頭のアドレス表記は読み飛ばし、`;` 以降はコメントとして扱います。
    """
    def parse_hex_dump(self, text: str) -> List[int]:
        data: List[int] = []
        for line_num, line in enumerate(text.splitlines(), 1):
            comment_start = line.find(';')
            if comment_start != -1:
                line = line[:comment_start]
            for token in line.split():
                if token.endswith(':'):
                    continue
                # int() は符号や全角数字も受け付けるため、ASCIIの16進2桁のみを許可する
                if not HEX_BYTE.fullmatch(token):
                    raise ValueError(f"Invalid byte '{token}' on line {line_num}: expected two hex digits")
                data.append(int(token, 16))
        return data

    def load_hex_dump(self, file_path: str, memory, origin: Optional[int] = None) -> int:
        with open(file_path, 'r') as f:
            text = f.read()
        return self.load_text(text, memory, origin)

    def load_text(self, text: str, memory, origin: Optional[int] = None) -> int:
        data = self.parse_hex_dump(text)
        return BinaryLoader().load_bytes(bytes(data), memory, origin)
