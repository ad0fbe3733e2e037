# snake6502/arch/mos6502/addressing.py
"""
MOS 6502 アドレッシングモード解決ロジック。

各モードは Memory.fetch_next() で必要な数のオペランドバイトを消費し、
実効アドレス（Implicitの場合はNone）を返します。
"""
from enum import Enum
from typing import Callable, Dict, List, Optional

from snake6502.core.memory import to_word
from snake6502.core.registers import Registers


# @intent:responsibility アドレッシングモードのタグ。命令表(YAML)のmode名と一致します。
class AddressingMode(Enum):
    IMPLICIT = "IMPLICIT"
    RELATIVE = "RELATIVE"
    IMMEDIATE = "IMMEDIATE"
    ZERO_PAGE = "ZERO_PAGE"
    ZERO_PAGE_X = "ZERO_PAGE_X"
    ZERO_PAGE_Y = "ZERO_PAGE_Y"
    ABSOLUTE = "ABSOLUTE"
    ABSOLUTE_X = "ABSOLUTE_X"
    ABSOLUTE_Y = "ABSOLUTE_Y"
    INDIRECT = "INDIRECT"
    INDEXED_INDIRECT = "INDEXED_INDIRECT"
    INDIRECT_INDEXED = "INDIRECT_INDEXED"


# @intent:responsibility 符号なし8bit値を2の補数の相対オフセット(-128..127)として解釈します。
def signed_offset(value: int) -> int:
    value &= 0xFF
    if value >= 0x80:
        return -(255 - value + 1)
    return value

# --- Addressing Modes ---
# 引数の memory は Memory または MemoryMappedIO。どちらも read/fetch_next/pc を提供します。

def addr_implicit(memory, registers: Registers) -> Optional[int]:
    return None

# @intent:note オフセットを読んだ後のPCを基準にする。
def addr_relative(memory, registers: Registers) -> int:
    offset = signed_offset(memory.fetch_next())
    return (memory.pc + offset) & 0xFFFF

# @intent:note オペランドバイト自身のアドレスを返し、命令側はそこを読む。
def addr_immediate(memory, registers: Registers) -> int:
    address = memory.pc
    memory.fetch_next()
    return address

def addr_zero_page(memory, registers: Registers) -> int:
    return memory.fetch_next()

# @intent:note ラップアラウンドあり ($FF + 1 -> $00)
def addr_zero_page_x(memory, registers: Registers) -> int:
    return (memory.fetch_next() + registers.get("X")) & 0xFF

def addr_zero_page_y(memory, registers: Registers) -> int:
    return (memory.fetch_next() + registers.get("Y")) & 0xFF

def addr_absolute(memory, registers: Registers) -> int:
    lo = memory.fetch_next()
    hi = memory.fetch_next()
    return to_word(lo, hi)

def addr_absolute_x(memory, registers: Registers) -> int:
    return (addr_absolute(memory, registers) + registers.get("X")) & 0xFFFF

def addr_absolute_y(memory, registers: Registers) -> int:
    return (addr_absolute(memory, registers) + registers.get("Y")) & 0xFFFF

# @intent:note JMP専用。ポインタが$xxFFの場合、上位バイトは同一ページの$xx00から読む（実機のページ境界バグ）。
def addr_indirect(memory, registers: Registers) -> int:
    pointer = addr_absolute(memory, registers)
    lo = memory.read(pointer)
    hi = memory.read((pointer & 0xFF00) | ((pointer + 1) & 0xFF))
    return to_word(lo, hi)

# @intent:responsibility ($zp,X) "Pre-indexed": ゼロページ内でXを加算し、そこにあるポインタを読む。
def addr_indexed_indirect(memory, registers: Registers) -> int:
    pointer = (memory.fetch_next() + registers.get("X")) & 0xFF
    lo = memory.read(pointer)
    hi = memory.read((pointer + 1) & 0xFF)
    return to_word(lo, hi)

# @intent:responsibility ($zp),Y "Post-indexed": ゼロページのポインタを読んでからYを加算。
def addr_indirect_indexed(memory, registers: Registers) -> int:
    pointer = memory.fetch_next()
    lo = memory.read(pointer)
    hi = memory.read((pointer + 1) & 0xFF)
    return (to_word(lo, hi) + registers.get("Y")) & 0xFFFF


AddrFunc = Callable[..., Optional[int]]

MODE_RESOLVERS: Dict[AddressingMode, AddrFunc] = {
    AddressingMode.IMPLICIT: addr_implicit,
    AddressingMode.RELATIVE: addr_relative,
    AddressingMode.IMMEDIATE: addr_immediate,
    AddressingMode.ZERO_PAGE: addr_zero_page,
    AddressingMode.ZERO_PAGE_X: addr_zero_page_x,
    AddressingMode.ZERO_PAGE_Y: addr_zero_page_y,
    AddressingMode.ABSOLUTE: addr_absolute,
    AddressingMode.ABSOLUTE_X: addr_absolute_x,
    AddressingMode.ABSOLUTE_Y: addr_absolute_y,
    AddressingMode.INDIRECT: addr_indirect,
    AddressingMode.INDEXED_INDIRECT: addr_indexed_indirect,
    AddressingMode.INDIRECT_INDEXED: addr_indirect_indexed,
}

OPERAND_LENGTHS: Dict[AddressingMode, int] = {
    AddressingMode.IMPLICIT: 0,
    AddressingMode.RELATIVE: 1,
    AddressingMode.IMMEDIATE: 1,
    AddressingMode.ZERO_PAGE: 1,
    AddressingMode.ZERO_PAGE_X: 1,
    AddressingMode.ZERO_PAGE_Y: 1,
    AddressingMode.ABSOLUTE: 2,
    AddressingMode.ABSOLUTE_X: 2,
    AddressingMode.ABSOLUTE_Y: 2,
    AddressingMode.INDIRECT: 2,
    AddressingMode.INDEXED_INDIRECT: 1,
    AddressingMode.INDIRECT_INDEXED: 1,
}


# @intent:responsibility モードに応じてオペランドを消費し、実効アドレスを返します。
def resolve(mode: AddressingMode, memory, registers: Registers) -> Optional[int]:
    return MODE_RESOLVERS[mode](memory, registers)


def operand_length(mode: AddressingMode) -> int:
    return OPERAND_LENGTHS[mode]


# @intent:responsibility 逆アセンブリ用のオペランド文字列を生成します。
# @intent:pre-condition RELATIVEの場合、next_pc にはオペランド直後のアドレスを渡します。
def format_operand(mode: AddressingMode, operand_bytes: List[int], next_pc: int = 0) -> str:
    if mode is AddressingMode.IMPLICIT:
        return ""
    if mode is AddressingMode.RELATIVE:
        return f"${(next_pc + signed_offset(operand_bytes[0])) & 0xFFFF:04X}"
    if len(operand_bytes) == 2:
        word = to_word(operand_bytes[0], operand_bytes[1])
        return {
            AddressingMode.ABSOLUTE: f"${word:04X}",
            AddressingMode.ABSOLUTE_X: f"${word:04X},X",
            AddressingMode.ABSOLUTE_Y: f"${word:04X},Y",
            AddressingMode.INDIRECT: f"(${word:04X})",
        }[mode]
    value = operand_bytes[0]
    return {
        AddressingMode.IMMEDIATE: f"#${value:02X}",
        AddressingMode.ZERO_PAGE: f"${value:02X}",
        AddressingMode.ZERO_PAGE_X: f"${value:02X},X",
        AddressingMode.ZERO_PAGE_Y: f"${value:02X},Y",
        AddressingMode.INDEXED_INDIRECT: f"(${value:02X},X)",
        AddressingMode.INDIRECT_INDEXED: f"(${value:02X}),Y",
    }[mode]
