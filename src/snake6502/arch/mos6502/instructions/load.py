# snake6502/arch/mos6502/instructions/load.py
"""
MOS 6502 転送系命令 (Load/Store/Transfer)。
"""
from typing import Optional

from snake6502.core.registers import Registers

# --- Load ---
# @intent:responsibility 実効アドレスの値をレジスタへロードし、N, Zフラグを更新。

def lda(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("A", memory.read(address))

def ldx(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("X", memory.read(address))

def ldy(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("Y", memory.read(address))

# --- Store ---
# @intent:responsibility レジスタの内容をメモリへストア。フラグ変化なし。

def sta(memory, registers: Registers, address: Optional[int]) -> None:
    memory.write(address, registers.get("A"))

def stx(memory, registers: Registers, address: Optional[int]) -> None:
    memory.write(address, registers.get("X"))

def sty(memory, registers: Registers, address: Optional[int]) -> None:
    memory.write(address, registers.get("Y"))

# --- Register Transfers (TAX, TAY, TXA, TYA, TSX, TXS) ---

def tax(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("X", registers.get("A"))

def tay(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("Y", registers.get("A"))

def txa(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("A", registers.get("X"))

def tya(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("A", registers.get("Y"))

def tsx(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("X", memory.sp)

# @intent:note TXSはN, Zフラグを更新しない。
def txs(memory, registers: Registers, address: Optional[int]) -> None:
    memory.sp = registers.get("X")
