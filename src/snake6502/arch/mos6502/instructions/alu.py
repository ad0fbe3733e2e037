# snake6502/arch/mos6502/instructions/alu.py
"""
MOS 6502 算術論理演算命令 (ALU)。
バイナリモードのみ。N, Zは常に Registers.normalize() 経由で更新されます。
"""
from typing import Optional

from snake6502.core.registers import Registers

# --- Logical Operations (AND, ORA, EOR, BIT) ---

def and_(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("A", registers.get("A") & memory.read(address))

def ora(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("A", registers.get("A") | memory.read(address))

def eor(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("A", registers.get("A") ^ memory.read(address))

# @intent:note A & M をレジスタへは書き戻さず、Z (と N) の判定にのみ用いる。Vフラグは持たない。
def bit(memory, registers: Registers, address: Optional[int]) -> None:
    registers.normalize(registers.get("A") & memory.read(address))

# --- Arithmetic Operations (ADC, SBC) ---

def adc(memory, registers: Registers, address: Optional[int]) -> None:
    total = registers.get("A") + memory.read(address) + int(registers.carry)
    registers.set_carry_if(total > 0xFF)
    registers.set("A", total)

# @intent:note キャリーは「借りが発生しなかった」ことを表す。
def sbc(memory, registers: Registers, address: Optional[int]) -> None:
    difference = registers.get("A") - memory.read(address) - (1 - int(registers.carry))
    registers.set_carry_if(difference >= 0)
    registers.set("A", difference)

# --- Compare Operations (CMP, CPX, CPY) ---
# @intent:note 結果を格納しない減算。C = (Reg >= M)、N/Zは差分から導出。

def _compare(memory, registers: Registers, name: str, address: Optional[int]) -> None:
    value = registers.get(name)
    operand = memory.read(address)
    registers.set_carry_if(value >= operand)
    registers.normalize(value - operand)

def cmp(memory, registers: Registers, address: Optional[int]) -> None:
    _compare(memory, registers, "A", address)

def cpx(memory, registers: Registers, address: Optional[int]) -> None:
    _compare(memory, registers, "X", address)

def cpy(memory, registers: Registers, address: Optional[int]) -> None:
    _compare(memory, registers, "Y", address)

# --- Shift / Rotate Operations (ASL, LSR, ROL, ROR) ---
# @intent:note address が None の場合はアキュムレータを対象とする。

def _shift(memory, registers: Registers, address: Optional[int], operation) -> None:
    value = registers.get("A") if address is None else memory.read(address)
    result, carry = operation(value)
    registers.set_carry_if(carry)
    if address is None:
        registers.set("A", result)
    else:
        memory.write(address, registers.normalize(result))

def asl(memory, registers: Registers, address: Optional[int]) -> None:
    _shift(memory, registers, address, lambda v: (v << 1, v & 0x80))

def lsr(memory, registers: Registers, address: Optional[int]) -> None:
    _shift(memory, registers, address, lambda v: (v >> 1, v & 0x01))

def rol(memory, registers: Registers, address: Optional[int]) -> None:
    carry_in = int(registers.carry)
    _shift(memory, registers, address, lambda v: ((v << 1) | carry_in, v & 0x80))

def ror(memory, registers: Registers, address: Optional[int]) -> None:
    carry_in = int(registers.carry)
    _shift(memory, registers, address, lambda v: ((v >> 1) | (carry_in << 7), v & 0x01))

# --- Increment / Decrement (INC, DEC, INX, DEX, INY, DEY) ---

def inc(memory, registers: Registers, address: Optional[int]) -> None:
    memory.write(address, registers.normalize(memory.read(address) + 1))

def dec(memory, registers: Registers, address: Optional[int]) -> None:
    memory.write(address, registers.normalize(memory.read(address) - 1))

def inx(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("X", registers.get("X") + 1)

def dex(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("X", registers.get("X") - 1)

def iny(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("Y", registers.get("Y") + 1)

def dey(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("Y", registers.get("Y") - 1)
