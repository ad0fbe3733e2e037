# snake6502/arch/mos6502/instructions/control.py
"""
MOS 6502 制御系命令 (Branch, Jump, Subroutine, Stack, Carry, NOP, BRK)。
"""
from typing import Optional

from snake6502.core.registers import Registers

# --- Branch Instructions ---
# @intent:note 実効アドレスは addr_relative で解決済みの分岐先絶対アドレス。
#              不成立時はPCを変更しない（fetch_nextで既に次の命令を指している）。

def bcc(memory, registers: Registers, address: Optional[int]) -> None:
    memory.branch(not registers.carry, address)

def bcs(memory, registers: Registers, address: Optional[int]) -> None:
    memory.branch(registers.carry, address)

def beq(memory, registers: Registers, address: Optional[int]) -> None:
    memory.branch(registers.zero, address)

def bne(memory, registers: Registers, address: Optional[int]) -> None:
    memory.branch(not registers.zero, address)

def bmi(memory, registers: Registers, address: Optional[int]) -> None:
    memory.branch(registers.negative, address)

def bpl(memory, registers: Registers, address: Optional[int]) -> None:
    memory.branch(not registers.negative, address)

# --- Jump / Subroutine ---

def jmp(memory, registers: Registers, address: Optional[int]) -> None:
    memory.jump(address)

def jsr(memory, registers: Registers, address: Optional[int]) -> None:
    memory.call_subroutine(address)

def rts(memory, registers: Registers, address: Optional[int]) -> None:
    memory.return_from_subroutine()

# --- Stack Operations (PHA, PLA) ---

def pha(memory, registers: Registers, address: Optional[int]) -> None:
    memory.push_byte(registers.get("A"))

def pla(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set("A", memory.pull_byte())

# --- Carry Operations (CLC, SEC) ---

def clc(memory, registers: Registers, address: Optional[int]) -> None:
    registers.clear_carry()

def sec(memory, registers: Registers, address: Optional[int]) -> None:
    registers.set_carry()

# --- System ---

def nop(memory, registers: Registers, address: Optional[int]) -> None:
    pass

# @intent:note BRKはシミュレーションの正常停止命令。状態遷移はCPU側(Mos6502Cpu)が担い、ここでは何もしない。
def brk(memory, registers: Registers, address: Optional[int]) -> None:
    pass
