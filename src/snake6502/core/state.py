# snake6502/core/state.py
"""
Core Layer (CPU状態)

ある時点でのレジスタ・フラグ・PC・SPを保持する不変の値オブジェクトを定義します。
"""
from dataclasses import dataclass, replace

from snake6502.core.memory import Memory, STACK_BASE
from snake6502.core.registers import Registers

# @intent:responsibility CPUの状態を不変に記録します。Snapshotとデバッガの比較に用います。
# @intent:rationale MemoryとRegistersは実行中に書き換わるため、観測用には毎回新しいインスタンスを生成します。
@dataclass(frozen=True)
class CpuState:
    pc: int = 0x0000  # Program Counter
    sp: int = 0xFF    # Stack Pointer (8bit offset)
    a: int = 0
    x: int = 0
    y: int = 0
    flag_c: bool = False
    flag_n: bool = False
    flag_z: bool = False

    # @intent:responsibility 実行中のMemory/Registersから状態を採取します。
    @classmethod
    def capture(cls, memory: Memory, registers: Registers) -> "CpuState":
        return cls(
            pc=memory.pc,
            sp=memory.sp,
            a=registers.get("A"),
            x=registers.get("X"),
            y=registers.get("Y"),
            flag_c=registers.carry,
            flag_n=registers.negative,
            flag_z=registers.zero,
        )

    # @intent:responsibility スタックポインタを物理アドレス（$0100 + SP）として返します。
    @property
    def stack_address(self) -> int:
        return STACK_BASE | (self.sp & 0xFF)

    def replace(self, **changes) -> "CpuState":
        return replace(self, **changes)
