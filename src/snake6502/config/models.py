from dataclasses import dataclass, field
from typing import Optional

from snake6502.core.memory import PROGRAM_ORIGIN, STACK_POINTER_START
from snake6502.io.mmio import IoConfig

@dataclass
class DisplayConfig:
    scale: int = 10  # 1ピクセルあたりの画面上のドット数
    steps_per_tick: int = 500  # QTimerの1ティックで実行する命令数
    tick_interval_ms: int = 10

@dataclass
class CpuInitialState:
    pc: int = PROGRAM_ORIGIN
    sp: int = STACK_POINTER_START
    registers: dict = field(default_factory=dict)  # 例: {"A": 0x10}

@dataclass
class SystemConfig:
    program_origin: int = PROGRAM_ORIGIN
    opcode_table: Optional[str] = None  # Noneの場合は同梱の opcodes.yaml
    io: IoConfig = field(default_factory=IoConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
