import random
from typing import Optional, Tuple

from snake6502.transport.bus import Bus
from snake6502.core.memory import Memory
from snake6502.core.registers import REGISTER_NAMES
from snake6502.io.mmio import IoCollaborator, MemoryMappedIO
from snake6502.io.framebuffer import FrameBuffer
from snake6502.arch.mos6502.cpu import Mos6502Cpu
from .loader import OpcodeTableLoader
from .models import SystemConfig, CpuInitialState

# @intent:responsibility システム構成（Config）に基づいて、Bus、Memory、I/O、CPUを生成・接続し、初期状態を適用します。
class SystemBuilder:
    def build_system(self, config: SystemConfig,
                     collaborator: Optional[IoCollaborator] = None,
                     rng: Optional[random.Random] = None) -> Tuple[Mos6502Cpu, MemoryMappedIO]:
        """
        collaborator を省略した場合は、構成に合わせたサイズのヘッドレスなFrameBufferを接続します。
        """
        if collaborator is None:
            collaborator = FrameBuffer(config.io.framebuffer_width, config.io.framebuffer_height)

        memory = Memory(Bus.with_flat_ram(), origin=config.program_origin)
        mmio = MemoryMappedIO(memory, collaborator, rng=rng, config=config.io)

        table_loader = OpcodeTableLoader()
        if config.opcode_table:
            opcode_table = table_loader.load_from_file(config.opcode_table)
        else:
            opcode_table = table_loader.load_default()

        cpu = Mos6502Cpu(mmio, opcode_table)
        self.apply_initial_state(cpu, config.initial_state)
        return cpu, mmio

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    def apply_initial_state(self, cpu: Mos6502Cpu, config_state: CpuInitialState) -> None:
        cpu.reset()
        cpu.memory.pc = config_state.pc & 0xFFFF
        cpu.memory.sp = config_state.sp & 0xFF
        for reg_name, value in config_state.registers.items():
            if reg_name not in REGISTER_NAMES:
                print(f"Warning: Ignoring initial value for unknown register '{reg_name}'")
                continue
            cpu.registers.set(reg_name, value)
