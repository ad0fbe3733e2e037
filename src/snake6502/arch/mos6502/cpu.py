# snake6502/arch/mos6502/cpu.py
"""
MOS 6502 CPUエミュレーションの中心モジュール。
"""
from typing import Dict, List, Optional, Tuple

from snake6502.common.errors import DecodeError
from snake6502.core.cpu import AbstractCpu
from snake6502.core.snapshot import Operation
from snake6502.arch.mos6502.addressing import resolve, format_operand
from snake6502.arch.mos6502.instructions.maps import (
    Mnemonic, OpcodeTable, OPERATIONS, STOP_MNEMONIC,
)


# @intent:responsibility MOS 6502 の命令ディスパッチ（フェッチ→記述子参照→アドレス解決→実行）を提供する。
class Mos6502Cpu(AbstractCpu):
    """
    MOS 6502 CPUをエミュレートするクラス。

    opcode_table を省略した場合はパッケージ同梱の opcodes.yaml を読み込みます。
    """
    def __init__(self, memory, opcode_table: Optional[OpcodeTable] = None):
        super().__init__(memory)
        if opcode_table is None:
            from snake6502.config.loader import OpcodeTableLoader
            opcode_table = OpcodeTableLoader().load_default()
        self._opcode_table = opcode_table

    @property
    def opcode_table(self) -> OpcodeTable:
        return self._opcode_table

    # @intent:responsibility 命令フェッチ。fetch_next() によりPCは次のバイトを指す。
    def _fetch(self) -> int:
        return self._memory.fetch_next()

    # @intent:responsibility 命令デコード。オペランドを消費して実効アドレスを確定させる。
    # @intent:post-condition 未定義のオペコードではCPUはHALT状態となり、DecodeErrorが送出される。
    def _decode(self, opcode: int, address: int) -> Operation:
        descriptor = self._opcode_table.get(opcode)
        if descriptor is None:
            error = DecodeError(opcode, address)
            self._halt(error)
            raise error

        operand_start = self._memory.pc
        effective_address = resolve(descriptor.mode, self._memory, self._registers)
        next_pc = self._memory.pc
        length = (next_pc - operand_start) & 0xFFFF
        operand_bytes = [self._memory.bus.peek(operand_start + i) for i in range(length)]

        operand_str = format_operand(descriptor.mode, operand_bytes, next_pc)
        return Operation(
            opcode_hex=f"{opcode:02X}",
            mnemonic=descriptor.mnemonic.value,
            mode=descriptor.mode.value,
            operands=[operand_str] if operand_str else [],
            operand_bytes=operand_bytes,
            address=effective_address,
            length=1 + length,
        )

    # @intent:responsibility 命令実行。BRKの場合は正常停止としてHALTへ遷移する。
    def _execute(self, operation: Operation) -> None:
        mnemonic = Mnemonic(operation.mnemonic)
        OPERATIONS[mnemonic](self._memory, self._registers, operation.address)
        if mnemonic is STOP_MNEMONIC:
            self._halt()

    def get_register_map(self) -> Dict[str, int]:
        state = self.get_state()
        registers = self._registers.as_dict()
        registers.update(PC=state.pc, S=state.stack_address)
        return registers

    def get_flag_state(self) -> Dict[str, bool]:
        return {
            "N": self._registers.negative,
            "Z": self._registers.zero,
            "C": self._registers.carry,
        }

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        from snake6502.arch.mos6502 import disassembler
        return disassembler.disassemble(self._memory.bus, self._opcode_table, start_addr, length)
