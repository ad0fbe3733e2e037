# snake6502/arch/mos6502/disassembler.py
"""
MOS 6502 逆アセンブラ。
"""
from typing import List, Tuple

from snake6502.transport.bus import Bus
from snake6502.arch.mos6502.addressing import format_operand, operand_length
from snake6502.arch.mos6502.instructions.maps import OpcodeTable

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルする。
def disassemble(bus: Bus, opcode_table: OpcodeTable, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    メモリを解析し、(アドレス, HEX, ニーモニック) のリストを返す。
    bus.peek() のみを用いるため、PCやバスアクティビティログには影響しない。
    """
    results = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr:
        addr = current_addr & 0xFFFF
        opcode = bus.peek(addr)
        descriptor = opcode_table.get(opcode)

        if descriptor is None:
            results.append((addr, f"{opcode:02X}", f"DB ${opcode:02X}"))
            current_addr += 1
            continue

        operand_count = operand_length(descriptor.mode)
        operand_bytes = [bus.peek((addr + 1 + i) & 0xFFFF) for i in range(operand_count)]
        next_pc = (addr + 1 + operand_count) & 0xFFFF

        hex_str = " ".join(f"{b:02X}" for b in [opcode] + operand_bytes)
        op_str = format_operand(descriptor.mode, operand_bytes, next_pc)
        text = f"{descriptor.mnemonic.value} {op_str}".strip()

        results.append((addr, hex_str, text))
        current_addr += 1 + operand_count

    return results
