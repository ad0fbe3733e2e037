# snake6502/arch/mos6502/instructions/maps.py
"""
MOS 6502 命令マップ。

ニーモニック → 命令本体 の静的な対応表と、オペコード → (ニーモニック, アドレッシングモード)
の命令記述子を定義します。オペコード表そのものは opcodes.yaml から起動時に一度だけ読み込まれます
（snake6502.config.loader.OpcodeTableLoader）。
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from snake6502.arch.mos6502.addressing import AddressingMode
from snake6502.core.registers import Registers
from snake6502.arch.mos6502.instructions import load, alu, control


class Mnemonic(Enum):
    # Load / Store / Transfer
    LDA = "LDA"
    LDX = "LDX"
    LDY = "LDY"
    STA = "STA"
    STX = "STX"
    STY = "STY"
    TAX = "TAX"
    TAY = "TAY"
    TXA = "TXA"
    TYA = "TYA"
    TSX = "TSX"
    TXS = "TXS"
    # ALU
    ADC = "ADC"
    SBC = "SBC"
    CMP = "CMP"
    CPX = "CPX"
    CPY = "CPY"
    AND = "AND"
    ORA = "ORA"
    EOR = "EOR"
    BIT = "BIT"
    ASL = "ASL"
    LSR = "LSR"
    ROL = "ROL"
    ROR = "ROR"
    INC = "INC"
    DEC = "DEC"
    INX = "INX"
    DEX = "DEX"
    INY = "INY"
    DEY = "DEY"
    # Control
    BCC = "BCC"
    BCS = "BCS"
    BEQ = "BEQ"
    BNE = "BNE"
    BMI = "BMI"
    BPL = "BPL"
    JMP = "JMP"
    JSR = "JSR"
    RTS = "RTS"
    PHA = "PHA"
    PLA = "PLA"
    CLC = "CLC"
    SEC = "SEC"
    NOP = "NOP"
    BRK = "BRK"


# 停止命令。これを実行するとCPUは正常にHALT状態へ遷移します。
STOP_MNEMONIC = Mnemonic.BRK

# Execution Function Type: (memory, registers, effective_address) -> None
ExecFunc = Callable[[object, Registers, Optional[int]], None]

OPERATIONS: Mapping[Mnemonic, ExecFunc] = MappingProxyType({
    Mnemonic.LDA: load.lda,
    Mnemonic.LDX: load.ldx,
    Mnemonic.LDY: load.ldy,
    Mnemonic.STA: load.sta,
    Mnemonic.STX: load.stx,
    Mnemonic.STY: load.sty,
    Mnemonic.TAX: load.tax,
    Mnemonic.TAY: load.tay,
    Mnemonic.TXA: load.txa,
    Mnemonic.TYA: load.tya,
    Mnemonic.TSX: load.tsx,
    Mnemonic.TXS: load.txs,

    Mnemonic.ADC: alu.adc,
    Mnemonic.SBC: alu.sbc,
    Mnemonic.CMP: alu.cmp,
    Mnemonic.CPX: alu.cpx,
    Mnemonic.CPY: alu.cpy,
    Mnemonic.AND: alu.and_,
    Mnemonic.ORA: alu.ora,
    Mnemonic.EOR: alu.eor,
    Mnemonic.BIT: alu.bit,
    Mnemonic.ASL: alu.asl,
    Mnemonic.LSR: alu.lsr,
    Mnemonic.ROL: alu.rol,
    Mnemonic.ROR: alu.ror,
    Mnemonic.INC: alu.inc,
    Mnemonic.DEC: alu.dec,
    Mnemonic.INX: alu.inx,
    Mnemonic.DEX: alu.dex,
    Mnemonic.INY: alu.iny,
    Mnemonic.DEY: alu.dey,

    Mnemonic.BCC: control.bcc,
    Mnemonic.BCS: control.bcs,
    Mnemonic.BEQ: control.beq,
    Mnemonic.BNE: control.bne,
    Mnemonic.BMI: control.bmi,
    Mnemonic.BPL: control.bpl,
    Mnemonic.JMP: control.jmp,
    Mnemonic.JSR: control.jsr,
    Mnemonic.RTS: control.rts,
    Mnemonic.PHA: control.pha,
    Mnemonic.PLA: control.pla,
    Mnemonic.CLC: control.clc,
    Mnemonic.SEC: control.sec,
    Mnemonic.NOP: control.nop,
    Mnemonic.BRK: control.brk,
})


# @intent:responsibility 1つのオペコードに対応する不変の命令記述子。
@dataclass(frozen=True)
class InstructionDescriptor:
    mnemonic: Mnemonic
    mode: AddressingMode

    @property
    def operation(self) -> ExecFunc:
        return OPERATIONS[self.mnemonic]


OpcodeTable = Mapping[int, InstructionDescriptor]


# @intent:responsibility 辞書から読み取り専用の命令表を作ります。実行中の変更を防ぐためです。
def freeze_table(entries: Dict[int, InstructionDescriptor]) -> OpcodeTable:
    return MappingProxyType(dict(entries))
