from .maps import (
    Mnemonic,
    InstructionDescriptor,
    OpcodeTable,
    OPERATIONS,
    STOP_MNEMONIC,
)
