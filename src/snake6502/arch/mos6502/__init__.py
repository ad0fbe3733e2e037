"""
MOS 6502 Architecture Package
"""
from .cpu import Mos6502Cpu
from .addressing import AddressingMode
