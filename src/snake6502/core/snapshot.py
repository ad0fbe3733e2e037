# snake6502/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令の実行結果（CPU状態・命令・バスアクセス）を記録した
不変のデータ構造を定義します。UIとデバッガへの情報提供を担います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from snake6502.core.state import CpuState
from snake6502.transport.bus import BusAccess


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True)
class Operation:
    """
    実行された命令の詳細（HEX、ニーモニック、アドレッシングモード、実効アドレス）。
    """
    opcode_hex: str # 例: "A9"
    mnemonic: str # 例: "LDA"
    mode: str = "IMPLICIT"
    operands: List[str] = field(default_factory=list) # 例: ["#$02"]
    operand_bytes: List[int] = field(default_factory=list)
    address: Optional[int] = None # 実効アドレス（Implicitの場合None）
    length: int = 1 # 命令のバイト長

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    step_count: int
    symbol_info: Optional[str] = None # 例: "LDA #$02"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
