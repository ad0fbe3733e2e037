# snake6502/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの実行状態（Running/Halted）の管理と命令サイクルの駆動に関する
抽象化を提供します。具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional, Tuple

from snake6502.common.errors import EmulationError
from snake6502.core.memory import STACK_POINTER_START
from snake6502.core.registers import Registers
from snake6502.core.snapshot import Snapshot, Operation, Metadata
from snake6502.core.state import CpuState


# @intent:responsibility 実行ループの2状態。
class CpuStatus(Enum):
    RUNNING = "RUNNING"
    HALTED = "HALTED"


# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    Memoryとのインターフェース、状態遷移、命令サイクルの抽象化を提供します。
    """
    # @intent:pre-condition memoryはMemory、またはそれを包むMemoryMappedIOである必要があります。
    # @intent:rationale MemoryとRegistersはこのCPUだけが所有し、変更します。
    def __init__(self, memory):
        self._memory = memory
        self._registers = Registers()
        self._status = CpuStatus.RUNNING
        self._error: Optional[EmulationError] = None
        self._step_count = 0

    @property
    def memory(self):
        return self._memory

    @property
    def registers(self) -> Registers:
        return self._registers

    @property
    def status(self) -> CpuStatus:
        return self._status

    @property
    def is_halted(self) -> bool:
        return self._status is CpuStatus.HALTED

    # @intent:responsibility HALTの原因となった致命的エラーを返します。BRKによる正常停止ではNone。
    @property
    def error(self) -> Optional[EmulationError]:
        return self._error

    @property
    def step_count(self) -> int:
        return self._step_count

    # @intent:responsibility CPUをリセットし、PCをプログラム原点に、SPを$FFに戻します。メモリ内容は保持します。
    def reset(self) -> None:
        self._registers = Registers()
        self._memory.pc = self._memory.origin
        self._memory.sp = STACK_POINTER_START
        self._status = CpuStatus.RUNNING
        self._error = None
        self._step_count = 0

    # @intent:responsibility 現在のCPUの状態を不変オブジェクトとして返します。
    def get_state(self) -> CpuState:
        return CpuState.capture(self._memory, self._registers)

    def _halt(self, error: Optional[EmulationError] = None) -> None:
        self._status = CpuStatus.HALTED
        self._error = error

    @abstractmethod
    def _fetch(self) -> int:
        """
        現在のPCからオペコードをフェッチし、PCを1進めます。
        """
        pass

    @abstractmethod
    def _decode(self, opcode: int, address: int) -> Operation:
        """
        オペコードを解析し、オペランドを消費して実効アドレスを確定させた
        Operationオブジェクトを返します。未定義のオペコードではCPUをHALTさせて例外を送出します。
        """
        pass

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        """
        デコードされた命令を実行し、Memory・Registersを更新します。
        """
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターン（ログクリア→HALT判定→フェッチ→デコード→実行→Snapshot生成）。
    def step(self) -> Snapshot:
        self._memory.bus.get_and_clear_activity_log()
        initial_pc = self._memory.pc

        halt_snapshot = self._handle_halt(initial_pc)
        if halt_snapshot:
            return halt_snapshot

        opcode = self._fetch()
        operation = self._decode(opcode, initial_pc)
        self._execute(operation)
        self._step_count += 1

        return self._create_snapshot(operation)

    # @intent:responsibility step() を停止まで（または max_steps 回まで）繰り返し、実行した命令数を返します。
    def run(self, max_steps: Optional[int] = None) -> int:
        executed = 0
        while not self.is_halted:
            if max_steps is not None and executed >= max_steps:
                break
            self.step()
            executed += 1
        return executed

    # @intent:responsibility HALT中は状態に触れず、HALTを示すSnapshotを返します。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        if not self.is_halted:
            return None
        return Snapshot(
            state=self.get_state(),
            operation=Operation(opcode_hex="--", mnemonic="HALT", length=0),
            metadata=Metadata(step_count=self._step_count, symbol_info="HALT"),
        )

    def _create_snapshot(self, operation: Operation) -> Snapshot:
        bus_activity = self._memory.bus.get_and_clear_activity_log()

        symbol_info = operation.mnemonic
        if operation.operands:
            symbol_info += " " + ", ".join(operation.operands)

        return Snapshot(
            state=self.get_state(),
            operation=operation,
            metadata=Metadata(step_count=self._step_count, symbol_info=symbol_info),
            bus_activity=bus_activity,
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。UIが内部構造を知らずに表示するために使用される。
        """
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, text) のタプルリストを返す。
        """
        pass
