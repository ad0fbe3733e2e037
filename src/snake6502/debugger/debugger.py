# snake6502/debugger/debugger.py
"""
デバッガモジュール。

Mos6502Cpu を1命令ずつ進め、各命令のSnapshot（CPU状態とバスアクセス）を
ブレークポイント条件と照合して、条件成立時に実行を止めます。
"""
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional

from snake6502.core.cpu import AbstractCpu
from snake6502.core.snapshot import Snapshot
from snake6502.core.state import CpuState
from snake6502.transport.bus import BusAccessType


class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # 次に実行する命令のアドレス
    MEMORY_READ = "MEMORY_READ"         # 命令がアドレスを読んだ
    MEMORY_WRITE = "MEMORY_WRITE"       # 命令がアドレスへ書いた
    REGISTER_VALUE = "REGISTER_VALUE"   # CpuStateの属性が値に一致した
    REGISTER_CHANGE = "REGISTER_CHANGE" # CpuStateの属性が直前の命令で変化した


@dataclass(frozen=True)
class BreakpointCondition:
    """
    register_name は CpuState の属性名（"a", "x", "y", "pc", "sp", "flag_z" など）。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None
    address: Optional[int] = None
    register_name: Optional[str] = None
    enabled: bool = True


# @intent:responsibility run() が戻った理由。
class StopReason(Enum):
    BREAKPOINT = "BREAKPOINT"
    HALTED = "HALTED"
    STEP_LIMIT = "STEP_LIMIT"
    STOPPED = "STOPPED"


def _accessed(snapshot: Snapshot, address: Optional[int], access_type: BusAccessType) -> bool:
    return any(a.access_type is access_type and a.address == address for a in snapshot.bus_activity)


def _register_of(state: CpuState, name: Optional[str]):
    return getattr(state, name, None) if name else None


# 実行後に評価する条件。引数は (条件, 実行後のSnapshot, 実行前の状態)。
_POST_STEP_CHECKS: Dict[BreakpointConditionType, Callable[[BreakpointCondition, Snapshot, CpuState], bool]] = {
    BreakpointConditionType.MEMORY_READ:
        lambda bp, snap, prev: _accessed(snap, bp.address, BusAccessType.READ),
    BreakpointConditionType.MEMORY_WRITE:
        lambda bp, snap, prev: _accessed(snap, bp.address, BusAccessType.WRITE),
    BreakpointConditionType.REGISTER_VALUE:
        lambda bp, snap, prev: (_register_of(snap.state, bp.register_name) is not None
                                and _register_of(snap.state, bp.register_name) == bp.value),
    BreakpointConditionType.REGISTER_CHANGE:
        lambda bp, snap, prev: (_register_of(snap.state, bp.register_name) is not None
                                and _register_of(snap.state, bp.register_name) != _register_of(prev, bp.register_name)),
}


# @intent:responsibility ブレークポイントの管理と、停止条件付きの連続実行を行います。
# @intent:rationale PC一致は命令の実行前に、その他の条件は実行後のSnapshotに対して評価します。
class Debugger:
    def __init__(self, cpu: AbstractCpu, max_history: int = 1000):
        self._cpu = cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running = False
        self._previous_state: CpuState = cpu.get_state()
        self._last_snapshot: Optional[Snapshot] = None
        self._last_hit: Optional[BreakpointCondition] = None
        # 古いSnapshotから破棄される
        self._history: Deque[Snapshot] = deque(maxlen=max_history)

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        if old_condition in self._breakpoints:
            self._breakpoints[self._breakpoints.index(old_condition)] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    # @intent:responsibility 直近のrun()を止めたブレークポイント。ブレークポイント以外で止まった場合はNone。
    @property
    def last_hit(self) -> Optional[BreakpointCondition]:
        return self._last_hit

    def _active(self):
        return (bp for bp in self._breakpoints if bp.enabled)

    def _pc_hit(self, pc: int) -> Optional[BreakpointCondition]:
        for bp in self._active():
            if bp.condition_type is BreakpointConditionType.PC_MATCH and bp.value == pc:
                return bp
        return None

    def _post_step_hit(self, snapshot: Snapshot) -> Optional[BreakpointCondition]:
        for bp in self._active():
            check = _POST_STEP_CHECKS.get(bp.condition_type)
            if check is not None and check(bp, snapshot, self._previous_state):
                return bp
        return None

    def step_instruction(self) -> Snapshot:
        """
        CPUを1命令分実行し、その結果のSnapshotを履歴に積んで返します。
        """
        self._previous_state = self._cpu.get_state()
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot
        self._history.append(snapshot)
        return snapshot

    def _break(self, bp: BreakpointCondition, pc: int) -> StopReason:
        self._running = False
        self._last_hit = bp
        print(f"Breakpoint hit at PC: {pc:#06x}")
        return StopReason.BREAKPOINT

    # @intent:responsibility ブレークポイント、HALT、命令数上限のいずれかまで実行を続けます。
    # @intent:note 再開直後の命令に対するPC一致は無視し、同じ位置で止まり続けないようにします。
    def run(self, max_steps: Optional[int] = None) -> StopReason:
        self._running = True
        self._last_hit = None
        executed = 0

        while self._running:
            if self._cpu.is_halted:
                self._running = False
                return StopReason.HALTED
            if max_steps is not None and executed >= max_steps:
                self._running = False
                return StopReason.STEP_LIMIT

            pc = self._cpu.get_state().pc
            if executed:
                bp = self._pc_hit(pc)
                if bp is not None:
                    return self._break(bp, pc)

            snapshot = self.step_instruction()
            executed += 1

            bp = self._post_step_hit(snapshot)
            if bp is not None:
                return self._break(bp, snapshot.state.pc)

        return StopReason.STOPPED

    def stop(self) -> None:
        self._running = False
