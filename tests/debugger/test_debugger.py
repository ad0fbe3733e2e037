# tests/debugger/test_debugger.py
"""
snake6502.debugger.debuggerモジュールの単体テスト。
Debuggerの実行制御、ブレークポイント管理、および条件チェック機能を検証します。
"""
import pytest

from snake6502.core.memory import Memory
from snake6502.arch.mos6502.cpu import Mos6502Cpu
from snake6502.debugger.debugger import (
    Debugger, BreakpointCondition, BreakpointConditionType, StopReason,
)

# @intent:test_suite デバッガのブレークポイントと実行制御機能の検証。

# LDX #$03 / loop: DEX / STX $10 / BNE loop / BRK
COUNTDOWN = [0xA2, 0x03, 0xCA, 0x86, 0x10, 0xD0, 0xFB, 0x00]


class TestDebugger:
    """
    Debuggerの単体テスト。
    """
    @pytest.fixture
    def setup_debugger(self):
        memory = Memory()
        memory.load(COUNTDOWN)
        cpu = Mos6502Cpu(memory)
        debugger = Debugger(cpu)
        return debugger, cpu, memory

    # @intent:test_case_add_remove_breakpoint ブレークポイントの追加と削除が正しく行われることを検証します。
    def test_add_remove_breakpoint(self, setup_debugger):
        debugger, _, _ = setup_debugger
        bp1 = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x0602)
        bp2 = BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x0010)

        debugger.add_breakpoint(bp1)
        debugger.add_breakpoint(bp2)
        debugger.add_breakpoint(bp1)
        assert debugger.get_breakpoints() == [bp1, bp2]

        disabled = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x0602, enabled=False)
        debugger.update_breakpoint(bp1, disabled)
        assert debugger.get_breakpoints() == [disabled, bp2]

        debugger.remove_breakpoint(bp2)
        assert debugger.get_breakpoints() == [disabled]

    # @intent:test_case_run_to_halt ブレークポイントがなければBRKまで実行されることを検証します。
    def test_run_until_halt(self, setup_debugger):
        debugger, cpu, memory = setup_debugger
        assert debugger.run() == StopReason.HALTED
        assert debugger.last_hit is None
        assert cpu.is_halted
        assert memory.read(0x10) == 0
        assert debugger.get_last_snapshot().operation.mnemonic == "BRK"

    # @intent:test_case_pc_match PC一致のブレークポイントで停止し、同じ位置から再開できることを検証します。
    def test_pc_breakpoint(self, setup_debugger, capsys):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x0602))

        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x0602
        assert cpu.registers.get("X") == 3
        assert debugger.last_hit.value == 0x0602
        assert "Breakpoint hit at PC: 0x0602" in capsys.readouterr().out

        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.registers.get("X") == 2

    # @intent:test_case_memory_write 特定アドレスへの書き込みで停止することを検証します。
    def test_memory_write_breakpoint(self, setup_debugger):
        debugger, cpu, memory = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x0010))
        assert debugger.run() == StopReason.BREAKPOINT
        assert memory.read(0x10) == 2
        assert debugger.get_last_snapshot().operation.mnemonic == "STX"

    def test_memory_read_breakpoint(self):
        memory = Memory()
        memory.load([0xEA, 0xA5, 0x20, 0x00])  # NOP / LDA $20 / BRK
        debugger = Debugger(Mos6502Cpu(memory))
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_READ, address=0x0020))
        assert debugger.run() == StopReason.BREAKPOINT
        assert debugger.get_last_snapshot().operation.mnemonic == "LDA"

    # @intent:test_case_register_value レジスタが指定値になった時点で停止することを検証します。
    def test_register_value_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(
            BreakpointConditionType.REGISTER_VALUE, value=1, register_name="x"))
        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.registers.get("X") == 1

    def test_register_change_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(
            BreakpointConditionType.REGISTER_CHANGE, register_name="flag_z"))
        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.registers.zero
        assert cpu.registers.get("X") == 0

    # @intent:test_case_step_limit 命令数上限で停止し、履歴が上限件数に保たれることを検証します。
    def test_step_limit_and_history(self):
        memory = Memory()
        memory.load([0x4C, 0x00, 0x06])  # JMP $0600
        debugger = Debugger(Mos6502Cpu(memory), max_history=5)
        assert debugger.run(max_steps=20) == StopReason.STEP_LIMIT
        history = debugger.get_history()
        assert len(history) == 5
        assert history[-1].metadata.step_count == 20

    def test_step_instruction(self, setup_debugger):
        debugger, _, _ = setup_debugger
        snapshot = debugger.step_instruction()
        assert snapshot.operation.mnemonic == "LDX"
        assert snapshot.state.x == 3
        assert debugger.get_history() == [snapshot]
