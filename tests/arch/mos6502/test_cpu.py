# tests/arch/mos6502/test_cpu.py
import pytest
from snake6502.common.errors import DecodeError
from snake6502.core.cpu import CpuStatus
from snake6502.core.memory import Memory
from snake6502.arch.mos6502.cpu import Mos6502Cpu
from snake6502.arch.mos6502.addressing import AddressingMode
from snake6502.arch.mos6502.instructions import InstructionDescriptor, Mnemonic
from snake6502.arch.mos6502.instructions.maps import freeze_table
from snake6502.transport.bus import BusAccessType

# @intent:test_suite MOS 6502 CPUのフェッチ・デコード・実行ループと停止条件を検証します。

@pytest.fixture
def cpu():
    return Mos6502Cpu(Memory())

def load(cpu, program):
    cpu.memory.load(program)

# @intent:test_case_end_to_end LDA #$02 / STA $02 / RTS を実行し、$02に2が格納されて停止することを検証します。
def test_store_then_return_halts(cpu):
    load(cpu, [0xA9, 0x02, 0x85, 0x02, 0x60])
    executed = cpu.run(max_steps=100)

    assert cpu.memory.read(0x02) == 2
    assert cpu.is_halted
    assert cpu.error is None
    # 空スタックからのRTSで$0000に戻り、そこのBRK($00)で停止する
    assert executed == 4

# @intent:test_case_brk_only BRKのみのプログラムは即座に停止し、レジスタは初期値のままであることを検証します。
def test_brk_only(cpu):
    load(cpu, [0x00])
    cpu.step()
    state = cpu.get_state()
    assert cpu.status is CpuStatus.HALTED
    assert cpu.error is None
    assert (state.a, state.x, state.y) == (0, 0, 0)
    assert not (state.flag_c or state.flag_n or state.flag_z)

# @intent:test_case_decode_error 未定義のオペコードでDecodeErrorが送出され、CPUが停止することを検証します。
def test_unknown_opcode(cpu):
    load(cpu, [0xEA, 0xFF])
    cpu.step()
    with pytest.raises(DecodeError) as exc_info:
        cpu.step()
    assert exc_info.value.opcode == 0xFF
    assert exc_info.value.address == 0x0601
    assert str(exc_info.value) == "Unknown opcode $FF at $0601"
    assert cpu.is_halted
    assert cpu.error is exc_info.value

# @intent:test_case_halted 停止後のstepは状態を変えずHALTスナップショットを返すことを検証します。
def test_step_after_halt(cpu):
    load(cpu, [0x00, 0xA9, 0x05])
    cpu.step()
    snapshot = cpu.step()
    assert snapshot.operation.mnemonic == "HALT"
    assert cpu.get_state().a == 0
    assert cpu.run() == 0

# @intent:test_case_snapshot スナップショットが命令・実効アドレス・バスアクセスを含むことを検証します。
def test_snapshot_contents(cpu):
    load(cpu, [0x85, 0x10])
    cpu.registers.set("A", 0x33)
    snapshot = cpu.step()

    assert snapshot.operation.opcode_hex == "85"
    assert snapshot.operation.mnemonic == "STA"
    assert snapshot.operation.mode == AddressingMode.ZERO_PAGE.value
    assert snapshot.operation.operands == ["$10"]
    assert snapshot.operation.operand_bytes == [0x10]
    assert snapshot.operation.address == 0x10
    assert snapshot.operation.length == 2
    assert snapshot.metadata.step_count == 1
    assert snapshot.metadata.symbol_info == "STA $10"
    assert snapshot.state.pc == 0x0602
    writes = [a for a in snapshot.bus_activity if a.access_type == BusAccessType.WRITE]
    assert [(a.address, a.data) for a in writes] == [(0x10, 0x33)]

# @intent:test_case_branch_loop DEX/BNEのループがXが0になるまで回ることを検証します。
def test_countdown_loop(cpu):
    # LDX #$03 / DEX / BNE -3 / BRK
    load(cpu, [0xA2, 0x03, 0xCA, 0xD0, 0xFD, 0x00])
    executed = cpu.run()
    assert cpu.registers.get("X") == 0
    assert cpu.registers.zero
    assert executed == 1 + 3 * 2 + 1

# @intent:test_case_subroutine JSR/RTSで呼び出し元の次の命令へ戻ることを検証します。
def test_jsr_rts_program(cpu):
    # JSR $0606 / LDY #$01 / BRK / LDX #$07 / RTS
    load(cpu, [0x20, 0x06, 0x06, 0xA0, 0x01, 0x00, 0xA2, 0x07, 0x60])
    cpu.run(max_steps=10)
    assert cpu.is_halted
    assert cpu.registers.get("X") == 0x07
    assert cpu.registers.get("Y") == 0x01
    assert cpu.get_state().sp == 0xFF

# @intent:test_case_max_steps run(max_steps)が指定回数で止まることを検証します。
def test_run_respects_max_steps(cpu):
    load(cpu, [0x4C, 0x00, 0x06])  # JMP $0600
    assert cpu.run(max_steps=25) == 25
    assert not cpu.is_halted
    assert cpu.step_count == 25

# @intent:test_case_reset resetがPC/SP/レジスタを初期化し、メモリは保持することを検証します。
def test_reset(cpu):
    load(cpu, [0xA9, 0x09, 0x00])
    cpu.run()
    cpu.reset()
    state = cpu.get_state()
    assert state.pc == 0x0600
    assert state.sp == 0xFF
    assert state.a == 0
    assert cpu.status is CpuStatus.RUNNING
    assert cpu.memory.read(0x0600) == 0xA9

# @intent:test_case_custom_table 独自のオペコード表を与えられることを検証します。
def test_custom_opcode_table():
    table = freeze_table({
        0x01: InstructionDescriptor(Mnemonic.INX, AddressingMode.IMPLICIT),
        0x02: InstructionDescriptor(Mnemonic.BRK, AddressingMode.IMPLICIT),
    })
    cpu = Mos6502Cpu(Memory(), table)
    cpu.memory.load([0x01, 0x01, 0x02])
    cpu.run()
    assert cpu.registers.get("X") == 2
    assert cpu.error is None

def test_register_and_flag_maps(cpu):
    cpu.registers.set("A", 0x80)
    regs = cpu.get_register_map()
    assert regs == {"A": 0x80, "X": 0, "Y": 0, "PC": 0x0600, "S": 0x01FF}
    assert cpu.get_flag_state() == {"N": True, "Z": False, "C": False}

    regs["A"] = 0x01
    assert cpu.registers.get("A") == 0x80
