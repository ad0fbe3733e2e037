# tests/core/test_memory.py
"""
snake6502.core.memoryモジュールの単体テスト。
"""
import pytest
from snake6502.core.memory import Memory, to_word, to_bytes, PROGRAM_ORIGIN, STACK_BASE

# @intent:test_suite メモリの読み書き、PC進行、スタック規律、サブルーチン連結を検証します。

@pytest.fixture
def memory():
    return Memory()

# @intent:test_case_init PCが$0600、SPが$FFで初期化されることを検証します。
def test_initial_registers(memory):
    assert memory.pc == PROGRAM_ORIGIN == 0x0600
    assert memory.sp == 0xFF

# @intent:test_case_rw 書き込んだ値が8bitに切り詰められて読み出されることを検証します。
@pytest.mark.parametrize("address, value", [(0x0000, 0x00), (0x0002, 0x02), (0x01FF, 0x1FF), (0xFFFF, 0x1337)])
def test_write_read_masks_value(memory, address, value):
    memory.write(address, value)
    assert memory.read(address) == value & 0xFF

# @intent:test_case_load プログラムがoriginから書き込まれ、PCは変わらないことを検証します。
def test_load_does_not_touch_pc(memory):
    memory.pc = 0x1234
    count = memory.load([0xA9, 0x02, 0x60])
    assert count == 3
    assert [memory.read(0x0600 + i) for i in range(3)] == [0xA9, 0x02, 0x60]
    assert memory.pc == 0x1234

    memory.load(b"\xEA", origin=0x0300)
    assert memory.read(0x0300) == 0xEA

# @intent:test_case_fetch fetch_nextがPCの指すバイトを返してPCを1進めることを検証します。
def test_fetch_next(memory):
    memory.load([0x11, 0x22])
    assert memory.fetch_next() == 0x11
    assert memory.fetch_next() == 0x22
    assert memory.pc == 0x0602

# @intent:test_case_fetch_wrap $FFFFからのフェッチでPCが$0000へラップすることを検証します。
def test_fetch_next_wraps(memory):
    memory.write(0xFFFF, 0x42)
    memory.pc = 0xFFFF
    assert memory.fetch_next() == 0x42
    assert memory.pc == 0x0000

# @intent:test_case_branch 条件が偽の場合はPCが変わらないことを検証します。
def test_branch(memory):
    memory.branch(False, 0x0700)
    assert memory.pc == 0x0600
    memory.branch(True, 0x0700)
    assert memory.pc == 0x0700
    memory.jump(0x10000)
    assert memory.pc == 0x0000

# @intent:test_case_stack 後入れ先出しとなり、SPが元に戻ることを検証します。
def test_stack_is_lifo(memory):
    start = memory.sp
    memory.push_byte(10)
    memory.push_byte(20)
    memory.push_byte(30)
    assert memory.sp == start - 3
    assert memory.pull_byte() == 30
    assert memory.pull_byte() == 20
    assert memory.pull_byte() == 10
    assert memory.sp == start

# @intent:test_case_stack_region プッシュした値がスタック領域($0100-$01FF)に置かれることを検証します。
def test_push_writes_stack_page(memory):
    memory.push_byte(0xAB)
    assert memory.read(STACK_BASE + 0xFF) == 0xAB

# @intent:test_case_stack_wrap SPが8bitでラップアラウンドすることを検証します。
def test_stack_pointer_wraps(memory):
    memory.sp = 0x00
    memory.push_byte(0x55)
    assert memory.sp == 0xFF
    assert memory.read(0x0100) == 0x55
    assert memory.pull_byte() == 0x55
    assert memory.sp == 0x00

# @intent:test_case_subroutine 入れ子のサブルーチン呼び出しが正しく復帰することを検証します。
def test_subroutine_linkage(memory):
    p0 = memory.pc
    memory.call_subroutine(0x0606)
    memory.call_subroutine(0x060D)
    assert memory.pc == 0x060D
    memory.return_from_subroutine()
    assert memory.pc == 0x0606
    memory.return_from_subroutine()
    assert memory.pc == p0
    assert memory.sp == 0xFF

# @intent:test_case_push_order 下位バイトが先にプッシュされることを検証します。
def test_call_pushes_low_byte_first(memory):
    memory.pc = 0x1234
    memory.call_subroutine(0x0700)
    assert memory.read(0x01FF) == 0x34
    assert memory.read(0x01FE) == 0x12

# @intent:test_case_word リトルエンディアンのワード変換を検証します。
def test_word_helpers():
    assert to_word(0x34, 0x12) == 0x1234
    assert to_bytes(0x1234) == (0x34, 0x12)
    assert to_bytes(to_word(0xFF, 0x00)) == (0xFF, 0x00)
    assert Memory.to_word(0x00, 0x06) == 0x0600
