# tests/loader/test_loader.py
"""
snake6502.loader.loaderモジュールの単体テスト。
バイナリとHEXダンプテキストのロード機能を検証します。
"""
import pytest
from pathlib import Path

from snake6502.core.memory import Memory
from snake6502.loader.loader import BinaryLoader, HexDumpLoader

# @intent:test_suite プログラムローダー機能の検証。

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


class TestBinaryLoader:
    @pytest.fixture
    def memory(self):
        return Memory()

    # @intent:test_case_load バイナリファイルが原点へロードされ、PCは変わらないことを検証します。
    def test_load_binary(self, memory, tmp_path):
        program = tmp_path / "prog.bin"
        program.write_bytes(bytes([0xA9, 0x02, 0x85, 0x02, 0x60]))
        memory.pc = 0x1234

        count = BinaryLoader().load_binary(str(program), memory)

        assert count == 5
        assert [memory.read(0x0600 + i) for i in range(5)] == [0xA9, 0x02, 0x85, 0x02, 0x60]
        assert memory.pc == 0x1234

    def test_load_bytes_at_origin(self, memory):
        assert BinaryLoader().load_bytes(b"\x01\x02", memory, origin=0x0300) == 2
        assert memory.read(0x0301) == 0x02

    # @intent:test_case_overflow アドレス空間を超えるプログラムが拒否されることを検証します。
    def test_program_too_large(self, memory):
        with pytest.raises(ValueError, match="exceeds"):
            BinaryLoader().load_bytes(bytes(0x20), memory, origin=0xFFF0)


class TestHexDumpLoader:
    # @intent:test_case_parse アドレス表記とコメントを読み飛ばして解析することを検証します。
    def test_parse_hex_dump(self):
        text = (
            "; program\n"
            "0600: a9 02 85 02   ; LDA/STA\n"
            "\n"
            "0604: 60\n"
        )
        assert HexDumpLoader().parse_hex_dump(text) == [0xA9, 0x02, 0x85, 0x02, 0x60]

    # @intent:test_case_invalid 不正なトークンは行番号付きのValueErrorとなることを検証します。
    @pytest.mark.parametrize("text, token", [
        ("a9 02\nzz 00\n", "zz"),
        ("a9 0x02\n", "0x02"),
        ("a9\n\nfff\n", "fff"),
    ])
    def test_invalid_token(self, text, token):
        with pytest.raises(ValueError, match=f"Invalid byte '{token}' on line"):
            HexDumpLoader().parse_hex_dump(text)

    # @intent:test_case_signed 符号付きや非ASCII数字のトークンも2桁として受理されないことを検証します。
    @pytest.mark.parametrize("token", ["-1", "+5", "١٢", "０１"])
    def test_signed_and_non_ascii_tokens_rejected(self, token):
        with pytest.raises(ValueError, match="on line 2"):
            HexDumpLoader().parse_hex_dump(f"a9 02\n85 {token}\n")

    def test_load_text_rejects_negative_byte_with_line(self):
        memory = Memory()
        with pytest.raises(ValueError, match="Invalid byte '-1' on line 2"):
            HexDumpLoader().load_text("a9 02\n85 -1\n", memory)
        assert memory.read(0x0600) == 0

    def test_invalid_token_reports_line(self):
        with pytest.raises(ValueError, match="line 3"):
            HexDumpLoader().parse_hex_dump("a9 02\n85 02\n6g\n")

    # @intent:test_case_snake 同梱のSnakeプログラムが309バイトとしてロードされることを検証します。
    def test_load_snake_fixture(self):
        memory = Memory()
        count = HexDumpLoader().load_hex_dump(str(FIXTURES / "snake.hex"), memory)
        assert count == 309
        assert memory.read(0x0600) == 0x20
        assert memory.read(0x0734) == 0x60
        assert memory.pc == 0x0600
