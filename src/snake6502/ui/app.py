# snake6502/ui/app.py
"""
アプリケーションのエントリポイント。
コマンドライン引数からシステムを構築し、GUIまたはヘッドレスで実行します。
"""
import argparse
import random
import sys
from pathlib import Path
from typing import List, Optional

from snake6502.common.errors import EmulationError
from snake6502.config.builder import SystemBuilder
from snake6502.config.loader import ConfigLoader
from snake6502.config.models import SystemConfig
from snake6502.io.framebuffer import FrameBuffer
from snake6502.loader.loader import BinaryLoader, HexDumpLoader

HEX_SUFFIXES = (".hex", ".txt")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="snake6502", description="6502 emulator for the easy6502 Snake game.")
    parser.add_argument("program", help="Program image (raw binary, or hex dump with --hex)")
    parser.add_argument("--config", help="System configuration YAML")
    parser.add_argument("--hex", action="store_true", help="Treat the program as a text hex dump")
    parser.add_argument("--headless", action="store_true", help="Run without a window and print the final screen")
    parser.add_argument("--max-steps", type=int, default=None, help="Stop after this many instructions")
    parser.add_argument("--disassemble", type=int, metavar="N", default=None,
                        help="Print N bytes of disassembly from the program origin and exit")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the random byte at $FE")
    return parser


# @intent:responsibility プログラムファイルをバイト列として読み込みます。拡張子が .hex/.txt の場合はHEXダンプとして扱います。
def read_program(path: str, as_hex: bool = False) -> bytes:
    if as_hex or Path(path).suffix.lower() in HEX_SUFFIXES:
        text = Path(path).read_text()
        return bytes(HexDumpLoader().parse_hex_dump(text))
    return Path(path).read_bytes()


def _print_summary(cpu, framebuffer: FrameBuffer) -> None:
    regs = cpu.get_register_map()
    state = "HALTED" if cpu.is_halted else "STOPPED"
    print(f"{state} after {cpu.step_count} steps at PC=${regs['PC']:04X} "
          f"A=${regs['A']:02X} X=${regs['X']:02X} Y=${regs['Y']:02X}")
    print(framebuffer.render_text())


# @intent:responsibility アプリケーションを起動します。
def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    framebuffer = FrameBuffer(config.io.framebuffer_width, config.io.framebuffer_height)
    rng = random.Random(args.seed)
    cpu, mmio = SystemBuilder().build_system(config, collaborator=framebuffer, rng=rng)

    program = read_program(args.program, args.hex)
    loaded = BinaryLoader().load_bytes(program, mmio, config.program_origin)
    print(f"Loaded {loaded} bytes at ${config.program_origin:04X}")

    if args.disassemble is not None:
        for address, hex_bytes, text in cpu.disassemble(config.program_origin, args.disassemble):
            print(f"{address:04X}  {hex_bytes:<9} {text}")
        return 0

    if args.headless:
        try:
            cpu.run(max_steps=args.max_steps)
        except EmulationError as e:
            print(f"Error: {e}")
            _print_summary(cpu, framebuffer)
            return 1
        _print_summary(cpu, framebuffer)
        return 0

    from PySide6.QtWidgets import QApplication
    from .main_window import MainWindow

    app = QApplication(sys.argv[:1])
    main_win = MainWindow(cpu, framebuffer, program, config)
    main_win.show()
    main_win.start()
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
