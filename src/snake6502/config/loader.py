import os
from typing import Any, Dict, Optional

import yaml

from snake6502.common.errors import ConfigError
from snake6502.io.mmio import IoConfig
from snake6502.arch.mos6502.addressing import AddressingMode
from snake6502.arch.mos6502.instructions.maps import (
    InstructionDescriptor, Mnemonic, OpcodeTable, freeze_table,
)
from .models import SystemConfig, CpuInitialState, DisplayConfig

DEFAULT_OPCODE_TABLE = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "arch", "mos6502", "opcodes.yaml",
)


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid integer format: {value}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith("0x"):
                return int(text, 16)
            if text.startswith("$"):
                return int(text[1:], 16)
            return int(text)
        except ValueError:
            raise ConfigError(f"Invalid integer format: {value}") from None
    raise ConfigError(f"Invalid integer format: {value}")


def _load_yaml(path: str) -> Dict[str, Any]:
    with open(path, 'r') as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level YAML value in {path} must be a mapping.")
    return data


# @intent:pre-condition 省略またはnullは空として扱い、マッピング以外は拒否します。
def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"Section '{key}' must be a mapping.")
    return value


# @intent:responsibility システム構成ファイル(YAML)を読み込み、SystemConfigへ変換します。
class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        return self.parse_config(_load_yaml(path), base_dir=os.path.dirname(os.path.abspath(path)))

    # @intent:responsibility 未指定のキーは既定値のまま残します。
    def parse_config(self, data: Dict[str, Any], base_dir: Optional[str] = None) -> SystemConfig:
        defaults = SystemConfig()

        opcode_table = data.get("opcode_table")
        if opcode_table is not None and base_dir and not os.path.isabs(opcode_table):
            opcode_table = os.path.join(base_dir, opcode_table)

        io_data = _section(data, "io")
        io_defaults = IoConfig()
        io_config = IoConfig(
            random_address=_parse_int(io_data.get("random_address", io_defaults.random_address)),
            keypress_address=_parse_int(io_data.get("keypress_address", io_defaults.keypress_address)),
            framebuffer_start=_parse_int(io_data.get("framebuffer_start", io_defaults.framebuffer_start)),
            framebuffer_end=_parse_int(io_data.get("framebuffer_end", io_defaults.framebuffer_end)),
            framebuffer_width=_parse_int(io_data.get("framebuffer_width", io_defaults.framebuffer_width)),
        )
        if io_config.framebuffer_end < io_config.framebuffer_start:
            raise ConfigError("io.framebuffer_end must not be below io.framebuffer_start.")
        if io_config.framebuffer_width <= 0:
            raise ConfigError("io.framebuffer_width must be a positive integer.")

        display_data = _section(data, "display")
        display_defaults = DisplayConfig()
        display = DisplayConfig(
            scale=_parse_int(display_data.get("scale", display_defaults.scale)),
            steps_per_tick=_parse_int(display_data.get("steps_per_tick", display_defaults.steps_per_tick)),
            tick_interval_ms=_parse_int(display_data.get("tick_interval_ms", display_defaults.tick_interval_ms)),
        )

        origin = _parse_int(data.get("program_origin", defaults.program_origin))

        initial_state_data = _section(data, "initial_state")
        registers = {
            str(name).upper(): _parse_int(value)
            for name, value in _section(initial_state_data, "registers").items()
        }
        initial_state = CpuInitialState(
            pc=_parse_int(initial_state_data.get("pc", origin)),
            sp=_parse_int(initial_state_data.get("sp", defaults.initial_state.sp)),
            registers=registers,
        )

        return SystemConfig(
            program_origin=origin,
            opcode_table=opcode_table,
            io=io_config,
            display=display,
            initial_state=initial_state,
        )


# @intent:responsibility 命令表(YAML)を読み込み、不変のオペコード表を生成します。
# @intent:rationale 命令表は実行前に一度だけ読み込み、ニーモニックやモード名の誤りはこの時点で検出します。
class OpcodeTableLoader:
    def load_default(self) -> OpcodeTable:
        return self.load_from_file(DEFAULT_OPCODE_TABLE)

    def load_from_file(self, path: str) -> OpcodeTable:
        return self.parse_table(_load_yaml(path))

    def parse_table(self, data: Dict[str, Any]) -> OpcodeTable:
        entries: Dict[int, InstructionDescriptor] = {}
        for key, entry in _section(data, "opcodes").items():
            opcode = _parse_int(key)
            if not 0 <= opcode <= 0xFF:
                raise ConfigError(f"Opcode {key} is not an 8-bit value.")
            if opcode in entries:
                raise ConfigError(f"Duplicate opcode ${opcode:02X}.")
            if not isinstance(entry, dict):
                raise ConfigError(f"Opcode ${opcode:02X}: entry must be a mapping.")

            try:
                mnemonic = Mnemonic(str(entry.get("mnemonic", "")).upper())
            except ValueError:
                raise ConfigError(f"Opcode ${opcode:02X}: unknown mnemonic {entry.get('mnemonic')!r}") from None
            try:
                mode = AddressingMode(str(entry.get("mode", "")).upper())
            except ValueError:
                raise ConfigError(f"Opcode ${opcode:02X}: unknown addressing mode {entry.get('mode')!r}") from None

            entries[opcode] = InstructionDescriptor(mnemonic, mode)
        return freeze_table(entries)
