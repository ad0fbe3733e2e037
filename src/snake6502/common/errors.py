# snake6502/common/errors.py
"""
共通の例外定義モジュール。

エミュレーション中に発生しうる致命的なエラーと、設定・レジスタ操作の
不正を表す例外型を定義します。
"""


# @intent:responsibility エミュレーション中の致命的エラーの基底クラス。
class EmulationError(Exception):
    pass


# @intent:responsibility 命令表に存在しないオペコードを検出したことを表します。
# @intent:post-condition opcodeとaddressにより、どのアドレスで何を読んだかをホストが特定できます。
class DecodeError(EmulationError):
    """
    未定義のオペコードをフェッチした場合に送出されます。
    CPUはこのエラーの発生と同時にHALT状態へ遷移します。
    """
    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"Unknown opcode ${opcode:02X} at ${address:04X}")


# @intent:responsibility フラグへの直接書き込みを拒否するための例外。
class FlagWriteError(ValueError):
    pass


# @intent:responsibility 設定ファイル（システム構成・命令表）の不正を表します。
class ConfigError(ValueError):
    pass
