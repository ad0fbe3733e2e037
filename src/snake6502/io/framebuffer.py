# snake6502/io/framebuffer.py
"""
ヘッドレスなフレームバッファ。

GUIを持たない環境（CLIの --headless、テスト）でI/Oコラボレータとして動作し、
Qtの表示ウィジェットからも描画元として共有されます。
"""
from typing import List, Set, Tuple

from snake6502.io.mmio import IoCollaborator

# easy6502互換の16色パレット
PALETTE = (
    "#000000", "#ffffff", "#880000", "#aaffee",
    "#cc44cc", "#00cc55", "#0000aa", "#eeee77",
    "#dd8855", "#664400", "#ff7777", "#333333",
    "#777777", "#aaff66", "#0088ff", "#bbbbbb",
)


# @intent:responsibility 32x32のピクセル格子と最後のキー入力を保持します。
class FrameBuffer(IoCollaborator):
    def __init__(self, width: int = 32, height: int = 32):
        self.width = width
        self.height = height
        self._pixels: List[List[int]] = [[0] * width for _ in range(height)]
        self._key = 0
        # 前回 take_dirty() 以降に変化した座標。UIの部分再描画に用いる。
        self._dirty: Set[Tuple[int, int]] = set()

    # @intent:pre-condition 範囲外の座標は無視します（フレームバッファ外への書き込みは描画しない）。
    def update(self, x: int, y: int, color_index: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        self._pixels[y][x] = color_index & 0x0F
        self._dirty.add((x, y))

    def last_keypress(self) -> int:
        return self._key

    # @intent:responsibility キー入力をラッチします。値は次に押されるまで保持されます。
    def press(self, key_code: int) -> None:
        self._key = key_code & 0xFF

    def pixel(self, x: int, y: int) -> int:
        return self._pixels[y][x]

    def color(self, x: int, y: int) -> str:
        return PALETTE[self._pixels[y][x]]

    def rows(self) -> List[List[int]]:
        return [list(row) for row in self._pixels]

    def take_dirty(self) -> Set[Tuple[int, int]]:
        dirty = self._dirty
        self._dirty = set()
        return dirty

    def clear(self, color_index: int = 0) -> None:
        for y in range(self.height):
            for x in range(self.width):
                self.update(x, y, color_index)

    # @intent:responsibility 端末表示用の簡易レンダリング。黒以外のピクセルを '#' で表します。
    def render_text(self) -> str:
        return "\n".join(
            "".join("." if value == 0 else "#" for value in row)
            for row in self._pixels
        )
