# snake6502/ui/display.py
"""
フレームバッファ表示ウィジェット。

FrameBuffer の内容を16色パレットで拡大描画し、キー入力を FrameBuffer へ
ラッチします。I/Oコラボレータそのものは FrameBuffer であり、このウィジェットは
その表示と入力の窓口に徹します。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QPainter, QColor, QKeyEvent, QPaintEvent

from snake6502.io.framebuffer import FrameBuffer, PALETTE

# 矢印キーはeasy6502の慣例に従い WASD のコードへ写像する。
ARROW_KEY_CODES = {
    Qt.Key_Up: ord("w"),
    Qt.Key_Left: ord("a"),
    Qt.Key_Down: ord("s"),
    Qt.Key_Right: ord("d"),
}


# @intent:responsibility FrameBufferを描画し、キー入力をFrameBufferへ渡すQWidget。
class FramebufferView(QWidget):
    def __init__(self, framebuffer: Optional[FrameBuffer] = None, scale: int = 10, parent=None):
        super().__init__(parent)
        self._framebuffer = framebuffer if framebuffer is not None else FrameBuffer()
        self._scale = scale
        self._colors = [QColor(c) for c in PALETTE]
        self.setFocusPolicy(Qt.StrongFocus)
        self.setFixedSize(self.sizeHint())

    @property
    def framebuffer(self) -> FrameBuffer:
        return self._framebuffer

    def sizeHint(self) -> QSize:
        return QSize(self._framebuffer.width * self._scale, self._framebuffer.height * self._scale)

    # @intent:responsibility 変化したピクセルがあれば再描画を要求し、その有無を返します。タイマーのティック毎に呼ばれます。
    def refresh(self) -> bool:
        if self._framebuffer.take_dirty():
            self.update()
            return True
        return False

    # @intent:responsibility 押されたキーのコードをFrameBufferにラッチします。
    def key_code_for(self, event: QKeyEvent) -> Optional[int]:
        key_code = ARROW_KEY_CODES.get(event.key())
        if key_code is None and event.text():
            key_code = ord(event.text()[0].lower()) & 0xFF
        return key_code

    def keyPressEvent(self, event: QKeyEvent) -> None:
        key_code = self.key_code_for(event)
        if key_code is None:
            super().keyPressEvent(event)
            return
        self._framebuffer.press(key_code)

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        scale = self._scale
        for y, row in enumerate(self._framebuffer.rows()):
            for x, color_index in enumerate(row):
                painter.fillRect(x * scale, y * scale, scale, scale, self._colors[color_index])
        painter.end()
