# snake6502/ui/main_window.py
"""
メインウィンドウの実装。
フレームバッファ表示とツールバーを保持し、QTimerでCPUを駆動します。
"""
from PySide6.QtWidgets import QMainWindow, QToolBar, QLabel
from PySide6.QtGui import QAction, QCloseEvent
from PySide6.QtCore import QTimer, Slot

from snake6502.common.errors import EmulationError
from snake6502.config.builder import SystemBuilder
from snake6502.config.models import SystemConfig
from snake6502.core.cpu import AbstractCpu
from snake6502.io.framebuffer import FrameBuffer
from .display import FramebufferView


# @intent:responsibility CPUの実行とフレームバッファ表示を結び付けるウィンドウ。
# @intent:rationale CPUはGUIスレッド上のQTimerからのみ駆動し、Memory/Registersを単一の所有者に保ちます。
class MainWindow(QMainWindow):
    def __init__(self, cpu: AbstractCpu, framebuffer: FrameBuffer, program: bytes,
                 config: SystemConfig = None, parent=None):
        super().__init__(parent)
        self._cpu = cpu
        self._program = bytes(program)
        self._config = config if config is not None else SystemConfig()
        self._display_config = self._config.display

        self.setWindowTitle("snake6502")
        self.view = FramebufferView(framebuffer, scale=self._display_config.scale)
        self.setCentralWidget(self.view)

        self.status_label = QLabel()
        self.statusBar().addPermanentWidget(self.status_label)

        self._timer = QTimer(self)
        self._timer.setInterval(self._display_config.tick_interval_ms)
        self._timer.timeout.connect(self._tick)

        self._create_toolbar()
        self._update_status()

    def _create_toolbar(self):
        toolbar = QToolBar("Execution")
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.start)
        toolbar.addAction(self.run_action)

        self.pause_action = QAction("Pause", self)
        self.pause_action.triggered.connect(self.pause)
        toolbar.addAction(self.pause_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self.step)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self.reset)
        toolbar.addAction(self.reset_action)

        self._update_ui_state(False)

    def _update_ui_state(self, is_running: bool):
        halted = self._cpu.is_halted
        self.run_action.setEnabled(not is_running and not halted)
        self.pause_action.setEnabled(is_running)
        self.step_action.setEnabled(not is_running and not halted)

    def is_running(self) -> bool:
        return self._timer.isActive()

    @Slot()
    def start(self):
        if self._cpu.is_halted:
            return
        self._timer.start()
        self.view.setFocus()
        self._update_ui_state(True)

    @Slot()
    def pause(self):
        self._timer.stop()
        self._update_ui_state(False)
        self._update_status()

    @Slot()
    def step(self):
        self._run_steps(1)
        self._update_ui_state(self.is_running())

    # @intent:responsibility フレームバッファ領域を消去してプログラムを再ロードし、構成の初期状態を再適用します。
    # @intent:note 消去はメモリへの書き込みで行うため、マップドI/O経由で画面も同時に消えます。
    @Slot()
    def reset(self):
        self.pause()
        io = self._config.io
        for address in range(io.framebuffer_start, io.framebuffer_end + 1):
            self._cpu.memory.write(address, 0)
        self._cpu.memory.load(self._program, self._config.program_origin)
        SystemBuilder().apply_initial_state(self._cpu, self._config.initial_state)
        self.view.framebuffer.clear()
        self.view.refresh()
        self._update_ui_state(False)
        self._update_status()

    @Slot()
    def _tick(self):
        self._run_steps(self._display_config.steps_per_tick)

    def _run_steps(self, count: int):
        try:
            self._cpu.run(max_steps=count)
        except EmulationError as e:
            self._timer.stop()
            self.statusBar().showMessage(str(e))
        if self._cpu.is_halted:
            self._timer.stop()
            self._update_ui_state(False)
        self.view.refresh()
        self._update_status()

    def _update_status(self):
        regs = self._cpu.get_register_map()
        flags = "".join(name if value else "-" for name, value in self._cpu.get_flag_state().items())
        state = "HALTED" if self._cpu.is_halted else ("RUNNING" if self.is_running() else "PAUSED")
        self.status_label.setText(
            f"{state}  PC=${regs['PC']:04X} A=${regs['A']:02X} X=${regs['X']:02X} "
            f"Y=${regs['Y']:02X} SP=${regs['S']:04X} {flags}  steps={self._cpu.step_count}"
        )

    def closeEvent(self, event: QCloseEvent):
        self._timer.stop()
        super().closeEvent(event)
