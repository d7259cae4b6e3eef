import logging
from typing import Sequence

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

logger = logging.getLogger(__name__)

BASE_INTERVAL_MS = 600  # per step at 1.0x

IDLE = "idle"
PLAYING = "playing"
PAUSED = "paused"
COMPLETED = "completed"


class RepeatingTask(QObject):
    """
    Cancellable tick source. Every tick is scheduled explicitly through a
    single-shot QTimer, so the delay may change from one tick to the next and
    ``cancel()`` drops a pending tick before it is delivered.
    """

    def __init__(self, callback, parent=None):
        super().__init__(parent)
        self._callback = callback
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    def schedule(self, delay_ms: int):
        self._timer.start(max(0, int(delay_ms)))

    def cancel(self):
        self._timer.stop()

    def _fire(self):
        self._callback()


class PlaybackController(QObject):
    """
    Cursor over an already computed step list. Nothing here calls back into
    the algorithms; rewinding only re-emits recorded steps.

    The cursor counts the steps shown so far (0..total), so the step on
    screen is ``index - 1``. ``completed`` fires once per run; moving the
    cursor backwards re-arms it.
    """

    stepChanged = pyqtSignal(int, object)
    completed = pyqtSignal()
    stateChanged = pyqtSignal(str)

    def __init__(self, steps: Sequence, speed: float = 1.0, base_interval: int = BASE_INTERVAL_MS, parent=None):
        super().__init__(parent)
        self._steps = tuple(steps)
        self._position = 0
        self._speed = 1.0
        self._base_interval = base_interval
        self._state = IDLE
        self._completion_fired = False
        self._task = RepeatingTask(self._tick, self)
        self.set_speed(speed)

    # ---------- Read-only state ----------

    @property
    def index(self) -> int:
        return self._position

    @property
    def total(self) -> int:
        return len(self._steps)

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state == PLAYING

    def step_at(self, index: int):
        return self._steps[index]

    def interval(self) -> int:
        return max(1, int(self._base_interval / self._speed))

    # ---------- Controls ----------

    def play(self):
        self._task.cancel()
        if self._position >= self.total:
            self._finish()
            return
        self._set_state(PLAYING)
        self._tick()

    def pause(self):
        self._task.cancel()
        if self._state == PLAYING:
            self._set_state(PAUSED)

    def step_forward(self):
        self._task.cancel()
        if self._position >= self.total:
            self._finish()
            return
        self._set_state(PAUSED)
        self._emit(self._position)
        self._position += 1
        if self._position >= self.total:
            self._finish()

    def step_backward(self):
        self._task.cancel()
        if not self._steps:
            return
        self._position = max(1, self._position - 1)
        self._completion_fired = False
        self._set_state(PAUSED)
        self._emit(self._position - 1)

    def go_to_start(self):
        self._task.cancel()
        if not self._steps:
            return
        self._position = 1
        self._completion_fired = False
        self._set_state(PAUSED)
        self._emit(0)

    def go_to_end(self):
        # the cursor ends past the last step so a later play() completes at once
        self._task.cancel()
        if not self._steps:
            return
        self._set_state(PAUSED)
        self._emit(self.total - 1)
        self._position = self.total

    def set_speed(self, multiplier: float):
        """Applies from the next scheduled tick on."""
        if multiplier <= 0:
            raise ValueError(f"Playback speed must be positive, got {multiplier}")
        self._speed = float(multiplier)

    def destroy(self):
        self._task.cancel()
        if self._state == PLAYING:
            self._set_state(PAUSED)

    # ---------- Internal helpers ----------

    def _tick(self):
        if self._position >= self.total:
            self._finish()
            return
        self._emit(self._position)
        self._position += 1
        self._task.schedule(self.interval())

    def _emit(self, index):
        self.stepChanged.emit(index, self._steps[index])

    def _finish(self):
        self._task.cancel()
        self._position = self.total
        if self._completion_fired:
            return
        self._completion_fired = True
        self._set_state(COMPLETED)
        self.completed.emit()

    def _set_state(self, state):
        if state != self._state:
            logger.debug("playback %s -> %s at %d/%d", self._state, state, self._position, self.total)
            self._state = state
            self.stateChanged.emit(state)
