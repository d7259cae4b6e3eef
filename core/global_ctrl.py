from PyQt5.QtCore import QObject, pyqtSignal

MIN_SPEED = 0.25
MAX_SPEED = 4.0


class GlobalController(QObject):
    """
    Holds the playback speed multiplier and broadcasts changes so the active
    playback and every view animation follow the same pace.
    """

    speedChanged = pyqtSignal(float)

    def __init__(self):
        super().__init__()
        self._speed = 1.0

    @property
    def speed(self) -> float:
        return self._speed

    def set_speed(self, value: float):
        """Clamp and broadcast speed multiplier (0.25× – 4×)."""
        value = max(MIN_SPEED, min(MAX_SPEED, value))
        if abs(value - self._speed) > 1e-3:
            self._speed = value
            self.speedChanged.emit(self._speed)

    def scale_duration(self, base_ms: int) -> int:
        """
        Convert a base duration (ms) into the actual duration at the current
        speed. Higher speed → shorter duration.
        """
        if self._speed <= 0:
            return base_ms
        return max(1, int(base_ms / self._speed))
