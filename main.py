import logging
import sys
from pathlib import Path

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from core.global_ctrl import MAX_SPEED, MIN_SPEED, GlobalController
from widgets.graphics_view import CustomGraphicsView
from bst.bst_ctrl import BSTController

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Main window: tree canvas and controls on the left, algorithm panel on the right."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("BST Step Visualizer")
        self.resize(1280, 760)

        self.global_ctrl = GlobalController()
        self.controller = BSTController(self.global_ctrl)

        self._build_ui()
        self._connect_signals()

        # Apply stylesheet if available
        style_path = Path(__file__).parent / "resources" / "styles.qss"
        if style_path.exists():
            with open(style_path, "r", encoding="utf-8") as handle:
                self.setStyleSheet(handle.read())

        self.controller.on_activate(self.graphics_view)

    def _build_ui(self):
        central = QWidget(self)
        self.setCentralWidget(central)

        root_layout = QHBoxLayout(central)
        root_layout.setContentsMargins(8, 8, 8, 8)
        root_layout.setSpacing(8)

        # Left panel (70%)
        left_panel = QWidget()
        left_layout = QVBoxLayout(left_panel)
        left_layout.setContentsMargins(0, 0, 0, 0)
        left_layout.setSpacing(6)

        self.graphics_view = CustomGraphicsView()
        left_layout.addWidget(self.graphics_view, 1)

        speed_layout = QHBoxLayout()
        speed_label = QLabel("Animation Speed")
        self.speed_value_label = QLabel("1.0×")
        self.speed_slider = QSlider(Qt.Horizontal)
        # slider units are hundredths of the multiplier
        self.speed_slider.setRange(int(MIN_SPEED * 100), int(MAX_SPEED * 100))
        self.speed_slider.setValue(100)
        speed_layout.addWidget(speed_label)
        speed_layout.addWidget(self.speed_slider, 1)
        speed_layout.addWidget(self.speed_value_label)
        left_layout.addLayout(speed_layout)

        left_layout.addWidget(self.controller.build_panel(), 0)

        # Right panel (30%)
        root_layout.addWidget(left_panel, 14)
        root_layout.addWidget(self.controller.algorithm_panel, 6)

    def _connect_signals(self):
        self.speed_slider.valueChanged.connect(self._on_speed_slider_changed)
        self.graphics_view.resized.connect(self.controller.view.refresh)

    def _on_speed_slider_changed(self, value):
        speed = value / 100.0
        self.speed_value_label.setText(f"{speed:.2f}×")
        self.global_ctrl.set_speed(speed)

    def closeEvent(self, event):
        self.controller.on_deactivate()
        super().closeEvent(event)


def main():
    level = logging.DEBUG if "--debug" in sys.argv else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("starting BST Step Visualizer")

    app = QApplication(sys.argv)
    window = MainWindow()
    window.showMaximized()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
