from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QPainter, QWheelEvent
from PyQt5.QtWidgets import QGraphicsView


class CustomGraphicsView(QGraphicsView):
    """
    Canvas for the tree:
    - normal wheel: vertical panning only
    - Ctrl + wheel: zoom with factor 1.1
    - emits ``resized`` so the layout can be recomputed for the new width
    """

    resized = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setRenderHints(self.renderHints() | QPainter.Antialiasing | QPainter.TextAntialiasing)
        self.setDragMode(QGraphicsView.NoDrag)
        self.setTransformationAnchor(QGraphicsView.AnchorUnderMouse)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAsNeeded)
        self.setViewportUpdateMode(QGraphicsView.FullViewportUpdate)

    def wheelEvent(self, event: QWheelEvent):
        if event.modifiers() & Qt.ControlModifier:
            angle = event.angleDelta().y()
            factor = 1.1 if angle > 0 else (1 / 1.1)
            self.scale(factor, factor)
        else:
            delta = event.angleDelta().y()
            self.translate(0, -delta * 0.2)
        event.accept()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.resized.emit()
