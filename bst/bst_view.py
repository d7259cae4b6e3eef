import math
from typing import Dict, Optional

from PyQt5.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QFont, QPainterPath, QPen
from PyQt5.QtWidgets import QGraphicsItem, QGraphicsObject, QGraphicsPathItem, QGraphicsSimpleTextItem, QMenu

from core.base_view import BaseStructureView
from bst.bst_layout import NODE_RADIUS, iter_positioned, layout_tree, positioned_edges
from bst.bst_model import count_nodes, tree_height
from bst.bst_steps import FOUND, INSERTING, PATH, REMOVING, VISITING

HIGHLIGHT_COLORS = {
    VISITING: QColor("#4caf50"),
    FOUND: QColor("#ff9800"),
    INSERTING: QColor("#00bcd4"),
    REMOVING: QColor("#f44336"),
    PATH: QColor("#ffeb3b"),
}

BG_COLOR = QColor("#1a1a2e")
NODE_FILL = QColor("#16213e")
NODE_STROKE = QColor("#e0e0e0")
NODE_TEXT = QColor("#ffffff")
EDGE_COLOR = QColor("#888888")
META_TEXT = QColor("#aaaaaa")


class BSTView(BaseStructureView):
    """
    Draws one tree state at a time: node circles colored by highlight kind,
    highlighted edges in the path color, and an arrow over the active node.
    """

    deleteRequested = pyqtSignal(int)
    findRequested = pyqtSignal(int)

    def __init__(self, global_ctrl):
        super().__init__(global_ctrl)
        self.scene.setBackgroundBrush(QBrush(BG_COLOR))
        self.node_items: Dict[int, BSTNodeItem] = {}
        self.edge_items: Dict[tuple, BSTEdgeItem] = {}
        self._arrow: Optional[ActiveArrowItem] = None
        self._meta: Optional[QGraphicsSimpleTextItem] = None
        self._last_render = None

    # ---------- Public API ----------

    def reset(self):
        self.scene.clear()
        self.node_items.clear()
        self.edge_items.clear()
        self._arrow = None
        self._meta = None

    def render_tree(self, tree):
        self.render_step(tree, {}, [], None)

    def refresh(self):
        """Redraw the last state, e.g. after the canvas width changed."""
        if self._last_render is not None:
            self.render_step(*self._last_render)

    def render_step(self, tree, highlights, edges, active_node=None):
        self.reset()
        self._last_render = (tree, highlights, edges, active_node)
        positioned = layout_tree(tree, self.canvas_width())
        lit_edges = set(edges)

        for parent, child in positioned_edges(positioned):
            key = (parent.value, child.value)
            edge = BSTEdgeItem(parent, child, key in lit_edges)
            self.scene.addItem(edge)
            self.edge_items[key] = edge

        for node in iter_positioned(positioned):
            item = BSTNodeItem(node.value, highlights.get(node.value))
            item.setPos(node.x - NODE_RADIUS, node.y - NODE_RADIUS)
            item.contextDelete.connect(self.deleteRequested.emit)
            item.contextFind.connect(self.findRequested.emit)
            self.scene.addItem(item)
            self.node_items[node.value] = item

            if node.value == active_node:
                self._arrow = ActiveArrowItem(node.x, node.y, highlights.get(node.value))
                self.scene.addItem(self._arrow)

        self._meta = QGraphicsSimpleTextItem(f"N = {count_nodes(tree)}    h = {tree_height(tree)}")
        self._meta.setBrush(QBrush(META_TEXT))
        self._meta.setPos(8, 8)
        self.scene.addItem(self._meta)

        self.auto_fit_view()


class BSTNodeItem(QGraphicsObject):
    contextDelete = pyqtSignal(int)
    contextFind = pyqtSignal(int)

    width = NODE_RADIUS * 2
    height = NODE_RADIUS * 2

    def __init__(self, value, highlight=None):
        super().__init__()
        self.value = value
        self.highlight = highlight
        self.setZValue(2)
        self.setFlag(QGraphicsItem.ItemIsSelectable, True)

    @property
    def fill_color(self) -> QColor:
        if self.highlight in HIGHLIGHT_COLORS:
            return HIGHLIGHT_COLORS[self.highlight]
        return NODE_FILL

    def boundingRect(self):
        return QRectF(0, 0, self.width, self.height)

    def paint(self, painter, option, widget=None):
        painter.setRenderHint(painter.Antialiasing)
        lit = self.highlight is not None
        painter.setPen(QPen(QColor("#ffffff") if lit else NODE_STROKE, 3 if lit else 2))
        painter.setBrush(QBrush(self.fill_color))
        painter.drawEllipse(self.boundingRect())

        font = QFont(painter.font())
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QColor("#000000") if lit else NODE_TEXT)
        painter.drawText(self.boundingRect(), Qt.AlignCenter, str(self.value))

    def contextMenuEvent(self, event):
        menu = QMenu()
        find_action = menu.addAction("Search Node")
        delete_action = menu.addAction("Remove Node")
        chosen = menu.exec_(event.screenPos())
        if chosen == delete_action:
            self.contextDelete.emit(self.value)
        elif chosen == find_action:
            self.contextFind.emit(self.value)


class BSTEdgeItem(QGraphicsPathItem):
    def __init__(self, parent_node, child_node, highlighted=False):
        super().__init__()
        self.highlighted = highlighted

        pen = QPen(HIGHLIGHT_COLORS[PATH] if highlighted else EDGE_COLOR, 4 if highlighted else 2)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        self.setPen(pen)
        self.setZValue(1)

        start = QPointF(parent_node.x, parent_node.y)
        end = QPointF(child_node.x, child_node.y)
        direction = end - start
        length = math.hypot(direction.x(), direction.y())
        if length > 1e-6:
            ux = direction.x() / length
            uy = direction.y() / length
            start = start + QPointF(ux * NODE_RADIUS, uy * NODE_RADIUS)
            end = end - QPointF(ux * NODE_RADIUS, uy * NODE_RADIUS)

        path = QPainterPath(start)
        path.lineTo(end)
        self.setPath(path)


class ActiveArrowItem(QGraphicsPathItem):
    """Downward arrow hovering above the node under examination."""

    def __init__(self, x, y, highlight=None):
        super().__init__()
        tip_y = y - NODE_RADIUS - 4
        path = QPainterPath(QPointF(x, tip_y))
        path.lineTo(x - 8, tip_y - 12)
        path.lineTo(x + 8, tip_y - 12)
        path.closeSubpath()
        self.setPath(path)

        color = HIGHLIGHT_COLORS.get(highlight, QColor("#ffffff"))
        self.setBrush(QBrush(color))
        self.setPen(QPen(color, 1))
        self.setZValue(3)
