import logging
import random
from typing import Optional

from PyQt5.QtWidgets import (
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from core.global_ctrl import GlobalController
from core.playback import PlaybackController
from bst import bst_pseudocode as ops
from bst.bst_algorithms import create_default_tree, run_operation
from bst.bst_model import count_nodes, tree_height
from bst.bst_pseudocode import get_pseudocode
from bst.bst_view import BSTView

logger = logging.getLogger(__name__)

MIN_INPUT = 0
MAX_INPUT = 999
RANDOM_SIZE_RANGE = (5, 10)

_BUTTON_LABELS = {
    ops.SEARCH: "Search",
    ops.INSERT: "Insert",
    ops.REMOVE: "Remove",
    ops.PREDECESSOR: "Predecessor",
    ops.SUCCESSOR: "Successor",
    ops.SELECT_KTH: "Select k-th",
    ops.INORDER: "In-order",
    ops.PREORDER: "Pre-order",
    ops.POSTORDER: "Post-order",
}


class BSTController(QWidget):
    """
    Builds the BST operation panel and the algorithm panel, runs operations
    and drives their playback into the view.
    """

    def __init__(self, global_ctrl: GlobalController):
        super().__init__()
        self.global_ctrl = global_ctrl
        self.view = BSTView(global_ctrl)
        self.tree = create_default_tree()
        self.playback: Optional[PlaybackController] = None
        self.panel_index = -1

        self._pending_tree = None
        self._panel_locked = False
        self._op_buttons = {}

        self._build_inputs()
        self.panel = self._create_panel()
        self.algorithm_panel = self._create_algorithm_panel()

        self.view.interactionLocked.connect(self._on_lock_state)
        self.view.deleteRequested.connect(self._handle_delete_from_view)
        self.view.findRequested.connect(self._handle_find_from_view)
        self.global_ctrl.speedChanged.connect(self._on_speed_changed)

        self._set_description(
            f"Default BST loaded (N={count_nodes(self.tree)}, h={tree_height(self.tree)}). Pick an operation."
        )
        self._refresh_inputs()

    # ---------- UI 构建 ----------

    def _build_inputs(self):
        self.value_edit = QLineEdit()
        self.value_edit.setPlaceholderText(f"Value ({MIN_INPUT}-{MAX_INPUT})")
        self.value_edit.returnPressed.connect(lambda: self._on_input_operation(ops.SEARCH))

    def _create_panel(self):
        container = QWidget()
        layout = QGridLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setHorizontalSpacing(12)
        layout.setVerticalSpacing(12)

        # Build
        build_group = QGroupBox("Build")
        build_layout = QVBoxLayout(build_group)
        build_layout.setContentsMargins(12, 10, 12, 12)
        self.random_btn = QPushButton("Random Tree")
        self.random_btn.clicked.connect(self._on_create_random)
        self.default_btn = QPushButton("Default Tree")
        self.default_btn.clicked.connect(self._on_create_default)
        build_layout.addWidget(self.random_btn)
        build_layout.addWidget(self.default_btn)
        layout.addWidget(build_group, 0, 0)

        # Operations with a value
        value_group = QGroupBox("Operations")
        value_layout = QGridLayout(value_group)
        value_layout.setContentsMargins(12, 10, 12, 12)
        value_layout.addWidget(self.value_edit, 0, 0, 1, 3)
        for idx, op in enumerate(ops.INPUT_OPERATIONS):
            button = QPushButton(_BUTTON_LABELS[op])
            button.clicked.connect(lambda _checked=False, name=op: self._on_input_operation(name))
            value_layout.addWidget(button, 1 + idx // 3, idx % 3)
            self._op_buttons[op] = button
        layout.addWidget(value_group, 0, 1)

        # Traversals
        traverse_group = QGroupBox("Traverse")
        traverse_layout = QVBoxLayout(traverse_group)
        traverse_layout.setContentsMargins(12, 10, 12, 12)
        for op in ops.TRAVERSAL_OPERATIONS:
            button = QPushButton(_BUTTON_LABELS[op])
            button.clicked.connect(lambda _checked=False, name=op: self._start_operation(name))
            traverse_layout.addWidget(button)
            self._op_buttons[op] = button
        layout.addWidget(traverse_group, 0, 2)

        layout.addWidget(self._create_playback_bar(), 1, 0, 1, 3)
        return container

    def _create_playback_bar(self):
        bar = QWidget()
        bar_layout = QHBoxLayout(bar)
        bar_layout.setContentsMargins(0, 0, 0, 0)
        bar_layout.setSpacing(6)

        self.start_btn = QPushButton("⏮")
        self.back_btn = QPushButton("◀")
        self.play_btn = QPushButton("Play")
        self.pause_btn = QPushButton("Pause")
        self.forward_btn = QPushButton("▶")
        self.end_btn = QPushButton("⏭")
        self.step_label = QLabel("0 / 0")

        self.start_btn.clicked.connect(lambda: self._with_playback("go_to_start"))
        self.back_btn.clicked.connect(lambda: self._with_playback("step_backward"))
        self.play_btn.clicked.connect(lambda: self._with_playback("play"))
        self.pause_btn.clicked.connect(lambda: self._with_playback("pause"))
        self.forward_btn.clicked.connect(lambda: self._with_playback("step_forward"))
        self.end_btn.clicked.connect(lambda: self._with_playback("go_to_end"))

        self._playback_buttons = (
            self.start_btn,
            self.back_btn,
            self.play_btn,
            self.pause_btn,
            self.forward_btn,
            self.end_btn,
        )
        for button in self._playback_buttons:
            bar_layout.addWidget(button)
        bar_layout.addStretch(1)
        bar_layout.addWidget(self.step_label)
        return bar

    def _create_algorithm_panel(self):
        panel = QWidget()
        layout = QVBoxLayout(panel)
        layout.setContentsMargins(0, 0, 0, 0)

        self.title_label = QLabel("Algorithm")
        self.title_label.setObjectName("algorithmTitle")
        self.code_list = QListWidget()
        self.code_list.setObjectName("pseudocodeList")
        self.description_label = QLabel()
        self.description_label.setWordWrap(True)
        self.step_log = QListWidget()

        layout.addWidget(self.title_label)
        layout.addWidget(self.code_list, 2)
        layout.addWidget(QLabel("Current step"))
        layout.addWidget(self.description_label)
        layout.addWidget(QLabel("Step log"))
        layout.addWidget(self.step_log, 3)
        return panel

    def build_panel(self):
        return self.panel

    # ---------- 生命周期 ----------

    def on_activate(self, graphics_view):
        self.view.bind_canvas(graphics_view)
        self.view.render_tree(self.tree)

    def on_deactivate(self):
        self._stop_playback()

    # ---------- 操作回调 ----------

    def _on_create_random(self):
        size = random.randint(*RANDOM_SIZE_RANGE)
        self._start_operation(ops.CREATE, size)

    def _on_create_default(self):
        self._stop_playback()
        self.view.unlock_interactions()
        self.tree = create_default_tree()
        self._show_pseudocode(None)
        self.step_log.clear()
        self._set_description(f"Default BST loaded (N={count_nodes(self.tree)}, h={tree_height(self.tree)}).")
        self.view.render_tree(self.tree)
        self._refresh_inputs()

    def _on_input_operation(self, op):
        value = self._read_value(_BUTTON_LABELS[op])
        if value is None:
            return
        self._start_operation(op, value)

    def _start_operation(self, op, value=None):
        self._stop_playback()
        logger.info("running %s%s", op, "" if value is None else f"({value})")

        outcome = run_operation(op, self.tree, value)
        self._pending_tree = outcome.tree
        self._show_pseudocode(op)
        self.step_log.clear()

        if not outcome.steps:
            self._commit_tree()
            return

        self.playback = PlaybackController(outcome.steps, speed=self.global_ctrl.speed, parent=self)
        self.playback.stepChanged.connect(self._on_step)
        self.playback.completed.connect(self._on_completed)
        self.playback.stateChanged.connect(lambda _state: self._refresh_inputs())
        self.view.lock_interactions()
        self.playback.play()

    def _with_playback(self, action):
        if self.playback is None:
            return
        getattr(self.playback, action)()
        self._update_step_label()

    def _on_step(self, index, step):
        self.view.render_step(step.tree, step.highlighted_nodes, step.highlighted_edges, step.active_node)
        self._set_description(step.description)
        self._set_code_line(step.code_line)
        self.step_log.addItem(f"{index + 1}. {step.description}")
        self.step_log.scrollToBottom()
        self._update_step_label()

    def _on_completed(self):
        self._commit_tree()
        self._set_code_line(None)
        self._update_step_label()

    def _commit_tree(self):
        # the current tree is only swapped once the whole run has played
        self.tree = self._pending_tree
        self.view.unlock_interactions()
        if self.playback is not None and self.playback.total:
            last = self.playback.step_at(self.playback.total - 1)
            self.view.render_step(self.tree, last.highlighted_nodes, last.highlighted_edges)
        else:
            self.view.render_tree(self.tree)
        self._refresh_inputs()

    def _stop_playback(self):
        if self.playback is None:
            return
        self.playback.destroy()
        self.playback.deleteLater()
        self.playback = None

    def _on_speed_changed(self, speed):
        if self.playback is not None:
            self.playback.set_speed(speed)

    def _handle_delete_from_view(self, value):
        if self._panel_locked:
            return
        self.value_edit.setText(str(value))
        self._start_operation(ops.REMOVE, value)

    def _handle_find_from_view(self, value):
        if self._panel_locked:
            return
        self.value_edit.setText(str(value))
        self._start_operation(ops.SEARCH, value)

    # ---------- 状态管理 ----------

    def _show_pseudocode(self, op):
        self.code_list.clear()
        if op is None:
            self.title_label.setText("Algorithm")
            return
        entry = get_pseudocode(op)
        self.title_label.setText(entry.title)
        self.code_list.addItems(list(entry.lines))

    def _set_code_line(self, line):
        if line is None or not 0 <= line < self.code_list.count():
            self.code_list.clearSelection()
            return
        self.code_list.setCurrentRow(line)

    def _set_description(self, text):
        self.description_label.setText(text)

    def _update_step_label(self):
        if self.playback is None:
            self.step_label.setText("0 / 0")
            return
        self.step_label.setText(f"{self.playback.index} / {self.playback.total}")

    def _refresh_inputs(self):
        locked = self._panel_locked
        empty = self.tree is None
        self.random_btn.setDisabled(locked)
        self.default_btn.setDisabled(locked)
        self.value_edit.setDisabled(locked)
        for op, button in self._op_buttons.items():
            button.setDisabled(locked or (empty and op != ops.INSERT))

        has_playback = self.playback is not None
        for button in self._playback_buttons:
            button.setDisabled(not has_playback)
        if has_playback:
            self.play_btn.setDisabled(self.playback.is_playing)
            self.pause_btn.setDisabled(not self.playback.is_playing)

    def _on_lock_state(self, locked):
        self._panel_locked = locked
        self._refresh_inputs()

    # ---------- Helpers ----------

    def _read_value(self, action: str) -> Optional[int]:
        raw = self.value_edit.text().strip()
        if not raw:
            QMessageBox.warning(self, "Missing Value", f"Enter a value for {action}.")
            return None
        try:
            value = self._coerce_value(raw)
        except ValueError:
            QMessageBox.warning(
                self,
                "Invalid Value",
                f"{action} needs a whole number between {MIN_INPUT} and {MAX_INPUT}.",
            )
            return None
        return value

    @staticmethod
    def _coerce_value(raw: str) -> int:
        value = int(raw)
        if not MIN_INPUT <= value <= MAX_INPUT:
            raise ValueError(f"{value} outside {MIN_INPUT}..{MAX_INPUT}")
        return value
