"""
Sketch Window - Main window with the sketch overlay, tools and fixture palette
"""

from PySide6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
                               QToolBar, QPushButton, QLabel, QGroupBox,
                               QLineEdit, QMessageBox, QScrollArea)
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QActionGroup, QFont, QKeySequence

from data.fixtures import FIXTURE_ORDER, STANDARD_FIXTURES
from models.scene import SceneTab
from sketch import SketchEngine, SketchOverlay, ToolType
from utils.debug_logger import debug_logger
from utils.general_utils import get_application_title


class SketchWindow(QMainWindow):
    """Before/after bathroom sketch editor"""

    def __init__(self, engine: SketchEngine = None, settings_manager=None):
        super().__init__()
        self.engine = engine or SketchEngine()
        self.settings_manager = settings_manager

        self.setWindowTitle(get_application_title())
        self.resize(1200, 800)
        self.init_ui()

        self.engine.status_changed.connect(self.update_status_bar)
        self.engine.can_undo_changed.connect(self.undo_action.setEnabled)
        self.engine.tab_changed.connect(self._on_tab_changed)
        self.engine.tool_changed.connect(self._on_tool_changed)
        self.engine.saved.connect(self._on_saved)

    def init_ui(self):
        self.create_toolbar()

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QHBoxLayout()

        main_layout.addWidget(self.create_left_panel())

        self.overlay = SketchOverlay(self.engine)
        scroll = QScrollArea()
        scroll.setWidget(self.overlay)
        scroll.setWidgetResizable(True)
        main_layout.addWidget(scroll, 1)

        central_widget.setLayout(main_layout)

        self.status_bar = self.statusBar()
        self.update_status_bar(self.engine.status)

    def create_toolbar(self):
        """Create the main toolbar"""
        toolbar = QToolBar()
        self.addToolBar(toolbar)

        # Before/after tabs
        self.tab_group = QActionGroup(self)
        self.tab_actions = {}
        for tab, text in ((SceneTab.BEFORE, 'Before'), (SceneTab.AFTER, 'After')):
            action = QAction(text, self)
            action.setCheckable(True)
            action.triggered.connect(lambda checked=False, t=tab: self.engine.switch_tab(t))
            self.tab_group.addAction(action)
            toolbar.addAction(action)
            self.tab_actions[tab.value] = action
        self.tab_actions[SceneTab.BEFORE.value].setChecked(True)

        toolbar.addSeparator()

        # Tools
        self.tool_group = QActionGroup(self)
        self.tool_actions = {}
        for tool_type, text in ((ToolType.SELECT, 'Select'), (ToolType.WALL, 'Draw Walls'),
                                (ToolType.DELETE, 'Delete')):
            action = QAction(text, self)
            action.setCheckable(True)
            action.triggered.connect(lambda checked=False, t=tool_type: self.engine.set_tool(t))
            self.tool_group.addAction(action)
            toolbar.addAction(action)
            self.tool_actions[tool_type.value] = action
        self.tool_actions[ToolType.SELECT.value].setChecked(True)

        toolbar.addSeparator()

        self.undo_action = QAction('Undo', self)
        self.undo_action.setShortcut(QKeySequence.Undo)
        self.undo_action.setEnabled(False)
        self.undo_action.triggered.connect(self.engine.undo)
        toolbar.addAction(self.undo_action)

        toolbar.addAction('Clear Walls', self.engine.clear_walls)
        toolbar.addAction('Save', self.save_sketch)
        toolbar.addAction('Reopen', self.reopen_sketch)

    def create_left_panel(self):
        """Sketch name and fixture palette"""
        panel = QWidget()
        panel.setMaximumWidth(220)
        layout = QVBoxLayout()

        name_group = QGroupBox("Sketch")
        name_layout = QVBoxLayout()
        self.name_edit = QLineEdit(self.engine.sketch_name)
        self.name_edit.setPlaceholderText("Sketch name")
        self.name_edit.textChanged.connect(self._on_name_changed)
        name_layout.addWidget(self.name_edit)
        name_group.setLayout(name_layout)
        layout.addWidget(name_group)

        palette_group = QGroupBox("Fixtures")
        palette_layout = QVBoxLayout()
        for fixture_type in FIXTURE_ORDER:
            entry = STANDARD_FIXTURES[fixture_type]
            button = QPushButton(f"{entry['icon']}  {entry['label']}")
            button.clicked.connect(lambda checked=False, t=fixture_type: self.engine.start_placing(t))
            palette_layout.addWidget(button)
        palette_group.setLayout(palette_layout)
        layout.addWidget(palette_group)

        self.scale_label = QLabel(self.engine.scale_manager.scale_string)
        self.scale_label.setFont(QFont("Arial", 9))
        layout.addWidget(self.scale_label)

        layout.addStretch()
        panel.setLayout(layout)
        return panel

    def update_status_bar(self, message: str):
        self.status_bar.showMessage(message)

    def _on_name_changed(self, text: str):
        self.engine.sketch_name = text.strip()

    def _on_tab_changed(self, tab: str):
        action = self.tab_actions.get(tab)
        if action is not None:
            action.setChecked(True)

    def _on_tool_changed(self, tool: str):
        action = self.tool_actions.get(tool)
        if action is not None:
            action.setChecked(True)
        else:
            # Placing has no toolbar entry
            for tool_action in self.tool_actions.values():
                tool_action.setChecked(False)

    def _on_saved(self, saved):
        if self.settings_manager is not None:
            self.settings_manager.set_last_sketch_name(saved.sketch_name)

    def save_sketch(self):
        try:
            self.engine.save()
        except Exception as e:
            debug_logger.error('SketchWindow', "Save failed", e)
            QMessageBox.critical(self, "Save Failed", f"Could not save the sketch:\n{e}")

    def reopen_sketch(self):
        """Discard unsaved edits and reload the last save under the current name"""
        try:
            self.engine.reload_latest()
        except Exception as e:
            debug_logger.error('SketchWindow', "Reopen failed", e)
            QMessageBox.critical(self, "Reopen Failed", f"Could not reopen the sketch:\n{e}")
