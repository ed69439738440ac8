from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from PyQt5 import QtCore, QtWidgets

from polygon_annotator.config import AnnotatorSettings
from polygon_annotator.interaction import ToolMode
from polygon_annotator.services import image_loader, svg_export
from polygon_annotator.session import AnnotationSession
from polygon_annotator.ui.annotation_canvas import AnnotationCanvas
from polygon_annotator.ui.keyboard import SHORTCUT_HELP

logger = logging.getLogger(__name__)

SLIDER_STEPS_PER_UNIT = 10
INSTRUCTIONS = (
    "<b>Instructions:</b> Open an image, click to add points, Enter or Close "
    "Polygon to finish. Ctrl+Z to undo, Esc to reset. Drag or use the Move "
    "tool to pan, scroll or use the slider to zoom. Polygon points may extend "
    "beyond the image."
)


class AnnotatorApp(QtWidgets.QApplication):
    """Thin application wrapper for the polygon annotator."""

    def __init__(self, argv: List[str]):
        super().__init__(argv)
        self.setQuitOnLastWindowClosed(True)
        self.window: AnnotatorWindow | None = None


class AnnotatorWindow(QtWidgets.QMainWindow):
    """Single-window image viewer with a polygon annotation tool."""

    def __init__(self, settings: AnnotatorSettings | None = None) -> None:
        super().__init__()
        self.setWindowTitle("Polygon Annotator")
        self.resize(1100, 800)

        self._settings = settings or AnnotatorSettings()
        self._session = AnnotationSession(self._settings)
        self.canvas = AnnotationCanvas(self._session)
        self.canvas.viewChanged.connect(self._on_view_changed)
        self.canvas.polygonChanged.connect(self._update_polygon_controls)
        self.canvas.toolChanged.connect(lambda _mode: self._sync_tool_buttons())

        self.open_button = QtWidgets.QPushButton("Open Image…")
        self.open_button.clicked.connect(self.open_image_dialog)

        self.move_tool_button = QtWidgets.QToolButton()
        self.move_tool_button.setText("Move")
        self.move_tool_button.setCheckable(True)
        self.move_tool_button.setToolTip(f"Move / Pan ({SHORTCUT_HELP['move_tool']})")
        self.move_tool_button.clicked.connect(lambda: self.set_tool_mode(ToolMode.MOVE))

        self.polygon_tool_button = QtWidgets.QToolButton()
        self.polygon_tool_button.setText("Polygon")
        self.polygon_tool_button.setCheckable(True)
        self.polygon_tool_button.setToolTip(f"Polygon ({SHORTCUT_HELP['polygon_tool']})")
        self.polygon_tool_button.clicked.connect(
            lambda: self.set_tool_mode(ToolMode.POLYGON)
        )

        tool_group = QtWidgets.QButtonGroup(self)
        tool_group.setExclusive(True)
        tool_group.addButton(self.move_tool_button)
        tool_group.addButton(self.polygon_tool_button)

        self.scale_label = QtWidgets.QLabel()
        self.scale_slider = QtWidgets.QSlider(QtCore.Qt.Horizontal)
        self.scale_slider.setRange(
            int(round(self._settings.min_scale * SLIDER_STEPS_PER_UNIT)),
            int(round(self._settings.slider_max_scale * SLIDER_STEPS_PER_UNIT)),
        )
        self.scale_slider.setSingleStep(1)
        self.scale_slider.setMinimumWidth(160)
        self.scale_slider.valueChanged.connect(self._on_scale_slider)

        zoom_out_button = QtWidgets.QPushButton("−")
        zoom_out_button.clicked.connect(self.zoom_out)
        zoom_in_button = QtWidgets.QPushButton("+")
        zoom_in_button.clicked.connect(self.zoom_in)
        fit_button = QtWidgets.QPushButton("Fit")
        fit_button.clicked.connect(self.fit_to_view)

        self.close_button = QtWidgets.QPushButton("Close Polygon")
        self.close_button.setToolTip(f"Close polygon ({SHORTCUT_HELP['close']})")
        self.close_button.clicked.connect(self.close_polygon)
        self.undo_button = QtWidgets.QPushButton("Undo")
        self.undo_button.setToolTip(f"Remove last point ({SHORTCUT_HELP['undo']})")
        self.undo_button.clicked.connect(self.undo_vertex)
        self.reset_button = QtWidgets.QPushButton("Reset")
        self.reset_button.setToolTip(f"Clear polygon ({SHORTCUT_HELP['reset']})")
        self.reset_button.clicked.connect(self.reset_polygon)
        self.save_button = QtWidgets.QPushButton("Save SVG")
        self.save_button.clicked.connect(self.save_svg_dialog)

        toolbar = QtWidgets.QHBoxLayout()
        toolbar.addWidget(self.open_button)
        toolbar.addWidget(self.move_tool_button)
        toolbar.addWidget(self.polygon_tool_button)
        toolbar.addSpacing(8)
        toolbar.addWidget(self.scale_label)
        toolbar.addWidget(self.scale_slider)
        toolbar.addWidget(zoom_out_button)
        toolbar.addWidget(zoom_in_button)
        toolbar.addWidget(fit_button)
        toolbar.addSpacing(8)
        toolbar.addWidget(self.close_button)
        toolbar.addWidget(self.undo_button)
        toolbar.addWidget(self.reset_button)
        toolbar.addWidget(self.save_button)
        toolbar.addStretch()

        instructions = QtWidgets.QLabel(INSTRUCTIONS)
        instructions.setWordWrap(True)
        self.points_label = QtWidgets.QLabel()
        self.points_label.setWordWrap(True)
        self.points_label.setTextInteractionFlags(QtCore.Qt.TextSelectableByMouse)

        layout = QtWidgets.QVBoxLayout()
        layout.addLayout(toolbar)
        layout.addWidget(self.canvas, 1)
        layout.addWidget(instructions)
        layout.addWidget(self.points_label)

        container = QtWidgets.QWidget()
        container.setLayout(layout)
        self.setCentralWidget(container)

        self._sync_tool_buttons()
        self._on_view_changed(self._session.scale)
        self._update_polygon_controls()

    @property
    def session(self) -> AnnotationSession:
        return self._session

    def show_status_message(self, message: str) -> None:
        self.statusBar().showMessage(message, 5000)

    # ------------------------------------------------------------------
    # Image loading and export
    # ------------------------------------------------------------------
    def open_image_dialog(self) -> None:
        file_path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self,
            "Open Image",
            "",
            image_loader.IMAGE_FILE_FILTER,
        )
        if not file_path:
            return
        self.load_image(Path(file_path))

    def load_image(self, path: Path) -> bool:
        try:
            loaded = image_loader.load_image(path)
        except ValueError as exc:
            QtWidgets.QMessageBox.critical(self, "Failed to load image", str(exc))
            logger.exception("Failed to load image %s", path)
            return False
        self.canvas.set_image(loaded)
        self.setWindowTitle(f"Polygon Annotator - {path.name}")
        self.show_status_message(f"Loaded image {path}")
        return True

    def save_svg_dialog(self) -> None:
        if not self._session.can_export():
            return
        default_name = svg_export.default_export_name(self._session.image_path)
        start_dir = (
            self._session.image_path.parent / default_name
            if self._session.image_path is not None
            else Path(default_name)
        )
        file_path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self,
            "Save SVG",
            str(start_dir),
            "SVG files (*.svg);;All files (*)",
        )
        if not file_path:
            return
        result = svg_export.export_svg(
            output_path=Path(file_path),
            image_path=self._session.image_path,
            dimensions=self._session.image,
            points=self._session.polygon.points,
        )
        if not result.success:
            QtWidgets.QMessageBox.warning(self, "Export failed", result.message)
            return
        self.show_status_message(result.message)

    # ------------------------------------------------------------------
    # Toolbar actions
    # ------------------------------------------------------------------
    def set_tool_mode(self, mode: ToolMode) -> None:
        self._session.set_tool_mode(mode)
        self._sync_tool_buttons()
        self.canvas.refresh()

    def zoom_in(self) -> None:
        self._session.zoom_in()
        self.canvas.notify_view_changed()

    def zoom_out(self) -> None:
        self._session.zoom_out()
        self.canvas.notify_view_changed()

    def fit_to_view(self) -> None:
        self._session.request_fit()
        self.canvas.notify_view_changed()

    def close_polygon(self) -> None:
        self._session.close_polygon()
        self._polygon_edited()

    def undo_vertex(self) -> None:
        self._session.undo_vertex()
        self._polygon_edited()

    def reset_polygon(self) -> None:
        self._session.reset_polygon()
        self._polygon_edited()

    def _polygon_edited(self) -> None:
        self._update_polygon_controls()
        self.canvas.refresh()

    def _on_scale_slider(self, value: int) -> None:
        self._session.set_slider_scale(value / SLIDER_STEPS_PER_UNIT)
        self.canvas.notify_view_changed()

    def _on_view_changed(self, scale: float) -> None:
        self.scale_label.setText(f"Scale: {scale:.2f}")
        self.scale_slider.blockSignals(True)
        try:
            self.scale_slider.setValue(int(round(scale * SLIDER_STEPS_PER_UNIT)))
        finally:
            self.scale_slider.blockSignals(False)

    def _sync_tool_buttons(self) -> None:
        mode = self._session.tool_mode
        self.move_tool_button.setChecked(mode is ToolMode.MOVE)
        self.polygon_tool_button.setChecked(mode is ToolMode.POLYGON)
        self._update_polygon_controls()

    def _update_polygon_controls(self) -> None:
        session = self._session
        self.close_button.setEnabled(session.can_close_polygon())
        self.undo_button.setEnabled(session.can_edit_polygon())
        self.reset_button.setEnabled(session.can_edit_polygon())
        self.save_button.setEnabled(session.can_export())
        self.points_label.setText(f"Points: {session.points_preview()}")
