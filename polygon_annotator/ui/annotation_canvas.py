from __future__ import annotations

from PyQt5 import QtCore, QtGui, QtWidgets

from polygon_annotator.interaction import GestureResult, PointerButton
from polygon_annotator.model.viewport_math import Point
from polygon_annotator.services.image_loader import LoadedImage
from polygon_annotator.session import AnnotationSession
from polygon_annotator.ui.keyboard import AnnotationKeyboardController

VERTEX_RADIUS_PX = 4.0
STROKE_WIDTH_PX = 2.0

_BUTTONS = {
    QtCore.Qt.LeftButton: PointerButton.LEFT,
    QtCore.Qt.MiddleButton: PointerButton.MIDDLE,
    QtCore.Qt.RightButton: PointerButton.RIGHT,
}

_MODIFIER_MASK = (
    QtCore.Qt.ShiftModifier
    | QtCore.Qt.AltModifier
    | QtCore.Qt.ControlModifier
    | QtCore.Qt.MetaModifier
)

_CURSORS = {
    "grabbing": QtCore.Qt.ClosedHandCursor,
    "grab": QtCore.Qt.OpenHandCursor,
    "default": QtCore.Qt.ArrowCursor,
    "crosshair": QtCore.Qt.CrossCursor,
}


def _event_point(event: QtGui.QMouseEvent | QtGui.QWheelEvent) -> Point:
    pos = event.pos()
    return (float(pos.x()), float(pos.y()))


class AnnotationCanvas(QtWidgets.QWidget):
    """Paints the image and polygon and forwards input to the session."""

    viewChanged = QtCore.pyqtSignal(float)
    polygonChanged = QtCore.pyqtSignal()
    toolChanged = QtCore.pyqtSignal(object)

    def __init__(
        self,
        session: AnnotationSession,
        parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setMinimumSize(320, 240)
        self.setMouseTracking(True)
        self.setFocusPolicy(QtCore.Qt.StrongFocus)

        palette = self.palette()
        palette.setColor(QtGui.QPalette.Window, QtGui.QColor("#303030"))
        self.setAutoFillBackground(True)
        self.setPalette(palette)

        self._session = session
        self._image: QtGui.QImage | None = None
        self._keyboard = AnnotationKeyboardController(session, self._after_shortcut)
        self._polygon_pen = QtGui.QPen(QtGui.QColor("red"))
        self._polygon_pen.setWidthF(STROKE_WIDTH_PX)
        self._polygon_brush = QtGui.QBrush(QtGui.QColor(255, 0, 0, 77))
        self._refresh_cursor()

    @property
    def session(self) -> AnnotationSession:
        return self._session

    def widget_size(self) -> tuple[int, int]:
        return (self.width(), self.height())

    def set_image(self, loaded: LoadedImage) -> None:
        self._image = loaded.image
        self._session.resize(self.widget_size())
        self._session.load_image(loaded.dimensions, loaded.path)
        self.notify_view_changed()
        self.polygonChanged.emit()

    def has_image(self) -> bool:
        return self._image is not None

    def refresh(self) -> None:
        self._refresh_cursor()
        self.update()

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------
    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # noqa: D401
        super().resizeEvent(event)
        self._session.resize((event.size().width(), event.size().height()))
        self.notify_view_changed()

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # noqa: D401
        _ = event
        painter = QtGui.QPainter(self)
        try:
            self._paint(painter)
        finally:
            painter.end()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: D401
        button = _BUTTONS.get(event.button(), PointerButton.OTHER)
        modifiers = bool(event.modifiers() & _MODIFIER_MASK)
        result = self._session.pointer_down(_event_point(event), button, modifiers)
        self._handle_result(result)

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: D401
        result = self._session.pointer_move(_event_point(event))
        self._handle_result(result)

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: D401
        result = self._session.pointer_up(_event_point(event))
        self._handle_result(result)

    def leaveEvent(self, event: QtCore.QEvent) -> None:  # noqa: D401
        self._handle_result(self._session.pointer_leave())
        super().leaveEvent(event)

    def wheelEvent(self, event: QtGui.QWheelEvent) -> None:  # noqa: D401
        if self._session.wheel(_event_point(event), event.angleDelta().y()):
            self.notify_view_changed()
        event.accept()

    def keyPressEvent(self, event: QtGui.QKeyEvent) -> None:  # noqa: D401
        if self._keyboard.handle_key_press(event):
            event.accept()
            return
        super().keyPressEvent(event)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _handle_result(self, result: GestureResult) -> None:
        if result.kind == "pan":
            self.notify_view_changed()
        elif result.kind == "vertex_added":
            self.polygonChanged.emit()
            self.update()
        self._refresh_cursor()

    def _after_shortcut(self) -> None:
        self.toolChanged.emit(self._session.tool_mode)
        self.polygonChanged.emit()
        self.refresh()

    def notify_view_changed(self) -> None:
        self.viewChanged.emit(self._session.scale)
        self.refresh()

    def _refresh_cursor(self) -> None:
        role = self._session.cursor_role()
        self.setCursor(_CURSORS.get(role, QtCore.Qt.ArrowCursor))

    def _paint(self, painter: QtGui.QPainter) -> None:
        if self._image is None or self._session.image is None:
            painter.setPen(QtGui.QColor("#b0b0b0"))
            painter.drawText(self.rect(), QtCore.Qt.AlignCenter, "Open an image to start annotating.")
            return

        painter.setRenderHints(
            QtGui.QPainter.Antialiasing | QtGui.QPainter.SmoothPixmapTransform
        )
        scale = self._session.scale
        ox, oy = self._session.offset
        painter.save()
        painter.translate(ox, oy)
        painter.scale(scale, scale)
        painter.drawImage(QtCore.QPointF(0.0, 0.0), self._image)
        painter.restore()

        polygon = self._session.polygon_snapshot()
        if not polygon.points:
            return
        viewport = self._session.viewport
        screen_points = [
            QtCore.QPointF(*viewport.to_screen(point)) for point in polygon.points
        ]
        painter.setPen(self._polygon_pen)
        if polygon.closed:
            painter.setBrush(self._polygon_brush)
            painter.drawPolygon(QtGui.QPolygonF(screen_points))
            return

        painter.setBrush(QtCore.Qt.NoBrush)
        painter.drawPolyline(QtGui.QPolygonF(screen_points))
        painter.setPen(QtCore.Qt.NoPen)
        painter.setBrush(QtGui.QColor("red"))
        for point in screen_points:
            painter.drawEllipse(point, VERTEX_RADIUS_PX, VERTEX_RADIUS_PX)
