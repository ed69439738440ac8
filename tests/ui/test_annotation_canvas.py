import os
from pathlib import Path

import pytest

pytest.importorskip("PyQt5")
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5 import QtCore, QtGui, QtWidgets

from polygon_annotator.interaction import GestureMode, ToolMode
from polygon_annotator.model.viewport import ImageDimensions
from polygon_annotator.services.image_loader import LoadedImage
from polygon_annotator.session import AnnotationSession
from polygon_annotator.ui.annotation_canvas import AnnotationCanvas


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    yield app


@pytest.fixture
def canvas(qapp):
    widget = AnnotationCanvas(AnnotationSession())
    widget.resize(800, 600)
    image = QtGui.QImage(1600, 300, QtGui.QImage.Format_RGB32)
    image.fill(QtGui.QColor("white"))
    widget.set_image(LoadedImage(Path("wide.png"), image, ImageDimensions(1600, 300)))
    yield widget
    widget.deleteLater()


def _mouse(kind, pos, button=QtCore.Qt.LeftButton, modifiers=QtCore.Qt.NoModifier):
    buttons = QtCore.Qt.NoButton if kind == QtCore.QEvent.MouseButtonRelease else button
    return QtGui.QMouseEvent(kind, QtCore.QPointF(*pos), button, buttons, modifiers)


def test_set_image_fits_canvas(canvas):
    assert canvas.session.scale == pytest.approx(0.5)
    assert canvas.session.offset == pytest.approx((0.0, 225.0))


def test_click_adds_vertex_and_signals(canvas):
    changes = []
    canvas.polygonChanged.connect(lambda: changes.append(True))

    canvas.mousePressEvent(_mouse(QtCore.QEvent.MouseButtonPress, (100, 300)))
    canvas.mouseReleaseEvent(_mouse(QtCore.QEvent.MouseButtonRelease, (101, 301)))

    assert canvas.session.polygon.points == ((202.0, 152.0),)
    assert changes == [True]


def test_right_drag_pans_with_grabbing_cursor(canvas):
    scales = []
    canvas.viewChanged.connect(scales.append)

    canvas.mousePressEvent(
        _mouse(QtCore.QEvent.MouseButtonPress, (100, 300), QtCore.Qt.RightButton)
    )
    assert canvas.session.gesture_mode is GestureMode.PANNING
    assert canvas.cursor().shape() == QtCore.Qt.ClosedHandCursor

    canvas.mouseMoveEvent(
        _mouse(QtCore.QEvent.MouseMove, (130, 310), QtCore.Qt.RightButton)
    )
    canvas.mouseReleaseEvent(
        _mouse(QtCore.QEvent.MouseButtonRelease, (130, 310), QtCore.Qt.RightButton)
    )

    assert canvas.session.offset == pytest.approx((30.0, 235.0))
    assert canvas.session.polygon.points == ()
    assert scales == [pytest.approx(0.5)]
    assert canvas.cursor().shape() == QtCore.Qt.CrossCursor


def test_shift_click_pans_instead_of_adding(canvas):
    canvas.mousePressEvent(
        _mouse(QtCore.QEvent.MouseButtonPress, (100, 300), modifiers=QtCore.Qt.ShiftModifier)
    )
    canvas.mouseReleaseEvent(_mouse(QtCore.QEvent.MouseButtonRelease, (100, 300)))

    assert canvas.session.polygon.points == ()


def test_leave_cancels_pending_click(canvas):
    canvas.mousePressEvent(_mouse(QtCore.QEvent.MouseButtonPress, (100, 300)))
    canvas.leaveEvent(QtCore.QEvent(QtCore.QEvent.Leave))
    canvas.mouseReleaseEvent(_mouse(QtCore.QEvent.MouseButtonRelease, (100, 300)))

    assert canvas.session.polygon.points == ()


def test_key_press_switches_tool(canvas):
    tools = []
    canvas.toolChanged.connect(tools.append)

    canvas.keyPressEvent(
        QtGui.QKeyEvent(QtCore.QEvent.KeyPress, QtCore.Qt.Key_M, QtCore.Qt.NoModifier)
    )

    assert canvas.session.tool_mode is ToolMode.MOVE
    assert tools == [ToolMode.MOVE]
    assert canvas.cursor().shape() == QtCore.Qt.OpenHandCursor


def test_paint_renders_open_and_closed_polygon(canvas):
    for point in [(100, 300), (300, 300), (200, 350)]:
        canvas.mousePressEvent(_mouse(QtCore.QEvent.MouseButtonPress, point))
        canvas.mouseReleaseEvent(_mouse(QtCore.QEvent.MouseButtonRelease, point))

    assert not canvas.grab().isNull()
    canvas.session.close_polygon()
    assert not canvas.grab().isNull()


def test_paint_without_image(qapp):
    widget = AnnotationCanvas(AnnotationSession())
    widget.resize(200, 100)

    assert not widget.grab().isNull()
    assert widget.has_image() is False
