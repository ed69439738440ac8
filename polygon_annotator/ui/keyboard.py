"""Keyboard shortcuts for the annotation canvas."""
from __future__ import annotations

from typing import Callable

from PyQt5 import QtCore, QtGui

from polygon_annotator.interaction import ToolMode
from polygon_annotator.session import AnnotationSession

SHORTCUT_HELP = {
    "close": "Enter",
    "reset": "Esc",
    "undo": "Ctrl+Z",
    "move_tool": "M",
    "polygon_tool": "P",
}


def shortcut_action(key: int, modifiers: QtCore.Qt.KeyboardModifiers) -> str | None:
    if key in (QtCore.Qt.Key_Return, QtCore.Qt.Key_Enter):
        return "close"
    if key == QtCore.Qt.Key_Escape:
        return "reset"
    if key == QtCore.Qt.Key_Z and bool(
        modifiers & (QtCore.Qt.ControlModifier | QtCore.Qt.MetaModifier)
    ):
        return "undo"
    if key == QtCore.Qt.Key_M:
        return "move_tool"
    if key == QtCore.Qt.Key_P:
        return "polygon_tool"
    return None


class AnnotationKeyboardController:
    """Applies shortcut actions to the session and reports changes."""

    def __init__(
        self, session: AnnotationSession, on_changed: Callable[[], None]
    ) -> None:
        self._session = session
        self._on_changed = on_changed

    def handle_key_press(self, event: QtGui.QKeyEvent) -> bool:
        action = shortcut_action(event.key(), event.modifiers())
        if action is None:
            return False
        self.apply(action)
        return True

    def apply(self, action: str) -> None:
        session = self._session
        if action == "close":
            session.close_polygon()
        elif action == "reset":
            session.reset_polygon()
        elif action == "undo":
            session.undo_vertex()
        elif action == "move_tool":
            session.set_tool_mode(ToolMode.MOVE)
        elif action == "polygon_tool":
            session.set_tool_mode(ToolMode.POLYGON)
        else:
            raise ValueError(f"Unknown shortcut action: {action}")
        self._on_changed()
