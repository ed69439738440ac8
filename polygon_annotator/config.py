"""Configuration helpers for Polygon Annotator settings persistence."""
from __future__ import annotations

from configparser import ConfigParser, Error
from dataclasses import dataclass, fields
import os
from pathlib import Path
import sys
from typing import Optional

CONFIG_FILENAME = "polygon_annotator.ini"
_SECTION = "interaction"
_TOOL_CHOICES = ("polygon", "move")


@dataclass
class AnnotatorSettings:
    drag_threshold_px: float = 4.0
    wheel_zoom_in: float = 1.1
    wheel_zoom_out: float = 0.9
    button_zoom_step: float = 1.2
    min_scale: float = 0.1
    max_scale: float = 10.0
    slider_max_scale: float = 5.0
    default_tool: str = "polygon"


def _config_dir(main_script_path: Optional[Path]) -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent
    if main_script_path is not None:
        return main_script_path.resolve().parent
    main_module = sys.modules.get("__main__")
    if main_module and getattr(main_module, "__file__", None):
        return Path(main_module.__file__).resolve().parent
    return Path.cwd()


def config_path(main_script_path: Optional[Path]) -> Path:
    return _config_dir(main_script_path) / CONFIG_FILENAME


def _positive_float(parser: ConfigParser, key: str, default: float) -> float:
    try:
        value = parser.getfloat(_SECTION, key, fallback=default)
    except ValueError:
        return default
    return value if value > 0 else default


def load_settings(main_script_path: Optional[Path]) -> AnnotatorSettings:
    settings = AnnotatorSettings()
    ini_path = config_path(main_script_path)
    if not ini_path.exists():
        return settings
    parser = ConfigParser()
    try:
        with ini_path.open("r", encoding="utf-8") as handle:
            parser.read_file(handle)
    except (OSError, Error):
        return settings
    if not parser.has_section(_SECTION):
        return settings
    for field in fields(AnnotatorSettings):
        if field.name == "default_tool":
            continue
        default = getattr(settings, field.name)
        setattr(settings, field.name, _positive_float(parser, field.name, default))
    if settings.min_scale >= settings.max_scale:
        settings.min_scale = AnnotatorSettings.min_scale
        settings.max_scale = AnnotatorSettings.max_scale
    tool = parser.get(_SECTION, "default_tool", fallback=settings.default_tool)
    if tool.strip().lower() in _TOOL_CHOICES:
        settings.default_tool = tool.strip().lower()
    return settings


def save_settings(settings: AnnotatorSettings, main_script_path: Optional[Path]) -> None:
    config = ConfigParser()
    config.optionxform = str
    ini_path = config_path(main_script_path)
    if ini_path.exists():
        try:
            with ini_path.open("r", encoding="utf-8") as handle:
                config.read_file(handle)
        except (OSError, Error):
            return
    config[_SECTION] = {
        field.name: str(getattr(settings, field.name)) for field in fields(settings)
    }
    try:
        with ini_path.open("w", encoding="utf-8") as handle:
            config.write(handle)
            handle.flush()
            os.fsync(handle.fileno())
    except OSError:
        return
