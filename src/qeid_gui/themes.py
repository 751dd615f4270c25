"""
Theme and settings for the Qeid Plus GUI.

Dark (default) and light stylesheets; the theme, match file path and rules
preset are persisted via QSettings.
"""
from __future__ import annotations

from pathlib import Path

from PySide6 import QtCore, QtWidgets

from qeid.rules import RULE_PRESETS
from qeid.storage import DEFAULT_MATCH_FILE

SETTINGS_ORG = "QeidPlus"
SETTINGS_APP = "QeidPlus"
THEME_KEY = "theme"
MATCH_FILE_KEY = "match_file"
RULES_KEY = "rules"

DARK = "dark"
LIGHT = "light"
THEMES = (DARK, LIGHT)

DARK_STYLESHEET = """
QWidget { background-color: #1f2a24; color: #ecefe9; }
QGroupBox {
    border: 1px solid #3b4a41;
    border-radius: 6px;
    margin-top: 10px;
    padding-top: 12px;
}
QGroupBox::title { subcontrol-origin: margin; left: 8px; padding: 0 4px; }
QPushButton {
    background-color: #2f6b4a;
    border: 1px solid #3f8a60;
    border-radius: 6px;
    padding: 6px 14px;
}
QPushButton:checked { background-color: #c8a24a; color: #1f2a24; }
QPushButton:disabled { background-color: #2a332e; color: #6f7a73; }
QLineEdit, QComboBox {
    background-color: #28362e;
    border: 1px solid #3b4a41;
    border-radius: 4px;
    padding: 4px;
}
QTableWidget { gridline-color: #3b4a41; }
QHeaderView::section { background-color: #2a3a31; padding: 4px; border: none; }
QLabel#scoreValue { font-size: 36px; font-weight: bold; }
QLabel#warning { color: #e0a040; }
"""

LIGHT_STYLESHEET = """
QLabel#scoreValue { font-size: 36px; font-weight: bold; }
QLabel#warning { color: #a05a00; }
"""


def _settings() -> QtCore.QSettings:
    return QtCore.QSettings(SETTINGS_ORG, SETTINGS_APP)


def get_saved_theme() -> str:
    return _settings().value(THEME_KEY, DARK, type=str)


def save_theme(theme: str) -> None:
    _settings().setValue(THEME_KEY, theme)


def get_match_file() -> str:
    default = str(Path(QtCore.QStandardPaths.writableLocation(
        QtCore.QStandardPaths.StandardLocation.AppDataLocation
    ) or ".") / DEFAULT_MATCH_FILE)
    return _settings().value(MATCH_FILE_KEY, default, type=str)


def save_match_file(path: str) -> None:
    _settings().setValue(MATCH_FILE_KEY, path)


def get_rules_name() -> str:
    """Saved rules preset, or "standard" when the saved name is not a known preset."""
    name = _settings().value(RULES_KEY, "standard", type=str)
    return name if name in RULE_PRESETS else "standard"


def save_rules_name(name: str) -> None:
    _settings().setValue(RULES_KEY, name)


def apply_theme(app: QtWidgets.QApplication, theme: str) -> None:
    app.setStyleSheet(DARK_STYLESHEET if theme == DARK else LIGHT_STYLESHEET)
