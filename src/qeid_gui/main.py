"""
Qeid Plus GUI entrypoint.

One window: score cards for both teams, the list of hands, and the edit
controls (Add Round, Undo, Redo, Delete, New Game). All edits go through a
``MatchEngine`` that saves to the match file configured in Settings.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6 import QtCore, QtWidgets

from qeid.engine import MatchEngine
from qeid.models import Match, Round
from qeid.rating import RatingPrompter
from qeid.rules import RULE_PRESETS, Team, get_rules
from qeid.storage import MatchStore

from .add_round_dialog import AddRoundDialog
from .themes import (
    DARK,
    LIGHT,
    apply_theme,
    get_match_file,
    get_rules_name,
    get_saved_theme,
    save_match_file,
    save_rules_name,
    save_theme,
)

logger = logging.getLogger(__name__)

COL_INDEX = 0
COL_MODE = 1
COL_MULTIPLIER = 2
COL_US = 3
COL_THEM = 4
COL_PROJECTS = 5
NUM_COLUMNS = 6


def _projects_text(r: Round) -> str:
    parts = []
    for team in Team:
        held = sorted(p.label for p in r.projects_for(team))
        if held:
            parts.append(f"{team.label}: {', '.join(held)}")
    return "; ".join(parts)


class ScoreCard(QtWidgets.QGroupBox):
    """Big running total for one team."""

    def __init__(self, team: Team, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(team.label, parent)
        layout = QtWidgets.QVBoxLayout(self)
        self.value = QtWidgets.QLabel("0")
        self.value.setObjectName("scoreValue")
        self.value.setAlignment(QtCore.Qt.AlignCenter)
        layout.addWidget(self.value)

    def set_total(self, total: int) -> None:
        self.value.setText(str(total))


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, engine: MatchEngine) -> None:
        super().__init__()
        self.setWindowTitle("Qeid Plus")
        self.resize(720, 640)
        self.engine = engine

        tabs = QtWidgets.QTabWidget()
        tabs.addTab(self._make_game_tab(), "Game")
        tabs.addTab(self._make_settings_tab(), "Settings")
        self.setCentralWidget(tabs)
        self.refresh()

    def _make_game_tab(self) -> QtWidgets.QWidget:
        widget = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(widget)

        cards = QtWidgets.QHBoxLayout()
        self._cards = {team: ScoreCard(team) for team in Team}
        for card in self._cards.values():
            cards.addWidget(card)
        layout.addLayout(cards)
        self._label_target = QtWidgets.QLabel()
        self._label_target.setAlignment(QtCore.Qt.AlignCenter)
        layout.addWidget(self._label_target)

        self._table = QtWidgets.QTableWidget()
        self._table.setColumnCount(NUM_COLUMNS)
        self._table.setHorizontalHeaderLabels(["#", "Mode", "Multiplier", "Us", "Them", "Projects"])
        self._table.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
        self._table.setSelectionMode(QtWidgets.QAbstractItemView.SingleSelection)
        self._table.setEditTriggers(QtWidgets.QAbstractItemView.EditTrigger.NoEditTriggers)
        self._table.verticalHeader().setVisible(False)
        self._table.horizontalHeader().setStretchLastSection(True)
        layout.addWidget(self._table)

        buttons_row = QtWidgets.QHBoxLayout()
        self._btn_add = QtWidgets.QPushButton("Add Round")
        self._btn_add.clicked.connect(self._on_add_round)
        self._btn_undo = QtWidgets.QPushButton("Undo")
        self._btn_undo.clicked.connect(self._on_undo)
        self._btn_redo = QtWidgets.QPushButton("Redo")
        self._btn_redo.clicked.connect(self._on_redo)
        self._btn_delete = QtWidgets.QPushButton("Delete")
        self._btn_delete.clicked.connect(self._on_delete)
        self._btn_new = QtWidgets.QPushButton("New Game")
        self._btn_new.clicked.connect(self._on_new_game)
        for btn in (self._btn_add, self._btn_undo, self._btn_redo, self._btn_delete):
            buttons_row.addWidget(btn)
        buttons_row.addStretch(1)
        buttons_row.addWidget(self._btn_new)
        layout.addLayout(buttons_row)
        return widget

    def _make_settings_tab(self) -> QtWidgets.QWidget:
        widget = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(widget)

        appearance = QtWidgets.QGroupBox("Appearance")
        form = QtWidgets.QFormLayout(appearance)
        theme_combo = QtWidgets.QComboBox()
        theme_combo.addItems(["Dark", "Light"])
        theme_combo.setCurrentIndex(0 if get_saved_theme() == DARK else 1)
        theme_combo.currentTextChanged.connect(self._on_theme_changed)
        form.addRow("Theme:", theme_combo)
        layout.addWidget(appearance)

        game = QtWidgets.QGroupBox("Game")
        game_form = QtWidgets.QFormLayout(game)
        self._combo_rules = QtWidgets.QComboBox()
        self._combo_rules.addItems(sorted(RULE_PRESETS))
        self._combo_rules.setCurrentText(self.engine.rules.name)
        self._combo_rules.currentTextChanged.connect(self._on_rules_changed)
        game_form.addRow("Rules (new games):", self._combo_rules)
        file_row = QtWidgets.QHBoxLayout()
        self._edit_match_file = QtWidgets.QLineEdit()
        if self.engine.store is not None:
            self._edit_match_file.setText(str(self.engine.store.path))
        self._edit_match_file.setReadOnly(True)
        file_row.addWidget(self._edit_match_file)
        btn_browse = QtWidgets.QPushButton("Browse...")
        btn_browse.clicked.connect(self._on_browse_match_file)
        file_row.addWidget(btn_browse)
        game_form.addRow("Match file:", file_row)
        layout.addWidget(game)

        layout.addStretch(1)
        return widget

    # -- view --

    def refresh(self) -> None:
        match = self.engine.match
        self._cards[Team.US].set_total(match.total_us)
        self._cards[Team.THEM].set_total(match.total_them)
        self._label_target.setText(f"Target {match.target_score}")
        self._fill_table(match)
        self._btn_undo.setEnabled(self.engine.can_undo)
        self._btn_redo.setEnabled(self.engine.can_redo)
        self._btn_delete.setEnabled(bool(match.rounds))
        if self.engine.show_winner:
            self._announce_winner(match)

    def _fill_table(self, match: Match) -> None:
        self._table.setRowCount(0)
        for row, r in enumerate(match.rounds):
            self._table.insertRow(row)
            index_item = QtWidgets.QTableWidgetItem(str(r.sequence_index))
            index_item.setData(QtCore.Qt.UserRole, r.id)
            self._table.setItem(row, COL_INDEX, index_item)
            self._table.setItem(row, COL_MODE, QtWidgets.QTableWidgetItem(r.mode.label))
            self._table.setItem(row, COL_MULTIPLIER, QtWidgets.QTableWidgetItem(r.multiplier.label))
            self._table.setItem(row, COL_US, QtWidgets.QTableWidgetItem(str(r.final_us)))
            self._table.setItem(row, COL_THEM, QtWidgets.QTableWidgetItem(str(r.final_them)))
            self._table.setItem(row, COL_PROJECTS, QtWidgets.QTableWidgetItem(_projects_text(r)))
            if not r.sums_match:
                self._table.item(row, COL_INDEX).setToolTip("Base points do not add up to the hand value.")

    def _announce_winner(self, match: Match) -> None:
        self.engine.dismiss_winner()
        winner = match.winner
        if winner is None:
            return
        QtWidgets.QMessageBox.information(
            self,
            "Game over",
            f"{winner.label} win!\n\n{match.share_text()}",
        )

    def selected_round_id(self) -> Optional[str]:
        rows = self._table.selectionModel().selectedRows()
        if not rows:
            return None
        item = self._table.item(rows[0].row(), COL_INDEX)
        return item.data(QtCore.Qt.UserRole) if item else None

    # -- actions --

    def _on_add_round(self) -> None:
        dialog = AddRoundDialog(rules=self.engine.rules, parent=self)
        if dialog.exec() == QtWidgets.QDialog.DialogCode.Accepted and dialog.result_round():
            self.engine.add_round(dialog.result_round())
            self.refresh()

    def _on_undo(self) -> None:
        self.engine.undo_last_round()
        self.refresh()

    def _on_redo(self) -> None:
        self.engine.redo_last_round()
        self.refresh()

    def _on_delete(self) -> None:
        round_id = self.selected_round_id()
        if round_id is None:
            return
        self.engine.delete_round(round_id)
        self.refresh()

    def _on_new_game(self) -> None:
        if self.engine.match.rounds:
            answer = QtWidgets.QMessageBox.question(self, "New game", "Discard the current game?")
            if answer != QtWidgets.QMessageBox.StandardButton.Yes:
                return
        self.engine.reset_match()
        self.refresh()

    def _on_theme_changed(self, text: str) -> None:
        theme = DARK if text.lower() == "dark" else LIGHT
        save_theme(theme)
        app = QtWidgets.QApplication.instance()
        if app:
            apply_theme(app, theme)

    def _on_rules_changed(self, name: str) -> None:
        save_rules_name(name)
        self.engine.rules = get_rules(name)

    def _on_browse_match_file(self) -> None:
        path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self, "Match file", self._edit_match_file.text(), "JSON (*.json)"
        )
        if not path:
            return
        save_match_file(path)
        self._edit_match_file.setText(path)
        self.engine = make_engine(path, self.engine.rules.name)
        self.refresh()


def _request_review() -> None:
    logger.info("Review prompt requested")


def make_engine(match_file: str, rules_name: str) -> MatchEngine:
    """Engine over ``match_file`` with the rating prompter attached."""
    store = MatchStore(match_file)
    rating = RatingPrompter(_request_review, state_path=store.path.parent / "rating.json")
    return MatchEngine.from_store(store, rules=get_rules(rules_name), listeners=[rating])


def main(argv: Optional[list[str]] = None) -> None:
    import sys

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QtWidgets.QApplication(argv or sys.argv)
    apply_theme(app, get_saved_theme())
    win = MainWindow(make_engine(get_match_file(), get_rules_name()))
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
