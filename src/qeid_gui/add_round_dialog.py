"""
Add Round dialog.

A thin view over ``qeid.draft.RoundDraft``: every widget change is pushed into
the draft and the whole dialog is then refreshed from it, so auto-complete,
project exclusivity and validation all live in the draft.
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from PySide6 import QtCore, QtWidgets

from qeid.draft import RoundDraft
from qeid.models import Round
from qeid.rules import STANDARD_RULES, Mode, MultiplierOption, ProjectType, RuleConfig, Team


class AddRoundDialog(QtWidgets.QDialog):
    """Collects one hand; ``result_round()`` is set when the user confirms."""

    def __init__(
        self,
        rules: RuleConfig = STANDARD_RULES,
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.draft = RoundDraft(rules=rules)
        self._result: Optional[Round] = None
        self._syncing = True  # combos emit while being filled
        self.setWindowTitle("Add Round")
        self.setMinimumWidth(420)
        self._setup_ui()
        self._refresh()

    def _setup_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)

        hand_group = QtWidgets.QGroupBox("Hand")
        form = QtWidgets.QFormLayout(hand_group)
        self._combo_mode = QtWidgets.QComboBox()
        for mode in Mode:
            self._combo_mode.addItem(mode.label, mode)
        self._combo_mode.currentIndexChanged.connect(self._on_mode_changed)
        form.addRow("Mode:", self._combo_mode)

        self._combo_multiplier = QtWidgets.QComboBox()
        for option in MultiplierOption:
            self._combo_multiplier.addItem(option.label, option)
        self._combo_multiplier.currentIndexChanged.connect(self._on_multiplier_changed)
        form.addRow("Multiplier:", self._combo_multiplier)

        self._check_auto = QtWidgets.QCheckBox("Auto-complete other team")
        self._check_auto.setChecked(self.draft.auto_complete)
        self._check_auto.toggled.connect(self._on_auto_toggled)
        form.addRow(self._check_auto)

        self._check_double = QtWidgets.QCheckBox("Double projects")
        self._check_double.toggled.connect(self._on_double_toggled)
        form.addRow(self._check_double)
        layout.addWidget(hand_group)

        # Base points, hidden for coffee hands
        self._base_group = QtWidgets.QGroupBox("Base points")
        base_form = QtWidgets.QFormLayout(self._base_group)
        self._edit_base: Dict[Team, QtWidgets.QLineEdit] = {}
        for team in Team:
            edit = QtWidgets.QLineEdit()
            edit.setPlaceholderText("0")
            edit.textEdited.connect(lambda text, t=team: self._on_base_edited(t, text))
            base_form.addRow(f"{team.label}:", edit)
            self._edit_base[team] = edit
        layout.addWidget(self._base_group)

        self._coffee_group = QtWidgets.QGroupBox("Coffee winner")
        coffee_row = QtWidgets.QHBoxLayout(self._coffee_group)
        self._coffee_buttons = QtWidgets.QButtonGroup(self)
        self._radio_coffee: Dict[Team, QtWidgets.QRadioButton] = {}
        for team in Team:
            radio = QtWidgets.QRadioButton(team.label)
            radio.clicked.connect(lambda checked=False, t=team: self._on_coffee_winner(t))
            self._coffee_buttons.addButton(radio)
            coffee_row.addWidget(radio)
            self._radio_coffee[team] = radio
        layout.addWidget(self._coffee_group)

        projects_group = QtWidgets.QGroupBox("Projects")
        grid = QtWidgets.QGridLayout(projects_group)
        self._project_buttons: Dict[Tuple[Team, ProjectType], QtWidgets.QPushButton] = {}
        for row, team in enumerate(Team):
            grid.addWidget(QtWidgets.QLabel(team.label), row, 0)
            for col, project in enumerate(ProjectType, start=1):
                btn = QtWidgets.QPushButton(project.label)
                btn.setCheckable(True)
                btn.clicked.connect(lambda checked=False, t=team, p=project: self._on_project_clicked(t, p))
                grid.addWidget(btn, row, col)
                self._project_buttons[(team, project)] = btn
        layout.addWidget(projects_group)

        self._label_preview = QtWidgets.QLabel()
        self._label_preview.setAlignment(QtCore.Qt.AlignCenter)
        layout.addWidget(self._label_preview)
        self._label_warning = QtWidgets.QLabel()
        self._label_warning.setObjectName("warning")
        self._label_warning.setWordWrap(True)
        layout.addWidget(self._label_warning)

        self._buttons = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.StandardButton.Ok | QtWidgets.QDialogButtonBox.StandardButton.Cancel
        )
        self._buttons.accepted.connect(self.accept)
        self._buttons.rejected.connect(self.reject)
        layout.addWidget(self._buttons)

    # -- widget -> draft --

    def _on_mode_changed(self) -> None:
        if not self._syncing:
            self.draft.set_mode(self._combo_mode.currentData())
            self._refresh()

    def _on_multiplier_changed(self) -> None:
        if not self._syncing:
            self.draft.set_multiplier(self._combo_multiplier.currentData())
            self._refresh()

    def _on_auto_toggled(self, checked: bool) -> None:
        self.draft.set_auto_complete(checked)
        self._refresh()

    def _on_double_toggled(self, checked: bool) -> None:
        self.draft.double_projects = checked
        self._refresh()

    def _on_base_edited(self, team: Team, text: str) -> None:
        self.draft.edit_base(team, text)
        self._refresh()

    def _on_coffee_winner(self, team: Team) -> None:
        self.draft.set_instant_winner(team)
        self._refresh()

    def _on_project_clicked(self, team: Team, project: ProjectType) -> None:
        self.draft.toggle_project(team, project)
        self._refresh()

    # -- draft -> widgets --

    def _refresh(self) -> None:
        d = self.draft
        self._syncing = True
        try:
            for team, edit in self._edit_base.items():
                if edit.text() != d.base_text[team]:
                    edit.setText(d.base_text[team])
            self._base_group.setVisible(not d.is_coffee)
            self._coffee_group.setVisible(d.is_coffee)
            if d.instant_winner is None:
                self._coffee_buttons.setExclusive(False)
                for radio in self._radio_coffee.values():
                    radio.setChecked(False)
                self._coffee_buttons.setExclusive(True)
            else:
                self._radio_coffee[d.instant_winner].setChecked(True)
            available = set(d.available_projects())
            for (team, project), btn in self._project_buttons.items():
                btn.setVisible(project in available)
                btn.setChecked(project in d.projects[team])
        finally:
            self._syncing = False

        self._label_preview.setText(
            f"Hand value {d.adjusted_base}  |  "
            f"{Team.US.label} {d.final(Team.US)} - {Team.THEM.label} {d.final(Team.THEM)}"
        )
        if d.validation_error:
            warning = d.validation_error
        elif d.sums_mismatch:
            warning = f"Base points do not add up to {d.adjusted_base}."
        else:
            warning = ""
        self._label_warning.setText(warning)
        self._buttons.button(QtWidgets.QDialogButtonBox.StandardButton.Ok).setEnabled(d.is_valid)

    def accept(self) -> None:
        if not self.draft.is_valid:
            return
        self._result = self.draft.build_round()
        super().accept()

    def result_round(self) -> Optional[Round]:
        """The scored round, or None if the dialog was cancelled."""
        return self._result
