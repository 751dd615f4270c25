"""
Command-line scoreboard.

Usage examples:

    python -m qeid.cli add --mode sun --us 20
    python -m qeid.cli add --mode hokom --multiplier x2 --us 12 --them 20 \\
        --project-us sara --project-them baloot --project-us baloot
    python -m qeid.cli add --mode sun --multiplier coffee --coffee-winner them
    python -m qeid.cli undo
    python -m qeid.cli show --match-file games/tonight.json

Each invocation loads the match file, applies one edit and saves it again.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .draft import RoundDraft
from .engine import MatchEngine
from .models import Match
from .rating import RatingPrompter
from .rules import RULE_PRESETS, Mode, MultiplierOption, ProjectType, Team, get_rules
from .storage import DEFAULT_MATCH_FILE, MatchStore

RATING_STATE_FILE = ".qeid_rating.json"


def _format_match(match: Match) -> str:
    lines = [f"{'#':>3}  {'mode':<6} {'mult':<7} {'us':>5} {'them':>5}  projects"]
    for r in match.rounds:
        projects = []
        for team in Team:
            held = sorted(p.label for p in r.projects_for(team))
            if held:
                projects.append(f"{team.label}: {', '.join(held)}")
        flag = "" if r.sums_match else "  (!)"
        lines.append(
            f"{r.sequence_index:>3}  {r.mode.label:<6} {r.multiplier.value:<7} "
            f"{r.final_us:>5} {r.final_them:>5}  {'; '.join(projects)}{flag}"
        )
    lines.append(f"Total: {match.share_text()} (target {match.target_score})")
    if match.winner is not None:
        lines.append(f"Winner: {match.winner.label}")
    return "\n".join(lines)


def _open_engine(args: argparse.Namespace) -> MatchEngine:
    store = MatchStore(args.match_file)
    rating = RatingPrompter(
        lambda: print("Enjoying Qeid Plus? Please leave us a rating!"),
        state_path=Path(args.match_file).parent / RATING_STATE_FILE,
    )
    return MatchEngine.from_store(store, rules=get_rules(args.rules), listeners=[rating])


def _add_show_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("show", help="Print the current scoreboard.")
    parser.set_defaults(func=_cmd_show)


def _cmd_show(args: argparse.Namespace) -> None:
    engine = _open_engine(args)
    print(_format_match(engine.match))


def _add_add_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "add",
        help="Score a hand and append it to the match.",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in Mode],
        required=True,
        help="Game mode of the hand.",
    )
    parser.add_argument(
        "--multiplier",
        choices=[m.value for m in MultiplierOption],
        default=MultiplierOption.NORMAL.value,
        help="Hand multiplier; 'coffee' ends the match for --coffee-winner.",
    )
    parser.add_argument(
        "--us",
        type=int,
        default=None,
        help="Base points for us. If --them is omitted it is auto-completed.",
    )
    parser.add_argument(
        "--them",
        type=int,
        default=None,
        help="Base points for them. If --us is omitted it is auto-completed.",
    )
    parser.add_argument(
        "--project-us",
        action="append",
        choices=[p.value for p in ProjectType],
        default=[],
        help="Project declared by us (repeatable).",
    )
    parser.add_argument(
        "--project-them",
        action="append",
        choices=[p.value for p in ProjectType],
        default=[],
        help="Project declared by them (repeatable).",
    )
    parser.add_argument(
        "--double-projects",
        action="store_true",
        help="Double project points (baloot excepted under standard rules).",
    )
    parser.add_argument(
        "--coffee-winner",
        choices=[t.value for t in Team],
        default=None,
        help="Team that won a coffee hand.",
    )
    parser.set_defaults(func=_cmd_add)


def _draft_from_args(args: argparse.Namespace) -> RoundDraft:
    draft = RoundDraft(rules=get_rules(args.rules))
    draft.set_mode(Mode(args.mode))
    draft.set_multiplier(MultiplierOption(args.multiplier))
    draft.double_projects = bool(args.double_projects)
    for team, names in ((Team.US, args.project_us), (Team.THEM, args.project_them)):
        for name in names:
            project = ProjectType(name)
            if not project.is_available(draft.mode, draft.rules):
                raise SystemExit(f"{project.label} cannot be declared in {draft.mode.label}.")
            if project not in draft.projects[team]:
                draft.toggle_project(team, project)

    if draft.is_coffee:
        if args.coffee_winner is None:
            raise SystemExit("A coffee hand needs --coffee-winner.")
        draft.set_instant_winner(Team(args.coffee_winner))
        return draft

    if args.us is None and args.them is None:
        raise SystemExit("Give --us and/or --them base points.")
    both = args.us is not None and args.them is not None
    draft.set_auto_complete(not both)
    if args.us is not None:
        draft.edit_base(Team.US, str(args.us))
    if args.them is not None:
        draft.edit_base(Team.THEM, str(args.them))
    if draft.validation_error:
        raise SystemExit(draft.validation_error)
    if draft.sums_mismatch:
        print(f"Warning: base points do not add up to {draft.adjusted_base}.")
    return draft


def _cmd_add(args: argparse.Namespace) -> None:
    draft = _draft_from_args(args)
    engine = _open_engine(args)
    engine.submit(draft.to_inputs())
    print(_format_match(engine.match))


def _add_delete_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("delete", help="Delete a hand by its number.")
    parser.add_argument("index", type=int, help="Hand number as shown by 'show'.")
    parser.set_defaults(func=_cmd_delete)


def _cmd_delete(args: argparse.Namespace) -> None:
    engine = _open_engine(args)
    target = next((r for r in engine.match.rounds if r.sequence_index == args.index), None)
    if target is None:
        print(f"No hand #{args.index}.")
        return
    engine.delete_round(target.id)
    print(_format_match(engine.match))


def _add_undo_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("undo", help="Remove the last hand.")
    parser.set_defaults(func=_cmd_undo)


def _cmd_undo(args: argparse.Namespace) -> None:
    engine = _open_engine(args)
    if engine.undo_last_round() is None:
        print("Nothing to undo.")
        return
    print(_format_match(engine.match))


def _add_reset_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("reset", help="Start a new match.")
    parser.set_defaults(func=_cmd_reset)


def _cmd_reset(args: argparse.Namespace) -> None:
    engine = _open_engine(args)
    engine.reset_match()
    print(_format_match(engine.match))


def _add_rules_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("rules", help="Print the point table of the selected rules.")
    parser.set_defaults(func=_cmd_rules)


def _cmd_rules(args: argparse.Namespace) -> None:
    rules = get_rules(args.rules)
    print(f"Rules: {rules.name} (target {rules.target_score})")
    for mode in Mode:
        values = ", ".join(
            f"{m.value}={rules.base_score(mode) * rules.multiplier_value(m)}" for m in MultiplierOption
        )
        print(f"{mode.label}: {values}")
        projects = ", ".join(
            f"{p.label}={rules.project_points(p, mode)}" for p in ProjectType if rules.is_available(p, mode)
        )
        print(f"  projects: {projects}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qeid", description="Baloot scoreboard.")
    parser.add_argument(
        "--match-file",
        type=str,
        default=DEFAULT_MATCH_FILE,
        help="JSON file holding the current match.",
    )
    parser.add_argument(
        "--rules",
        choices=sorted(RULE_PRESETS),
        default="standard",
        help="Rule preset used to score new hands.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level, e.g. INFO or DEBUG.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_show_parser(subparsers)
    _add_add_parser(subparsers)
    _add_delete_parser(subparsers)
    _add_undo_parser(subparsers)
    _add_reset_parser(subparsers)
    _add_rules_parser(subparsers)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
