#!/usr/bin/env python3
"""
Yahtzee TUI — Terminal frontend using Textual.

Keyboard-driven interface with box-art dice, a scorecard table, a
session history overlay and a per-game replay. All game rules live in
GameEngine; this module only renders its state and forwards input.
"""
import argparse
import logging
import random

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Center, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Static

from frontend_adapter import CATEGORY_ORDER, CATEGORY_TOOLTIPS, FrontendAdapter
from game_engine import MAX_ROLLS, NUM_ROUNDS, GameEngine
from scoring_rules import UPPER_CATEGORIES, calculate_score
from settings import load_settings

logger = logging.getLogger(__name__)


# ── Die faces ────────────────────────────────────────────────────────────────

# Pip rows per face; each row marks the left, centre and right columns
PIP_ROWS = {
    1: ("...", ".o.", "..."),
    2: ("o..", "...", "..o"),
    3: ("o..", ".o.", "..o"),
    4: ("o.o", "...", "o.o"),
    5: ("o.o", ".o.", "o.o"),
    6: ("o.o", "o.o", "o.o"),
}

# corners (tl, tr, bl, br), horizontal, vertical
BORDERS = {
    False: "┌┐└┘─│",
    True: "╔╗╚╝═║",
}

DIE_WIDTH = 9


def die_lines(value, held=False):
    """Five text rows drawing one die; held dice get a double border."""
    tl, tr, bl, br, horiz, vert = BORDERS[held]
    lines = [tl + horiz * (DIE_WIDTH - 2) + tr]
    for pattern in PIP_ROWS[value]:
        pips = " ".join("●" if mark == "o" else " " for mark in pattern)
        lines.append(f"{vert} {pips} {vert}")
    lines.append(bl + horiz * (DIE_WIDTH - 2) + br)
    return lines


def render_dice_box(values, held):
    """Render 5 dice side by side, with hold labels below."""
    faces = [die_lines(value, is_held) for value, is_held in zip(values, held)]
    lines = ["  ".join(row) for row in zip(*faces)]
    lines.append("".join(
        f"  [{i + 1}] {'HELD' if is_held else 'hold'}".ljust(DIE_WIDTH + 2)
        for i, is_held in enumerate(held)
    ))
    return "\n".join(lines)


def format_scorecard_row(cat, scorecard, values, selected=False):
    """Format a single scorecard row: fixed score, or (potential) if open."""
    marker = ">>" if selected else "  "
    if scorecard.is_filled(cat):
        return f"{marker}{cat.value:<18} {scorecard.scores[cat]:>3}"

    potential = calculate_score(cat, values)
    if selected:
        return f"{marker}[bold]{cat.value:<18} ({potential:>3})[/bold]"
    elif potential > 0:
        return f"{marker}[green]{cat.value:<18} ({potential:>3})[/green]"
    return f"{marker}[dim]{cat.value:<18} ({potential:>3})[/dim]"


def help_text(bindings):
    """Key reference built from a list of Bindings."""
    lines = ["[bold]CONTROLS[/bold]", ""]
    for binding in bindings:
        key = binding.key_display or binding.key
        lines.append(f"  {key:<12} {binding.description}")
    lines.append("")
    lines.append("[dim]Press Esc or ? to close[/dim]")
    return "\n".join(lines)


# ── Widgets ──────────────────────────────────────────────────────────────────

class DiceDisplay(Static):

    def render(self):
        engine = self.app.engine
        return render_dice_box(engine.values, engine.held)


class StatusDisplay(Static):
    """Shows the rolls left and the engine's status message."""

    def render(self):
        engine = self.app.engine
        lines = [f"Rolls left: {engine.rolls_left}/{MAX_ROLLS}"]
        if engine.game_over:
            lines.append("[bold]All categories scored! Press N for a new game[/bold]")
        lines.append(f"[italic]{engine.message}[/italic]")
        return "\n".join(lines)


class ScorecardDisplay(Static):

    def render(self):
        engine = self.app.engine
        scorecard = engine.scorecard
        selected = self.app.adapter.selected_category

        lines = []
        for cat in CATEGORY_ORDER:
            if cat is CATEGORY_ORDER[len(UPPER_CATEGORIES)]:
                lines.append(f"  Upper total: {scorecard.get_upper_section_total()}")
            lines.append(format_scorecard_row(cat, scorecard, engine.values, cat == selected))
        lines.append(f"[bold]  TOTAL SCORE: {engine.current_total()}[/bold]")

        if selected is not None and not scorecard.is_filled(selected):
            lines.append(f"\n[dim]{CATEGORY_TOOLTIPS[selected]}[/dim]")
        return "\n".join(lines)


class ActionButton(Button, can_focus=False):
    """Mouse-only button; the keyboard always drives the app bindings."""


# ── Modal Screens ────────────────────────────────────────────────────────────

class HelpScreen(ModalScreen):

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("question_mark", "dismiss", "Close"),
    ]

    def compose(self) -> ComposeResult:
        yield Center(Static(help_text(self.app.BINDINGS), classes="panel"))


class HistoryScreen(ModalScreen):
    """Finished games of this session, newest first."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("h", "dismiss", "Close"),
    ]

    def compose(self) -> ComposeResult:
        rows = self.app.adapter.history_rows(limit=20)
        lines = ["[bold]GAME HISTORY[/bold]", f"{'#':<4} {'Date':<20} {'Score':>6}"]
        lines += [f"{pos:<4} {date:<20} {score:>6}" for pos, date, score in rows]
        if not rows:
            lines.append("No finished games yet.")
        lines.append("\n[dim]H or Esc to close[/dim]")
        yield Center(Static("\n".join(lines), classes="panel"))


class ReplayScreen(ModalScreen):

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("r", "dismiss", "Close"),
    ]

    def compose(self) -> ComposeResult:
        lines = self.app.engine.game_log.replay_lines() or ["Nothing scored yet."]
        text = "[bold]GAME REPLAY[/bold]\n\n" + "\n".join(lines)
        text += "\n\n[dim]R or Esc to close[/dim]"
        yield Center(Static(text, classes="panel"))


class ConfirmZeroScreen(ModalScreen[bool]):
    """Asks before a category is scored for 0; dismisses with the answer."""

    BINDINGS = [
        Binding("y", "dismiss(True)", "Yes"),
        Binding("enter", "dismiss(True)", "Yes"),
        Binding("n", "dismiss(False)", "No"),
        Binding("escape", "dismiss(False)", "No"),
    ]

    def __init__(self, category_name: str):
        super().__init__()
        self.category_name = category_name

    def compose(self) -> ComposeResult:
        text = (f"[bold]Score 0 in {self.category_name}?[/bold]\n\n"
                "Y / Enter to confirm,  N / Esc to cancel")
        yield Center(Static(text, classes="panel"))


# ── Main App ─────────────────────────────────────────────────────────────────

class YahtzeeApp(App):
    """Yahtzee terminal UI application."""

    CSS = """
    #dice-panel {
        width: 60;
        padding: 1 2;
    }

    #scorecard-panel {
        padding: 1 2;
    }

    #buttons, #status-display {
        height: auto;
        margin-top: 1;
    }

    ActionButton {
        margin-right: 2;
    }

    .panel {
        padding: 1 3;
        border: thick $accent;
        background: $surface;
        width: 70;
    }
    """

    BINDINGS = [
        Binding("space", "roll", "Roll"),
        Binding("1", "hold(0)", "Hold 1", show=False),
        Binding("2", "hold(1)", "Hold 2", show=False),
        Binding("3", "hold(2)", "Hold 3", show=False),
        Binding("4", "hold(3)", "Hold 4", show=False),
        Binding("5", "hold(4)", "Hold 5", show=False),
        Binding("tab,down", "navigate(1)", "Next category", key_display="Tab/↓", priority=True),
        Binding("shift+tab,up", "navigate(-1)", "Prev category", key_display="S-Tab/↑",
                priority=True, show=False),
        Binding("enter", "score", "Score"),
        Binding("n", "new_game", "New game"),
        Binding("h", "history", "History"),
        Binding("r", "replay", "Replay"),
        Binding("d", "dark", "Dark mode", show=False),
        Binding("question_mark", "help", "Help", key_display="?"),
        Binding("escape", "quit", "Quit"),
    ]

    def __init__(self, engine=None, settings=None):
        super().__init__()
        self.engine = engine if engine is not None else GameEngine()
        self.adapter = FrontendAdapter(self.engine, settings=settings)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            with Vertical(id="dice-panel"):
                yield DiceDisplay(id="dice-display")
                with Horizontal(id="buttons"):
                    yield ActionButton("ROLL", id="roll-btn", variant="primary")
                    yield ActionButton("NEW GAME", id="new-game-btn")
                yield StatusDisplay(id="status-display")
            with Vertical(id="scorecard-panel"):
                yield ScorecardDisplay(id="scorecard-display")
        yield Footer()

    def on_mount(self):
        self.title = "Yahtzee"
        self._apply_theme()
        self._refresh_display()

    def _apply_theme(self):
        self.theme = "textual-dark" if self.adapter.dark_mode else "textual-light"

    def _refresh_display(self):
        for widget in self.query("DiceDisplay, StatusDisplay, ScorecardDisplay"):
            widget.refresh()
        self.query_one("#roll-btn", Button).disabled = not self.adapter.roll_enabled
        self.sub_title = self._round_text()
        logger.debug("Refreshed: round %d, %d rolls left",
                     self.engine.current_round, self.engine.rolls_left)

    def _round_text(self):
        text = f"Round {self.engine.current_round}/{NUM_ROUNDS}"
        best = self.engine.history.best()
        if best is not None:
            text += f" | Best this session: {best.score}"
        return text

    def check_action(self, action, parameters):
        # Category navigation is a priority binding; keep it off overlays
        if action == "navigate" and isinstance(self.screen, ModalScreen):
            return False
        return True

    # ── Actions ──────────────────────────────────────────────────────────

    def action_roll(self):
        self.adapter.do_roll()
        self._refresh_display()

    @on(Button.Pressed, "#roll-btn")
    def on_roll_button(self):
        self.action_roll()

    @on(Button.Pressed, "#new-game-btn")
    def on_new_game_button(self):
        self.action_new_game()

    def action_hold(self, index: int):
        self.adapter.do_hold(index)
        self._refresh_display()

    def action_navigate(self, direction: int):
        self.adapter.navigate_category(direction)
        self._refresh_display()

    def action_score(self):
        adapter = self.adapter
        cat = adapter.selected_category
        if cat is None or not adapter.is_category_enabled(cat):
            return

        if adapter.try_score_category(cat):
            self._refresh_display()
        elif adapter.confirm_zero_category is not None:
            self.push_screen(ConfirmZeroScreen(cat.value), self._on_confirm_zero)

    def _on_confirm_zero(self, confirmed: bool):
        if confirmed:
            self.adapter.confirm_zero_yes()
        else:
            self.adapter.confirm_zero_no()
        self._refresh_display()

    def action_new_game(self):
        self.adapter.do_new_game()
        self._refresh_display()

    def action_help(self):
        self.push_screen(HelpScreen())

    def action_history(self):
        self.push_screen(HistoryScreen())

    def action_replay(self):
        self.push_screen(ReplayScreen())

    def action_dark(self):
        self.adapter.toggle_dark_mode()
        self._apply_theme()


def parse_args(argv=None):
    """Parse command line arguments for the TUI."""
    parser = argparse.ArgumentParser(description="Solo Yahtzee in the terminal")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed the dice for a reproducible session")
    parser.add_argument("--settings", default=None,
                        help="Path to a settings JSON file "
                             "(default: ~/.yahtzee_solo_settings.json)")
    parser.add_argument("--log-file", default=None,
                        help="Write log messages to this file")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Log level used with --log-file (default: INFO)")
    return parser.parse_args(argv)


def main(argv=None):
    """Entry point for the TUI."""
    args = parse_args(argv)

    # The terminal belongs to Textual, so logs only go to a file
    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=getattr(logging, args.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    rng = random.Random(args.seed) if args.seed is not None else None
    engine = GameEngine(rng=rng)
    app = YahtzeeApp(engine=engine, settings=load_settings(args.settings))
    app.run()


if __name__ == "__main__":
    main()
