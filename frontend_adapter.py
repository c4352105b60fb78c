"""FrontendAdapter — UI state management shared by Yahtzee frontends.

Owns zero-score confirmation, keyboard category navigation, history
formatting and the JSON snapshot. Pure Python, no Textual dependency:
the TUI creates a FrontendAdapter wrapping a GameEngine and keeps only
rendering and input translation for itself.
"""

from game_engine import MAX_ROLLS
from scoring_rules import Category, potential_scores
from settings import DEFAULTS


CATEGORY_ORDER = list(Category)

CATEGORY_TOOLTIPS = {
    Category.ONES: "Sum of all dice showing 1",
    Category.TWOS: "Sum of all dice showing 2",
    Category.THREES: "Sum of all dice showing 3",
    Category.FOURS: "Sum of all dice showing 4",
    Category.FIVES: "Sum of all dice showing 5",
    Category.SIXES: "Sum of all dice showing 6",
    Category.THREE_OF_KIND: "3 of the same, score = sum of all dice",
    Category.FOUR_OF_KIND: "4 of the same, score = sum of all dice",
    Category.FULL_HOUSE: "Exactly 3 of one + 2 of another = 25",
    Category.SMALL_STRAIGHT: "4 consecutive dice = 30",
    Category.LARGE_STRAIGHT: "5 consecutive dice = 40",
    Category.YAHTZEE: "All 5 dice the same = 50",
    Category.CHANCE: "Sum of all dice, no pattern needed",
}


class FrontendAdapter:
    """Presentation-side state for a GameEngine.

    The engine stays the single owner of game state; the adapter only
    reads it and forwards commands.
    """

    def __init__(self, engine, settings=None):
        self.engine = engine
        self.settings = dict(DEFAULTS)
        if settings:
            self.settings.update(settings)

        # Zero-score confirmation
        self.confirm_zero_category = None

        # Keyboard category navigation
        self.kb_selected_index = None

        self.dark_mode = bool(self.settings["dark_mode"])

    # ── Enabled state ─────────────────────────────────────────────────────

    @property
    def roll_enabled(self):
        """Whether the roll control should accept input."""
        return self.engine.can_roll

    def is_category_enabled(self, cat):
        """Whether the score control for ``cat`` should accept input."""
        return self.engine.can_select_category(cat)

    @property
    def selected_category(self):
        """Category under the keyboard cursor, or None."""
        if self.kb_selected_index is None:
            return None
        return CATEGORY_ORDER[self.kb_selected_index]

    # ── Zero-score confirmation ───────────────────────────────────────────

    def try_score_category(self, cat):
        """Attempt to score a category. Asks for confirmation if score is 0.

        Returns True if scoring happened immediately, False otherwise.
        """
        if not self.engine.can_select_category(cat):
            return False
        score = potential_scores(self.engine.values, self.engine.scorecard)[cat]
        if score == 0 and self.settings["confirm_zero"]:
            self.confirm_zero_category = cat
            return False
        return self._commit(cat)

    def confirm_zero_yes(self):
        """Confirm scoring 0 in the pending category. Returns True if scored."""
        cat = self.confirm_zero_category
        if cat is None:
            return False
        self.confirm_zero_category = None
        return self._commit(cat)

    def confirm_zero_no(self):
        """Cancel the zero-score confirmation."""
        self.confirm_zero_category = None

    def _commit(self, cat):
        if self.engine.commit_score(cat) is None:
            return False
        self.kb_selected_index = None
        return True

    # ── Keyboard category navigation ──────────────────────────────────────

    def navigate_category(self, direction):
        """Move keyboard selection to next/previous unfilled category.

        Args:
            direction: +1 for forward, -1 for backward
        """
        scorecard = self.engine.scorecard
        unfilled = [i for i, cat in enumerate(CATEGORY_ORDER)
                    if not scorecard.is_filled(cat)]
        if not unfilled:
            self.kb_selected_index = None
            return

        if self.kb_selected_index is None:
            self.kb_selected_index = unfilled[0] if direction > 0 else unfilled[-1]
        elif direction > 0:
            candidates = [i for i in unfilled if i > self.kb_selected_index]
            self.kb_selected_index = candidates[0] if candidates else unfilled[0]
        else:
            candidates = [i for i in unfilled if i < self.kb_selected_index]
            self.kb_selected_index = candidates[-1] if candidates else unfilled[-1]

    # ── Game actions ──────────────────────────────────────────────────────

    def do_roll(self):
        """Roll dice. Returns True if the engine rolled."""
        return self.engine.roll()

    def do_hold(self, die_index):
        """Toggle hold on a die."""
        return self.engine.toggle_hold(die_index)

    def do_new_game(self):
        """Start a new game and drop any pending UI state."""
        self.engine.new_game()
        self.confirm_zero_category = None
        self.kb_selected_index = None

    def toggle_dark_mode(self):
        """Toggle dark mode for this session."""
        self.dark_mode = not self.dark_mode

    # ── Data helpers ──────────────────────────────────────────────────────

    def history_rows(self, limit=None):
        """Return (position, formatted date, score) rows, newest first."""
        entries = self.engine.history.entries
        if limit is not None:
            entries = entries[:limit]
        date_format = self.settings["date_format"]
        return [
            (i + 1, entry.timestamp.strftime(date_format), entry.score)
            for i, entry in enumerate(entries)
        ]

    def get_game_snapshot(self):
        """Return a complete JSON-serializable dict of game + UI state."""
        snap = self.engine.snapshot()
        scorecard = self.engine.scorecard

        scores = {cat.value: val for cat, val in snap.scores.items() if val is not None}
        potential = {cat.value: val for cat, val
                     in potential_scores(snap.dice, scorecard).items()}

        return {
            "dice": [{"value": v, "held": h} for v, h in zip(snap.dice, snap.held)],
            "rolls_left": snap.rolls_left,
            "max_rolls": MAX_ROLLS,
            "current_round": snap.current_round,
            "game_over": snap.game_over,
            "can_roll": self.roll_enabled,
            "message": snap.message,
            "scorecard": {
                "scores": scores,
                "upper_total": scorecard.get_upper_section_total(),
                "lower_total": scorecard.get_lower_section_total(),
                "grand_total": snap.total,
            },
            "potential_scores": potential,
            "history": [
                {"date": date, "score": score}
                for _, date, score in self.history_rows()
            ],
            "confirm_zero_category": (self.confirm_zero_category.value
                                      if self.confirm_zero_category else None),
            "kb_selected_index": self.kb_selected_index,
            "dark_mode": self.dark_mode,
        }
