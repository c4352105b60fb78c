"""
Yahtzee Game Engine - Pure game logic without GUI dependencies

Two layers:

* Immutable data structures (DieState, Scorecard, GameState) and pure action
  functions that return a new GameState, or the same one when the action is
  not allowed.
* GameEngine, which owns one session: the current GameState, the finished-game
  history, the per-game action log and a status message for the frontend.

Randomness comes from an injectable ``rng`` (anything with ``randint``),
defaulting to the ``random`` module.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Mapping, Tuple

from game_log import HOLD, ROLL, SCORE, GameLog
from score_history import HistoryEntry, ScoreHistory
from scoring_rules import (
    Category,
    LOWER_CATEGORIES,
    UPPER_CATEGORIES,
    calculate_score,
    lookup_category,
)

logger = logging.getLogger(__name__)

MAX_ROLLS = 3
NUM_DICE = 5
NUM_ROUNDS = len(Category)

WELCOME_MESSAGE = "Welcome! Press ROLL to start"
NEW_GAME_MESSAGE = "New game, press ROLL"


class Scorecard:
    """Manages the Yahtzee scorecard

    Entries are only written through ``with_score``, which returns a new
    card; ``scores`` is a read-only view.
    """

    def __init__(self):
        """Initialize an empty scorecard"""
        # None = not filled
        self._scores = {category: None for category in Category}

    @property
    def scores(self):
        """Read-only mapping of Category to score (None = not filled)"""
        return MappingProxyType(self._scores)

    def is_filled(self, category):
        """Check if a category has been filled"""
        return self._scores[category] is not None

    def get_upper_section_total(self):
        """Total of the filled upper categories (Ones through Sixes)"""
        return sum(self._scores[cat] or 0 for cat in UPPER_CATEGORIES)

    def get_lower_section_total(self):
        """Total of the filled lower categories"""
        return sum(self._scores[cat] or 0 for cat in LOWER_CATEGORIES)

    def get_grand_total(self):
        """Sum of every filled category; unfilled ones count as 0"""
        return self.get_upper_section_total() + self.get_lower_section_total()

    def is_complete(self):
        """Check if all categories are filled"""
        return all(score is not None for score in self._scores.values())

    def copy(self):
        """Create a copy of the scorecard"""
        new_card = Scorecard()
        new_card._scores = self._scores.copy()
        return new_card

    def with_score(self, category, score):
        """Return new Scorecard with score set for category.

        A filled category is never overwritten.
        """
        new_card = self.copy()
        if not new_card.is_filled(category):
            new_card._scores[category] = score
        return new_card


@dataclass(frozen=True)
class DieState:
    """Pure representation of a single die's state - immutable"""
    value: int  # 1-6
    held: bool = False

    def roll(self, rng=random) -> 'DieState':
        """Return new DieState with random value (if not held)"""
        if self.held:
            return self
        return replace(self, value=rng.randint(1, 6))

    def toggle_held(self) -> 'DieState':
        """Return new DieState with held status toggled"""
        return replace(self, held=not self.held)


def fresh_dice(rng=random) -> Tuple[DieState, ...]:
    """Five newly rolled, unheld dice."""
    return tuple(DieState(value=rng.randint(1, 6)) for _ in range(NUM_DICE))


@dataclass(frozen=True)
class GameState:
    """Immutable game state - represents complete game state at a point in time"""
    dice: Tuple[DieState, ...]  # 5 dice (tuple for immutability)
    scorecard: Scorecard
    rolls_left: int  # 0-3
    current_round: int = 1  # 1-13

    @staticmethod
    def create_initial(rng=random):
        """Create a fresh game state with an opening random hand"""
        return GameState(
            dice=fresh_dice(rng),
            scorecard=Scorecard(),
            rolls_left=MAX_ROLLS,
            current_round=1,
        )

    @property
    def values(self) -> Tuple[int, ...]:
        """The hand as plain die values"""
        return tuple(die.value for die in self.dice)

    @property
    def held(self) -> Tuple[bool, ...]:
        """The hold mask, one flag per die position"""
        return tuple(die.held for die in self.dice)

    @property
    def game_over(self) -> bool:
        """Every category has been scored"""
        return self.scorecard.is_complete()


# Game Action Functions

def roll_dice(state: GameState, rng=random) -> GameState:
    """
    Roll all unheld dice and use up one roll.

    If no rolls are left, returns state unchanged.
    """
    if state.rolls_left <= 0:
        return state

    new_dice = tuple(die.roll(rng) for die in state.dice)
    return replace(state,
                   dice=new_dice,
                   rolls_left=state.rolls_left - 1)


def toggle_die_hold(state: GameState, die_index: int) -> GameState:
    """
    Toggle hold status of a specific die.

    Allowed whatever the roll count. If index is outside 0-4, returns
    state unchanged.
    """
    if not (0 <= die_index < NUM_DICE):
        return state

    dice_list = list(state.dice)
    dice_list[die_index] = dice_list[die_index].toggle_held()
    return replace(state, dice=tuple(dice_list))


def select_category(state: GameState, category: Category, rng=random) -> GameState:
    """
    Lock in score for a category and start the next turn.

    Scores the current hand, clears all holds, restores the full roll
    count and re-rolls all five dice regardless of holds. If the category
    is already filled, returns state unchanged.
    """
    if not can_select_category(state, category):
        return state

    score = calculate_score(category, state.values)
    new_scorecard = state.scorecard.with_score(category, score)

    next_round = state.current_round
    if not new_scorecard.is_complete():
        next_round += 1

    return replace(state,
                   dice=fresh_dice(rng),
                   scorecard=new_scorecard,
                   rolls_left=MAX_ROLLS,
                   current_round=next_round)


def can_roll(state: GameState) -> bool:
    """Player can roll while any rolls are left this turn."""
    return state.rolls_left > 0


def can_select_category(state: GameState, category: Category) -> bool:
    """Category is available if it exists and has not been scored yet."""
    return category in state.scorecard.scores and not state.scorecard.is_filled(category)


def reset_game(rng=random) -> GameState:
    """Create a fresh game state (equivalent to starting over)."""
    return GameState.create_initial(rng)


# ══════════════════════════════════════════════════════════════════════════════
# Session engine
# ══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EngineSnapshot:
    """Read-only view of the engine for a frontend."""
    dice: Tuple[int, ...]
    held: Tuple[bool, ...]
    rolls_left: int
    scores: Mapping[Category, int | None]
    total: int
    history: Tuple[HistoryEntry, ...]
    message: str
    current_round: int
    game_over: bool


class GameEngine:
    """Owns a single-player session and exposes the commands a frontend calls.

    Illegal commands (rolling with no rolls left, scoring a filled category,
    holding a die that doesn't exist) leave the game untouched.
    """

    def __init__(self, rng=None) -> None:
        """
        Args:
            rng: Optional random source with ``randint(a, b)``; defaults to
                 the ``random`` module. Pass a seeded ``random.Random`` for
                 reproducible dice.
        """
        self.rng = rng if rng is not None else random
        self.state = GameState.create_initial(self.rng)
        self.history = ScoreHistory()
        self.game_log = GameLog()
        self.message = WELCOME_MESSAGE

    # ── Properties ────────────────────────────────────────────────────────

    @property
    def dice(self) -> Tuple[DieState, ...]:
        return self.state.dice

    @property
    def values(self) -> Tuple[int, ...]:
        return self.state.values

    @property
    def held(self) -> Tuple[bool, ...]:
        return self.state.held

    @property
    def rolls_left(self) -> int:
        return self.state.rolls_left

    @property
    def scorecard(self) -> Scorecard:
        return self.state.scorecard

    @property
    def current_round(self) -> int:
        return self.state.current_round

    @property
    def game_over(self) -> bool:
        return self.state.game_over

    @property
    def can_roll(self) -> bool:
        return can_roll(self.state)

    def can_select_category(self, category: Category) -> bool:
        return can_select_category(self.state, category)

    # ── Commands ──────────────────────────────────────────────────────────

    def roll(self) -> bool:
        """Re-roll every unheld die. Returns True if a roll happened."""
        if not can_roll(self.state):
            logger.debug("Roll rejected: no rolls left")
            self.message = "No rolls left, pick a category"
            return False

        self.state = roll_dice(self.state, self.rng)
        self.game_log.record(ROLL, self.state)
        left = self.rolls_left
        logger.debug("Rolled %s, %d left", self.values, left)
        self.message = f"Rolled, {left} roll{'' if left == 1 else 's'} left"
        return True

    def toggle_hold(self, position: int) -> bool:
        """Flip the hold flag of one die. Returns True if it changed."""
        new_state = toggle_die_hold(self.state, position)
        if new_state is self.state:
            logger.debug("Hold rejected: no die at position %r", position)
            return False

        self.state = new_state
        self.game_log.record(HOLD, self.state)
        verb = "held" if self.held[position] else "released"
        self.message = f"Die {position + 1} {verb}"
        return True

    def commit_score(self, category: Category | str) -> int | None:
        """Score the current hand in ``category`` and start the next turn.

        ``category`` may be a Category or its display name ("Full House").
        Returns the points scored, or None if the category is unknown or
        was already used.
        """
        resolved = lookup_category(category)
        if resolved is None:
            logger.debug("Score rejected: unknown category %r", category)
            self.message = f"Unknown category {category!r}"
            return None
        if not can_select_category(self.state, resolved):
            logger.debug("Score rejected: %s already filled", resolved.value)
            self.message = f"{resolved.value} already scored"
            return None

        before = self.state
        self.state = select_category(self.state, resolved, self.rng)
        score = self.scorecard.scores[resolved]
        self.game_log.record(SCORE, before, category=resolved, score=score)
        logger.info("Scored %d in %s with %s", score, resolved.value, before.values)
        self.message = f"{resolved.value} scored {score}"
        return score

    def current_total(self) -> int:
        """Sum of every scored category."""
        return self.scorecard.get_grand_total()

    def new_game(self) -> HistoryEntry | None:
        """Start over, recording the finished game if it scored anything.

        Returns the new HistoryEntry, or None if nothing was recorded.
        """
        total = self.current_total()
        entry = None
        if total > 0:
            entry = self.history.record(total)
            logger.info("Game finished with %d points", total)

        self.state = reset_game(self.rng)
        self.game_log.clear()
        self.message = NEW_GAME_MESSAGE
        return entry

    def snapshot(self) -> EngineSnapshot:
        """Capture the current state for rendering."""
        return EngineSnapshot(
            dice=self.values,
            held=self.held,
            rolls_left=self.rolls_left,
            scores=MappingProxyType(dict(self.scorecard.scores)),
            total=self.current_total(),
            history=self.history.entries,
            message=self.message,
            current_round=self.current_round,
            game_over=self.game_over,
        )
