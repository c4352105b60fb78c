"""
Game Engine Test Suite

Rules for the turn state machine, both the pure action functions and the
GameEngine session object that wraps them.

Sections:
    1. Dice — values, immutability, rolling, holding
    2. Game Setup — initial state
    3. Rolling — when allowed, what changes, limits
    4. Holding Dice — toggling, out-of-range positions
    5. Scoring a Category — write-once, turn reset, re-roll
    6. New Game & History
    7. Snapshot & Messages
    8. Game Flow — full game
"""
import random
from dataclasses import replace
from datetime import datetime

import pytest

from game_engine import (
    MAX_ROLLS,
    DieState,
    EngineSnapshot,
    GameEngine,
    GameState,
    Scorecard,
    can_roll,
    can_select_category,
    reset_game,
    roll_dice,
    select_category,
    toggle_die_hold,
)
from scoring_rules import Category


# ── Helpers ──────────────────────────────────────────────────────────────────

class ScriptedRng:
    """Deterministic dice: returns the scripted values, then a seeded stream."""

    def __init__(self, values=()):
        self._values = iter(values)
        self._fallback = random.Random(1234)

    def randint(self, a, b):
        value = next(self._values, None)
        if value is None:
            return self._fallback.randint(a, b)
        return value


def make_dice(*values, held=()):
    """Create a tuple of DieState from integer values."""
    return tuple(DieState(value=v, held=i in held) for i, v in enumerate(values))


def engine_with_dice(*values, rolls_left=MAX_ROLLS, next_rolls=()):
    """GameEngine whose current hand is set to the given values.

    ``next_rolls`` scripts the dice drawn after the hand is set.
    """
    engine = GameEngine(rng=ScriptedRng())
    engine.state = replace(engine.state, dice=make_dice(*values), rolls_left=rolls_left)
    engine.rng = ScriptedRng(next_rolls)
    return engine


# ═══════════════════════════════════════════════════════════════════════════════
# 1. DICE
# ═══════════════════════════════════════════════════════════════════════════════

class TestDieState:

    def test_die_defaults_to_unheld(self):
        assert DieState(value=4).held is False

    def test_die_is_immutable(self):
        die = DieState(value=3)
        with pytest.raises(AttributeError):
            die.value = 6

    def test_rolling_unheld_die_produces_value_1_through_6(self):
        die = DieState(value=1)
        rng = random.Random(7)
        seen = {die.roll(rng).value for _ in range(500)}
        assert seen == {1, 2, 3, 4, 5, 6}

    def test_rolling_held_die_preserves_value(self):
        for v in range(1, 7):
            die = DieState(value=v, held=True)
            assert die.roll(ScriptedRng([1])) is die

    def test_toggle_held_flips_and_keeps_value(self):
        die = DieState(value=6).toggle_held()
        assert die.held is True
        assert die.value == 6
        assert die.toggle_held().held is False


# ═══════════════════════════════════════════════════════════════════════════════
# 2. GAME SETUP
#    Rule: construction performs the opening roll itself.
# ═══════════════════════════════════════════════════════════════════════════════

class TestGameSetup:

    def test_initial_hand_uses_rng(self):
        engine = GameEngine(rng=ScriptedRng([6, 5, 4, 3, 2]))
        assert engine.values == (6, 5, 4, 3, 2)

    def test_initial_dice_in_range(self):
        engine = GameEngine()
        assert len(engine.dice) == 5
        assert all(1 <= v <= 6 for v in engine.values)

    def test_initial_dice_unheld(self):
        assert GameEngine().held == (False,) * 5

    def test_initial_rolls_left_is_max(self):
        assert GameEngine().rolls_left == MAX_ROLLS == 3

    def test_initial_scorecard_empty(self):
        engine = GameEngine()
        assert all(not engine.scorecard.is_filled(c) for c in Category)
        assert engine.current_total() == 0

    def test_initial_history_empty(self):
        assert len(GameEngine().history) == 0

    def test_initial_round_is_one(self):
        assert GameEngine().current_round == 1

    def test_reset_game_returns_fresh_state(self):
        state = reset_game(ScriptedRng([1, 2, 3, 4, 5]))
        assert state.values == (1, 2, 3, 4, 5)
        assert state.rolls_left == MAX_ROLLS
        assert not state.game_over


# ═══════════════════════════════════════════════════════════════════════════════
# 3. ROLLING
#    Rule: up to 3 rolls per turn; held dice keep their value.
# ═══════════════════════════════════════════════════════════════════════════════

class TestRolling:

    def test_roll_decrements_rolls_left(self):
        engine = GameEngine()
        assert engine.roll() is True
        assert engine.rolls_left == 2

    def test_three_rolls_exhaust_turn(self):
        engine = GameEngine()
        for _ in range(3):
            engine.roll()
        assert engine.rolls_left == 0
        assert engine.can_roll is False

    def test_roll_replaces_unheld_dice(self):
        engine = engine_with_dice(1, 1, 1, 1, 1, next_rolls=[6, 6, 6, 6, 6])
        engine.roll()
        assert engine.values == (6, 6, 6, 6, 6)

    def test_roll_keeps_held_dice(self):
        engine = engine_with_dice(1, 2, 3, 4, 5, next_rolls=[6, 6, 6])
        engine.toggle_hold(0)
        engine.toggle_hold(3)
        engine.roll()
        assert engine.values == (1, 6, 6, 4, 6)
        assert engine.held == (True, False, False, True, False)

    def test_roll_with_no_rolls_left_changes_nothing(self):
        engine = engine_with_dice(2, 3, 4, 5, 6, rolls_left=0)
        before = engine.state
        assert engine.roll() is False
        assert engine.state is before
        assert engine.values == (2, 3, 4, 5, 6)
        assert engine.rolls_left == 0

    def test_pure_roll_refuses_below_zero(self):
        state = replace(GameState.create_initial(), rolls_left=0)
        assert roll_dice(state) is state
        assert can_roll(state) is False

    def test_roll_is_logged(self):
        engine = GameEngine()
        engine.roll()
        entry = engine.game_log.entries[-1]
        assert entry.kind == "roll"
        assert entry.rolls_left == 2
        assert entry.dice == engine.values


# ═══════════════════════════════════════════════════════════════════════════════
# 4. HOLDING DICE
#    Rule: any position 0-4 can be toggled, whatever the roll count.
#    Rule: positions outside 0-4 are ignored.
# ═══════════════════════════════════════════════════════════════════════════════

class TestHolding:

    def test_toggle_flips_one_die(self):
        engine = GameEngine()
        assert engine.toggle_hold(2) is True
        assert engine.held == (False, False, True, False, False)

    def test_toggle_twice_releases(self):
        engine = GameEngine()
        engine.toggle_hold(4)
        engine.toggle_hold(4)
        assert engine.held == (False,) * 5

    def test_toggle_does_not_change_values_or_rolls(self):
        engine = engine_with_dice(1, 2, 3, 4, 5, rolls_left=2)
        engine.toggle_hold(1)
        assert engine.values == (1, 2, 3, 4, 5)
        assert engine.rolls_left == 2

    def test_toggle_allowed_with_no_rolls_left(self):
        engine = engine_with_dice(1, 2, 3, 4, 5, rolls_left=0)
        assert engine.toggle_hold(0) is True
        assert engine.held[0] is True

    @pytest.mark.parametrize("position", [-1, 5, 99])
    def test_out_of_range_position_is_ignored(self, position):
        engine = GameEngine()
        before = engine.state
        assert engine.toggle_hold(position) is False
        assert engine.state is before

    def test_pure_toggle_out_of_range_returns_same_state(self):
        state = GameState.create_initial()
        assert toggle_die_hold(state, 5) is state

    def test_hold_is_logged(self):
        engine = GameEngine()
        engine.toggle_hold(1)
        engine.toggle_hold(3)
        entry = engine.game_log.entries[-1]
        assert entry.kind == "hold"
        assert entry.held == (False, True, False, True, False)


# ═══════════════════════════════════════════════════════════════════════════════
# 5. SCORING A CATEGORY
#    Rule: each category is scored at most once per game.
#    Rule: scoring clears holds, restores 3 rolls and re-rolls all five dice.
# ═══════════════════════════════════════════════════════════════════════════════

class TestScoring:

    def test_fresh_engine_chance_end_to_end(self):
        engine = GameEngine(rng=ScriptedRng([2, 2, 3, 4, 5]))
        assert engine.commit_score(Category.CHANCE) == 16
        assert engine.scorecard.scores[Category.CHANCE] == 16
        assert engine.current_total() == 16

    def test_commit_resets_turn(self):
        engine = engine_with_dice(3, 3, 3, 2, 2, rolls_left=1)
        engine.toggle_hold(0)
        engine.toggle_hold(1)
        engine.commit_score(Category.FULL_HOUSE)
        assert engine.rolls_left == MAX_ROLLS
        assert engine.held == (False,) * 5

    def test_commit_rerolls_all_dice_ignoring_holds(self):
        engine = engine_with_dice(1, 1, 1, 1, 1, next_rolls=[6, 5, 4, 3, 2])
        engine.toggle_hold(0)
        engine.commit_score(Category.ONES)
        assert engine.values == (6, 5, 4, 3, 2)

    def test_commit_advances_round(self):
        engine = GameEngine()
        engine.commit_score(Category.CHANCE)
        assert engine.current_round == 2

    def test_score_is_permanent(self):
        engine = engine_with_dice(6, 6, 6, 6, 6)
        engine.commit_score(Category.SIXES)
        engine.state = replace(engine.state, dice=make_dice(1, 1, 1, 1, 1))
        engine.commit_score(Category.SIXES)
        assert engine.scorecard.scores[Category.SIXES] == 30

    def test_commit_on_filled_category_changes_nothing(self):
        engine = engine_with_dice(2, 2, 3, 4, 5)
        engine.commit_score(Category.CHANCE)
        engine.roll()
        before = engine.state
        scores_before = dict(engine.scorecard.scores)

        assert engine.commit_score(Category.CHANCE) is None
        assert engine.state is before
        assert engine.scorecard.scores == scores_before
        assert engine.rolls_left == MAX_ROLLS - 1

    def test_zero_score_is_still_a_fixed_entry(self):
        engine = engine_with_dice(1, 2, 3, 5, 5)
        assert engine.commit_score(Category.SMALL_STRAIGHT) == 0
        assert engine.scorecard.is_filled(Category.SMALL_STRAIGHT)
        assert not engine.can_select_category(Category.SMALL_STRAIGHT)

    def test_unknown_category_is_ignored(self):
        engine = GameEngine()
        before = engine.state
        assert engine.commit_score("Bonus") is None
        assert engine.state is before
        assert engine.message == "Unknown category 'Bonus'"

    def test_commit_accepts_display_name(self):
        engine = engine_with_dice(2, 2, 3, 4, 5)
        assert engine.commit_score("Chance") == 16
        assert engine.scorecard.is_filled(Category.CHANCE)
        assert engine.message == "Chance scored 16"

    def test_display_name_of_filled_category_is_rejected(self):
        engine = engine_with_dice(2, 2, 3, 4, 5)
        engine.commit_score(Category.CHANCE)
        assert engine.commit_score("Chance") is None
        assert engine.message == "Chance already scored"

    def test_scores_cannot_be_written_through_engine(self):
        engine = GameEngine(rng=ScriptedRng([2, 2, 3, 4, 5]))
        engine.commit_score(Category.CHANCE)
        with pytest.raises(TypeError):
            engine.scorecard.scores[Category.CHANCE] = 99
        assert engine.scorecard.scores[Category.CHANCE] == 16
        assert engine.current_total() == 16

    def test_snapshot_scores_are_read_only(self):
        snap = GameEngine().snapshot()
        with pytest.raises(TypeError):
            snap.scores[Category.CHANCE] = 99

    def test_pure_select_on_filled_returns_same_state(self):
        state = GameState.create_initial()
        state = select_category(state, Category.CHANCE)
        assert select_category(state, Category.CHANCE) is state
        assert can_select_category(state, Category.CHANCE) is False

    def test_score_is_logged(self):
        engine = engine_with_dice(5, 5, 5, 2, 2)
        engine.commit_score(Category.FULL_HOUSE)
        entry = engine.game_log.scored_turns()[-1]
        assert entry.category == Category.FULL_HOUSE
        assert entry.score == 25
        assert entry.dice == (5, 5, 5, 2, 2)
        assert entry.rolls_left == MAX_ROLLS

    def test_replay_line_for_unrolled_turn(self):
        engine = engine_with_dice(2, 2, 3, 4, 5)
        engine.commit_score(Category.CHANCE)
        assert engine.game_log.replay_lines() == ["Turn 1: [2,2,3,4,5] → Chance: 16"]
        assert entry.turn == 1

    def test_scorecard_with_score_never_overwrites(self):
        card = Scorecard().with_score(Category.ONES, 3)
        assert card.with_score(Category.ONES, 5).scores[Category.ONES] == 3


# ═══════════════════════════════════════════════════════════════════════════════
# 6. NEW GAME & HISTORY
#    Rule: a game with a positive total is recorded at the front of history.
# ═══════════════════════════════════════════════════════════════════════════════

class TestNewGame:

    def test_zero_total_is_not_recorded(self):
        engine = GameEngine()
        assert engine.new_game() is None
        assert len(engine.history) == 0

    def test_zero_scores_only_is_not_recorded(self):
        engine = engine_with_dice(1, 2, 3, 5, 5)
        engine.commit_score(Category.YAHTZEE)
        engine.new_game()
        assert len(engine.history) == 0

    def test_positive_total_is_recorded_at_front(self):
        engine = GameEngine()
        engine.history.record(10, timestamp=datetime(2020, 1, 1))
        engine.state = replace(engine.state,
                               scorecard=Scorecard().with_score(Category.CHANCE, 42))
        entry = engine.new_game()
        assert entry.score == 42
        assert engine.history.entries[0] is entry
        assert [e.score for e in engine.history] == [42, 10]

    def test_new_game_resets_board(self):
        engine = engine_with_dice(6, 6, 6, 6, 6, rolls_left=1)
        engine.toggle_hold(2)
        engine.commit_score(Category.YAHTZEE)
        engine.roll()
        engine.new_game()
        assert engine.rolls_left == MAX_ROLLS
        assert engine.held == (False,) * 5
        assert engine.current_total() == 0
        assert engine.current_round == 1
        assert engine.game_log.entries == []

    def test_new_game_draws_fresh_hand(self):
        engine = engine_with_dice(1, 1, 1, 1, 1, next_rolls=[2, 3, 4, 5, 6])
        engine.toggle_hold(0)
        engine.new_game()
        assert engine.values == (2, 3, 4, 5, 6)

    def test_history_survives_several_games(self):
        engine = GameEngine()
        for _ in range(3):
            engine.commit_score(Category.CHANCE)
            engine.new_game()
        assert len(engine.history) == 3


# ═══════════════════════════════════════════════════════════════════════════════
# 7. SNAPSHOT & MESSAGES
# ═══════════════════════════════════════════════════════════════════════════════

class TestSnapshot:

    def test_snapshot_fields(self):
        engine = engine_with_dice(2, 2, 3, 4, 5)
        engine.toggle_hold(1)
        snap = engine.snapshot()
        assert isinstance(snap, EngineSnapshot)
        assert snap.dice == (2, 2, 3, 4, 5)
        assert snap.held == (False, True, False, False, False)
        assert snap.rolls_left == MAX_ROLLS
        assert snap.total == 0
        assert snap.history == ()
        assert snap.game_over is False
        assert set(snap.scores) == set(Category)

    def test_snapshot_is_detached_from_engine(self):
        engine = GameEngine()
        snap = engine.snapshot()
        engine.commit_score(Category.CHANCE)
        assert snap.scores[Category.CHANCE] is None

    def test_welcome_message(self):
        assert GameEngine().message.startswith("Welcome")

    def test_roll_message(self):
        engine = GameEngine()
        engine.roll()
        assert engine.message == "Rolled, 2 rolls left"
        engine.roll()
        assert engine.message == "Rolled, 1 roll left"

    def test_score_message(self):
        engine = engine_with_dice(2, 2, 3, 4, 5)
        engine.commit_score(Category.CHANCE)
        assert engine.message == "Chance scored 16"

    def test_rejected_score_message(self):
        engine = GameEngine()
        engine.commit_score(Category.CHANCE)
        engine.commit_score(Category.CHANCE)
        assert engine.message == "Chance already scored"

    def test_rejected_roll_message(self):
        engine = engine_with_dice(1, 2, 3, 4, 5, rolls_left=0)
        engine.roll()
        assert "No rolls left" in engine.message

    def test_new_game_message(self):
        engine = GameEngine()
        engine.new_game()
        assert engine.message == "New game, press ROLL"


# ═══════════════════════════════════════════════════════════════════════════════
# 8. GAME FLOW
# ═══════════════════════════════════════════════════════════════════════════════

class TestGameFlow:

    def test_full_game_fills_every_category(self):
        engine = GameEngine(rng=random.Random(42))
        for cat in Category:
            engine.roll()
            assert engine.commit_score(cat) is not None
        assert engine.game_over is True
        assert engine.current_round == 13
        assert engine.current_total() == sum(engine.scorecard.scores.values())
        assert all(not engine.can_select_category(c) for c in Category)

    def test_seeded_sessions_are_reproducible(self):
        def play(seed):
            engine = GameEngine(rng=random.Random(seed))
            engine.roll()
            engine.toggle_hold(0)
            engine.roll()
            engine.commit_score(Category.CHANCE)
            return engine.values, engine.current_total()

        assert play(99) == play(99)
