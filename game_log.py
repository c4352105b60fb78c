"""Per-game action log, used to replay the current game turn by turn.

Each entry captures the board as it stood when a roll, hold change or
scoring decision happened. The engine clears the log on a new game.
"""
from __future__ import annotations

from dataclasses import dataclass

from scoring_rules import Category

ROLL = "roll"
HOLD = "hold"
SCORE = "score"


@dataclass(frozen=True)
class LogEntry:
    """Board state at one logged event."""
    kind: str                       # ROLL, HOLD or SCORE
    turn: int                       # 1-13
    dice: tuple[int, ...]
    held: tuple[bool, ...]
    rolls_left: int
    category: Category | None = None
    score: int | None = None


class GameLog:
    """Ordered LogEntry records for one game."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    def record(self, kind: str, state, category: Category | None = None,
               score: int | None = None) -> LogEntry:
        """Append an entry built from a GameState and return it.

        For SCORE, pass the state from before the commit so the entry
        shows the hand that was scored.
        """
        entry = LogEntry(
            kind=kind,
            turn=state.current_round,
            dice=state.values,
            held=state.held,
            rolls_left=state.rolls_left,
            category=category,
            score=score,
        )
        self.entries.append(entry)
        return entry

    def scored_turns(self) -> list[LogEntry]:
        """SCORE entries in the order they were committed."""
        return [e for e in self.entries if e.kind == SCORE]

    def rolls_in_turn(self, turn: int) -> list[tuple[int, ...]]:
        """Dice after each roll of a turn."""
        return [e.dice for e in self.entries if e.kind == ROLL and e.turn == turn]

    def replay_lines(self) -> list[str]:
        """One line per scored turn: the dice after each roll, then the score.

        A turn scored without rolling shows the opening hand.
        """
        lines = []
        for entry in self.scored_turns():
            hands = self.rolls_in_turn(entry.turn) or [entry.dice]
            dice_str = " → ".join(f"[{','.join(map(str, h))}]" for h in hands)
            lines.append(f"Turn {entry.turn}: {dice_str} → {entry.category.value}: {entry.score}")
        return lines

    def clear(self) -> None:
        self.entries = []
