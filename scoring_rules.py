"""
Yahtzee Scoring Rules - Pure scoring functions

Maps a five-die hand plus a category to a point value. No state, no
randomness, no GUI dependencies. Hands are plain sequences of ints (1-6).
"""
from enum import Enum


class Category(str, Enum):
    """Yahtzee score categories, in scoresheet order.

    Members compare equal to their display names, so "Full House" and
    Category.FULL_HOUSE score the same.
    """
    ONES = "Ones"
    TWOS = "Twos"
    THREES = "Threes"
    FOURS = "Fours"
    FIVES = "Fives"
    SIXES = "Sixes"
    THREE_OF_KIND = "Three of a Kind"
    FOUR_OF_KIND = "Four of a Kind"
    FULL_HOUSE = "Full House"
    SMALL_STRAIGHT = "Small Straight"
    LARGE_STRAIGHT = "Large Straight"
    YAHTZEE = "Yahtzee"
    CHANCE = "Chance"

    @property
    def is_upper(self):
        """True for Ones through Sixes"""
        return self in _UPPER_FACES

    @property
    def face(self):
        """Die face counted by an upper category, None for lower categories"""
        return _UPPER_FACES.get(self)


_UPPER_FACES = {
    Category.ONES: 1, Category.TWOS: 2, Category.THREES: 3,
    Category.FOURS: 4, Category.FIVES: 5, Category.SIXES: 6,
}

UPPER_CATEGORIES = tuple(cat for cat in Category if cat.is_upper)
LOWER_CATEGORIES = tuple(cat for cat in Category if not cat.is_upper)

FULL_HOUSE_POINTS = 25
SMALL_STRAIGHT_POINTS = 30
LARGE_STRAIGHT_POINTS = 40
YAHTZEE_POINTS = 50

_SMALL_STRAIGHTS = ({1, 2, 3, 4}, {2, 3, 4, 5}, {3, 4, 5, 6})
_LARGE_STRAIGHTS = ({1, 2, 3, 4, 5}, {2, 3, 4, 5, 6})


def lookup_category(category):
    """Return the Category for a member or display name, None if unknown"""
    try:
        return Category(category)
    except ValueError:
        return None


def count_faces(hand):
    """
    Count occurrences of each face value

    Args:
        hand: Sequence of die values (1-6)

    Returns:
        7-slot list indexed by face; slot 0 is unused and always 0
    """
    counts = [0] * 7
    for value in hand:
        counts[value] += 1
    return counts


def _faces_present(counts):
    return {face for face in range(1, 7) if counts[face] > 0}


def has_n_of_kind(counts, n):
    """True if at least n dice share a face"""
    return max(counts) >= n


def has_full_house(counts):
    """
    True if one face appears exactly 3 times and another exactly 2 times.

    Five of a kind does not count: no face appears exactly twice.
    """
    return 3 in counts and 2 in counts


def has_small_straight(counts):
    """True if the faces present contain 4 consecutive values"""
    present = _faces_present(counts)
    return any(run.issubset(present) for run in _SMALL_STRAIGHTS)


def has_large_straight(counts):
    """True if the faces present are exactly 5 consecutive values"""
    present = _faces_present(counts)
    return any(run == present for run in _LARGE_STRAIGHTS)


def has_yahtzee(counts):
    """True if all five dice show the same face"""
    return 5 in counts


def calculate_score(category, hand):
    """
    Calculate the score for a given category and hand

    Args:
        category: Category enum value or its display name
        hand: Sequence of five die values

    Returns:
        Integer score for the category (0 if it doesn't qualify)
    """
    counts = count_faces(hand)
    total = sum(hand)

    # Upper section - sum of matching dice
    if category == Category.ONES:
        return counts[1] * 1
    elif category == Category.TWOS:
        return counts[2] * 2
    elif category == Category.THREES:
        return counts[3] * 3
    elif category == Category.FOURS:
        return counts[4] * 4
    elif category == Category.FIVES:
        return counts[5] * 5
    elif category == Category.SIXES:
        return counts[6] * 6

    elif category == Category.THREE_OF_KIND:
        return total if has_n_of_kind(counts, 3) else 0

    elif category == Category.FOUR_OF_KIND:
        return total if has_n_of_kind(counts, 4) else 0

    elif category == Category.FULL_HOUSE:
        return FULL_HOUSE_POINTS if has_full_house(counts) else 0

    elif category == Category.SMALL_STRAIGHT:
        return SMALL_STRAIGHT_POINTS if has_small_straight(counts) else 0

    elif category == Category.LARGE_STRAIGHT:
        return LARGE_STRAIGHT_POINTS if has_large_straight(counts) else 0

    elif category == Category.YAHTZEE:
        return YAHTZEE_POINTS if has_yahtzee(counts) else 0

    elif category == Category.CHANCE:
        return total

    return 0


def potential_scores(hand, scorecard):
    """Score every still-open category for the hand, keyed by Category."""
    return {
        cat: calculate_score(cat, hand)
        for cat in Category
        if not scorecard.is_filled(cat)
    }
