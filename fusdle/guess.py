"""
Guess evaluation against a puzzle answer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

MATCH_NONE = "none"
MATCH_EXACT = "exact"
MATCH_WRONG_ORDER = "wrong-order"

# Shorter guess words ("a", "of", ...) never count as partial matches.
MIN_MATCHED_WORD_LENGTH = 3

WRONG_ORDER_FEEDBACK = "So close! You have all the right words, but in the wrong order."


@dataclass
class GuessResult:
    is_correct: bool
    answer: Optional[str] = None
    partial_match_feedback: Optional[str] = None
    matched_word: Optional[str] = None
    match_type: str = MATCH_NONE
    has_correct_words_wrong_order: bool = False


def _normalize(text: str) -> str:
    return re.sub(r"\s+", "", text.lower())


def _words(text: str) -> list[str]:
    return text.lower().split()


def evaluate_guess(answer: str, guess: str) -> GuessResult:
    """
    Compare a guess with the answer, ignoring case and whitespace.

    Incorrect guesses get feedback when they hold every answer word in another
    order, or else when one of their words appears in the answer.
    """
    if _normalize(answer) == _normalize(guess):
        return GuessResult(is_correct=True, answer=answer)

    answer_words = _words(answer)
    guess_words = _words(guess)

    if (
        len(answer_words) > 1
        and len(guess_words) == len(answer_words)
        and sorted(guess_words) == sorted(answer_words)
    ):
        return GuessResult(
            is_correct=False,
            partial_match_feedback=WRONG_ORDER_FEEDBACK,
            match_type=MATCH_WRONG_ORDER,
            has_correct_words_wrong_order=True,
        )

    for word in guess_words:
        if len(word) >= MIN_MATCHED_WORD_LENGTH and word in answer_words:
            return GuessResult(
                is_correct=False,
                partial_match_feedback=(
                    f'You\'re on the right track! Your guess contains "{word}".'
                ),
                matched_word=word,
                match_type=MATCH_EXACT,
            )

    return GuessResult(is_correct=False)
