from __future__ import annotations

from .models import Question


# Letters folded onto their canonical spelling before comparison.
_FOLD = str.maketrans({"ё": "е"})


def normalize(text: str | None) -> str:
    return (text or "").lower().strip().translate(_FOLD)


def score_answer(question: Question, text: str | None) -> int:
    """Points of the first keyed answer equal to ``text`` after normalizing, else 0."""
    needle = normalize(text)
    for answer in question.answers:
        if normalize(answer.text) == needle:
            return answer.points
    return 0
