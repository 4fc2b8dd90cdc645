from __future__ import annotations

import math
import random
from typing import Any, Iterable

from .models import Answer, Question


DECK_MIN = 10
DECK_MAX = 20


def clamp_int(value: Any, lo: int, hi: int, default: int) -> int:
    """Floor ``value`` into ``[lo, hi]``; ``default`` when it is not a number."""
    try:
        n = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(n):
        return default
    return max(lo, min(hi, math.floor(n)))


def _q(prompt: str, *answers: str) -> Question:
    return Question(
        prompt=prompt,
        answers=tuple(Answer(text=t, points=i) for i, t in enumerate(answers, start=1)),
    )


DEFAULT_QUESTIONS_RU: list[Question] = [
    _q("Назовите популярный фрукт", "яблоко", "банан", "апельсин", "виноград", "манго"),
    _q("Назовите вид транспорта", "автобус", "машина", "поезд", "самолет", "метро"),
    _q("Назовите школьный предмет", "математика", "русский язык", "история", "география", "физика"),
    _q("Назовите домашнее животное", "кот", "собака", "хомяк", "попугай", "рыбки"),
    _q("Назовите напиток", "чай", "кофе", "вода", "сок", "лимонад"),
    _q("Назовите профессию", "врач", "учитель", "повар", "инженер", "водитель"),
    _q("Назовите время года", "лето", "зима", "весна", "осень", "дождь"),
    _q("Назовите цвет", "красный", "синий", "зелёный", "чёрный", "белый"),
    _q("Назовите популярное блюдо", "пицца", "бургер", "пельмени", "суп", "салат"),
    _q("Назовите часть тела", "рука", "нога", "голова", "глаз", "сердце"),
    _q("Назовите предмет мебели", "стол", "стул", "кровать", "шкаф", "диван"),
    _q("Назовите бытовую технику", "холодильник", "телевизор", "пылесос", "микроволновка", "стиральная машина"),
    _q("Назовите вид спорта", "футбол", "баскетбол", "хоккей", "теннис", "плавание"),
    _q("Назовите город в России", "москва", "санкт-петербург", "казань", "новосибирск", "екатеринбург"),
    _q("Назовите музыкальный инструмент", "гитара", "пианино", "барабаны", "скрипка", "флейта"),
    _q("Назовите приложение в телефоне", "ютуб", "телеграм", "вконтакте", "инстаграм", "тик ток"),
    _q("Назовите школьную принадлежность", "тетрадь", "ручка", "карандаш", "линейка", "дневник"),
    _q("Назовите комнату в доме", "кухня", "спальня", "гостиная", "ванная", "коридор"),
    _q("Назовите праздник", "новый год", "день рождения", "8 марта", "23 февраля", "пасха"),
    _q("Назовите часть дома", "дверь", "окно", "стена", "крыша", "пол"),
    _q("Назовите животное из леса", "волк", "лиса", "медведь", "заяц", "лось"),
    _q("Назовите предмет в школе", "доска", "парта", "учебник", "мел", "портфель"),
    _q("Назовите популярный мессенджер", "телеграм", "ватсап", "вайбер", "дискорд", "сигнал"),
    _q("Назовите предмет на кухне", "ложка", "вилка", "тарелка", "нож", "кастрюля"),
    _q("Назовите сладость", "шоколад", "конфета", "печенье", "торт", "мороженое"),
]


class QuestionBank:
    """Read-only pool of questions that hands out shuffled decks."""

    def __init__(self, questions: Iterable[Question] | None = None, rng: random.Random | None = None):
        self._questions = tuple(DEFAULT_QUESTIONS_RU if questions is None else questions)
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._questions)

    def build_deck(self, count: Any) -> list[Question]:
        limit = clamp_int(count, DECK_MIN, DECK_MAX, DECK_MIN)
        deck = list(self._questions)
        self._rng.shuffle(deck)
        return deck[:limit]
