"""Deterministic random helpers used across the game logic."""

from __future__ import annotations

from collections.abc import Iterable, MutableSequence, Sequence  # noqa: TC003
from random import Random
from typing import TypeVar

_T = TypeVar("_T")

VOWELS = "aeiou"
CONSONANTS = "bcdfghjklmnpqrstvwxzy"
ID_CHARS = "abcdef0123456789"
ID_LENGTH = 32


class RandomService:
    """Thin wrapper around :class:`random.Random` providing game utilities.

    Every bound is inclusive on both ends, matching how dice-like rolls are
    described throughout the rules.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._random = Random(seed)  # noqa: S311

    @property
    def seed(self) -> int | None:
        """Return the base seed for the service."""
        return self._seed

    def reseed(self, seed: int | None) -> None:
        """Reset the random generator to a new seed."""
        self._seed = seed
        self._random = Random(seed)  # noqa: S311

    def random_number(self, low: int = 1, high: int = 10) -> int:
        """Return an integer in ``[low, high]``."""
        if high < low:
            msg = f"Upper bound {high} is below lower bound {low}."
            raise ValueError(msg)
        return self._random.randint(low, high)

    def random_in_range(self, bounds: Sequence[int]) -> int:
        """Return an integer drawn from a ``(low, high)`` pair."""
        low, high = bounds
        return self.random_number(low, high)

    def choice(self, population: Sequence[_T]) -> _T:
        """Return a deterministic choice from *population*."""
        if not population:
            msg = "Cannot choose from an empty population."
            raise ValueError(msg)
        return population[self._random.randrange(len(population))]

    def pop_random(self, population: MutableSequence[_T]) -> _T:
        """Remove and return a random element of *population*."""
        if not population:
            msg = "Cannot pop from an empty population."
            raise ValueError(msg)
        return population.pop(self._random.randrange(len(population)))

    def shuffle(self, items: Iterable[_T]) -> tuple[_T, ...]:
        """Return a shuffled tuple of *items* using the service RNG."""
        mutable = list(items)
        self._random.shuffle(mutable)
        return tuple(mutable)

    def create_id(self) -> str:
        """Return a random hexadecimal identifier."""
        return "".join(self.choice(ID_CHARS) for _ in range(ID_LENGTH))

    def generate_name(self, min_length: int, max_length: int) -> str:
        """Return a pronounceable capitalised name.

        A consonant is always followed by a vowel; after a vowel either
        alphabet may follow.
        """
        length = self.random_number(min_length, max_length)
        letters = [self.choice(VOWELS if self.random_number() > 5 else CONSONANTS)]
        while len(letters) < length:
            if letters[-1] in CONSONANTS:
                letters.append(self.choice(VOWELS))
            else:
                alphabet = VOWELS if self.random_number() > 5 else CONSONANTS
                letters.append(self.choice(alphabet))
        return "".join(letters).capitalize()

    def generate_names(
        self,
        count: int,
        min_length: int,
        max_length: int,
        exclude: MutableSequence[str],
    ) -> list[str]:
        """Return *count* unique names, registering each one in *exclude*."""
        names: list[str] = []
        while len(names) < count:
            name = self.generate_name(min_length, max_length)
            if name in exclude:
                continue
            exclude.append(name)
            names.append(name)
        return names


__all__ = ["CONSONANTS", "ID_CHARS", "ID_LENGTH", "VOWELS", "RandomService"]
