from __future__ import annotations

import pytest

from nardis.shared.rng import CONSONANTS, ID_CHARS, ID_LENGTH, VOWELS, RandomService


def test_same_seed_produces_same_rolls() -> None:
    first = RandomService(seed=7)
    second = RandomService(seed=7)

    assert [first.random_number() for _ in range(20)] == [
        second.random_number() for _ in range(20)
    ]


def test_random_number_bounds_are_inclusive() -> None:
    rng = RandomService(seed=3)

    rolls = {rng.random_number(1, 3) for _ in range(200)}

    assert rolls == {1, 2, 3}


def test_random_number_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError, match="below lower bound"):
        RandomService().random_number(5, 1)


def test_create_id_is_hexadecimal() -> None:
    identifier = RandomService(seed=1).create_id()

    assert len(identifier) == ID_LENGTH
    assert set(identifier) <= set(ID_CHARS)


def test_generated_name_never_stacks_consonants() -> None:
    rng = RandomService(seed=11)

    for _ in range(50):
        name = rng.generate_name(4, 7).lower()
        assert 4 <= len(name) <= 7
        for current, following in zip(name, name[1:], strict=False):
            if current in CONSONANTS:
                assert following in VOWELS


def test_generate_names_respects_exclusions() -> None:
    rng = RandomService(seed=5)
    excluded: list[str] = []

    names = rng.generate_names(15, 3, 5, excluded)

    assert len(set(names)) == 15
    assert excluded == names


def test_pop_random_removes_the_element() -> None:
    rng = RandomService(seed=2)
    items = [1, 2, 3]

    popped = rng.pop_random(items)

    assert popped not in items
    assert len(items) == 2


def test_choice_rejects_empty_population() -> None:
    with pytest.raises(ValueError, match="empty population"):
        RandomService().choice([])
