import pytest

from delve.core.rng import RNG, pick_index, roll_between
from tests.helpers.fakes import ScriptedRNG


def test_rng_determinism_same_seed() -> None:
    rng_a = RNG(12345)
    rng_b = RNG(12345)

    ints_a = [rng_a.randint(1, 100) for _ in range(5)]
    ints_b = [rng_b.randint(1, 100) for _ in range(5)]
    floats_a = [rng_a.random() for _ in range(5)]
    floats_b = [rng_b.random() for _ in range(5)]
    choices_a = [rng_a.choice(["a", "b", "c"]) for _ in range(5)]
    choices_b = [rng_b.choice(["a", "b", "c"]) for _ in range(5)]

    assert ints_a == ints_b
    assert floats_a == floats_b
    assert choices_a == choices_b


def test_rng_different_seed() -> None:
    rng_a = RNG(11111)
    rng_b = RNG(22222)

    draws_a = [rng_a.randint(1, 100) for _ in range(5)]
    draws_b = [rng_b.randint(1, 100) for _ in range(5)]

    assert draws_a != draws_b


def test_choice_rejects_empty_sequence() -> None:
    with pytest.raises(ValueError):
        RNG(1).choice([])


def test_roll_between_is_inclusive_and_uses_one_draw() -> None:
    rng = ScriptedRNG([0.0, 0.999])

    assert roll_between(3, 7, rng) == 3
    assert roll_between(3, 7, rng) == 7
    assert rng.consumed == 2


def test_roll_between_skips_draw_for_empty_range() -> None:
    rng = ScriptedRNG([])

    assert roll_between(5, 5, rng) == 5
    assert roll_between(5, 2, rng) == 5
    assert rng.consumed == 0


def test_pick_index_stays_in_range() -> None:
    assert pick_index(4, ScriptedRNG([0.999999])) == 3
    assert pick_index(4, ScriptedRNG([0.0])) == 0
    with pytest.raises(ValueError):
        pick_index(0, ScriptedRNG([0.5]))
