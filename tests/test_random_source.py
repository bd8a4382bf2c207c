"""Tests for injectable random sources."""

import pytest

from semantic_graph.engine.random_source import (
    NumpyRandom,
    SequenceRandom,
    XorShiftRandom,
    random_vector,
    shuffled_indices,
)


def test_xorshift_is_deterministic_and_in_range():
    a = XorShiftRandom(1993)
    b = XorShiftRandom(1993)
    draws_a = [a.random() for _ in range(200)]
    draws_b = [b.random() for _ in range(200)]

    assert draws_a == draws_b
    assert all(0.0 <= v < 1.0 for v in draws_a)
    assert len(set(draws_a)) > 150


def test_xorshift_zero_seed_does_not_stall():
    source = XorShiftRandom(0)
    draws = {source.random() for _ in range(10)}
    assert len(draws) == 10


def test_different_seeds_differ():
    assert XorShiftRandom(1).random() != XorShiftRandom(2).random()


def test_numpy_random_seeded():
    assert [NumpyRandom(7).random() for _ in range(3)] == [NumpyRandom(7).random() for _ in range(3)]


def test_sequence_random_cycles():
    source = SequenceRandom([0.1, 0.5])
    assert [source.random() for _ in range(5)] == [0.1, 0.5, 0.1, 0.5, 0.1]


def test_sequence_random_rejects_bad_values():
    with pytest.raises(ValueError):
        SequenceRandom([])
    with pytest.raises(ValueError):
        SequenceRandom([1.0])


def test_shuffled_indices_is_permutation():
    order = shuffled_indices(XorShiftRandom(5), 20)
    assert sorted(order) == list(range(20))


def test_shuffled_indices_with_zero_draws_rotates_deterministically():
    # j is always 0, so each step swaps position i with position 0
    assert shuffled_indices(SequenceRandom([0.0]), 3) == [1, 2, 0]


def test_random_vector_length():
    vec = random_vector(SequenceRandom([0.25]), 4)
    assert vec.tolist() == [0.25, 0.25, 0.25, 0.25]
