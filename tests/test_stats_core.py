import itertools

import pytest

from fitlog.stats_core import (
    NO_CHANGE,
    StatsDelta,
    apply_deltas,
    compute_deltas,
    exercise_is_complete,
)


def _recount(flags):
    """Totals recomputed from scratch for a single exercise."""
    return sum(flags), int(exercise_is_complete(flags))


@pytest.mark.parametrize("others", [(), (True,), (False,), (True, True), (True, False)])
@pytest.mark.parametrize("prev,new", itertools.product([True, False], repeat=2))
def test_deltas_match_full_recount(others, prev, new):
    before = _recount((prev,) + others)
    after = _recount((new,) + others)

    delta = compute_deltas(prev, new, all(others))

    assert delta == StatsDelta(after[0] - before[0], after[1] - before[1])


@pytest.mark.parametrize("completed", [True, False])
@pytest.mark.parametrize("others_done", [True, False])
def test_no_toggle_is_no_change(completed, others_done):
    assert compute_deltas(completed, completed, others_done) == NO_CHANGE


def test_completing_last_set_completes_exercise():
    assert compute_deltas(False, True, True) == StatsDelta(1, 1)


def test_uncompleting_a_set_of_a_finished_exercise():
    assert compute_deltas(True, False, True) == StatsDelta(-1, -1)


def test_partial_exercise_only_moves_sets():
    assert compute_deltas(False, True, False) == StatsDelta(1, 0)
    assert compute_deltas(True, False, False) == StatsDelta(-1, 0)


def test_apply_deltas_floors_at_zero():
    assert apply_deltas(0, 0, StatsDelta(-1, -1)) == (0, 0)
    assert apply_deltas(None, None, StatsDelta(1, 0)) == (1, 0)
    assert apply_deltas(5, 2, StatsDelta(-1, -1)) == (4, 1)


def test_toggle_and_revert_is_identity():
    forward = compute_deltas(False, True, True)
    back = compute_deltas(True, False, True)
    assert apply_deltas(*apply_deltas(3, 1, forward), back) == (3, 1)


def test_exercise_is_complete():
    assert exercise_is_complete([True, True])
    assert not exercise_is_complete([True, False])
    assert not exercise_is_complete([])
