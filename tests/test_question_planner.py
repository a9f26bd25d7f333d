"""Tests for splitting an interview into HR/technical/behavioral parts."""

import math

import pytest

from orca.core.question_planner import plan_questions


@pytest.mark.parametrize("total", range(0, 31))
def test_counts_add_up_and_follow_rounding(total):
    plan = plan_questions(total)

    assert plan.total == total
    assert plan.hr_count + plan.technical_count + plan.behavioral_count == total
    assert plan.hr_count == math.ceil(total / 3)
    assert plan.technical_count == math.floor(total / 3)
    assert plan.behavioral_count >= 0


@pytest.mark.parametrize(
    "total, expected",
    [
        (5, (2, 1, 2)),
        (10, (4, 3, 3)),
        (15, (5, 5, 5)),
        (0, (0, 0, 0)),
    ],
)
def test_selectable_lengths(total, expected):
    plan = plan_questions(total)
    assert (plan.hr_count, plan.technical_count, plan.behavioral_count) == expected


def test_negative_total_is_rejected():
    with pytest.raises(ValueError):
        plan_questions(-1)
