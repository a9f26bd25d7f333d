"""
Question planning for Orca.

Splits the selected interview length into the three interview parts.
HR questions take the rounded-up third, technical questions the rounded-down
third, and behavioral questions absorb the remainder.
"""

from orca.models.interview import QuestionPlan


def plan_questions(total: int) -> QuestionPlan:
    """
    Partition a total question count into HR/technical/behavioral counts.

    Args:
        total: Number of questions in the interview (>= 0)

    Returns:
        QuestionPlan whose counts add up to total

    Raises:
        ValueError: If total is negative
    """
    if total < 0:
        raise ValueError(f"Question count must be non-negative, got {total}")

    hr_count = -(-total // 3)
    technical_count = total // 3
    behavioral_count = total - hr_count - technical_count

    return QuestionPlan(
        total=total,
        hr_count=hr_count,
        technical_count=technical_count,
        behavioral_count=behavioral_count,
    )
