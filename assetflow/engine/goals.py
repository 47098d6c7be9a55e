"""Progress toward a financial goal amount."""

from __future__ import annotations

from decimal import Decimal


def achievement_rate(total_value: Decimal, goal: Decimal | None) -> Decimal:
    """Percent of *goal* reached (can exceed 100); 0 when no positive goal is set."""
    if goal is None or goal <= 0:
        return Decimal(0)
    return total_value / goal * 100


def distance_to_goal(total_value: Decimal, goal: Decimal | None) -> Decimal:
    """Amount still needed; negative once the goal is exceeded, 0 with no goal."""
    if goal is None:
        return Decimal(0)
    return goal - total_value


def is_goal_reached(total_value: Decimal, goal: Decimal | None) -> bool:
    if goal is None:
        return False
    return total_value >= goal
