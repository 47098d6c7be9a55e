"""Rebalancing suggestions against category target allocations.

Computes, for each category that has a target:
  - current share of the composite total (percent)
  - gap to target (percentage points, positive = under-allocated)
  - suggested adjustment in currency (positive = buy, negative = sell)

Categories without a target, and uncategorised holdings, are listed as
informational only.  Pure calculation; nothing stored is modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable

from assetflow.config.defaults import DECIMAL_PRECISION, REBALANCE_MINIMUM_ADJUSTMENT
from assetflow.engine.carry_forward import CompositeSnapshotView
from assetflow.engine.outcomes import MetricResult, Unavailable, UnavailableReason, engine_context
from assetflow.engine.records import Category

# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

class RebalancingAction(Enum):
    BUY = "buy"
    SELL = "sell"
    NO_ACTION = "no_action"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class RebalancingSuggestion:
    """Adjustment for one targeted category."""

    category: str
    name: str
    target_pct: Decimal
    current_value: Decimal
    current_pct: MetricResult
    delta_pct: MetricResult
    adjustment: MetricResult
    action: RebalancingAction

    @property
    def is_available(self) -> bool:
        return self.action is not RebalancingAction.UNAVAILABLE


@dataclass(frozen=True)
class CategoryHolding:
    """A category present in the view but without a target."""

    category: str
    current_value: Decimal
    current_pct: MetricResult


@dataclass
class RebalancingPlan:
    """Full rebalancing result."""

    total_value: Decimal = Decimal(0)
    suggestions: list[RebalancingSuggestion] = field(default_factory=list)
    """Targeted categories, largest imbalance first."""
    informational: list[CategoryHolding] = field(default_factory=list)
    """Untargeted categories, by identifier."""

    @property
    def target_sum(self) -> Decimal:
        return sum((s.target_pct for s in self.suggestions), Decimal(0))

    @property
    def actionable(self) -> list[RebalancingSuggestion]:
        return [
            s for s in self.suggestions
            if s.action in (RebalancingAction.BUY, RebalancingAction.SELL)
        ]


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

def _classify(adjustment: Decimal, minimum: Decimal) -> RebalancingAction:
    if abs(adjustment) < minimum:
        return RebalancingAction.NO_ACTION
    return RebalancingAction.BUY if adjustment > 0 else RebalancingAction.SELL


def _sort_key(s: RebalancingSuggestion) -> tuple[Decimal, str]:
    magnitude = Decimal(0) if isinstance(s.delta_pct, Unavailable) else abs(s.delta_pct)
    return (-magnitude, s.category)


def rebalance(
    view: CompositeSnapshotView,
    categories: Iterable[Category],
    minimum_adjustment: Decimal = Decimal(REBALANCE_MINIMUM_ADJUSTMENT),
    precision: int = DECIMAL_PRECISION,
) -> RebalancingPlan:
    """Compare the view's category allocation to *categories*' targets.

    Parameters:
        view: Composite view whose category totals are rebalanced.
        categories: Reference categories; those with ``target_allocation``
            set produce suggestions.
        minimum_adjustment: Adjustments smaller than this are NO_ACTION.

    Returns:
        RebalancingPlan.  When the view total is zero every suggestion
        carries ``Unavailable(DIVISION_BY_ZERO)``.

    Raises:
        ValueError: two targeted categories normalise to the same identifier.
    """
    grand = view.total
    targeted: dict[str, Category] = {}
    for cat in categories:
        if not cat.has_target:
            continue
        if cat.key in targeted:
            raise ValueError(
                f"categories {targeted[cat.key].name!r} and {cat.name!r} share the identifier {cat.key!r}"
            )
        targeted[cat.key] = cat

    suggestions: list[RebalancingSuggestion] = []
    with engine_context(precision):
        for key, cat in targeted.items():
            current = view.category_total(key)
            target = cat.target_allocation or Decimal(0)
            if grand == 0:
                gap = Unavailable(UnavailableReason.DIVISION_BY_ZERO)
                suggestions.append(RebalancingSuggestion(
                    category=key,
                    name=cat.name,
                    target_pct=target,
                    current_value=current,
                    current_pct=gap,
                    delta_pct=gap,
                    adjustment=gap,
                    action=RebalancingAction.UNAVAILABLE,
                ))
                continue

            current_pct = current / grand * 100
            delta_pct = target - current_pct
            # == delta_pct / 100 * grand, without the rounding of current_pct
            adjustment = target * grand / 100 - current
            suggestions.append(RebalancingSuggestion(
                category=key,
                name=cat.name,
                target_pct=target,
                current_value=current,
                current_pct=current_pct,
                delta_pct=delta_pct,
                adjustment=adjustment,
                action=_classify(adjustment, minimum_adjustment),
            ))

        informational: list[CategoryHolding] = []
        for key in sorted(view.category_totals):
            if key in targeted:
                continue
            value = view.category_totals[key]
            pct: MetricResult = (
                Unavailable(UnavailableReason.DIVISION_BY_ZERO) if grand == 0
                else value / grand * 100
            )
            informational.append(CategoryHolding(category=key, current_value=value, current_pct=pct))

    suggestions.sort(key=_sort_key)
    return RebalancingPlan(total_value=grand, suggestions=suggestions, informational=informational)
