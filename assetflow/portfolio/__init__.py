"""Portfolio-level reporting built on the engine.

Public API::

    from assetflow.portfolio import (
        PerformanceReport,
        PeriodMetrics,
        generate_performance_report,
        history_frame,
    )
"""

from assetflow.portfolio.performance import (
    GoalProgress,
    HistoryPoint,
    PerformanceReport,
    PeriodMetrics,
    RecentSnapshot,
    category_history_frame,
    generate_performance_report,
    history_frame,
)

__all__ = [
    "GoalProgress",
    "HistoryPoint",
    "PerformanceReport",
    "PeriodMetrics",
    "RecentSnapshot",
    "category_history_frame",
    "generate_performance_report",
    "history_frame",
]
