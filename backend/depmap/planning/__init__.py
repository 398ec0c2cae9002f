from depmap.planning.criticality import (
    CriticalityRule,
    CriticalityRules,
    classify,
    get_criticality_rules,
    score,
)
from depmap.planning.scheduler import schedule_waves

__all__ = [
    "CriticalityRule",
    "CriticalityRules",
    "classify",
    "get_criticality_rules",
    "score",
    "schedule_waves",
]
