from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


class UnknownMetricError(ValueError):
    """Raised when an axis selection names a metric outside the table."""


@dataclass(frozen=True)
class Metric:
    key: str
    axis_title: str
    tooltip_name: str
    unit: str = ""


# ==========================================================
# Metric table (single source of truth for labels and units)
# ==========================================================

METRICS: Dict[str, Metric] = {
    "poverty": Metric("poverty", "In Poverty (%)", "Poverty", "%"),
    "age": Metric("age", "Age (Median)", "Age"),
    "income": Metric("income", "Household Income (Median)", "Household Income"),
    "obesity": Metric("obesity", "Obese (%)", "Obesity", "%"),
    "healthcare": Metric("healthcare", "Lacks Healthcare (%)", "Healthcare", "%"),
}

X_METRICS: Tuple[str, ...] = ("poverty", "age", "income")
Y_METRICS: Tuple[str, ...] = ("obesity", "healthcare")

DEFAULT_X = "poverty"
DEFAULT_Y = "obesity"

NUMERIC_COLUMNS: Tuple[str, ...] = ("poverty", "age", "income", "healthcare", "obesity")
REQUIRED_COLUMNS: Tuple[str, ...] = ("state", "abbr") + NUMERIC_COLUMNS


# ==========================================================
# Info panels, keyed "<x-metric>-<y-metric>"
# ==========================================================

INFO_PANELS: Dict[str, Dict[str, str]] = {
  "poverty-obesity": {
    "title": "Poverty & Obesity",
    "body": "States with a larger share of residents below the poverty line "
            "tend to report higher adult obesity rates.",
  },
  "age-obesity": {
    "title": "Age & Obesity",
    "body": "Median age varies only a few years between states and shows "
            "little relationship with obesity rates.",
  },
  "income-obesity": {
    "title": "Household Income & Obesity",
    "body": "Higher median household income generally accompanies lower "
            "obesity rates.",
  },
  "poverty-healthcare": {
    "title": "Poverty & Healthcare",
    "body": "The share of residents without healthcare coverage rises with "
            "the poverty rate.",
  },
  "age-healthcare": {
    "title": "Age & Healthcare",
    "body": "Older states tend to have fewer uninsured residents, in part "
            "because of Medicare eligibility.",
  },
  "income-healthcare": {
    "title": "Household Income & Healthcare",
    "body": "Wealthier states report a smaller uninsured population.",
  },
}


def get_metric(key: str) -> Metric:
    try:
        return METRICS[key]
    except KeyError:
        raise UnknownMetricError(f"Unknown metric: {key!r}") from None


def require_metric(key: str, allowed: Tuple[str, ...]) -> Metric:
    """Looks up ``key`` and checks it is selectable on the given axis."""
    if key not in allowed:
        raise UnknownMetricError(
            f"Metric {key!r} is not selectable here (expected one of {', '.join(allowed)})"
        )
    return get_metric(key)


def panel_key(x_metric: str, y_metric: str) -> str:
    return f"{x_metric}-{y_metric}"
