from __future__ import annotations

import math
from typing import List

import pandas as pd

from census_scatter.metrics import get_metric


def format_value(value) -> str:
    """Renders a metric the way it appears in the source file (42830, 18.2, NaN)."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "NaN"
    if math.isnan(number):
        return "NaN"
    if number.is_integer():
        return str(int(number))
    return repr(number)


def tooltip_text(record, x_metric: str, y_metric: str) -> str:
    x = get_metric(x_metric)
    y = get_metric(y_metric)
    return (
        f"{record['state']}\n"
        f"{x.tooltip_name}: {format_value(record[x_metric])}{x.unit}\n"
        f"{y.tooltip_name}: {format_value(record[y_metric])}{y.unit}"
    )


def tooltip_texts(dataset: pd.DataFrame, x_metric: str, y_metric: str) -> List[str]:
    return [tooltip_text(row, x_metric, y_metric) for _, row in dataset.iterrows()]


def bind_tooltips(session) -> List[str]:
    """Regenerates tooltip text for the active metric pair and hands it to the renderer.

    Marker and label share one binding, so hovering either shows the same text.
    """
    texts = tooltip_texts(session.dataset, session.x_metric, session.y_metric)
    session.tooltips = texts
    session.renderer.bind_tooltips(texts)
    return texts
