from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np
import pandas as pd

from census_scatter.metrics import (
    DEFAULT_X,
    DEFAULT_Y,
    X_METRICS,
    Y_METRICS,
    get_metric,
    panel_key,
    require_metric,
)
from census_scatter.queries import DatasetLoadError, load_dataset
from census_scatter.render import ChartRenderer
from census_scatter.scales import LinearScale, extent, zero_floored
from census_scatter.settings import Settings
from census_scatter.tooltips import bind_tooltips
from census_scatter.transitions import Transition

logger = logging.getLogger(__name__)

# Surface height is the viewport height divided by this.
HEIGHT_RATIO = 1.4

MARKER_RADIUS = 10.0
MARKER_OPACITY = 0.8
LABEL_OFFSET = 3.5


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


@dataclass(frozen=True)
class Margins:
    top: float = 50
    right: float = 110
    bottom: float = 50
    left: float = 150


MARGINS = Margins()


@dataclass
class ChartSession:
    """Everything one build of the chart owns; controller operations mutate it."""

    dataset: pd.DataFrame
    viewport: Viewport
    renderer: ChartRenderer
    x_scale: LinearScale
    y_scale: LinearScale
    x_metric: str = DEFAULT_X
    y_metric: str = DEFAULT_Y
    margins: Margins = MARGINS
    transition_ms: int = 1000
    positions: np.ndarray = field(default_factory=lambda: np.empty((2, 0)))
    tooltips: List[str] = field(default_factory=list)
    active_panel: Optional[str] = None
    axis_transitions: dict = field(default_factory=dict)
    marker_transition: Optional[Transition] = None
    marker_radius: float = MARKER_RADIUS
    marker_opacity: float = MARKER_OPACITY
    label_offset: float = LABEL_OFFSET

    @property
    def surface_size(self) -> Tuple[float, float]:
        return surface_size(self.viewport)

    @property
    def plot_size(self) -> Tuple[float, float]:
        return plot_size(self.viewport, self.margins)

    @property
    def label_positions(self) -> np.ndarray:
        cx, cy = self.positions
        return np.vstack([cx, cy + self.label_offset])

    def axis_title(self, axis: str) -> str:
        return get_metric(self.x_metric if axis == "x" else self.y_metric).axis_title

    def scale_for(self, axis: str) -> LinearScale:
        return self.x_scale if axis == "x" else self.y_scale

    def compute_positions(self) -> np.ndarray:
        cx = self.x_scale(self.dataset[self.x_metric].to_numpy(dtype=float))
        cy = self.y_scale(self.dataset[self.y_metric].to_numpy(dtype=float))
        return np.vstack([cx, cy])


# --------------------------------------------------
# Geometry
# --------------------------------------------------
def surface_size(viewport: Viewport) -> Tuple[float, float]:
    # No minimum clamp: a tiny viewport gives a degenerate or negative plot area.
    return float(viewport.width), float(viewport.height) / HEIGHT_RATIO


def plot_size(viewport: Viewport, margins: Margins = MARGINS) -> Tuple[float, float]:
    width, height = surface_size(viewport)
    return (
        width - margins.left - margins.right,
        height - margins.top - margins.bottom,
    )


def x_domain(dataset: pd.DataFrame, metric: str):
    return extent(dataset[metric])


def y_domain(dataset: pd.DataFrame, metric: str):
    return zero_floored(dataset[metric])


# --------------------------------------------------
# Build
# --------------------------------------------------
def build_chart(
    viewport: Viewport,
    renderer: ChartRenderer,
    settings: Optional[Settings] = None,
    loader: Optional[Callable[[Settings], pd.DataFrame]] = None,
    x_metric: str = DEFAULT_X,
    y_metric: str = DEFAULT_Y,
) -> Optional[ChartSession]:
    """
    Loads the dataset and draws the chart for ``viewport``.

    Returns the new session, or None when the dataset can't be loaded; the
    failure is logged and nothing is drawn.
    """
    settings = settings or Settings()
    loader = loader or load_dataset
    require_metric(x_metric, X_METRICS)
    require_metric(y_metric, Y_METRICS)

    try:
        dataset = loader(settings)
    except DatasetLoadError:
        logger.exception("Census dataset failed to load; chart not rendered")
        return None

    plot_w, plot_h = plot_size(viewport)
    session = ChartSession(
        dataset=dataset,
        viewport=viewport,
        renderer=renderer,
        x_scale=LinearScale(x_domain(dataset, x_metric), (0.0, plot_w)),
        y_scale=LinearScale(y_domain(dataset, y_metric), (plot_h, 0.0)),
        x_metric=x_metric,
        y_metric=y_metric,
        transition_ms=settings.transition_ms,
    )
    session.positions = session.compute_positions()

    renderer.build_surface(session)
    renderer.bind_markers(session)
    bind_tooltips(session)

    session.active_panel = panel_key(x_metric, y_metric)
    renderer.show_panel(session.active_panel)

    logger.info(
        "Built chart: %d records, surface %.0fx%.0f, %s vs %s",
        len(dataset), *session.surface_size, x_metric, y_metric,
    )
    return session
