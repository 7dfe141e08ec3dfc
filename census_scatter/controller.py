from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np
import pandas as pd

from census_scatter.chart import ChartSession, Viewport, build_chart, x_domain, y_domain
from census_scatter.metrics import X_METRICS, Y_METRICS, panel_key, require_metric
from census_scatter.render import ChartRenderer
from census_scatter.settings import Settings
from census_scatter.tooltips import bind_tooltips
from census_scatter.transitions import retarget

logger = logging.getLogger(__name__)


def _rescale_axis(session: ChartSession, axis: str, domain, now: Optional[float]) -> None:
    scale = session.scale_for(axis)
    old_domain = np.asarray(scale.domain, dtype=float)
    scale.domain = (float(domain[0]), float(domain[1]))

    axis_transition = retarget(
        session.axis_transitions.get(axis),
        old_domain,
        np.asarray(scale.domain, dtype=float),
        duration_ms=session.transition_ms,
        now=now,
    )
    session.axis_transitions[axis] = axis_transition
    session.renderer.animate_axis(axis, axis_transition)


def _move_markers(session: ChartSession, now: Optional[float]) -> None:
    previous = session.positions
    session.positions = session.compute_positions()
    session.marker_transition = retarget(
        session.marker_transition,
        previous,
        session.positions,
        duration_ms=session.transition_ms,
        now=now,
    )
    session.renderer.animate_markers(session.marker_transition)


def _swap_axis(session: ChartSession, axis: str, metric: str, now: Optional[float]) -> None:
    renderer = session.renderer
    renderer.hide_panel(session.active_panel)
    session.active_panel = None

    if axis == "x":
        session.x_metric = metric
        domain = x_domain(session.dataset, metric)
    else:
        session.y_metric = metric
        domain = y_domain(session.dataset, metric)

    _rescale_axis(session, axis, domain, now)
    _move_markers(session, now)
    bind_tooltips(session)

    renderer.set_axis_title(axis, session.axis_title(axis))
    session.active_panel = panel_key(session.x_metric, session.y_metric)
    renderer.show_panel(session.active_panel)


def select_x_metric(session: ChartSession, metric: str, now: Optional[float] = None) -> bool:
    """Switches the x axis to ``metric``. Returns False if it was already active."""
    require_metric(metric, X_METRICS)
    if metric == session.x_metric:
        return False
    logger.info("x axis: %s -> %s", session.x_metric, metric)
    _swap_axis(session, "x", metric, now)
    return True


def select_y_metric(session: ChartSession, metric: str, now: Optional[float] = None) -> bool:
    """Switches the y axis to ``metric``. Returns False if it was already active."""
    require_metric(metric, Y_METRICS)
    if metric == session.y_metric:
        return False
    logger.info("y axis: %s -> %s", session.y_metric, metric)
    _swap_axis(session, "y", metric, now)
    return True


def handle_resize(
    session: Optional[ChartSession],
    viewport: Viewport,
    renderer_factory: Callable[[], ChartRenderer],
    settings: Optional[Settings] = None,
    loader: Optional[Callable[[Settings], pd.DataFrame]] = None,
) -> Optional[ChartSession]:
    """Throws away ``session`` and builds a fresh chart for ``viewport``."""
    if session is not None:
        logger.info(
            "Viewport %sx%s -> %sx%s, rebuilding chart",
            session.viewport.width, session.viewport.height, viewport.width, viewport.height,
        )
    return build_chart(viewport, renderer_factory(), settings=settings, loader=loader)
