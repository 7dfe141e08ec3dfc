from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Tuple

import numpy as np
import plotly.graph_objects as go

from census_scatter.scales import LinearScale
from census_scatter.transitions import Transition

logger = logging.getLogger(__name__)

COLOR_MARKER = "#89bdd3"
COLOR_MARKER_EDGE = "#e3e3e3"
COLOR_LABEL = "#ffffff"
COLOR_TEXT = "#2c2f33"

# Plotly refuses figure sizes below this.
MIN_FIGURE_PX = 10


class ChartRenderer(Protocol):
    """What the chart builder and controller need from a drawing backend."""

    def build_surface(self, session) -> None: ...

    def bind_markers(self, session) -> None: ...

    def animate_axis(self, axis: str, transition: Transition) -> None: ...

    def animate_markers(self, transition: Transition) -> None: ...

    def bind_tooltips(self, texts: List[str]) -> None: ...

    def set_axis_title(self, axis: str, title: str) -> None: ...

    def show_panel(self, key: str) -> None: ...

    def hide_panel(self, key: str) -> None: ...


@dataclass
class _Axis:
    scale: LinearScale
    title: str = ""
    transition: Optional[Transition] = None

    def scale_at(self, now: Optional[float]) -> LinearScale:
        if self.transition is None:
            return self.scale
        d0, d1 = self.transition.value(now)
        return LinearScale((d0, d1), self.scale.range)


class PlotlyRenderer:
    """
    Draws the scatter plot as a Plotly figure in pixel coordinates.

    Scales map metric values to pixels; the axes here span the pixel range
    and carry tick labels computed from the scales, so the figure matches
    what the scales say regardless of Plotly's own autoranging.
    """

    def __init__(self, tick_count: int = 10):
        self.tick_count = tick_count
        self.surface: Tuple[float, float] = (0.0, 0.0)
        self.margins = None
        self.plot_size: Tuple[float, float] = (0.0, 0.0)
        self.axes = {}
        self.labels: List[str] = []
        self.positions = np.empty((2, 0))
        self.marker_transition: Optional[Transition] = None
        self.tooltips: List[str] = []
        self.visible_panel: Optional[str] = None
        self.marker_radius = 10.0
        self.marker_opacity = 0.8
        self.label_offset = 3.5

    # --------------------------------------------------
    # ChartRenderer
    # --------------------------------------------------
    def build_surface(self, session) -> None:
        self.surface = session.surface_size
        self.margins = session.margins
        self.plot_size = session.plot_size
        self.axes = {
            "x": _Axis(session.x_scale, session.axis_title("x")),
            "y": _Axis(session.y_scale, session.axis_title("y")),
        }
        self.marker_transition = None
        self.visible_panel = None

    def bind_markers(self, session) -> None:
        self.labels = session.dataset["abbr"].tolist()
        self.positions = np.array(session.positions, copy=True)
        self.marker_radius = session.marker_radius
        self.marker_opacity = session.marker_opacity
        self.label_offset = session.label_offset

    def animate_axis(self, axis: str, transition: Transition) -> None:
        self.axes[axis].transition = transition

    def animate_markers(self, transition: Transition) -> None:
        self.marker_transition = transition
        self.positions = transition.end.copy()

    def bind_tooltips(self, texts: List[str]) -> None:
        self.tooltips = list(texts)

    def set_axis_title(self, axis: str, title: str) -> None:
        self.axes[axis].title = title

    def show_panel(self, key: str) -> None:
        self.visible_panel = key

    def hide_panel(self, key: str) -> None:
        if self.visible_panel == key:
            self.visible_panel = None

    # --------------------------------------------------
    # Figure
    # --------------------------------------------------
    @property
    def animating(self) -> bool:
        pending = [self.marker_transition] + [a.transition for a in self.axes.values()]
        return any(t is not None for t in pending)

    def positions_at(self, now: Optional[float] = None) -> np.ndarray:
        if self.marker_transition is None:
            return self.positions
        return self.marker_transition.value(now)

    def _axis_layout(self, axis: str, now: Optional[float]) -> dict:
        ax = self.axes[axis]
        scale = ax.scale_at(now)
        values = scale.ticks(self.tick_count)
        plot_w, plot_h = self.plot_size
        return dict(
            title=dict(text=ax.title),
            range=[0, plot_w] if axis == "x" else [plot_h, 0],
            tickmode="array",
            tickvals=[float(scale(v)) for v in values],
            ticktext=scale.tick_labels(self.tick_count),
            showgrid=False,
            zeroline=False,
            showline=True,
            ticks="outside",
            fixedrange=True,
        )

    def figure(self, now: Optional[float] = None) -> go.Figure:
        cx, cy = self.positions_at(now)
        hover = [t.replace("\n", "<br>") for t in self.tooltips]

        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=cx,
            y=cy,
            mode="markers",
            name="states",
            marker=dict(
                size=self.marker_radius * 2,
                color=COLOR_MARKER,
                opacity=self.marker_opacity,
                line=dict(width=1, color=COLOR_MARKER_EDGE),
            ),
            hovertext=hover,
            hovertemplate="%{hovertext}<extra></extra>",
        ))
        fig.add_trace(go.Scatter(
            x=cx,
            y=cy + self.label_offset,
            mode="text",
            name="labels",
            text=self.labels,
            textfont=dict(color=COLOR_LABEL, size=10),
            hovertext=hover,
            hovertemplate="%{hovertext}<extra></extra>",
        ))

        surface_w, surface_h = self.surface
        m = self.margins
        fig.update_layout(
            template="plotly_white",
            width=max(int(surface_w), MIN_FIGURE_PX),
            height=max(int(surface_h), MIN_FIGURE_PX),
            margin=dict(l=m.left, r=m.right, t=m.top, b=m.bottom) if m else None,
            xaxis=self._axis_layout("x", now),
            yaxis=self._axis_layout("y", now),
            showlegend=False,
            hoverlabel=dict(bgcolor="#000000", font=dict(color="#ffffff")),
            font=dict(color=COLOR_TEXT),
        )
        return fig

    def finish(self) -> None:
        self.marker_transition = None
        for ax in self.axes.values():
            ax.transition = None

    def play(
        self,
        placeholder,
        frame_count: int = 24,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        key: str = "scatter",
    ) -> int:
        """Draws any pending transition frame by frame, then the resting chart.

        Returns the number of charts drawn. Streamlit stops the script on the
        next interaction, which abandons the loop; frames whose time has
        already passed are skipped when a later run picks the transition up.
        """
        drawn = 0
        if self.animating:
            pending = [self.marker_transition] + [a.transition for a in self.axes.values()]
            pending = [t for t in pending if t is not None]
            duration_ms = max(t.duration_ms for t in pending)
            if duration_ms > 0:
                frame_s = duration_ms / 1000.0 / frame_count
                start = min(t.started_at for t in pending)
                for i in range(1, frame_count + 1):
                    now = start + i * frame_s
                    if now < clock() - frame_s:
                        continue
                    placeholder.plotly_chart(self.figure(now), key=f"{key}-frame-{i}")
                    drawn += 1
                    sleep(frame_s)
            self.finish()
        placeholder.plotly_chart(self.figure(), key=key)
        logger.debug("Rendered chart (%d animation frames)", drawn)
        return drawn + 1
