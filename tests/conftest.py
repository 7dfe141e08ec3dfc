"""Shared fixtures: a small census CSV, settings pointing at it, and a renderer
that records what the chart asked it to do."""

from __future__ import annotations

import pytest

from census_scatter.chart import Viewport, build_chart
from census_scatter.queries import load_census_csv
from census_scatter.settings import Settings

CSV_HEADER = "id,state,abbr,poverty,povertyMoe,age,income,healthcare,obesity\n"
CSV_ROWS = [
    "1,Alabama,AL,18.2,0.5,38.6,42830,13.9,32.4\n",
    "2,Alaska,AK,10.1,0.6,33.3,70761,15,28.4\n",
    "4,Arizona,AZ,17.8,0.3,36.9,50255,14.4,28.0\n",
    "5,Arkansas,AR,18.9,0.5,37.8,41371,16.3,33.1\n",
]


class RecordingRenderer:
    """Minimal ChartRenderer that logs calls instead of drawing."""

    def __init__(self):
        self.calls = []
        self.visible_panels = set()
        self.tooltips = []
        self.titles = {}

    def count(self, name):
        return sum(1 for call in self.calls if call[0] == name)

    def build_surface(self, session):
        self.calls.append(("build_surface", session.surface_size))

    def bind_markers(self, session):
        self.calls.append(("bind_markers", session.positions.copy()))

    def animate_axis(self, axis, transition):
        self.calls.append(("animate_axis", axis, transition))

    def animate_markers(self, transition):
        self.calls.append(("animate_markers", transition))

    def bind_tooltips(self, texts):
        self.calls.append(("bind_tooltips", list(texts)))
        self.tooltips = list(texts)

    def set_axis_title(self, axis, title):
        self.calls.append(("set_axis_title", axis, title))
        self.titles[axis] = title

    def show_panel(self, key):
        self.calls.append(("show_panel", key))
        self.visible_panels.add(key)

    def hide_panel(self, key):
        self.calls.append(("hide_panel", key))
        self.visible_panels.discard(key)


@pytest.fixture
def census_csv(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text(CSV_HEADER + "".join(CSV_ROWS))
    return path


@pytest.fixture
def settings(census_csv):
    return Settings(data_path=str(census_csv), transition_ms=1000)


@pytest.fixture
def viewport():
    return Viewport(width=1260, height=700)


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def session(viewport, renderer, settings):
    return build_chart(viewport, renderer, settings=settings,
                       loader=lambda s: load_census_csv(s.data_path))


@pytest.fixture
def renderer_factory():
    return RecordingRenderer
