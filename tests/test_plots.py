"""Smoke tests for visualization plot functions.

Each test verifies that the function returns a valid Plotly Figure
without raising exceptions.
"""

import numpy as np
import plotly.graph_objects as go
import pytest

from engine.evaluation import centerline_profile, evaluate_grid
from engine.routing import prepare_model
from visualization.plots import (
    create_centerline_figure,
    create_concentration_figure,
    create_risk_summary_figure,
)


@pytest.fixture
def chlorine_grid(one_kg_release, chlorine, neutral_wind):
    return evaluate_grid(one_kg_release, chlorine, neutral_wind, 200.0, 3000.0, receptor_height=0.0)


class TestConcentrationFigure:
    def test_returns_figure(self, chlorine_grid, neutral_wind):
        fig = create_concentration_figure(
            chlorine_grid, neutral_wind.wind_speed, neutral_wind.wind_direction
        )
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 2
        assert len(fig.data[0].x) == len(chlorine_grid)
        assert fig.layout.annotations

    def test_without_wind(self, chlorine_grid):
        fig = create_concentration_figure(chlorine_grid)
        assert not fig.layout.annotations

    def test_empty(self):
        fig = create_concentration_figure([])
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 0


class TestCenterlineFigure:
    def test_with_transition(self, one_kg_release, chlorine, neutral_wind):
        distances, conc = centerline_profile(one_kg_release, chlorine, neutral_wind, 5000.0, 50)
        model, _ = prepare_model(one_kg_release, chlorine, neutral_wind)
        fig = create_centerline_figure(distances, conc, model.transition_distance(5000.0))
        assert isinstance(fig, go.Figure)
        assert fig.layout.yaxis.type == "log"
        assert fig.layout.shapes

    def test_zero_concentrations_plotted(self):
        fig = create_centerline_figure(np.array([100.0, 200.0]), np.zeros(2))
        assert np.all(np.asarray(fig.data[0].y) > 0)

    def test_empty(self):
        fig = create_centerline_figure(np.array([]), np.array([]))
        assert len(fig.data) == 0


class TestRiskSummaryFigure:
    def test_counts_match(self, chlorine_grid):
        fig = create_risk_summary_figure(chlorine_grid)
        assert sum(fig.data[0].y) == len(chlorine_grid)

    def test_empty(self):
        assert isinstance(create_risk_summary_figure([]), go.Figure)
