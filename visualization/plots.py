"""
Visualization module for the chemical dispersion core.

Provides Plotly figures for reports: a plan-view concentration map of grid
estimates, a centerline profile, and a risk-tier summary.
"""

from typing import List, Optional, Sequence

import numpy as np
import plotly.graph_objects as go

from config import CONCENTRATION_UNITS
from models.estimate import ConcentrationEstimate
from models.risk import RiskTier

TIER_COLORS = {
    RiskTier.SAFE: "rgba(120,120,120,0.6)",
    RiskTier.DETECTABLE: "gold",
    RiskTier.NOTABLE_DISCOMFORT: "orange",
    RiskTier.DISABLING: "orangered",
    RiskTier.LIFE_THREATENING: "darkred",
}


def _empty_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(text=message, showarrow=False)
    fig.update_layout(template="plotly_dark")
    return fig


def _add_wind_arrow(fig: go.Figure, extent: float, wind_speed: float, wind_direction_deg: float):
    """Wind needle in the upper-left corner; plume-local x always points downwind."""
    cx, cy = -0.8 * extent, 0.8 * extent
    length = 0.12 * extent

    fig.add_annotation(
        x=cx + length, y=cy,
        ax=cx, ay=cy,
        xref="x", yref="y",
        axref="x", ayref="y",
        showarrow=True,
        arrowhead=3,
        arrowsize=1.5,
        arrowwidth=3,
        arrowcolor="deepskyblue",
    )
    fig.add_annotation(
        x=cx + length / 2, y=cy - 0.06 * extent,
        xref="x", yref="y",
        text=f"{wind_speed:.1f} m/s from {wind_direction_deg:.0f}°",
        showarrow=False,
        font=dict(size=9, color="deepskyblue"),
    )


def create_concentration_figure(
    estimates: Sequence[ConcentrationEstimate],
    wind_speed: Optional[float] = None,
    wind_direction_deg: Optional[float] = None,
    title: str = "Ground-level concentration",
) -> go.Figure:
    """Plan view of grid estimates in plume-local coordinates, coloured by log10 concentration."""
    if not estimates:
        return _empty_figure("No concentrations above the reporting threshold")

    xs = np.array([e.x for e in estimates])
    ys = np.array([e.y for e in estimates])
    conc = np.array([e.concentration for e in estimates])
    conc_display = np.log10(np.maximum(conc, 1e-3))
    tiers = [e.risk_tier.label for e in estimates]

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=xs,
            y=ys,
            mode="markers",
            marker=dict(
                size=6,
                symbol="square",
                color=conc_display,
                colorscale="Hot",
                reversescale=True,
                colorbar=dict(title=f"log10({CONCENTRATION_UNITS})"),
            ),
            customdata=list(zip(conc, tiers)),
            name="Concentration",
            hovertemplate=(
                "x: %{x:.0f}m<br>y: %{y:.0f}m<br>"
                f"C: %{{customdata[0]:.3g}} {CONCENTRATION_UNITS}<br>"
                "%{customdata[1]}<extra></extra>"
            ),
        )
    )
    fig.add_trace(
        go.Scatter(
            x=[0.0],
            y=[0.0],
            mode="markers",
            marker=dict(size=12, color="lime", symbol="diamond",
                        line=dict(width=1, color="black")),
            name="Source",
            hovertemplate="Source<extra></extra>",
        )
    )

    if wind_speed is not None and wind_direction_deg is not None:
        extent = float(max(np.max(np.abs(xs)), np.max(np.abs(ys)), 1.0))
        _add_wind_arrow(fig, extent, wind_speed, wind_direction_deg)

    fig.update_layout(
        title=title,
        height=600,
        template="plotly_dark",
        margin=dict(l=60, r=60, t=50, b=60),
    )
    fig.update_xaxes(title_text="Downwind (m)")
    fig.update_yaxes(title_text="Crosswind (m)", scaleanchor="x", scaleratio=1)

    return fig


def create_centerline_figure(
    distances: np.ndarray,
    concentrations: np.ndarray,
    transition_distance: Optional[float] = None,
    title: str = "Centerline concentration",
) -> go.Figure:
    """Log-scale centerline profile, with the heavy-gas regime transition marked when known."""
    distances = np.asarray(distances, dtype=float)
    concentrations = np.asarray(concentrations, dtype=float)
    if distances.size == 0:
        return _empty_figure("No centerline samples")

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=distances,
            y=np.maximum(concentrations, 1e-6),
            mode="lines+markers",
            line=dict(color="gold", width=2),
            marker=dict(size=4),
            name="Centerline",
            hovertemplate=f"x: %{{x:.0f}}m<br>C: %{{y:.3g}} {CONCENTRATION_UNITS}<extra></extra>",
        )
    )

    if transition_distance is not None:
        fig.add_vline(
            x=transition_distance,
            line=dict(color="deepskyblue", dash="dash"),
            annotation_text="Ri = 1",
            annotation_position="top right",
        )

    fig.update_layout(
        title=title,
        xaxis_title="Downwind distance (m)",
        yaxis_title=f"Concentration ({CONCENTRATION_UNITS})",
        yaxis_type="log",
        template="plotly_dark",
        height=400,
    )
    return fig


def create_risk_summary_figure(estimates: List[ConcentrationEstimate]) -> go.Figure:
    """Bar chart of how many estimates fall in each risk tier."""
    if not estimates:
        return _empty_figure("No estimates available")

    tiers = list(RiskTier)
    counts = [sum(1 for e in estimates if e.risk_tier == tier) for tier in tiers]

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=[tier.label for tier in tiers],
            y=counts,
            marker_color=[TIER_COLORS[tier] for tier in tiers],
            name="Risk tiers",
            hovertemplate="%{x}: %{y}<extra></extra>",
        )
    )
    fig.update_layout(
        title="Risk tier distribution",
        xaxis_title="Tier",
        yaxis_title="Points",
        template="plotly_dark",
        height=300,
    )
    return fig
