#!/usr/bin/env python3
"""
Reference Scenario Report.

Runs the reference scenarios through the dispersion engine and prints the
receptor concentrations, risk tiers, centerline maximum, grid summary and any
diagnostics.  Optionally writes the Plotly figures to HTML.

Usage:
    python experiments/run_reference_scenarios.py
    python experiments/run_reference_scenarios.py --scenario B --grid-spacing 50
    python experiments/run_reference_scenarios.py --html-dir reports/ -v
"""

import sys
import os
import argparse
import logging

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import CONCENTRATION_UNITS, CENTERLINE_MAX_DISTANCE_M, RECEPTOR_HEIGHT_M
from engine.evaluation import (
    centerline_profile,
    evaluate_grid,
    evaluate_receptors,
    max_concentration_along_centerline,
    summarize_estimates,
)
from engine.routing import prepare_model
from models.estimate import ModelKind
from models.risk import RiskTier
from validation.scenarios import SCENARIOS
from visualization.plots import (
    create_centerline_figure,
    create_concentration_figure,
    create_risk_summary_figure,
)

logger = logging.getLogger(__name__)


def run_scenario(
    key: str,
    grid_spacing: float,
    max_distance: float,
    receptor_height: float = RECEPTOR_HEIGHT_M,
    html_dir=None,
) -> dict:
    """Evaluate one reference scenario, print its report and return the raw results."""
    sc = SCENARIOS[key]()
    release, chemical, weather = sc["release"], sc["chemical"], sc["weather"]

    print(f"\n{'='*70}")
    print(f"Scenario {key}: {sc['description']}")
    print(f"{'='*70}")

    model, notes = prepare_model(release, chemical, weather)
    print(f"  Model: {model.kind.value}, stability {model.stability_class.value}, "
          f"Q = {model.release_rate:.3g} kg/s")

    transition = None
    if model.kind == ModelKind.HEAVY_GAS:
        transition = model.transition_distance(CENTERLINE_MAX_DISTANCE_M)
        if transition is None:
            print("  Richardson number does not cross 1 within the centerline range")
        else:
            print(f"  Gravity -> passive transition at {transition:.0f} m")

    receptors = evaluate_receptors(release, chemical, weather, sc["receptors"])
    print(f"\n  {'Receptor':<10} {'Conc (' + CONCENTRATION_UNITS + ')':>16} "
          f"{'Regime':>20} {'Tier':>20}")
    print(f"  {'-'*10} {'-'*16} {'-'*20} {'-'*20}")
    for est in receptors:
        print(f"  {est.name or '':<10} {est.concentration:>16.4g} "
              f"{est.regime.value:>20} {est.risk_tier.label:>20}")

    peak_x, peak_c = max_concentration_along_centerline(release, chemical, weather)
    print(f"\n  Centerline maximum: {peak_c:.4g} {CONCENTRATION_UNITS} at {peak_x:.0f} m")

    grid = evaluate_grid(
        release, chemical, weather, grid_spacing, max_distance,
        receptor_height=receptor_height,
    )
    summary = summarize_estimates(grid)
    print(f"  Grid: {summary['count']} points above threshold, "
          f"max {summary['max_concentration']:.4g} {CONCENTRATION_UNITS}")
    for tier in reversed(list(RiskTier)):
        if tier == RiskTier.SAFE:
            continue
        print(f"    at or above {tier.label:<20} {summary['at_or_above'][tier]:>8}")

    for note in notes:
        print(f"  [{note.code}] {note.message}")

    if html_dir:
        os.makedirs(html_dir, exist_ok=True)
        distances, concentrations = centerline_profile(release, chemical, weather)
        figures = {
            "grid": create_concentration_figure(
                grid, weather.wind_speed, weather.wind_direction,
                title=f"Scenario {key}: ground-level concentration",
            ),
            "centerline": create_centerline_figure(
                distances, concentrations, transition,
                title=f"Scenario {key}: centerline concentration",
            ),
            "risk": create_risk_summary_figure(grid),
        }
        for name, fig in figures.items():
            path = os.path.join(html_dir, f"scenario_{key.lower()}_{name}.html")
            fig.write_html(path)
            logger.info("Wrote %s", path)

    return {
        "receptors": receptors,
        "centerline_max": (peak_x, peak_c),
        "grid_summary": summary,
        "transition_distance": transition,
        "diagnostics": notes,
    }


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Reference Scenario Report")
    parser.add_argument("--scenario", choices=sorted(SCENARIOS), action="append",
                        help="Scenario to run (repeatable; default all)")
    parser.add_argument("--grid-spacing", type=float, default=100.0, help="Grid spacing (m)")
    parser.add_argument("--max-distance", type=float, default=5000.0, help="Grid radius (m)")
    parser.add_argument("--receptor-height", type=float, default=RECEPTOR_HEIGHT_M,
                        help="Grid receptor height (m)")
    parser.add_argument("--html-dir", default=None, help="Write Plotly figures to this directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    keys = args.scenario or sorted(SCENARIOS)
    print("Reference Scenario Report")
    print(f"Grid spacing: {args.grid_spacing}m, Radius: {args.max_distance}m")

    try:
        for key in keys:
            run_scenario(key, args.grid_spacing, args.max_distance,
                         args.receptor_height, args.html_dir)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(f"\nTotal: {len(keys)} scenario(s) completed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
