"""Projection figures for PVA-Sim.

Every function:
  - Accepts a ProjectionResult (or a quasi-extinction curve DataFrame)
  - Returns a matplotlib Figure
  - Has an optional ``save_path`` parameter (saves PNG when given)

matplotlib backend is forced to Agg (no display) on import.
"""

from __future__ import annotations

import matplotlib
matplotlib.use('Agg')

from typing import TYPE_CHECKING, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from pva_sim.analysis import summarize_trajectories
from pva_sim.viz.style import (
    ENVELOPE_COLOR,
    EXTINCT_COLOR,
    MEDIAN_COLOR,
    THRESHOLD_COLOR,
    TRAJECTORY_COLOR,
    save_figure,
    themed_figure,
    themed_legend,
)

if TYPE_CHECKING:
    from pva_sim.types import ProjectionResult


# ═══════════════════════════════════════════════════════════════════════
# 1. TRAJECTORY ENSEMBLE
# ═══════════════════════════════════════════════════════════════════════

def plot_trajectories(
    result: 'ProjectionResult',
    threshold: Optional[float] = None,
    max_replicates: int = 100,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Spaghetti plot of replicate trajectories with a 5–95% envelope.

    Replicates ending below ``threshold`` are drawn in the extinct color.

    Args:
        result: ProjectionResult.
        threshold: Quasi-extinction threshold to draw; defaults to the
            config's threshold when the result carries its config.
        max_replicates: Draw at most this many individual trajectories.
        save_path: Optional path to save the figure.
    """
    if threshold is None and result.config is not None:
        threshold = result.config.extinction.threshold

    matrix = result.population_matrix()
    years = np.arange(1, result.year_count + 1)
    fig, ax = themed_figure()

    for row in matrix[:max_replicates]:
        below = threshold is not None and row[-1] < threshold
        ax.plot(years, row, linewidth=0.7, alpha=0.35,
                color=EXTINCT_COLOR if below else TRAJECTORY_COLOR)

    summary = summarize_trajectories(result)
    ax.fill_between(years, summary['q5'], summary['q95'],
                    color=ENVELOPE_COLOR, alpha=0.2, label='5–95% envelope')
    ax.plot(years, summary['q50'], color=MEDIAN_COLOR, linewidth=2.0,
            label='Median')
    if threshold is not None:
        ax.axhline(threshold, color=THRESHOLD_COLOR, linestyle='--',
                   linewidth=1.5, label=f'Threshold = {threshold:g}')

    ax.set_xlabel('Year', fontsize=12)
    ax.set_ylabel('Population size', fontsize=12)
    ax.set_title(f'Projected trajectories ({result.replicate_count} replicates)',
                 fontsize=14, fontweight='bold')
    ax.set_xlim(1, max(result.year_count, 2))
    ax.set_ylim(bottom=0)
    themed_legend(ax, fontsize=10)

    if save_path:
        save_figure(fig, save_path)
    return fig


# ═══════════════════════════════════════════════════════════════════════
# 2. FINAL POPULATION DISTRIBUTION
# ═══════════════════════════════════════════════════════════════════════

def plot_final_population_histogram(
    result: 'ProjectionResult',
    threshold: Optional[float] = None,
    bins: int = 40,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Histogram of final-year population sizes."""
    final = result.final_population()
    fig, ax = themed_figure()
    ax.hist(final, bins=bins, color=TRAJECTORY_COLOR, alpha=0.8)
    if threshold is not None:
        ax.axvline(threshold, color=THRESHOLD_COLOR, linestyle='--',
                   linewidth=1.5, label=f'Threshold = {threshold:g}')
        themed_legend(ax, fontsize=10)
    ax.set_xlabel(f'Population size in year {result.year_count}', fontsize=12)
    ax.set_ylabel('Replicates', fontsize=12)
    ax.set_title('Final population size', fontsize=14, fontweight='bold')

    if save_path:
        save_figure(fig, save_path)
    return fig


# ═══════════════════════════════════════════════════════════════════════
# 3. QUASI-EXTINCTION RISK CURVE
# ═══════════════════════════════════════════════════════════════════════

def plot_quasi_extinction_curve(
    curve: pd.DataFrame,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Probability of ending below each threshold (from quasi_extinction_curve)."""
    fig, ax = themed_figure()
    ax.step(curve['threshold'], curve['probability'], where='post',
            color=EXTINCT_COLOR, linewidth=2.0)
    ax.set_xlabel('Quasi-extinction threshold', fontsize=12)
    ax.set_ylabel('Probability', fontsize=12)
    ax.set_title('Quasi-extinction risk', fontsize=14, fontweight='bold')
    ax.set_ylim(-0.02, 1.02)

    if save_path:
        save_figure(fig, save_path)
    return fig
