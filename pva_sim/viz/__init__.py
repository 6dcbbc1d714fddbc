"""PVA-Sim visualization.

Modules:
  - style: Dark theme colours and helpers
  - trajectories: Trajectory ensemble, final-size histogram, risk curve
"""

from pva_sim.viz.style import (  # noqa: F401
    DARK_BG,
    DARK_PANEL,
    ENVELOPE_COLOR,
    EXTINCT_COLOR,
    GRID_COLOR,
    MEDIAN_COLOR,
    TEXT_COLOR,
    THRESHOLD_COLOR,
    TRAJECTORY_COLOR,
    save_figure,
    style_axes,
    themed_figure,
)

from pva_sim.viz.trajectories import (  # noqa: F401
    plot_final_population_histogram,
    plot_quasi_extinction_curve,
    plot_trajectories,
)
