"""Dark theme styling for PVA-Sim figures.

Colors for the trajectory ensemble, the extinct replicates, the
threshold line and summary envelopes, plus helpers to build and save
themed figures.
"""

import matplotlib.pyplot as plt
import numpy as np

# ═══════════════════════════════════════════════════════════════════════
# COLOR PALETTE
# ═══════════════════════════════════════════════════════════════════════

DARK_BG = '#1a1a2e'
DARK_PANEL = '#16213e'
TEXT_COLOR = '#e0e0e0'
GRID_COLOR = '#2a2a4a'

TRAJECTORY_COLOR = '#48c9b0'   # teal: persisting replicates
EXTINCT_COLOR = '#e94560'      # crimson: replicates below threshold at the end
THRESHOLD_COLOR = '#f39c12'    # amber
MEDIAN_COLOR = '#e0e0e0'
ENVELOPE_COLOR = '#3498db'     # sky blue: quantile band


# ═══════════════════════════════════════════════════════════════════════
# THEME HELPERS
# ═══════════════════════════════════════════════════════════════════════

def style_axes(ax) -> None:
    """Dark panel, light labels, faint grid."""
    ax.set_facecolor(DARK_PANEL)
    ax.tick_params(colors=TEXT_COLOR)
    for text in (ax.xaxis.label, ax.yaxis.label, ax.title):
        text.set_color(TEXT_COLOR)
    for spine in ax.spines.values():
        spine.set_color(GRID_COLOR)
    ax.grid(True, color=GRID_COLOR, alpha=0.3, linewidth=0.5)


def themed_figure(nrows=1, ncols=1, figsize=(10, 6)):
    """Create (fig, axes) with the dark theme applied to every Axes."""
    fig, axes = plt.subplots(nrows, ncols, figsize=figsize)
    fig.patch.set_facecolor(DARK_BG)
    for ax in np.atleast_1d(axes).flat:
        style_axes(ax)
    return fig, axes


def themed_legend(ax, **kwargs):
    return ax.legend(facecolor=DARK_PANEL, edgecolor=GRID_COLOR,
                     labelcolor=TEXT_COLOR, **kwargs)


def save_figure(fig, save_path, dpi=150):
    """Save with tight layout on the dark background, then close."""
    fig.tight_layout()
    fig.savefig(save_path, dpi=dpi, facecolor=fig.get_facecolor(),
                edgecolor='none', bbox_inches='tight')
    plt.close(fig)
