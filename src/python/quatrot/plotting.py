"""
Plots of sampled rotation paths.

Figures are written to disk with the non-interactive Agg backend.
"""

import logging
import os

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for saving
import matplotlib.pyplot as plt
import pandas as pd

logger = logging.getLogger(__name__)

COLORS = {
    'x': '#2E86AB',
    'y': '#A23B72',
    'z': '#F18F01',
    'w': '#546E7A',
    'angle': '#C73E1D',
}


def plot_slerp(table: pd.DataFrame, output_path: str) -> None:
    """
    Plot a slerp table as produced by :func:`quatrot.cli.slerp_table`.

    The upper panel shows the four components against t, the lower panel the
    angle from the start rotation.

    Parameters
    ----------
    table : pd.DataFrame
        Columns t, x, y, z, w and angle_deg.
    output_path : str
        Image file to write; the format follows the extension.
    """
    missing = {'t', 'x', 'y', 'z', 'w', 'angle_deg'} - set(table.columns)
    if missing:
        raise ValueError(f"Slerp table is missing columns: {sorted(missing)}")

    directory = os.path.dirname(os.path.abspath(output_path))
    os.makedirs(directory, exist_ok=True)

    fig, (ax_comp, ax_angle) = plt.subplots(2, 1, figsize=(8, 7), sharex=True)

    for name in ('x', 'y', 'z', 'w'):
        ax_comp.plot(table['t'], table[name], marker='.', color=COLORS[name], label=name)
    ax_comp.set_ylabel('Component')
    ax_comp.set_title('Spherical Linear Interpolation')
    ax_comp.legend(loc='best')
    ax_comp.grid(True, alpha=0.3)

    ax_angle.plot(table['t'], table['angle_deg'], marker='.', color=COLORS['angle'])
    ax_angle.set_xlabel('t')
    ax_angle.set_ylabel('Angle from start [deg]')
    ax_angle.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    logger.info("Saved slerp plot: %s", output_path)
