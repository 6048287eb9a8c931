"""
Export utilities for the Expert Elicitation Plotter.

Writes rendered density charts to PNG at a fixed width.  The figure's
size and face colour are restored afterwards with try/finally, so a
figure shown on screen is left as it was.
"""

import os
from typing import Dict, List

from matplotlib.figure import Figure

from .constants import EXPORT_BG_COLOR, EXPORT_DPI, EXPORT_WIDTH_INCHES


def safe_filename(name: str) -> str:
    """Reduce *name* to characters that are safe in a file name."""
    return "".join(
        c if c.isalnum() or c in '-_ ' else '_'
        for c in name
    ).strip().replace(' ', '_') or "chart"


def export_png(
    fig: Figure,
    filepath: str,
    *,
    dpi: int = EXPORT_DPI,
    width_inches: float = EXPORT_WIDTH_INCHES,
) -> None:
    """Export figure as PNG on a white background.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
    filepath : str
        Output file path (should end with ``.png``).
    dpi : int
        Export resolution.
    width_inches : float
        Figure width in inches; height is scaled to keep the aspect.
    """
    current_w = fig.get_figwidth()
    current_h = fig.get_figheight()
    facecolor = fig.get_facecolor()
    try:
        scale = width_inches / current_w if current_w > 0 else 1.0
        fig.set_size_inches(width_inches, current_h * scale)
        fig.set_facecolor(EXPORT_BG_COLOR)
        fig.savefig(
            filepath,
            dpi=dpi,
            bbox_inches='tight',
            facecolor=fig.get_facecolor(),
            edgecolor='none',
            pad_inches=0.1,
        )
    finally:
        fig.set_size_inches(current_w, current_h)
        fig.set_facecolor(facecolor)


def export_all_charts(
    figures: Dict[str, Figure],
    output_dir: str,
    *,
    dpi: int = EXPORT_DPI,
    width_inches: float = EXPORT_WIDTH_INCHES,
) -> List[str]:
    """Export ``{filename_stem: Figure}`` as PNGs into *output_dir*.

    Returns the paths written, in *figures* order.
    """
    os.makedirs(output_dir, exist_ok=True)
    paths = []
    for name, fig in figures.items():
        filepath = os.path.join(output_dir, f"{safe_filename(name)}.png")
        export_png(fig, filepath, dpi=dpi, width_inches=width_inches)
        paths.append(filepath)
    return paths
