"""
Baseline/treatment density chart for the Expert Elicitation Plotter.

Draws the selected scenario's baseline (blue) and treatment (green)
probability density curves on a 0-100 % loss axis, with dashed markers
at each most-likely value.  Other scenarios from the same group are
drawn as faded background curves for comparison.
"""

import numpy as np
from matplotlib.figure import Figure

from .beta_density import distribution_density
from .constants import (
    BACKGROUND_ALPHA, CURVE_FILL_ALPHA, EXPORT_TEXT_COLOR, PLOT_PALETTE,
    VALUE_RANGE,
)
from .data_model import Session
from .session_ops import expected_yields
from .sparse_model import realize_scenario


def render_scenario_density(
    fig: Figure,
    session: Session,
    scenario_id: str,
    *,
    show_group: bool = True,
    for_export: bool = False,
) -> None:
    """Render density curves for one scenario on *fig*.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        Figure to draw on (will be cleared).
    session : Session
        Current session.
    scenario_id : str
        Scenario whose curves are highlighted.
    show_group : bool
        Draw the other scenarios of the same group as faded curves.
    for_export : bool
        If ``True``, use the export text colour for annotations.
    """
    fig.clf()
    pal = PLOT_PALETTE
    scenario = session.get_scenario(scenario_id)
    ax = fig.add_subplot(111)

    # ── Background curves (rest of the group) ────────────────────────
    if show_group:
        for other in session.scenarios:
            if other.id == scenario_id or other.group != scenario.group:
                continue
            realized = realize_scenario(session.distribution_for(other.id))
            for which, colour in (('baseline', pal['baseline_faded']),
                                  ('treatment', pal['treatment_faded'])):
                x, y = distribution_density(getattr(realized, which))
                ax.plot(x, y, color=colour, linewidth=0.8,
                        alpha=BACKGROUND_ALPHA, zorder=2)

    # ── Selected scenario ────────────────────────────────────────────
    realized = realize_scenario(session.distribution_for(scenario_id))
    y_peak = 0.0
    for which, label in (('baseline', 'Baseline'), ('treatment', 'Treatment')):
        dist = getattr(realized, which)
        x, y = distribution_density(dist)
        colour = pal[which]
        ax.plot(x, y, color=colour, linewidth=2.0, label=label, zorder=4)
        ax.fill_between(x, y, color=colour, alpha=CURVE_FILL_ALPHA, zorder=3)
        ax.axvline(dist.mode, color=colour, linewidth=1.0,
                   linestyle='--', zorder=5)
        if y.size:
            y_peak = max(y_peak, float(np.max(y)))

    if y_peak == 0.0:
        ax.text(0.5, 0.5, 'Zero-width range: no density to show',
                transform=ax.transAxes, ha='center', va='center',
                color=pal['no_data'])

    # ── Yield annotation ─────────────────────────────────────────────
    yields = expected_yields(session, scenario_id)
    if yields is not None:
        text_color = EXPORT_TEXT_COLOR if for_export else pal['mode_marker']
        ax.text(
            0.98, 0.95,
            f"{session.yield_column}\n"
            f"Baseline: {yields['baseline']:.2f}\n"
            f"Treatment: {yields['treatment']:.2f}",
            transform=ax.transAxes, ha='right', va='top',
            fontsize=6.5, family='monospace', color=text_color,
            bbox=dict(boxstyle='round,pad=0.4', facecolor='#ffffff',
                      edgecolor='#999999', alpha=0.9),
        )

    # ── Labels ───────────────────────────────────────────────────────
    ax.set_xlim(*VALUE_RANGE)
    ax.set_ylim(bottom=0.0)
    ax.set_xlabel("Loss (%)", fontsize=8)
    ax.set_ylabel("Probability density", fontsize=8)
    ax.set_title(f"{scenario.id} ({scenario.group})",
                 fontsize=10, fontweight='bold')
    ax.legend(fontsize=6, framealpha=0.9, loc='upper left')
    ax.grid(axis='y', linewidth=0.4, alpha=0.5, color=pal['grid'])

    fig.tight_layout(pad=1.5)
