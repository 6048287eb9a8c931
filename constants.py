"""
Constants for the Expert Elicitation Plotter.

Centralises the default distributions, shape-parameter tuning, named
record-format columns, the baseline/treatment plot palette, and export
settings.  Everything here is process-wide immutable configuration,
never user state.
"""

from .data_model import Distribution

# ── Default distributions (used wherever a sparse field is unset) ────────
# Baseline is wider/higher than treatment: no intervention loses more.
DEFAULT_BASELINE = Distribution(min=0, max=30, mode=15, confidence=100)
DEFAULT_TREATMENT = Distribution(min=0, max=20, mode=10, confidence=100)

# ── Shape-parameter mapping ──────────────────────────────────────────────
# kappa = 4 + (confidence / 100) * CONCENTRATION_K
CONCENTRATION_K = 50.0
KAPPA_FLOOR = 4.0
MODE_CLAMP = (0.01, 0.99)

# ── Density sampling ─────────────────────────────────────────────────────
DENSITY_SAMPLE_COUNT = 101
X_EPSILON = 1e-6

# ── Legal value ranges ───────────────────────────────────────────────────
VALUE_RANGE = (0.0, 100.0)
CONFIDENCE_RANGE = (1.0, 100.0)

# ── Distribution identifiers ─────────────────────────────────────────────
BASELINE = "baseline"
TREATMENT = "treatment"
WHICH_OPTIONS = (BASELINE, TREATMENT)

FIELD_MIN = "min"
FIELD_MAX = "max"
FIELD_MODE = "mode"
FIELD_CONFIDENCE = "confidence"
# Record-format order of the four distribution fields
DIST_FIELDS = (FIELD_MIN, FIELD_MAX, FIELD_MODE, FIELD_CONFIDENCE)
# Fields taking part in ordering and dominance constraints
RANGE_FIELDS = (FIELD_MIN, FIELD_MODE, FIELD_MAX)

# ── Record-format column names (order is part of the format) ────────────
COL_SCENARIO_ID = "scenario_id"
COL_SCENARIO_GROUP = "scenario_group"
COL_COMMENT = "comment"

DIST_COLUMNS = tuple(
    f"{which}_{fld}" for which in WHICH_OPTIONS for fld in DIST_FIELDS
)
REQUIRED_COLUMNS = (COL_SCENARIO_ID, COL_SCENARIO_GROUP) + DIST_COLUMNS
RESERVED_COLUMNS = frozenset(
    ("id", "group", COL_SCENARIO_ID, COL_SCENARIO_GROUP, COL_COMMENT)
    + DIST_COLUMNS
)

# Case-insensitive substring that marks the yield attribute column
YIELD_MARKER = "yield"

# Two-character escape written in place of line breaks inside comments
COMMENT_NEWLINE_ESCAPE = "\\n"

# ── Plot palette ─────────────────────────────────────────────────────────
PLOT_PALETTE = {
    'baseline':        '#2563EB',   # blue
    'baseline_faded':  '#93C5FD',
    'treatment':       '#16A34A',   # green
    'treatment_faded': '#86EFAC',
    'mode_marker':     '#1F2937',
    'grid':            '#cccccc',
    'no_data':         '#666666',
}

BACKGROUND_ALPHA = 0.35
CURVE_FILL_ALPHA = 0.18

# ── Export settings ──────────────────────────────────────────────────────
EXPORT_DPI = 300
EXPORT_WIDTH_INCHES = 6.0
EXPORT_TEXT_COLOR = '#333333'
EXPORT_BG_COLOR = '#ffffff'
DEFAULT_SESSION_FILENAME = "elicitation_results.csv"
