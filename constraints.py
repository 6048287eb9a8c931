"""
Constraint enforcement for baseline/treatment edits.

Every edit is a pure transition ``(pair, edit) -> pair``.  Two
invariants hold on the realized values after each transition:

- ordering inside each distribution: ``min <= mode <= max``, all within
  ``VALUE_RANGE`` and ``confidence`` within ``CONFIDENCE_RANGE``;
- dominance across the pair: treatment ``min``, ``mode`` and ``max``
  never exceed the corresponding baseline value.

Out-of-range input is clamped into a legal configuration, never
rejected.  Results are written back through ``reduce`` so values equal
to their default collapse to unset.
"""

import math
from dataclasses import replace
from typing import Optional

from .constants import (
    BASELINE, CONFIDENCE_RANGE, DEFAULT_BASELINE, DEFAULT_TREATMENT,
    DIST_FIELDS, FIELD_MAX, FIELD_MIN, FIELD_MODE, RANGE_FIELDS,
    VALUE_RANGE, WHICH_OPTIONS,
)
from .data_model import (
    Distribution, SparseDistribution, SparseScenarioDistribution,
)
from .sparse_model import realize, reduce


def _clamp(value, lo, hi):
    return max(lo, min(value, hi))


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def _check_target(which: str, field: Optional[str]) -> None:
    if which not in WHICH_OPTIONS:
        raise ValueError(
            f"Unknown distribution {which!r}; expected one of {WHICH_OPTIONS}"
        )
    if field is not None and field not in DIST_FIELDS:
        raise ValueError(
            f"Unknown field {field!r}; expected one of {DIST_FIELDS}"
        )


def _normalize(dist: Distribution) -> Distribution:
    """Clamp a realized distribution into a legal ordering."""
    lo, hi = VALUE_RANGE
    d_min = _clamp(dist.min, lo, hi)
    d_max = _clamp(dist.max, d_min, hi)
    d_mode = _clamp(dist.mode, d_min, d_max)
    confidence = _clamp(dist.confidence, *CONFIDENCE_RANGE)
    return Distribution(min=d_min, max=d_max, mode=d_mode, confidence=confidence)


def _cascade(baseline: Distribution, treatment: Distribution) -> Distribution:
    """Pull treatment min/mode/max down to the baseline values."""
    return replace(treatment, **{
        name: min(getattr(treatment, name), getattr(baseline, name))
        for name in RANGE_FIELDS
    })


def _realized_pair(pair: SparseScenarioDistribution):
    baseline = _normalize(realize(pair.baseline, DEFAULT_BASELINE))
    treatment = _cascade(
        baseline, _normalize(realize(pair.treatment, DEFAULT_TREATMENT))
    )
    return baseline, treatment


def _write_back(baseline: Distribution, treatment: Distribution) -> SparseScenarioDistribution:
    return SparseScenarioDistribution(
        baseline=reduce(baseline, DEFAULT_BASELINE),
        treatment=reduce(treatment, DEFAULT_TREATMENT),
    )


def _edit_field(
    dist: Distribution,
    field: str,
    value: float,
    cap: Optional[Distribution],
) -> Distribution:
    """Apply one field edit to *dist*, keeping ``min <= mode <= max``.

    *cap* is the realized baseline when editing the treatment side;
    range fields may not exceed it.
    """
    lo, hi = VALUE_RANGE

    def ceiling(name):
        return hi if cap is None else min(hi, getattr(cap, name))

    if field == FIELD_MIN:
        new_min = _clamp(value, lo, min(dist.max, ceiling(FIELD_MIN)))
        new_mode = new_min if new_min > dist.mode else dist.mode
        return replace(dist, min=new_min, mode=new_mode)

    if field == FIELD_MAX:
        new_max = _clamp(value, dist.min, ceiling(FIELD_MAX))
        new_mode = new_max if new_max < dist.mode else dist.mode
        return replace(dist, max=new_max, mode=new_mode)

    if field == FIELD_MODE:
        new_mode = _clamp(value, dist.min, min(dist.max, ceiling(FIELD_MODE)))
        return replace(dist, mode=new_mode)

    return replace(dist, confidence=_clamp(value, *CONFIDENCE_RANGE))


def apply_edit(
    pair: SparseScenarioDistribution,
    which: str,
    field: str,
    value: float,
    *,
    integer: bool = False,
) -> SparseScenarioDistribution:
    """Set one field of the baseline or treatment distribution.

    Parameters
    ----------
    pair : SparseScenarioDistribution
        Current state (not modified).
    which : str
        ``"baseline"`` or ``"treatment"``.
    field : str
        ``"min"``, ``"max"``, ``"mode"`` or ``"confidence"``.
    value : float
        Requested value; clamped into a legal configuration.  A
        non-finite value leaves the pair unchanged.
    integer : bool
        Round *value* half-up first, as integer input widgets do.

    Returns
    -------
    SparseScenarioDistribution
        New pair satisfying the ordering and dominance invariants.
    """
    _check_target(which, field)
    value = float(value)
    if not math.isfinite(value):
        return pair
    if integer:
        value = _round_half_up(value)

    baseline, treatment = _realized_pair(pair)
    if which == BASELINE:
        baseline = _edit_field(baseline, field, value, cap=None)
        treatment = _cascade(baseline, treatment)
    else:
        treatment = _edit_field(treatment, field, value, cap=baseline)
    return _write_back(baseline, treatment)


def apply_range_edit(
    pair: SparseScenarioDistribution,
    which: str,
    min_value: float,
    mode_value: float,
    max_value: float,
    *,
    integer: bool = False,
) -> SparseScenarioDistribution:
    """Set min, mode and max together (triple-handle slider drag).

    The three values are sorted into order, clamped into
    ``VALUE_RANGE`` and, on the treatment side, capped by the baseline.
    Confidence is left as it is.
    """
    _check_target(which, None)
    values = [float(v) for v in (min_value, mode_value, max_value)]
    if not all(math.isfinite(v) for v in values):
        return pair
    if integer:
        values = [_round_half_up(v) for v in values]
    new_min, new_mode, new_max = sorted(_clamp(v, *VALUE_RANGE) for v in values)

    baseline, treatment = _realized_pair(pair)
    if which == BASELINE:
        baseline = replace(baseline, min=new_min, mode=new_mode, max=new_max)
        treatment = _cascade(baseline, treatment)
    else:
        treatment = _cascade(
            baseline,
            replace(treatment, min=new_min, mode=new_mode, max=new_max),
        )
    return _write_back(baseline, treatment)


def reset_edit(
    pair: SparseScenarioDistribution,
    which: str,
    field: Optional[str] = None,
) -> SparseScenarioDistribution:
    """Return one field (or a whole distribution) to its default.

    Resetting a baseline value can break dominance over the treatment
    side, so the result is passed through ``enforce_constraints``.
    """
    _check_target(which, field)
    current = getattr(pair, which)
    if field is None:
        cleared = SparseDistribution()
    else:
        cleared = replace(current, **{field: None})
    return enforce_constraints(replace(pair, **{which: cleared}))


def enforce_constraints(pair: SparseScenarioDistribution) -> SparseScenarioDistribution:
    """Clamp an arbitrary pair (e.g. freshly loaded) into a legal one."""
    baseline, treatment = _realized_pair(pair)
    return _write_back(baseline, treatment)


def is_consistent(pair: SparseScenarioDistribution) -> bool:
    """``True`` if *pair* already satisfies every invariant."""
    baseline = realize(pair.baseline, DEFAULT_BASELINE)
    treatment = realize(pair.treatment, DEFAULT_TREATMENT)
    for dist in (baseline, treatment):
        if _normalize(dist) != dist:
            return False
    return all(
        getattr(treatment, name) <= getattr(baseline, name)
        for name in RANGE_FIELDS
    )

