"""
Beta density curves for the Expert Elicitation Plotter.

Maps the four intuitive inputs (min, max, most-likely value, confidence)
onto a beta distribution rescaled to ``[min, max]`` and samples its
probability density for display.

The normalising constant is evaluated in log space with
``scipy.special.betaln`` so that very peaked curves (large shape
parameters) never overflow.  Every function is pure: degenerate input
yields a flat zero curve instead of an exception.
"""

import math
from typing import List, Tuple

import numpy as np
from scipy.special import betaln

from .constants import (
    CONCENTRATION_K, CONFIDENCE_RANGE, DENSITY_SAMPLE_COUNT, KAPPA_FLOOR,
    MODE_CLAMP, X_EPSILON,
)
from .data_model import BetaParams, DensityPoint, Distribution


def map_to_shape_parameters(mode: float, confidence: float) -> BetaParams:
    """Convert a normalised mode and a confidence into beta parameters.

    Parameters
    ----------
    mode : float
        Mode as a fraction of the ``[min, max]`` span.  Clamped into
        ``MODE_CLAMP`` so the curve never spikes at a boundary.
    confidence : float
        1-100.  Higher confidence gives a larger concentration
        ``kappa = 4 + (confidence / 100) * CONCENTRATION_K``.

    Returns
    -------
    BetaParams
        ``alpha = m (kappa - 2) + 1`` and ``beta = (1 - m)(kappa - 2) + 1``,
        both strictly greater than 1.
    """
    m = float(mode)
    if not math.isfinite(m):
        m = 0.5
    m = min(max(m, MODE_CLAMP[0]), MODE_CLAMP[1])

    c = float(confidence)
    if not math.isfinite(c):
        c = CONFIDENCE_RANGE[0]
    c = min(max(c, CONFIDENCE_RANGE[0]), CONFIDENCE_RANGE[1])

    kappa = KAPPA_FLOOR + (c / 100.0) * CONCENTRATION_K
    alpha = m * (kappa - 2.0) + 1.0
    beta = (1.0 - m) * (kappa - 2.0) + 1.0
    return BetaParams(alpha=alpha, beta=beta)


def density_arrays(
    min_value: float,
    max_value: float,
    mode: float,
    confidence: float,
    n: int = DENSITY_SAMPLE_COUNT,
) -> Tuple[np.ndarray, np.ndarray]:
    """Sample the density on *n* evenly spaced points of ``[min, max]``.

    Returns
    -------
    x, y : numpy.ndarray
        Ascending positions and densities.  ``y`` is scaled by
        ``1 / (max - min)`` so the curve integrates to ~1 over the
        original interval.  A zero-width or inverted interval yields
        ``y == 0`` everywhere, and ``n < 1`` yields empty arrays.
    """
    if n < 1:
        return np.empty(0), np.empty(0)

    lo = float(min_value)
    hi = float(max_value)

    if not (math.isfinite(lo) and math.isfinite(hi)) or lo >= hi:
        x_flat = lo if math.isfinite(lo) else 0.0
        return np.full(n, x_flat), np.zeros(n)

    span = hi - lo
    params = map_to_shape_parameters((float(mode) - lo) / span, confidence)

    x_norm = np.linspace(0.0, 1.0, n)
    # Keep log() away from the exact boundaries
    x_safe = np.clip(x_norm, X_EPSILON, 1.0 - X_EPSILON)
    log_norm = betaln(params.alpha, params.beta)

    with np.errstate(all='ignore'):
        log_pdf = (
            (params.alpha - 1.0) * np.log(x_safe)
            + (params.beta - 1.0) * np.log1p(-x_safe)
            - log_norm
        )
        y = np.exp(log_pdf) / span

    # Bad points become 0; the rest of the curve survives
    y = np.where(np.isfinite(y) & (y >= 0.0), y, 0.0)
    return lo + x_norm * span, y


def sample_density(
    min_value: float,
    max_value: float,
    mode: float,
    confidence: float,
    n: int = DENSITY_SAMPLE_COUNT,
) -> List[DensityPoint]:
    """Density curve as an ascending list of ``DensityPoint(x, y)``."""
    xs, ys = density_arrays(min_value, max_value, mode, confidence, n)
    return [DensityPoint(x=float(x), y=float(y)) for x, y in zip(xs, ys)]


def distribution_density(dist: Distribution, n: int = DENSITY_SAMPLE_COUNT):
    """``density_arrays`` for a concrete ``Distribution``."""
    return density_arrays(dist.min, dist.max, dist.mode, dist.confidence, n)


def distribution_mean(dist: Distribution) -> float:
    """Mean of the rescaled beta distribution behind *dist*.

    A zero-width interval has all its mass at ``min``.
    """
    if dist.min >= dist.max:
        return float(dist.min)
    span = dist.max - dist.min
    params = map_to_shape_parameters((dist.mode - dist.min) / span, dist.confidence)
    return dist.min + span * params.alpha / params.concentration
