"""
Sparse (partially user-supplied) distributions.

A ``SparseDistribution`` keeps ``None`` for every field the expert has
not touched.  ``realize`` fills the gaps from a default ``Distribution``;
``reduce`` goes the other way and collapses every value equal to its
default back to ``None``, so that
``realize(reduce(d, defaults), defaults) == d``.
"""

from .constants import DEFAULT_BASELINE, DEFAULT_TREATMENT, DIST_FIELDS
from .data_model import (
    Distribution, ScenarioDistribution, SparseDistribution,
    SparseScenarioDistribution,
)


def realize(sparse: SparseDistribution, defaults: Distribution) -> Distribution:
    """Merge *sparse* with *defaults* field by field."""
    values = {}
    for name in DIST_FIELDS:
        value = getattr(sparse, name)
        values[name] = getattr(defaults, name) if value is None else value
    return Distribution(**values)


def reduce(concrete: Distribution, defaults: Distribution) -> SparseDistribution:
    """Strip every field of *concrete* that equals its default."""
    values = {}
    for name in DIST_FIELDS:
        value = getattr(concrete, name)
        values[name] = None if value == getattr(defaults, name) else value
    return SparseDistribution(**values)


def is_edited(sparse: SparseDistribution) -> bool:
    """``True`` if at least one field has been set by the user."""
    return any(getattr(sparse, name) is not None for name in DIST_FIELDS)


def is_scenario_complete(pair: SparseScenarioDistribution) -> bool:
    """A scenario counts as complete once either side has been edited."""
    return is_edited(pair.baseline) or is_edited(pair.treatment)


def realize_scenario(pair: SparseScenarioDistribution) -> ScenarioDistribution:
    return ScenarioDistribution(
        baseline=realize(pair.baseline, DEFAULT_BASELINE),
        treatment=realize(pair.treatment, DEFAULT_TREATMENT),
    )


def reduce_scenario(pair: ScenarioDistribution) -> SparseScenarioDistribution:
    return SparseScenarioDistribution(
        baseline=reduce(pair.baseline, DEFAULT_BASELINE),
        treatment=reduce(pair.treatment, DEFAULT_TREATMENT),
    )


def empty_scenario_distribution() -> SparseScenarioDistribution:
    """Sparse pair with every field unset."""
    return SparseScenarioDistribution(
        baseline=SparseDistribution(),
        treatment=SparseDistribution(),
    )
