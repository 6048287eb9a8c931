"""
Data model for the Expert Elicitation Plotter.

Immutable dataclasses representing scenarios, their baseline/treatment
distributions, and a whole elicitation session.  Operations in the
other modules never mutate these objects; they build new ones with
``dataclasses.replace``.

Unset sparse fields are modelled as ``None`` (not ``NaN`` and not 0):
``None`` means "use the system default for this field".
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

AttributeValue = Union[int, float, str]


@dataclass(frozen=True)
class Distribution:
    """A fully concrete distribution on the 0-100 outcome scale.

    Parameters
    ----------
    min, max : float
        Lower and upper bounds, ``0 <= min <= max <= 100``.
    mode : float
        Most-likely value, ``min <= mode <= max``.
    confidence : float
        1-100 input controlling how peaked the curve is.
    """
    min: float
    max: float
    mode: float
    confidence: float


@dataclass(frozen=True)
class SparseDistribution:
    """User-facing distribution where any field may be unset (``None``)."""
    min: Optional[float] = None
    max: Optional[float] = None
    mode: Optional[float] = None
    confidence: Optional[float] = None


@dataclass(frozen=True)
class ScenarioDistribution:
    baseline: Distribution
    treatment: Distribution


@dataclass(frozen=True)
class SparseScenarioDistribution:
    """Baseline/treatment pair of sparse distributions for one scenario.

    The realized treatment ``min``, ``mode`` and ``max`` never exceed the
    realized baseline values; ``constraints`` maintains this on every
    edit.
    """
    baseline: SparseDistribution = field(default_factory=SparseDistribution)
    treatment: SparseDistribution = field(default_factory=SparseDistribution)


@dataclass(frozen=True)
class BetaParams:
    """Shape parameters of a beta distribution, both ``> 0``.

    Derived on demand and never persisted.
    """
    alpha: float
    beta: float

    @property
    def concentration(self) -> float:
        """Sum of the two shape parameters (kappa)."""
        return self.alpha + self.beta


@dataclass(frozen=True)
class DensityPoint:
    x: float
    y: float


@dataclass(frozen=True)
class Scenario:
    """One elicitation scenario (one row of the session file).

    Parameters
    ----------
    id : str
        Unique scenario identifier.
    group : str
        Category used to filter and navigate scenarios.
    comment : str or None
        Free-text note from the expert.
    attributes : dict
        Ordered ``{column: number_or_text}`` mapping of every other
        column.  Reserved column names are rejected.
    """
    id: str
    group: str
    comment: Optional[str] = None
    attributes: Dict[str, AttributeValue] = field(default_factory=dict)

    def __post_init__(self):
        from .constants import RESERVED_COLUMNS

        clashes = [key for key in self.attributes if key in RESERVED_COLUMNS]
        if clashes:
            raise ValueError(
                f"Scenario '{self.id}' uses reserved column name(s) as "
                f"attributes: {clashes}"
            )


@dataclass(frozen=True)
class Session:
    """A complete (possibly partially elicited) session.

    Parameters
    ----------
    scenarios : list of Scenario
        Scenarios in file/display order.
    distributions : dict
        ``{scenario.id: SparseScenarioDistribution}``.
    yield_column : str or None
        Attribute key holding the production quantity, if detected.
    """
    scenarios: List[Scenario]
    distributions: Dict[str, SparseScenarioDistribution]
    yield_column: Optional[str] = None

    def get_scenario(self, scenario_id: str) -> Scenario:
        for scenario in self.scenarios:
            if scenario.id == scenario_id:
                return scenario
        raise KeyError(f"Unknown scenario id: {scenario_id!r}")

    def distribution_for(self, scenario_id: str) -> SparseScenarioDistribution:
        """Sparse pair for *scenario_id*; all-unset if never edited."""
        return self.distributions.get(scenario_id, SparseScenarioDistribution())
