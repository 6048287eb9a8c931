"""
Scenario lifecycle and navigation helpers.

A ``Scenario`` and its ``SparseScenarioDistribution`` are created and
destroyed together.  Every function returns a new ``Session``; the
caller owns the "current session" and swaps it in after each call.
"""

from collections import OrderedDict
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from .constants import DEFAULT_BASELINE, DEFAULT_TREATMENT
from .csv_codec import detect_yield_column
from .data_model import Scenario, Session, SparseScenarioDistribution
from .sparse_model import (
    empty_scenario_distribution, is_scenario_complete, realize,
)


# ── Navigation ───────────────────────────────────────────────────────────

def scenario_groups(session: Session) -> List[str]:
    """Unique group labels in first-appearance order."""
    return list(OrderedDict.fromkeys(s.group for s in session.scenarios))


def scenarios_in_group(session: Session, group: str) -> List[Scenario]:
    return [s for s in session.scenarios if s.group == group]


def completion_status(session: Session) -> Dict[str, bool]:
    """``{scenario_id: complete}`` for every scenario."""
    return {
        s.id: is_scenario_complete(session.distribution_for(s.id))
        for s in session.scenarios
    }


def completed_count(session: Session) -> Tuple[int, int]:
    """``(completed, total)`` scenario counts."""
    status = completion_status(session)
    return sum(status.values()), len(status)


# ── Lifecycle ────────────────────────────────────────────────────────────

def _refresh_yield_column(scenarios: List[Scenario], current: Optional[str]) -> Optional[str]:
    # Same key order as the encoded header
    keys = sorted({key for s in scenarios for key in s.attributes})
    if current in keys:
        return current
    return detect_yield_column(keys)


def add_scenario(
    session: Session,
    scenario: Scenario,
    distribution: Optional[SparseScenarioDistribution] = None,
) -> Session:
    """Append *scenario* with an all-unset (or given) distribution."""
    if any(s.id == scenario.id for s in session.scenarios):
        raise ValueError(f"Scenario id {scenario.id!r} already exists")
    scenarios = list(session.scenarios) + [scenario]
    distributions = dict(session.distributions)
    distributions[scenario.id] = distribution or empty_scenario_distribution()
    return Session(
        scenarios=scenarios,
        distributions=distributions,
        yield_column=_refresh_yield_column(scenarios, session.yield_column),
    )


def _unique_copy_id(session: Session, scenario_id: str) -> str:
    taken = {s.id for s in session.scenarios}
    candidate = f"{scenario_id}_copy"
    counter = 2
    while candidate in taken:
        candidate = f"{scenario_id}_copy{counter}"
        counter += 1
    return candidate


def duplicate_scenario(
    session: Session,
    scenario_id: str,
    new_id: Optional[str] = None,
) -> Session:
    """Insert a copy of a scenario (and its distribution) right after it."""
    source = session.get_scenario(scenario_id)
    new_id = new_id or _unique_copy_id(session, scenario_id)
    if any(s.id == new_id for s in session.scenarios):
        raise ValueError(f"Scenario id {new_id!r} already exists")

    copy = replace(source, id=new_id, attributes=dict(source.attributes))
    scenarios = []
    for s in session.scenarios:
        scenarios.append(s)
        if s.id == scenario_id:
            scenarios.append(copy)

    distributions = dict(session.distributions)
    distributions[new_id] = session.distribution_for(scenario_id)
    return replace(session, scenarios=scenarios, distributions=distributions)


def delete_scenario(session: Session, scenario_id: str) -> Session:
    session.get_scenario(scenario_id)
    scenarios = [s for s in session.scenarios if s.id != scenario_id]
    distributions = {
        key: value for key, value in session.distributions.items()
        if key != scenario_id
    }
    return Session(
        scenarios=scenarios,
        distributions=distributions,
        yield_column=_refresh_yield_column(scenarios, session.yield_column),
    )


def update_scenario(
    session: Session,
    scenario_id: str,
    *,
    group: Optional[str] = None,
    attributes: Optional[dict] = None,
) -> Session:
    """Replace a scenario's group and/or attributes; the id is fixed."""
    changes = {}
    if group is not None:
        changes['group'] = group
    if attributes is not None:
        changes['attributes'] = dict(attributes)
    return _replace_scenario(session, scenario_id, changes)


def update_comment(session: Session, scenario_id: str, comment: Optional[str]) -> Session:
    return _replace_scenario(session, scenario_id, {'comment': comment or None})


def _replace_scenario(session: Session, scenario_id: str, changes: dict) -> Session:
    target = session.get_scenario(scenario_id)
    updated = replace(target, **changes)
    scenarios = [updated if s.id == scenario_id else s for s in session.scenarios]
    return Session(
        scenarios=scenarios,
        distributions=dict(session.distributions),
        yield_column=_refresh_yield_column(scenarios, session.yield_column),
    )


def set_distribution(
    session: Session,
    scenario_id: str,
    pair: SparseScenarioDistribution,
) -> Session:
    """Store the result of an edit for *scenario_id*."""
    session.get_scenario(scenario_id)
    distributions = dict(session.distributions)
    distributions[scenario_id] = pair
    return replace(session, distributions=distributions)


# ── Yield impact ─────────────────────────────────────────────────────────

def yield_impact(loss_percentage: float, baseline_yield: float) -> float:
    """Absolute yield left after losing *loss_percentage* percent."""
    return baseline_yield * (1.0 - loss_percentage / 100.0)


def scenario_yield(scenario: Scenario, yield_column: Optional[str]) -> Optional[float]:
    """Numeric yield attribute of *scenario*, or ``None``."""
    if not yield_column:
        return None
    value = scenario.attributes.get(yield_column)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def expected_yields(session: Session, scenario_id: str) -> Optional[Dict[str, float]]:
    """Yield remaining at the most-likely baseline and treatment loss.

    Returns ``None`` when the session has no numeric yield for the
    scenario.
    """
    scenario = session.get_scenario(scenario_id)
    base_yield = scenario_yield(scenario, session.yield_column)
    if base_yield is None:
        return None
    pair = session.distribution_for(scenario_id)
    baseline = realize(pair.baseline, DEFAULT_BASELINE)
    treatment = realize(pair.treatment, DEFAULT_TREATMENT)
    return {
        'baseline': yield_impact(baseline.mode, base_yield),
        'treatment': yield_impact(treatment.mode, base_yield),
    }
