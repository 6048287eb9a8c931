"""
Exceptions raised by the session codec.

Both are fatal for the import/export call that raises them; nothing is
partially applied.  Hosts are expected to show the message verbatim.
"""

from typing import Sequence


class StructuralError(ValueError):
    """A required column is missing or there is nothing to export."""


class ConflictError(ValueError):
    """Rows sharing a ``scenario_id`` disagree outside ``scenario_group``.

    Attributes
    ----------
    scenario_id : str
        The duplicated identifier.
    columns : list of str
        Mismatched column names, in header order.
    """

    def __init__(self, scenario_id: str, columns: Sequence[str]):
        self.scenario_id = scenario_id
        self.columns = list(columns)
        super().__init__(
            f"Scenario '{scenario_id}' appears more than once with "
            f"different values in column(s): {', '.join(self.columns)}. "
            f"Rows sharing a scenario_id may only differ in scenario_group."
        )
