"""
Example session generator for the Expert Elicitation Plotter.

Creates a synthetic session file for testing and demonstration: three
scenario groups, a yield column, a few comments, and a mix of
untouched, partially edited and fully edited scenarios so that blank
(unset) cells are exercised.
"""

import os
import random

from .constraints import apply_edit
from .csv_codec import write_session_file
from .data_model import Scenario
from .sparse_model import empty_scenario_distribution


def build_example_session():
    """Return ``(scenarios, distributions)`` for the example session."""
    # Reproducible randomness
    rng = random.Random(42)

    groups = [
        {
            'name': 'Pest Pressure',
            'levels': ['low', 'medium', 'high'],
            'yield_range': (3.0, 4.5),
        },
        {
            'name': 'Weather',
            'levels': ['dry', 'normal', 'wet'],
            'yield_range': (2.5, 4.0),
        },
        {
            'name': 'Rotation',
            'levels': ['cereal', 'legume'],
            'yield_range': (3.5, 5.0),
        },
    ]
    regions = ['north', 'south', 'east']

    scenarios = []
    distributions = {}
    counter = 1
    for group in groups:
        for level in group['levels']:
            scenario_id = f"S{counter:02d}"
            counter += 1
            attributes = {
                'level': level,
                'region': rng.choice(regions),
                'yield_t_ha': round(rng.uniform(*group['yield_range']), 2),
            }
            comment = None
            if rng.random() < 0.3:
                comment = f"Reviewed with agronomist\nlevel: {level}"
            scenarios.append(Scenario(
                id=scenario_id,
                group=group['name'],
                comment=comment,
                attributes=attributes,
            ))

            # Roughly a third untouched, a third partial, a third full
            pair = empty_scenario_distribution()
            roll = rng.random()
            if roll > 0.33:
                pair = apply_edit(pair, 'baseline', 'max', rng.randint(20, 60))
                pair = apply_edit(pair, 'baseline', 'mode', rng.randint(5, 30))
            if roll > 0.66:
                pair = apply_edit(pair, 'baseline', 'min', rng.randint(0, 5))
                pair = apply_edit(pair, 'treatment', 'max', rng.randint(10, 40))
                pair = apply_edit(pair, 'treatment', 'mode', rng.randint(2, 20))
                pair = apply_edit(pair, 'treatment', 'confidence', rng.randint(50, 100))
            distributions[scenario_id] = pair

    return scenarios, distributions


def generate_example_session(filepath: str) -> str:
    """Write the example session to *filepath* and return the path."""
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    scenarios, distributions = build_example_session()
    return write_session_file(filepath, scenarios, distributions)


if __name__ == '__main__':
    import tempfile
    out_path = os.path.join(tempfile.gettempdir(), 'elicitation_example.csv')
    path = generate_example_session(out_path)
    print(f"  session: {path} ({os.path.getsize(path):,} bytes)")
