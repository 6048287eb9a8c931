"""
Unit tests for sparse distributions (realize / reduce / completion).
"""

import unittest

from elicitation_plotter.constants import DEFAULT_BASELINE, DEFAULT_TREATMENT
from elicitation_plotter.data_model import (
    Distribution, ScenarioDistribution, SparseDistribution,
    SparseScenarioDistribution,
)
from elicitation_plotter.sparse_model import (
    empty_scenario_distribution,
    is_edited,
    is_scenario_complete,
    realize,
    realize_scenario,
    reduce,
    reduce_scenario,
)


class TestRealize(unittest.TestCase):

    def test_all_unset_gives_defaults(self):
        self.assertEqual(realize(SparseDistribution(), DEFAULT_BASELINE), DEFAULT_BASELINE)

    def test_set_fields_override_defaults(self):
        sparse = SparseDistribution(min=5, confidence=60)
        self.assertEqual(
            realize(sparse, DEFAULT_BASELINE),
            Distribution(min=5, max=30, mode=15, confidence=60),
        )

    def test_zero_is_a_value_not_unset(self):
        sparse = SparseDistribution(mode=0)
        self.assertEqual(realize(sparse, DEFAULT_TREATMENT).mode, 0)


class TestReduce(unittest.TestCase):

    def test_default_values_collapse(self):
        self.assertEqual(reduce(DEFAULT_TREATMENT, DEFAULT_TREATMENT), SparseDistribution())

    def test_non_default_values_kept(self):
        dist = Distribution(min=0, max=25, mode=15, confidence=100)
        self.assertEqual(reduce(dist, DEFAULT_BASELINE), SparseDistribution(max=25))

    def test_float_equal_to_default_collapses(self):
        dist = Distribution(min=0.0, max=30.0, mode=15.0, confidence=100.0)
        self.assertEqual(reduce(dist, DEFAULT_BASELINE), SparseDistribution())

    def test_round_trip_on_integer_inputs(self):
        """realize(reduce(d)) == d for integer-valued distributions."""
        for defaults in (DEFAULT_BASELINE, DEFAULT_TREATMENT):
            for lo in (0, 10, 20):
                for hi in (20, 30, 55):
                    if hi < lo:
                        continue
                    for mode in sorted({lo, (lo + hi) // 2, hi, 15}):
                        if not lo <= mode <= hi:
                            continue
                        for confidence in (1, 50, 100):
                            dist = Distribution(lo, hi, mode, confidence)
                            self.assertEqual(
                                realize(reduce(dist, defaults), defaults), dist
                            )


class TestCompletion(unittest.TestCase):

    def test_empty_is_not_edited(self):
        self.assertFalse(is_edited(SparseDistribution()))

    def test_single_field_is_edited(self):
        self.assertTrue(is_edited(SparseDistribution(confidence=80)))

    def test_scenario_complete_if_either_side_edited(self):
        self.assertFalse(is_scenario_complete(empty_scenario_distribution()))
        self.assertTrue(is_scenario_complete(SparseScenarioDistribution(
            treatment=SparseDistribution(max=12),
        )))
        self.assertTrue(is_scenario_complete(SparseScenarioDistribution(
            baseline=SparseDistribution(min=3),
        )))


class TestScenarioHelpers(unittest.TestCase):

    def test_realize_scenario_uses_matching_defaults(self):
        realized = realize_scenario(empty_scenario_distribution())
        self.assertEqual(realized.baseline, DEFAULT_BASELINE)
        self.assertEqual(realized.treatment, DEFAULT_TREATMENT)

    def test_reduce_scenario(self):
        pair = ScenarioDistribution(
            baseline=Distribution(0, 40, 15, 100),
            treatment=DEFAULT_TREATMENT,
        )
        self.assertEqual(
            reduce_scenario(pair),
            SparseScenarioDistribution(
                baseline=SparseDistribution(max=40),
                treatment=SparseDistribution(),
            ),
        )


if __name__ == "__main__":
    unittest.main()
