"""
Tests for the density chart, PNG export, example data and CLI.

Charts are drawn on bare ``matplotlib.figure.Figure`` objects so no
display or pyplot backend is needed.
"""

import os
import sys
import tempfile
import unittest

from matplotlib.figure import Figure

from elicitation_plotter.__main__ import main
from elicitation_plotter.chart_density import render_scenario_density
from elicitation_plotter.constraints import is_consistent
from elicitation_plotter.csv_codec import read_session_file
from elicitation_plotter.data_model import (
    Scenario, Session, SparseDistribution, SparseScenarioDistribution,
)
from elicitation_plotter.example_data import (
    build_example_session, generate_example_session,
)
from elicitation_plotter.export import export_all_charts, export_png, safe_filename
from elicitation_plotter.session_ops import scenario_groups


def _session(yield_column=None):
    attributes = {"yield_t": 4.0} if yield_column else {}
    return Session(
        scenarios=[
            Scenario(id="s1", group="A", attributes=dict(attributes)),
            Scenario(id="s2", group="A", attributes=dict(attributes)),
            Scenario(id="s3", group="B", attributes=dict(attributes)),
        ],
        distributions={"s1": SparseScenarioDistribution(
            baseline=SparseDistribution(max=50, mode=25),
        )},
        yield_column=yield_column,
    )


def _texts(ax):
    return [t.get_text() for t in ax.texts]


class TestDensityChart(unittest.TestCase):

    def test_curves_markers_and_group_background(self):
        fig = Figure()
        render_scenario_density(fig, _session(), "s1")
        ax = fig.axes[0]
        # 2 faded curves for s2, 2 curves and 2 mode markers for s1
        self.assertEqual(len(ax.lines), 6)
        labels = [t.get_text() for t in ax.get_legend().get_texts()]
        self.assertEqual(labels, ["Baseline", "Treatment"])
        self.assertEqual(ax.get_title(), "s1 (A)")
        self.assertEqual(ax.get_xlim(), (0.0, 100.0))

    def test_without_group_background(self):
        fig = Figure()
        render_scenario_density(fig, _session(), "s1", show_group=False)
        self.assertEqual(len(fig.axes[0].lines), 4)

    def test_rerender_clears_figure(self):
        fig = Figure()
        render_scenario_density(fig, _session(), "s1")
        render_scenario_density(fig, _session(), "s3")
        self.assertEqual(len(fig.axes), 1)
        self.assertEqual(len(fig.axes[0].lines), 4)

    def test_yield_annotation(self):
        fig = Figure()
        render_scenario_density(fig, _session("yield_t"), "s2")
        texts = _texts(fig.axes[0])
        self.assertEqual(len(texts), 1)
        self.assertIn("yield_t", texts[0])
        self.assertIn("Baseline: 3.40", texts[0])
        self.assertIn("Treatment: 3.60", texts[0])

    def test_no_yield_annotation_without_column(self):
        fig = Figure()
        render_scenario_density(fig, _session(), "s2")
        self.assertEqual(_texts(fig.axes[0]), [])

    def test_zero_width_range_message(self):
        session = Session(
            scenarios=[Scenario(id="z", group="G")],
            distributions={"z": SparseScenarioDistribution(
                baseline=SparseDistribution(min=30, max=30, mode=30),
                treatment=SparseDistribution(min=0, max=0, mode=0),
            )},
        )
        fig = Figure()
        render_scenario_density(fig, session, "z")
        self.assertTrue(any("Zero-width" in t for t in _texts(fig.axes[0])))


class TestExport(unittest.TestCase):

    def test_safe_filename(self):
        self.assertEqual(safe_filename("Pest Pressure/S01"), "Pest_Pressure_S01")
        self.assertEqual(safe_filename(""), "chart")

    def test_export_png_restores_size(self):
        fig = Figure(figsize=(4.0, 3.0))
        render_scenario_density(fig, _session(), "s1")
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "chart.png")
            export_png(fig, path, dpi=50)
            self.assertTrue(os.path.getsize(path) > 0)
        self.assertEqual(tuple(fig.get_size_inches()), (4.0, 3.0))

    def test_export_all_charts(self):
        figures = {}
        for scenario_id in ("s1", "s3"):
            fig = Figure()
            render_scenario_density(fig, _session(), scenario_id)
            figures[f"Group {scenario_id}"] = fig
        with tempfile.TemporaryDirectory() as tmp:
            out_dir = os.path.join(tmp, "charts")
            paths = export_all_charts(figures, out_dir, dpi=50)
            self.assertEqual(
                [os.path.basename(p) for p in paths],
                ["Group_s1.png", "Group_s3.png"],
            )
            self.assertTrue(all(os.path.exists(p) for p in paths))


class TestExampleData(unittest.TestCase):

    def test_example_session_shape(self):
        scenarios, distributions = build_example_session()
        self.assertEqual(len(scenarios), 8)
        self.assertEqual(set(distributions), {s.id for s in scenarios})
        self.assertTrue(all(is_consistent(pair) for pair in distributions.values()))

    def test_example_is_reproducible(self):
        self.assertEqual(build_example_session(), build_example_session())

    def test_generated_file_loads(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = generate_example_session(os.path.join(tmp, "example.csv"))
            session = read_session_file(path)
        self.assertEqual(len(session.scenarios), 8)
        self.assertEqual(session.yield_column, "yield_t_ha")
        self.assertEqual(scenario_groups(session), ["Pest Pressure", "Weather", "Rotation"])
        self.assertEqual(session.scenarios, build_example_session()[0])


class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self._hook = sys.excepthook
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = self._tmp.name

    def tearDown(self):
        sys.excepthook = self._hook
        self._tmp.cleanup()

    def test_example_then_export(self):
        path = os.path.join(self.tmp, "session.csv")
        self.assertEqual(main(["--example", path]), 0)
        self.assertTrue(os.path.exists(path))

        out_dir = os.path.join(self.tmp, "charts")
        self.assertEqual(main([path, "--output", out_dir, "--group", "Weather"]), 0)
        pngs = sorted(os.listdir(out_dir))
        self.assertEqual(pngs, ["Weather_S04.png", "Weather_S05.png", "Weather_S06.png"])

    def test_summary_only(self):
        path = generate_example_session(os.path.join(self.tmp, "session.csv"))
        self.assertEqual(main([path]), 0)

    def test_bad_file(self):
        path = os.path.join(self.tmp, "bad.csv")
        with open(path, "w", encoding="utf-8") as fh:
            fh.write("name,value\nx,1\n")
        self.assertEqual(main([path]), 2)

    def test_missing_file(self):
        self.assertEqual(main([os.path.join(self.tmp, "nope.csv")]), 2)


if __name__ == "__main__":
    unittest.main()
