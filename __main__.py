"""
Entry point for the Expert Elicitation Plotter.

Usage:
    python -m elicitation_plotter SESSION.csv [--output DIR] [--group NAME]
    python -m elicitation_plotter --example [PATH]
"""

import argparse
import sys
import traceback

from .constants import DEFAULT_SESSION_FILENAME


def _check_dependencies():
    """Verify required packages are installed."""
    missing = []
    try:
        import matplotlib  # noqa: F401
    except ImportError:
        missing.append("matplotlib")
    try:
        import numpy  # noqa: F401
    except ImportError:
        missing.append("numpy")
    try:
        import scipy  # noqa: F401
    except ImportError:
        missing.append("scipy")

    if missing:
        print(
            f"Missing required packages: {', '.join(missing)}\n"
            f"Install with: pip install {' '.join(missing)}",
            file=sys.stderr,
        )
        sys.exit(1)


def _exception_hook(exc_type, exc_value, exc_tb):
    """Global exception handler to prevent silent crashes."""
    msg = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
    print(f"Unhandled exception:\n{msg}", file=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elicitation_plotter",
        description="Summarise an elicitation session and export density charts.",
    )
    parser.add_argument("session", nargs="?", help="Session CSV file to load")
    parser.add_argument(
        "--output", type=str,
        help="Directory for one PNG density chart per scenario",
    )
    parser.add_argument("--group", type=str, help="Only chart this scenario group")
    parser.add_argument(
        "--example", type=str, metavar="PATH", nargs="?",
        const=DEFAULT_SESSION_FILENAME,
        help=f"Write the example session to PATH (default: {DEFAULT_SESSION_FILENAME}) and exit",
    )
    return parser


def main(argv=None):
    """Load a session, print its completion summary, export charts."""
    _check_dependencies()
    sys.excepthook = _exception_hook

    from matplotlib.figure import Figure

    from . import APP_NAME, APP_VERSION
    from .chart_density import render_scenario_density
    from .csv_codec import read_session_file
    from .errors import ConflictError, StructuralError
    from .example_data import generate_example_session
    from .export import export_all_charts
    from .session_ops import completed_count, completion_status, scenario_groups

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.example:
        path = generate_example_session(args.example)
        print(f"Example session written to {path}")
        return 0
    if not args.session:
        parser.error("a session file is required (or use --example PATH)")

    try:
        session = read_session_file(args.session)
    except (StructuralError, ConflictError, FileNotFoundError) as exc:
        print(f"Could not load session: {exc}", file=sys.stderr)
        return 2

    done, total = completed_count(session)
    status = completion_status(session)
    print(f"{APP_NAME} v{APP_VERSION}")
    print(f"Scenarios: {total} ({done} elicited)")
    if session.yield_column:
        print(f"Yield column: {session.yield_column}")
    for group in scenario_groups(session):
        members = [s for s in session.scenarios if s.group == group]
        n_done = sum(status[s.id] for s in members)
        print(f"  {group}: {n_done}/{len(members)}")

    if args.output:
        figures = {}
        for scenario in session.scenarios:
            if args.group and scenario.group != args.group:
                continue
            fig = Figure(figsize=(6.0, 4.0))
            render_scenario_density(fig, session, scenario.id, for_export=True)
            figures[f"{scenario.group}_{scenario.id}"] = fig
        paths = export_all_charts(figures, args.output)
        print(f"Exported {len(paths)} chart(s) to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
