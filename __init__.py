"""
Expert Elicitation Plotter v1.0.0

Collects expert-supplied uncertainty ranges for a baseline and a
treatment outcome per scenario and turns them into beta probability
density curves.

Four intuitive inputs (minimum, maximum, most-likely value, confidence)
are mapped to a bounded beta distribution.  Partially elicited sessions
are stored as a comma-separated record in which every field left at its
default is written blank.
"""

APP_NAME = "Expert Elicitation Plotter"
APP_VERSION = "1.0.0"
APP_DATE = "2026-10-18"
__version__ = APP_VERSION
