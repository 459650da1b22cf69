"""Command-line interface, run with ``python -m arbor.cli``."""
