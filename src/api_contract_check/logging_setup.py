"""Logging configuration for the command line."""

import logging


def setup_logging(verbose: bool = False) -> None:
    """Setup basic logging. Verbose mode shows per-parameter debug output."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
