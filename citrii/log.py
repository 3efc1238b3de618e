#!/usr/bin/env python3
"""Package-wide logger."""

import logging


logging.basicConfig(level=logging.DEBUG, format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')
log = logging.getLogger('citrii')


def set_verbose(verbose: bool) -> None:
    """Show or hide per-section and per-item debug output."""
    log.setLevel(logging.DEBUG if verbose else logging.INFO)
