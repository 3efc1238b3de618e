#!/usr/bin/env python3
"""
Print the owned profiles of a Mii database.

Usage: python scripts/print_profiles.py CFL_DB.dat
"""

import argparse
from pathlib import Path

from citrii.errors import CitriiError
from citrii.log import log, set_verbose
from citrii.model.database import DatabaseFile
from citrii.model.profile import ProfileFull


def describe_profile(index: int, full: ProfileFull) -> list[str]:
    """Summary lines for one owned profile; page and slot are shown raw."""
    profile = full.main
    header = profile.header
    return [
        f'[{index}] page {header.page} slot {header.slot}: {profile.name_text!r} by {full.author_text!r}',
        f'  Hair: style={profile.hair.style}, color={profile.hair.color}',
        f'  Eye: style={profile.eye.style}, color={profile.eye.color}, x={profile.eye.x}, y={profile.eye.y}',
        f'  Favorite: {bool(profile.general.favorite)}',
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description='Print the owned profiles of a Mii database')
    parser.add_argument('database', type=Path, help='Database file (CFL_DB.dat)')
    parser.add_argument('--quiet', '-q', action='store_true', help='Hide debug output')
    args = parser.parse_args()
    set_verbose(not args.quiet)

    if not args.database.exists():
        log.error(f'Database not found: {args.database}')
        return

    log.info(f'Reading database: {args.database}')
    try:
        db_file = DatabaseFile.load(args.database)
    except CitriiError as e:
        log.error(f'Failed to load database: {e}')
        return

    database = db_file.database
    for index, full in database.owned_profiles():
        for line in describe_profile(index, full):
            log.info(line)

    log.info(f'Invited profiles: {database.invited_count}')


if __name__ == '__main__':
    main()
