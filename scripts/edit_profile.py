#!/usr/bin/env python3
"""
Step one property of an owned profile and save the database.

Usage:
    python scripts/edit_profile.py CFL_DB.dat <slot> <page> <property> <inc|dec> [--output OUTPUT]

Examples:
    # Next hair style for the profile in slot 0
    python scripts/edit_profile.py CFL_DB.dat 0 hair style inc

    # Move the mole of slot 12 up one step, writing to a copy
    python scripts/edit_profile.py CFL_DB.dat 12 mole y dec --output CFL_DB_edited.dat
"""

import argparse
from pathlib import Path

from citrii.errors import CitriiError
from citrii.log import log, set_verbose
from citrii.model import edits
from citrii.model.database import DatabaseFile
from citrii.model.edits import Delta, Page


CHANGES = {
    'style': edits.change_style,
    'color': edits.change_color,
    'scale': edits.change_scale,
    'y_scale': edits.change_y_scale,
    'rotation': edits.change_rotation,
    'x': edits.change_x,
    'y': edits.change_y,
}


def main() -> None:
    parser = argparse.ArgumentParser(description='Edit a profile in a Mii database')
    parser.add_argument('database', type=Path, help='Database file (CFL_DB.dat)')
    parser.add_argument('slot', type=int, help='Owned profile slot (0-99)')
    parser.add_argument('page', choices=[p.name.lower() for p in Page], help='Editing page')
    parser.add_argument('property', choices=sorted(CHANGES), help='Property to change')
    parser.add_argument('delta', choices=['inc', 'dec'], help='Step direction')
    parser.add_argument('--output', '-o', type=Path, help='Output file (default: overwrite the input)')
    parser.add_argument('--quiet', '-q', action='store_true', help='Hide debug output')
    args = parser.parse_args()
    set_verbose(not args.quiet)

    log.info(f'Reading database: {args.database}')
    try:
        db_file = DatabaseFile.load(args.database)
    except (CitriiError, OSError) as e:
        log.error(f'Failed to load database: {e}')
        return

    index = db_file.database.owned_slot_to_index(args.slot)
    if index is None:
        log.error(f'No profile in slot {args.slot}')
        return

    profile = db_file.database.owned[index].main
    page = Page[args.page.upper()]
    delta = Delta.INC if args.delta == 'inc' else Delta.DEC
    if not CHANGES[args.property](profile, page, delta):
        log.error(f'Page {args.page} has no {args.property}')
        return

    try:
        db_file.save(args.output)
    except OSError as e:
        log.error(f'Failed to save database: {e}')
        return

    log.info('Edit complete!')


if __name__ == '__main__':
    main()
