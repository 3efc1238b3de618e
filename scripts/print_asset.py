#!/usr/bin/env python3
"""
Print a summary of a face resource container.

Usage:
    python scripts/print_asset.py CFL_Res.dat
    python scripts/print_asset.py romfs.bin --romfs
"""

import argparse
from pathlib import Path

from citrii.asset.container import SECTION_FIELDS, Asset
from citrii.log import log, set_verbose


def main() -> None:
    parser = argparse.ArgumentParser(description='Print a summary of a face resource container')
    parser.add_argument('path', type=Path, help='CFL_Res.dat, or a RomFS image with --romfs')
    parser.add_argument('--romfs', action='store_true', help='Read the container out of a RomFS image')
    parser.add_argument('--quiet', '-q', action='store_true', help='Hide debug output')
    args = parser.parse_args()
    set_verbose(not args.quiet)

    if not args.path.exists():
        log.error(f'File not found: {args.path}')
        return

    data = args.path.read_bytes()
    asset = Asset.from_romfs(data) if args.romfs else Asset.from_bytes(data)
    if asset is None:
        return

    log.info(f'Container version: {asset.version}')
    for name in SECTION_FIELDS:
        items = getattr(asset, name)
        present = sum(1 for item in items if item is not None)
        log.info(f'  {name}: {present}/{len(items)} items')
    log.info(f'  face_configs: {sum(1 for c in asset.face_configs if c is not None)}')


if __name__ == '__main__':
    main()
