"""In-place profile edits, one step at a time.

Each editing page exposes a subset of properties. Style and color
changes wrap around a per-page limit; placement changes (scale,
y-scale, rotation, x, y) clamp to a per-page range. A property the
current page does not have is left alone and the change reports False.
"""

from __future__ import annotations

from enum import IntEnum

from citrii.log import log
from citrii.model.profile import Profile


class Page(IntEnum):
    FACE = 0
    MAKEUP = 1
    WRINKLE = 2
    HAIR = 3
    EYEBROW = 4
    EYE = 5
    NOSE = 6
    LIP = 7
    GLASS = 8
    MUSTACHE = 9
    MOLE = 10
    BEARD = 11


class Delta(IntEnum):
    DEC = -1
    INC = 1


# page -> (group, field, limit)
STYLE_LIMITS = {
    Page.FACE: ('face', 'style', 12),
    Page.MAKEUP: ('face', 'makeup', 12),
    Page.WRINKLE: ('face', 'wrinkle', 12),
    Page.HAIR: ('hair', 'style', 132),
    Page.EYEBROW: ('eyebrow', 'style', 24),
    Page.EYE: ('eye', 'style', 62),
    Page.NOSE: ('nose', 'style', 18),
    Page.LIP: ('lip', 'style', 37),
    Page.GLASS: ('glass', 'style', 9),
    Page.MUSTACHE: ('misc', 'mustache_style', 6),
    Page.MOLE: ('mole', 'style', 2),
    Page.BEARD: ('beard', 'style', 6),
}

COLOR_LIMITS = {
    Page.FACE: ('face', 'color', 6),
    Page.HAIR: ('hair', 'color', 8),
    Page.EYEBROW: ('eyebrow', 'color', 8),
    Page.EYE: ('eye', 'color', 6),
    Page.LIP: ('lip', 'color', 5),
    Page.GLASS: ('glass', 'color', 6),
    # mustache shares the beard color
    Page.MUSTACHE: ('beard', 'color', 8),
    Page.BEARD: ('beard', 'color', 8),
}

# page -> (group, field, min, max)
SCALE_RANGES = {
    Page.EYEBROW: ('eyebrow', 'scale', 0, 8),
    Page.EYE: ('eye', 'scale', 0, 7),
    Page.NOSE: ('nose', 'scale', 0, 8),
    Page.LIP: ('lip', 'scale', 0, 8),
    Page.GLASS: ('glass', 'scale', 0, 7),
    Page.MUSTACHE: ('beard', 'mustache_scale', 0, 8),
    Page.MOLE: ('mole', 'scale', 0, 8),
}

Y_SCALE_RANGES = {
    Page.EYEBROW: ('eyebrow', 'y_scale', 0, 6),
    Page.EYE: ('eye', 'y_scale', 0, 6),
    Page.LIP: ('lip', 'y_scale', 0, 6),
}

ROTATION_RANGES = {
    Page.EYEBROW: ('eyebrow', 'rotation', 0, 11),
    Page.EYE: ('eye', 'rotation', 0, 7),
}

X_RANGES = {
    Page.EYEBROW: ('eyebrow', 'x', 0, 12),
    Page.EYE: ('eye', 'x', 0, 12),
    Page.MOLE: ('mole', 'x', 0, 16),
}

Y_RANGES = {
    Page.EYEBROW: ('eyebrow', 'y', 3, 18),
    Page.EYE: ('eye', 'y', 0, 18),
    Page.NOSE: ('nose', 'y', 0, 18),
    Page.LIP: ('misc', 'lip_y', 0, 18),
    Page.GLASS: ('glass', 'y', 0, 20),
    Page.MUSTACHE: ('beard', 'mustache_y', 0, 16),
    Page.MOLE: ('mole', 'y', 0, 30),
}


def wrap_change_value(value: int, limit: int, delta: Delta) -> int:
    """Step `value` within [0, limit), wrapping at both ends."""
    if delta == Delta.INC:
        value += 1
        return 0 if value >= limit else value
    if value <= 0:
        value = limit
    return value - 1


def clamp_change_value(value: int, minimum: int, maximum: int, delta: Delta) -> int:
    """Step `value` within [minimum, maximum], stopping at the ends."""
    if delta == Delta.INC:
        return value if value >= maximum else value + 1
    return value if value <= minimum else value - 1


def _wrap(profile: Profile, table: dict, page: Page, delta: Delta) -> bool:
    entry = table.get(page)
    if entry is None:
        return False
    group_name, field, limit = entry
    group = getattr(profile, group_name)
    value = wrap_change_value(getattr(group, field), limit, delta)
    setattr(group, field, value)
    log.info(f'{Page(page).name.lower()}: {group_name}.{field} = {value}')
    return True


def _clamp(profile: Profile, table: dict, page: Page, delta: Delta) -> bool:
    entry = table.get(page)
    if entry is None:
        return False
    group_name, field, minimum, maximum = entry
    group = getattr(profile, group_name)
    value = clamp_change_value(getattr(group, field), minimum, maximum, delta)
    setattr(group, field, value)
    log.info(f'{Page(page).name.lower()}: {group_name}.{field} = {value}')
    return True


def change_style(profile: Profile, page: Page, delta: Delta) -> bool:
    return _wrap(profile, STYLE_LIMITS, page, delta)


def change_color(profile: Profile, page: Page, delta: Delta) -> bool:
    return _wrap(profile, COLOR_LIMITS, page, delta)


def change_scale(profile: Profile, page: Page, delta: Delta) -> bool:
    return _clamp(profile, SCALE_RANGES, page, delta)


def change_y_scale(profile: Profile, page: Page, delta: Delta) -> bool:
    return _clamp(profile, Y_SCALE_RANGES, page, delta)


def change_rotation(profile: Profile, page: Page, delta: Delta) -> bool:
    return _clamp(profile, ROTATION_RANGES, page, delta)


def change_x(profile: Profile, page: Page, delta: Delta) -> bool:
    return _clamp(profile, X_RANGES, page, delta)


def change_y(profile: Profile, page: Page, delta: Delta) -> bool:
    return _clamp(profile, Y_RANGES, page, delta)


def next_page(page: Page, delta: Delta) -> Page:
    """Cycle through the editing pages."""
    return Page((page + delta) % len(Page))
