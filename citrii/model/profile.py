"""Mii profile records.

A profile is a little-endian record of bit-field groups; its ID is a
big-endian record nested inside it. Sizes: Profile 0x48, ProfileFull 0x5C,
ProfileAlt 0x54, CFHEObject 0x0E.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import datetime

from citrii.codec import BIG, LITTLE, BitFields, Record, array, bitfields, bits, fixed, record, u8, u16, u32


NAME_LENGTH = 10
SLOT_COUNT = 100
CREATION_EPOCH = datetime(2010, 1, 1)


@bitfields(u32)
@dataclass
class ProfileHeader(BitFields):
    three: int = bits(8)  # always 3?
    allow_copying: int = bits(1)
    private_name: int = bits(1)
    region_lock: int = bits(2)  # 0 - none, 1 - JPN, 2 - USA, 3 - EUR
    char_set: int = bits(2)  # 0 - standard, 1 - CHN, 2 - KOR, 3 - TWN
    padding_a: int = bits(2)

    page: int = bits(4)
    slot: int = bits(4)
    version_minor: int = bits(4)
    version_major: int = bits(3)  # 1 - Wii, 2 - DSi, 3 - 3DS
    padding_b: int = bits(1)


@bitfields(u32)
@dataclass
class ProfileIdLow(BitFields):
    creation_date: int = bits(28)  # 2-second ticks since 2010-01-01
    unknown: int = bits(1)
    temporary: int = bits(1)
    ntr: int = bits(1)
    normal: int = bits(1)


@record(BIG)
@dataclass
class ProfileId(Record):
    low: ProfileIdLow = fixed(ProfileIdLow)
    mac: list[int] = fixed(array(u8, 6))


@bitfields(u16)
@dataclass
class ProfileGeneral(BitFields):
    sex: int = bits(1)
    birth_month: int = bits(4)
    birth_day: int = bits(5)
    favorite_color: int = bits(4)
    favorite: int = bits(1)
    padding: int = bits(1)


@bitfields(u16)
@dataclass
class ProfileFace(BitFields):
    disable_sharing: int = bits(1)
    style: int = bits(4)
    color: int = bits(3)
    wrinkle: int = bits(4)
    makeup: int = bits(4)


@bitfields(u16)
@dataclass
class ProfileHair(BitFields):
    style: int = bits(8)
    color: int = bits(3)
    flip: int = bits(1)
    padding: int = bits(4)


@bitfields(u32)
@dataclass
class ProfileEye(BitFields):
    style: int = bits(6)
    color: int = bits(3)
    scale: int = bits(4)
    y_scale: int = bits(3)
    rotation: int = bits(5)
    x: int = bits(4)
    y: int = bits(5)
    padding: int = bits(2)


@bitfields(u32)
@dataclass
class ProfileEyebrow(BitFields):
    style: int = bits(5)
    color: int = bits(3)
    scale: int = bits(4)
    y_scale: int = bits(3)
    padding: int = bits(1)
    rotation: int = bits(5)
    x: int = bits(4)
    y: int = bits(5)
    padding2: int = bits(2)


@bitfields(u16)
@dataclass
class ProfileNose(BitFields):
    style: int = bits(5)
    scale: int = bits(4)
    y: int = bits(5)
    padding: int = bits(2)


@bitfields(u16)
@dataclass
class ProfileLip(BitFields):
    style: int = bits(6)
    color: int = bits(3)
    scale: int = bits(4)
    y_scale: int = bits(3)


@bitfields(u16)
@dataclass
class ProfileMisc(BitFields):
    lip_y: int = bits(5)
    mustache_style: int = bits(3)
    padding: int = bits(8)


@bitfields(u16)
@dataclass
class ProfileBeard(BitFields):
    style: int = bits(3)
    color: int = bits(3)
    mustache_scale: int = bits(4)
    mustache_y: int = bits(5)
    padding: int = bits(1)


@bitfields(u16)
@dataclass
class ProfileGlass(BitFields):
    style: int = bits(4)
    color: int = bits(3)
    scale: int = bits(4)
    y: int = bits(5)


@bitfields(u16)
@dataclass
class ProfileMole(BitFields):
    style: int = bits(1)
    scale: int = bits(4)
    x: int = bits(5)
    y: int = bits(5)
    padding: int = bits(1)


def decode_name(units: list[int]) -> str:
    """Decode a zero-terminated UTF-16 name."""
    text = struct.pack(f'<{len(units)}H', *units).decode('utf-16-le', errors='replace')
    return text.split('\x00', 1)[0]


def encode_name(text: str, length: int = NAME_LENGTH) -> list[int]:
    """Encode a name as `length` UTF-16 code units, zero padded."""
    data = text.encode('utf-16-le')
    if len(data) > 2 * length:
        raise ValueError(f'Name {text!r} is longer than {length} UTF-16 units')
    units = list(struct.unpack(f'<{len(data) // 2}H', data))
    return units + [0] * (length - len(units))


@record(LITTLE)
@dataclass
class Profile(Record):
    header: ProfileHeader = fixed(ProfileHeader)
    system_id: list[int] = fixed(array(u8, 8))
    id: ProfileId = fixed(ProfileId)
    padding: int = fixed(u16)
    general: ProfileGeneral = fixed(ProfileGeneral)
    name: list[int] = fixed(array(u16, NAME_LENGTH))
    height: int = fixed(u8)
    width: int = fixed(u8)
    face: ProfileFace = fixed(ProfileFace)
    hair: ProfileHair = fixed(ProfileHair)
    eye: ProfileEye = fixed(ProfileEye)
    eyebrow: ProfileEyebrow = fixed(ProfileEyebrow)
    nose: ProfileNose = fixed(ProfileNose)
    lip: ProfileLip = fixed(ProfileLip)
    misc: ProfileMisc = fixed(ProfileMisc)
    beard: ProfileBeard = fixed(ProfileBeard)
    glass: ProfileGlass = fixed(ProfileGlass)
    mole: ProfileMole = fixed(ProfileMole)

    @property
    def slot(self) -> int:
        """Position in the owned list: page * 10 + slot."""
        if self.header.page >= 10 or self.header.slot >= 10:
            raise ValueError(f'Invalid page/slot {self.header.page}/{self.header.slot}')
        return self.header.page * 10 + self.header.slot

    @slot.setter
    def slot(self, value: int) -> None:
        if not 0 <= value < SLOT_COUNT:
            raise ValueError(f'Slot {value} out of range [0, {SLOT_COUNT})')
        self.header.page = value // 10
        self.header.slot = value % 10

    @property
    def name_text(self) -> str:
        return decode_name(self.name)

    @name_text.setter
    def name_text(self, value: str) -> None:
        self.name = encode_name(value)

    def is_null(self) -> bool:
        """True for an unused entry (no ID)."""
        low = self.id.low
        return (
            low.creation_date == 0
            and low.unknown == 0
            and low.temporary == 0
            and low.ntr == 0
            and low.normal == 0
            and all(b == 0 for b in self.id.mac)
        )

    @classmethod
    def new(cls, mac: list[int], system_id: list[int], time: datetime, slot: int) -> Profile:
        """Create a default profile created at `time` in `slot`."""
        creation_date = int((time - CREATION_EPOCH).total_seconds()) // 2
        profile = cls(
            header=ProfileHeader(three=3, version_major=3),
            system_id=list(system_id),
            id=ProfileId(
                low=ProfileIdLow(creation_date=creation_date, unknown=1, normal=1),
                mac=list(mac),
            ),
            general=ProfileGeneral(sex=1),
            name=encode_name('?'),
            height=64,
            width=64,
            face=ProfileFace(),
            hair=ProfileHair(style=12, color=1),
            eye=ProfileEye(style=4, scale=4, y_scale=3, rotation=3, x=2, y=12),
            eyebrow=ProfileEyebrow(color=1, scale=4, y_scale=3, rotation=6, x=2, y=10),
            nose=ProfileNose(style=1, scale=4, y=9),
            lip=ProfileLip(style=23, scale=4, y_scale=3),
            misc=ProfileMisc(lip_y=13),
            beard=ProfileBeard(mustache_scale=4, mustache_y=10),
            glass=ProfileGlass(scale=4, y=10),
            mole=ProfileMole(scale=4, x=2, y=20),
        )
        profile.slot = slot
        return profile


@record(LITTLE)
@dataclass
class ProfileFull(Record):
    """Owned profile with its author name."""

    main: Profile = fixed(Profile)
    author: list[int] = fixed(array(u16, NAME_LENGTH))

    @property
    def author_text(self) -> str:
        return decode_name(self.author)

    @author_text.setter
    def author_text(self, value: str) -> None:
        self.author = encode_name(value)


@record(LITTLE)
@dataclass
class ProfileAlt(Record):
    main: Profile = fixed(Profile)
    timestamp: int = fixed(u32)  # seconds since 2000-01-01
    unk: list[int] = fixed(array(u8, 8))


@bitfields(u32)
@dataclass
class CFHEListNode(BitFields):
    prev: int = bits(15)
    pf: int = bits(1)
    next: int = bits(15)
    nf: int = bits(1)


@record(LITTLE)
@dataclass
class CFHEObject(Record):
    profile_id: ProfileId = fixed(ProfileId)
    list_node: CFHEListNode = fixed(CFHEListNode)
