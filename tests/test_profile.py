"""
Tests for profile records.
"""

from datetime import datetime

import pytest

from citrii.model.profile import (
    CFHEObject,
    Profile,
    ProfileAlt,
    ProfileFull,
    ProfileHeader,
    ProfileId,
    decode_name,
    encode_name,
)


MAC = [0x00, 0x1F, 0x32, 0x11, 0x22, 0x33]
SYSTEM_ID = [1, 2, 3, 4, 5, 6, 7, 8]


def test_record_sizes() -> None:
    assert Profile.byte_len() == 0x48
    assert ProfileFull.byte_len() == 0x5C
    assert ProfileAlt.byte_len() == 0x54
    assert CFHEObject.byte_len() == 0x0E
    assert ProfileId.byte_len() == 10


def test_id_is_big_endian() -> None:
    """The ID nested in a little-endian profile keeps big-endian order."""
    profile = Profile(header=ProfileHeader(three=3))
    profile.id.low.creation_date = 1
    profile.id.mac = list(MAC)

    data = profile.to_bytes()

    assert data[0:4] == b'\x03\x00\x00\x00'
    assert data[12:16] == b'\x00\x00\x00\x01'
    assert list(data[16:22]) == MAC


def test_new() -> None:
    profile = Profile.new(MAC, SYSTEM_ID, datetime(2010, 1, 1, 0, 0, 10), slot=23)

    assert profile.id.low.creation_date == 5
    assert profile.id.low.normal == 1
    assert profile.header.three == 3
    assert (profile.header.page, profile.header.slot) == (2, 3)
    assert profile.slot == 23
    assert profile.name_text == '?'
    assert not profile.is_null()


def test_round_trip() -> None:
    profile = Profile.new(MAC, SYSTEM_ID, datetime(2021, 3, 4, 5, 6, 7), slot=99)
    profile.name_text = 'Miiko'

    assert Profile.read_bytes(profile.to_bytes()) == profile


def test_null() -> None:
    assert Profile().is_null()

    profile = Profile()
    profile.id.mac[5] = 1
    assert not profile.is_null()


def test_slot() -> None:
    profile = Profile()
    profile.slot = 57
    assert (profile.header.page, profile.header.slot) == (5, 7)

    with pytest.raises(ValueError):
        profile.slot = 100

    profile.header.page = 10
    with pytest.raises(ValueError):
        profile.slot


def test_names() -> None:
    assert decode_name(encode_name('Mii')) == 'Mii'
    assert encode_name('ab') == [0x61, 0x62] + [0] * 8
    assert decode_name(encode_name('ÉmiliaÅ')) == 'ÉmiliaÅ'
    assert decode_name(encode_name('x' * 10)) == 'x' * 10

    with pytest.raises(ValueError):
        encode_name('x' * 11)


def test_full_profile_author() -> None:
    full = ProfileFull()
    full.author_text = 'Me'

    data = full.to_bytes()

    assert data[0x48:0x4C] == b'M\x00e\x00'
    assert ProfileFull.read_bytes(data).author_text == 'Me'
