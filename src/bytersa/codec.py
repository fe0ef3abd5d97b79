"""Wire encodings for ciphertext unit sequences.

The fixed-width form packs every unit into an 8-byte big-endian block and base64-encodes the concatenation. Units
that do not fit are refused outright. The arbitrary-precision form DER-encodes the units as a SEQUENCE OF INTEGER
before base64, which has no width limit.

Typical usage example:

    text = encode_units([2790])
    units = decode_units(text)
    text = encode_big_units([2**100 + 1])
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import base64
import binascii
from typing import Iterable

from pyasn1 import error
from pyasn1.codec.der import decoder
from pyasn1.codec.der import encoder
from pyasn1.type import univ

UNIT_WIDTH: int = 8


class DecodeError(ValueError):
    """Raised when encoded ciphertext cannot be turned back into units."""


class CipherUnits(univ.SequenceOf):
    """Arbitrary-precision ciphertext, one INTEGER per plaintext byte."""
    componentType = univ.Integer()


def _b64_dec(text: str) -> bytes:
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise DecodeError(f"Invalid base64 payload: {exc}") from exc


def encode_units(units: Iterable[int], width: int = UNIT_WIDTH) -> str:
    """Encodes units as fixed-width big-endian blocks in base64.

    Args:
        units: Ciphertext units, each in `[0, 256**width)`.
        width: Block size in bytes.

    Returns:
        The base64 text, with padding.

    Raises:
        OverflowError: If a unit is negative or too large for `width` bytes.
    """
    blob = b"".join(int(unit).to_bytes(width, byteorder="big", signed=False) for unit in units)
    return base64.b64encode(blob).decode("ascii")


def decode_units(text: str, width: int = UNIT_WIDTH) -> list[int]:
    """Reverses `encode_units`.

    Args:
        text: The base64 text.
        width: Block size in bytes, same as used for encoding.

    Returns:
        The units in their original order.

    Raises:
        DecodeError: If the text is not valid base64 or does not split into whole blocks.
    """
    blob = _b64_dec(text)
    if len(blob) % width != 0:
        raise DecodeError(f"Payload of {len(blob)} bytes is not a multiple of the {width}-byte unit width")
    return [int.from_bytes(blob[i:i + width], byteorder="big", signed=False) for i in range(0, len(blob), width)]


def encode_big_units(units: Iterable[int]) -> str:
    """Encodes units of any size as a base64 DER SEQUENCE OF INTEGER.

    Raises:
        OverflowError: If a unit is negative.
    """
    seq = CipherUnits().clear()
    for pos, unit in enumerate(units):
        if unit < 0:
            raise OverflowError("Ciphertext units must be non-negative")
        seq.setComponentByPosition(pos, int(unit))
    return base64.b64encode(encoder.encode(seq)).decode("ascii")


def decode_big_units(text: str) -> list[int]:
    """Reverses `encode_big_units`.

    Raises:
        DecodeError: If the text is not valid base64, not a single DER SEQUENCE OF INTEGER, or holds negative units.
    """
    blob = _b64_dec(text)
    try:
        seq, rest = decoder.decode(blob, asn1Spec=CipherUnits())
    except error.PyAsn1Error as exc:
        raise DecodeError(f"Invalid DER payload: {exc}") from exc
    if rest:
        raise DecodeError(f"{len(rest)} trailing bytes after DER payload")
    units = [int(unit) for unit in seq]
    if any(unit < 0 for unit in units):
        raise DecodeError("Ciphertext units must be non-negative")
    return units
