"""Byte-wise textbook RSA in an Academic Sense.

Provides key pair generation from a pool of small primes, per-byte RSA encryption and decryption over fixed-width
or arbitrary-precision integers, and a base64 wire form for the resulting ciphertext units.

Typical usage example:

    pub, priv = generate_key_pair()
    c = encrypt_text("Hi there!", pub)
    r = decrypt_text(c, priv)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from bytersa.codec import decode_big_units
from bytersa.codec import decode_units
from bytersa.codec import DecodeError
from bytersa.codec import encode_big_units
from bytersa.codec import encode_units
from bytersa.keygen import generate_key_pair
from bytersa.keygen import KeyPair
from bytersa.primes import DEFAULT_PRIMES
from bytersa.primes import RandomPrimePool
from bytersa.primes import TablePrimePool
from bytersa.rsa import BIGINT
from bytersa.rsa import Cipher
from bytersa.rsa import decrypt
from bytersa.rsa import decrypt_text
from bytersa.rsa import encrypt
from bytersa.rsa import encrypt_text
from bytersa.rsa import FIXED
from bytersa.rsa import Key

__version__ = "0.1.0"
__all__ = [
    "BIGINT",
    "Cipher",
    "DEFAULT_PRIMES",
    "DecodeError",
    "FIXED",
    "Key",
    "KeyPair",
    "RandomPrimePool",
    "TablePrimePool",
    "decode_big_units",
    "decode_units",
    "decrypt",
    "decrypt_text",
    "encode_big_units",
    "encode_units",
    "encrypt",
    "encrypt_text",
    "generate_key_pair",
]
