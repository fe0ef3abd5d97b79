"""Key pair generation from a pool of candidate primes.

Two distinct primes are drawn from the pool, the modulus and the Carmichael function of it are derived, and a
public exponent with its inverse is searched for. Any draw that cannot produce a usable pair (a modulus smaller
than the plaintext alphabet, or an exponent search coming up empty) is simply discarded and a new pair of primes
is drawn. With a pool that can never satisfy these conditions this loops forever unless `max_attempts` is given.

Typical usage example:

    pub, priv = generate_key_pair()
    pub, priv = generate_key_pair(RandomPrimePool(12), inverse=mod_inverse_eea)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import random
from typing import Callable, NamedTuple

from bytersa import arith
from bytersa.primes import DEFAULT_PRIMES
from bytersa.primes import PrimePool
from bytersa.primes import TablePrimePool
from bytersa.rsa import ALPHABET_SIZE
from bytersa.rsa import Key

logger = logging.getLogger(__name__)

Search = Callable[[int], int | None]
InverseSearch = Callable[[int, int], int | None]


class KeyPair(NamedTuple):
    public: Key
    private: Key


def select_primes(pool: PrimePool) -> tuple[int, int]:
    """Draws two distinct primes from the pool."""
    p = pool.draw()
    q = pool.draw()
    while p == q:
        q = pool.draw()
    return p, q


def derive_key_pair(p: int,
                    q: int,
                    alphabet: int = ALPHABET_SIZE,
                    coprime: Search = arith.coprime_brute,
                    inverse: InverseSearch = arith.mod_inverse) -> KeyPair | None:
    """Derives a key pair from two primes.

    Args:
        p: The first prime.
        q: The second prime, distinct from `p`.
        alphabet: Number of distinct plaintext units. The modulus must be at least this large or decryption
            could not tell some units apart.
        coprime: Search for the public exponent given the Carmichael function value.
        inverse: Search for the private exponent given the public one and the Carmichael function value.

    Returns:
        The key pair, or None if these primes cannot produce one and a new pair must be drawn.
    """
    n = p * q
    if n < alphabet:
        logger.debug("Modulus %d of (%d, %d) is below the alphabet size %d", n, p, q, alphabet)
        return None
    lam = arith.lcm(p - 1, q - 1)
    e = coprime(lam)
    if e is None:
        logger.debug("No public exponent coprime to %d for (%d, %d)", lam, p, q)
        return None
    d = inverse(e, lam)
    if d is None:
        logger.debug("No inverse of %d modulo %d for (%d, %d)", e, lam, p, q)
        return None
    return KeyPair(Key(n, e), Key(n, d))


def generate_key_pair(pool: PrimePool | None = None,
                      rng: random.Random | None = None,
                      alphabet: int = ALPHABET_SIZE,
                      coprime: Search = arith.coprime_brute,
                      inverse: InverseSearch = arith.mod_inverse,
                      max_attempts: int | None = None) -> KeyPair:
    """Generates a (public, private) key pair.

    Args:
        pool: Source of candidate primes. Defaults to a table pool over the small primes up to 151.
        rng: Randomness provider for the default pool. Ignored when `pool` is given.
        alphabet: Minimum modulus, see `derive_key_pair`.
        coprime: Public exponent search, see `derive_key_pair`.
        inverse: Private exponent search, see `derive_key_pair`.
        max_attempts: Cap on the number of prime pairs tried. Unbounded by default.

    Returns:
        The key pair. Both keys share the modulus.

    Raises:
        RuntimeError: If `max_attempts` prime pairs were tried without success.
    """
    if pool is None:
        pool = TablePrimePool(DEFAULT_PRIMES, rng)
    attempt = 0
    while max_attempts is None or attempt < max_attempts:
        attempt += 1
        p, q = select_primes(pool)
        pair = derive_key_pair(p, q, alphabet, coprime, inverse)
        if pair is not None:
            logger.debug("Generated key pair with modulus %d after %d attempt(s)", pair.public.mod, attempt)
            return pair
    raise RuntimeError(f"No usable key pair found in {max_attempts} attempts. Check the prime pool.")
