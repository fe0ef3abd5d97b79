"""Prime pools feeding the key generator, with the primality checks needed to build them.

A prime pool is anything with a `draw()` method returning a positive integer presumed prime. The key generator
never verifies primality itself, so the cryptographic properties of a key pair rest entirely on the pool.
Two pools are provided: a fixed table (by default the small primes up to 151) and a generator of fresh random
probable primes of a requested bit length.

Typical usage example:

    pool = TablePrimePool(DEFAULT_PRIMES)
    pool = TablePrimePool.generate(16, 32)
    pool = RandomPrimePool(12)
    p = pool.draw()
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import random
import secrets
from typing import Iterable, Protocol

logger = logging.getLogger(__name__)

DEFAULT_PRIMES: tuple[int, ...] = (
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37,
    41, 43, 47, 53, 59, 61, 67, 71, 73, 79, 83, 89,
    97, 101, 103, 107, 109, 113, 127, 131, 137, 139, 149, 151,
)  # yapf: disable
MINIMUM_BITS: int = 8

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0


class PrimePool(Protocol):
    """Source of candidate primes."""

    def draw(self) -> int:
        ...


def _sieve(limit: int = 10000) -> list[int]:
    """Odd-only Sieve of Eratosthenes.

    Args:
        limit: Inclusive upper bound, anything below 2 yields no primes.

    Returns:
        Every prime up to `limit`, ascending.
    """
    if limit < 2:
        return []
    # Slot k stands for the odd number 2k + 3.
    odd = bytearray([1]) * ((limit - 1) // 2)
    for k in range(int(limit**0.5) // 2):
        if odd[k]:
            step = 2 * k + 3
            start = (step * step - 3) // 2
            odd[start::step] = bytes(len(range(start, len(odd), step)))
    return [2] + [2 * k + 3 for k, flag in enumerate(odd) if flag]


def get_pre_primes(n: int = 10000, change: bool = False) -> list[int]:
    """Small primes used to pre-filter candidates, sieved once and cached module-wide.

    The cache is rebuilt when a greater range is requested, when it is empty, or when `change` forces it.

    Args:
        n: Inclusive bound the cached primes must reach. Must be >= 0.
        change: Rebuild the cache for exactly `n`, even if it already reaches further.

    Returns:
        Ascending primes up to at least `n`, or exactly up to `n` if `change` is True.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if n > _SMALL_PRIMES_CAP or change or not _SMALL_PRIMES:
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _trial_division(candidate: int, bound: int = 10000) -> bool:
    """Cheap composite filter run before Miller-Rabin.

    Returns:
        False once a small prime up to `bound` divides `candidate` (or it is below 2), True if it survives.
    """
    if candidate < 2:
        return False
    for prime in get_pre_primes(bound):
        if prime * prime > candidate:
            break
        if candidate % prime == 0:
            return False
    return True


def _miller_rabin(w: int, iters: int, rng: random.Random) -> bool:
    """Perform Miller-Rabin primality test.

    Args:
        w: Odd integer to be tested.
        iters: Number of Miller-Rabin iterations to perform.
        rng: Source of the random bases.

    Returns:
        True if `w` is probably prime, False otherwise.
    """
    if w <= 3:
        return w == 2 or w == 3
    if w % 2 == 0:
        return False
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    for _ in range(iters):
        b = rng.randrange(2, w - 1)
        z = pow(b, m, w)
        if z == 1 or z == w - 1:
            continue
        for _ in range(1, a):
            z = pow(z, 2, w)
            if z == w - 1:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def check_prime(candidate: int, iters: int = 40, n: int = 10000, rng: random.Random | None = None) -> bool:
    """Trial division by the primes up to `n`, then Miller-Rabin.

    Candidates below `n**2` are decided by trial division alone.

    Args:
        candidate: The candidate prime to test.
        iters: Number of Miller-Rabin iterations to perform.
        n: The number up to which to generate primes for trial division. Defaults to 10000.
        rng: Randomness provider for the Miller-Rabin bases. Defaults to the system source.

    Returns:
        True if `candidate` is probably prime, False otherwise.
    """
    if not _trial_division(candidate, n):
        return False
    if candidate < n * n:
        return True
    return _miller_rabin(candidate, iters, rng or secrets.SystemRandom())


class TablePrimePool:
    """Draws uniformly from a fixed table of primes.

    Attributes:
        primes: The distinct candidate primes, in ascending order.
    """

    def __init__(self, primes: Iterable[int] = DEFAULT_PRIMES, rng: random.Random | None = None) -> None:
        self.primes: tuple[int, ...] = tuple(sorted(set(primes)))
        if any(p < 1 for p in self.primes):
            raise ValueError("Prime table must hold positive integers only")
        if len(self.primes) < 2:
            raise ValueError("Prime table must hold at least two distinct values")
        self.rng = rng or secrets.SystemRandom()

    def draw(self) -> int:
        return self.primes[self.rng.randrange(len(self.primes))]

    @classmethod
    def generate(cls, bits: int, count: int, rng: random.Random | None = None) -> "TablePrimePool":
        """Builds a table of `count` distinct random primes of `bits` bits.

        Args:
            bits: Bit length of each prime.
            count: Number of distinct primes in the table. Must be >= 2.
            rng: Randomness provider, shared by generation and later draws.

        Returns:
            A new table pool.

        Raises:
            ValueError: If `count` is below two.
            RuntimeError: If `count` distinct primes could not be collected, most likely because `bits` is too
                small to hold that many.
        """
        if count < 2:
            raise ValueError("count must be >= 2")
        source = RandomPrimePool(bits, rng)
        found: set[int] = set()
        rep_cap = count * 50
        for _ in range(rep_cap):
            found.add(source.draw())
            if len(found) == count:
                logger.debug("Generated table of %d primes of %d bits", count, bits)
                return cls(found, source.rng)
        raise RuntimeError(f"Only {len(found)} distinct primes of {bits} bits found after {rep_cap} draws.")


class RandomPrimePool:
    """Draws a fresh probable prime of exactly `bits` bits on every call.

    The two most significant bits are always set, so the product of any two draws has `2 * bits` bits.
    """

    def __init__(self, bits: int, rng: random.Random | None = None) -> None:
        if bits < MINIMUM_BITS:
            raise ValueError(f"bits must be >= {MINIMUM_BITS}")
        self.bits = bits
        self.rng = rng or secrets.SystemRandom()

    def draw(self) -> int:
        """Generates one probable prime.

        Raises:
            RuntimeError: If generation loops way beyond a reasonable time.
        """
        msk = (1 << self.bits - 1) | (1 << self.bits - 2) | 1
        rep_cap = self.bits * 50
        for _ in range(rep_cap):
            cand = self.rng.getrandbits(self.bits) | msk
            if check_prime(cand, rng=self.rng):
                return cand
        raise RuntimeError(f"Run an improbable {rep_cap} amount of loops with no prime found. "
                           "Check the random number generator.")
