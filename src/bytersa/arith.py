"""Modular arithmetic primitives shared by key generation and the cipher engine.

Everything in here is written against the small set of operations any integer type provides (addition,
multiplication, modulo, floor division and comparison), so the same code drives both the fixed-width and the
arbitrary-precision paths.

Typical usage example:

    lam = lcm(60, 52)
    e = coprime_brute(lam)
    d = mod_inverse(e, lam)
    c = mod_exp(65, e, 3233)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


def gcd(a, b):
    """Greatest common divisor by Euclid's algorithm.

    Args:
        a: Non-negative integer.
        b: Non-negative integer.

    Returns:
        The greatest common divisor, `gcd(a, 0) == a`.
    """
    while b > 0:
        a, b = b, a % b
    return a


def lcm(a, b):
    """Least common multiple. Both arguments must be positive."""
    return a * (b // gcd(a, b))


def mod_exp(base, exponent, modulus):
    """Computes `base**exponent % modulus` by square-and-multiply.

    A zero exponent returns 1 without reducing, same as repeated multiplication would.

    Args:
        base: The integer to exponentiate.
        exponent: Non-negative exponent.
        modulus: Positive modulus.

    Returns:
        The modular power.

    Raises:
        ValueError: If the exponent is negative.
    """
    if exponent < 0:
        raise ValueError("Exponent must be non-negative")
    result = 1
    base = base % modulus
    while exponent > 0:
        if exponent % 2 == 1:
            result = (result * base) % modulus
        base = (base * base) % modulus
        exponent = exponent // 2
    return result


def mod_inverse(a: int, m: int) -> int | None:
    """Finds the smallest modular inverse of `a` in `[2, m)` by linear scan.

    Args:
        a: The number to invert.
        m: The modulus.

    Returns:
        The first `x` with `a*x % m == 1`, or None when the scan is exhausted.
    """
    for x in range(2, int(m)):
        if (a * x) % m == 1:
            return x
    return None


def coprime_brute(n: int) -> int | None:
    """Finds the smallest integer in `[2, n)` coprime to `n`.

    Returns:
        The first candidate with `gcd(i, n) == 1`, or None if there is none.
    """
    for i in range(2, int(n)):
        if gcd(i, n) == 1:
            return i
    return None


def mod_inverse_eea(a: int, m: int) -> int | None:
    """Drop-in replacement for `mod_inverse` that runs the extended Euclidean algorithm.

    Only the coefficient of `a` is tracked, since the coefficient of `m` vanishes modulo `m`. The result obeys the
    same `[2, m)` contract as the linear scan, so an inverse of 1 still counts as not found.

    Args:
        a: The number to invert.
        m: The modulus.

    Returns:
        The inverse of `a` modulo `m` if it lies in `[2, m)`, otherwise None.
    """
    if m < 2:
        return None
    rem, nxt = a % m, m
    coef, nxt_coef = 1, 0
    while nxt != 0:
        quot = rem // nxt
        rem, nxt = nxt, rem - quot * nxt
        coef, nxt_coef = nxt_coef, coef - quot * nxt_coef
    if rem != 1:
        return None
    x = coef % m
    return x if x >= 2 else None
