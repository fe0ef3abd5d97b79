# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import random

import pytest

from bytersa import arith
from bytersa import keygen
from bytersa import primes
from bytersa.rsa import Key


class ScriptedPool:
    """Pool replaying a fixed sequence of draws."""

    def __init__(self, draws):
        self.draws = list(draws)
        self.calls = 0

    def draw(self):
        self.calls += 1
        return self.draws.pop(0)


def test_derive_concrete():
    pair = keygen.derive_key_pair(61, 53)
    assert pair == keygen.KeyPair(Key(3233, 7), Key(3233, 223))
    assert pair.public.mod == pair.private.mod == 3233


def test_derive_modulus_too_small(caplog):
    with caplog.at_level(logging.DEBUG, logger="bytersa.keygen"):
        assert keygen.derive_key_pair(11, 13) is None
    assert "below the alphabet size" in caplog.text


@pytest.mark.parametrize("p,q", [(2, 131), (2, 127), (3, 89), (17, 19)])
def test_derive_threshold(p, q):
    pair = keygen.derive_key_pair(p, q)
    if p * q < keygen.ALPHABET_SIZE:
        assert pair is None
    else:
        assert pair is not None
        assert pair.public.mod == p * q


def test_derive_custom_alphabet():
    assert keygen.derive_key_pair(61, 53, alphabet=4000) is None
    assert keygen.derive_key_pair(3, 5, alphabet=15) is not None


def test_derive_coprime_failure(mocker):
    coprime = mocker.Mock(return_value=None)
    inverse = mocker.Mock()
    assert keygen.derive_key_pair(61, 53, coprime=coprime, inverse=inverse) is None
    coprime.assert_called_once_with(780)
    inverse.assert_not_called()


def test_derive_inverse_failure(mocker):
    inverse = mocker.Mock(return_value=None)
    assert keygen.derive_key_pair(61, 53, inverse=inverse) is None
    inverse.assert_called_once_with(7, 780)


def test_derive_eea_same_result():
    for p in primes.DEFAULT_PRIMES:
        for q in primes.DEFAULT_PRIMES:
            if p != q:
                assert keygen.derive_key_pair(p, q, inverse=arith.mod_inverse_eea) == keygen.derive_key_pair(p, q)


@pytest.mark.parametrize("p,q", [(61, 53), (151, 149), (2, 131), (3, 101), (97, 5)])
def test_derive_exponents_valid(p, q):
    pub, priv = keygen.derive_key_pair(p, q)
    lam = arith.lcm(p - 1, q - 1)
    assert arith.gcd(pub.expo, lam) == 1
    assert (pub.expo * priv.expo) % lam == 1
    for m in range(pub.mod):
        assert pow(pow(m, pub.expo, pub.mod), priv.expo, priv.mod) == m


def test_select_primes_distinct():
    pool = ScriptedPool([61, 61, 61, 53])
    assert keygen.select_primes(pool) == (61, 53)
    assert pool.calls == 4


def test_generate_retries_small_modulus():
    pool = ScriptedPool([2, 3, 11, 13, 61, 53])
    pair = keygen.generate_key_pair(pool)
    assert pair == (Key(3233, 7), Key(3233, 223))
    assert pool.calls == 6


def test_generate_retries_failed_search(mocker):
    pool = ScriptedPool([61, 53, 61, 53])
    inverse = mocker.Mock(side_effect=[None, 223])
    pair = keygen.generate_key_pair(pool, inverse=inverse)
    assert pair.private == Key(3233, 223)
    assert inverse.call_count == 2


def test_generate_bounded():
    pool = ScriptedPool([2, 3] * 5)
    with pytest.raises(RuntimeError):
        keygen.generate_key_pair(pool, max_attempts=5)


def test_generate_default_pool_deterministic():
    first = keygen.generate_key_pair(rng=random.Random(42))
    second = keygen.generate_key_pair(rng=random.Random(42))
    assert first == second


@pytest.mark.parametrize("seed", range(50))
def test_generate_modulus_threshold(seed):
    pub, priv = keygen.generate_key_pair(rng=random.Random(seed))
    assert pub.mod >= keygen.ALPHABET_SIZE
    assert pub.mod == priv.mod


@pytest.mark.slow
@pytest.mark.parametrize("bits", [8, 10])
def test_generate_random_pool(bits):
    rng = random.Random(bits)
    pub, priv = keygen.generate_key_pair(primes.RandomPrimePool(bits, rng))
    assert (2 * bits - 1) <= pub.mod.bit_length() <= 2 * bits
    message = 0xC0FFEE % pub.mod
    assert pow(pow(message, pub.expo, pub.mod), priv.expo, priv.mod) == message


def test_generate_random_pool_fast_inverse():
    rng = random.Random(7)
    pub, priv = keygen.generate_key_pair(primes.RandomPrimePool(24, rng), inverse=arith.mod_inverse_eea)
    assert 47 <= pub.mod.bit_length() <= 48
    message = 0xC0FFEE
    assert pow(pow(message, pub.expo, pub.mod), priv.expo, priv.mod) == message
