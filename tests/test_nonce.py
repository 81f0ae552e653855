"""
The nonce generator: even-y points, independence, and failure on a degenerate random source
"""
import pytest

from sigswap.adaptor import generate_nonce
from sigswap.core import NonceGenerationError
from sigswap.cryptography import SECP256K1, has_even_y, multiply_generator, negate


def test_nonce_point_is_even_and_matches_scalar():
    for _ in range(4):
        nonce = generate_nonce()
        assert has_even_y(nonce.point)
        assert multiply_generator(nonce.scalar) == nonce.point
        assert 0 < nonce.scalar < SECP256K1.order


def test_independent_nonces_differ():
    assert generate_nonce().scalar != generate_nonce().scalar


def test_odd_draw_is_negated():
    # Find a fixed draw whose point has odd y, then check it comes back negated
    k = 1
    while has_even_y(multiply_generator(k)):
        k += 1
    nonce = generate_nonce(lambda n: k.to_bytes(n, "big"))
    assert nonce.scalar == negate(k)
    assert has_even_y(nonce.point)


def test_zero_source_fails():
    with pytest.raises(NonceGenerationError):
        generate_nonce(lambda n: b'\x00' * n)


def test_scalar_not_in_repr():
    nonce = generate_nonce()
    assert hex(nonce.scalar)[2:] not in repr(nonce)
