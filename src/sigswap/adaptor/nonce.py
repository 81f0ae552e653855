"""
Fresh single-use nonces with an even-y public point
"""
from dataclasses import dataclass
from secrets import token_bytes
from typing import Callable

from sigswap.core import ECC, NonceGenerationError
from sigswap.cryptography import SECP256K1, Point, has_even_y, negate, negate_point, xonly_bytes

__all__ = ["NonceCommitment", "RandFunc", "generate_nonce"]

RandFunc = Callable[[int], bytes]


@dataclass(frozen=True)
class NonceCommitment:
    """
    A secret nonce scalar r and its public point R = r·G, with y(R) even. Never reuse one across two signatures
    under the same key: two equations with a shared r reveal the key.
    """
    scalar: int
    point: Point

    def __repr__(self):
        # The scalar stays out of logs and tracebacks
        return f"NonceCommitment(point_x={self.x_bytes.hex()})"

    @property
    def x_bytes(self) -> bytes:
        return xonly_bytes(self.point)


def generate_nonce(randfunc: RandFunc = token_bytes, max_draws: int = 8) -> NonceCommitment:
    """
    Draw a uniform nonzero scalar r, compute R = r·G and, if y(R) is odd, replace (r, R) with (n - r, -R).

    Parity never needs a retry. A draw is repeated only when it reduces to zero, which a working random source does
    with negligible probability, so max_draws zero draws in a row raise a NonceGenerationError.
    """
    for _ in range(max_draws):
        r = int.from_bytes(randfunc(ECC.COORD_BYTES), "big") % SECP256K1.order
        if r == 0:
            continue
        point = SECP256K1.multiply_generator(r)
        if not has_even_y(point):
            r, point = negate(r), negate_point(point)
        return NonceCommitment(r, point)

    raise NonceGenerationError(f"Random source returned a zero scalar {max_draws} times in a row")
