"""
The secp256k1 curve, its points, and the x-only conventions used by BIP340
"""
import json
from dataclasses import dataclass
from typing import Optional, Tuple

from sigswap.core import ECC, PointError
from sigswap.cryptography.ecc_math import is_quadratic_residue, modular_sqrt

__all__ = ["EllipticCurve", "Point", "SECP256K1", "add_points", "multiply_generator", "scalar_multiplication",
           "lift_x", "negate_point", "has_even_y", "xonly_bytes", "compress_point",
           "decompress_point"]


@dataclass(frozen=True)
class Point:
    """Immutable affine point. The point at infinity is Point() = (None, None)"""
    x: Optional[int] = None
    y: Optional[int] = None

    def __post_init__(self):
        if (self.x is None) != (self.y is None):
            raise ValueError("Point at infinity must have both coordinates as None")

    def __bool__(self) -> bool:
        """Point at infinity is falsy"""
        return self.x is not None and self.y is not None

    def __iter__(self):
        return iter((self.x, self.y))

    @property
    def tuple(self):
        return self.x, self.y


class EllipticCurve:
    """
    A short Weierstrass curve y^2 = x^3 + ax + b (mod p) whose rational points form a cyclic group of the given
    order, generated by the given generator.
    """

    def __init__(self, a: int, b: int, p: int, order: int, generator: Tuple[int, int] | Point,
                 curve: Optional[str] = None):
        if (4 * pow(a, 3) + 27 * pow(b, 2)) % p == 0:
            raise ValueError("Cannot use Singular curve in ECC")

        self.a = a
        self.b = b
        self.p = p
        self.order = order
        self.generator = Point(*generator) if isinstance(generator, tuple) else generator
        self.curve = curve

        # G, 2G, 4G, ... for fixed-base multiplication
        self._generator_doublings = self._precompute_doublings(self.generator)

    def __repr__(self):
        gx, gy = self.generator.x, self.generator.y
        hex_dict = {
            'a': hex(self.a),
            'b': hex(self.b),
            'p': hex(self.p),
            'order': hex(self.order),
            'generator': (hex(gx), hex(gy)),
        }
        if self.curve:
            hex_dict.update({'curve': self.curve})
        return json.dumps(hex_dict)

    def _precompute_doublings(self, point: Point) -> list:
        doublings = []
        current = point
        for _ in range(self.order.bit_length()):
            if not current:
                break
            doublings.append(current)
            current = self.double_point(current)
        return doublings

    def x_terms(self, x: int) -> int:
        """Compute x^3 + ax + b mod p"""
        x = x % self.p
        return (pow(x, 3, self.p) + self.a * x + self.b) % self.p

    def is_point_on_curve(self, point: Point) -> bool:
        if not point:
            return True
        return (point.y * point.y - self.x_terms(point.x)) % self.p == 0

    def is_x_on_curve(self, x: int) -> bool:
        if not 0 <= x < self.p:
            return False
        return is_quadratic_residue(self.x_terms(x), self.p)

    def lift_x(self, x: int) -> Point:
        """
        Returns the unique point with the given x-coordinate and even y-coordinate. Raises a PointError if x is not
        the x-coordinate of a curve point.
        """
        if not self.is_x_on_curve(x):
            raise PointError(f"Given x coordinate {hex(x)} is not on the curve.")
        y = modular_sqrt(self.x_terms(x), self.p)
        return Point(x, y if y % 2 == 0 else self.p - y)

    def negate_point(self, point: Point) -> Point:
        if not point:
            return point
        return Point(point.x, (-point.y) % self.p)

    def double_point(self, point: Point) -> Point:
        if not point or point.y == 0:
            return Point()

        x, y = point.tuple
        m = ((3 * x * x + self.a) * pow(2 * y, -1, self.p)) % self.p
        x3 = (m * m - 2 * x) % self.p
        y3 = (m * (x - x3) - y) % self.p
        return Point(x3, y3)

    def add_points(self, point1: Point, point2: Point) -> Point:
        if not point1:
            return point2
        if not point2:
            return point1

        x1, y1 = point1.tuple
        x2, y2 = point2.tuple

        if x1 == x2:
            if y1 == y2:
                return self.double_point(point1)
            return Point()  # inverses

        m = ((y2 - y1) * pow(x2 - x1, -1, self.p)) % self.p
        x3 = (m * m - x1 - x2) % self.p
        y3 = (m * (x1 - x3) - y1) % self.p
        return Point(x3, y3)

    def scalar_multiplication(self, n: int, point: Point) -> Point:
        """Double-and-add. The scalar is reduced modulo the group order first"""
        n = n % self.order
        if not point or n == 0:
            return Point()
        if point == self.generator:
            return self.multiply_generator(n)

        result = Point()
        addend = point
        while n > 0:
            if n & 1:
                result = self.add_points(result, addend)
            addend = self.double_point(addend)
            n >>= 1
        return result

    def multiply_generator(self, n: int) -> Point:
        """Fixed-base multiplication n * G using the precomputed doublings of G"""
        n = n % self.order
        result = Point()
        for doubling in self._generator_doublings:
            if n == 0:
                break
            if n & 1:
                result = self.add_points(result, doubling)
            n >>= 1
        return result


# --- SINGLETON INSTANCE --- #
_secp256k1_params = {
    'a': 0,
    'b': 7,
    'p': 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F,
    'order': 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
    'generator': (0x79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798,
                  0x483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8),
    'curve': "secp256k1"
}

SECP256K1 = EllipticCurve(**_secp256k1_params)


# --- CONVENIENCE FUNCTIONS --- #

def add_points(point1: Point, point2: Point) -> Point:
    return SECP256K1.add_points(point1, point2)


def multiply_generator(n: int) -> Point:
    return SECP256K1.multiply_generator(n)


def scalar_multiplication(n: int, point: Point) -> Point:
    return SECP256K1.scalar_multiplication(n, point)


def lift_x(x: int | bytes) -> Point:
    """Even-y lift of an x-only coordinate, given as an integer or 32 big-endian bytes"""
    if isinstance(x, (bytes, bytearray)):
        if len(x) != ECC.COORD_BYTES:
            raise PointError(f"x-only coordinate must be exactly {ECC.COORD_BYTES} bytes")
        x = int.from_bytes(x, "big")
    return SECP256K1.lift_x(x)


def negate_point(point: Point) -> Point:
    return SECP256K1.negate_point(point)


def has_even_y(point: Point) -> bool:
    if not point:
        raise PointError("Point at infinity has no y-coordinate")
    return point.y % 2 == 0


def xonly_bytes(point: Point) -> bytes:
    """32-byte big-endian x-coordinate"""
    if not point:
        raise PointError("Point at infinity has no x-only encoding")
    return point.x.to_bytes(ECC.COORD_BYTES, "big")


def compress_point(point: Point) -> bytes:
    """33-byte SEC1 compressed encoding"""
    prefix = ECC.EVEN_PREFIX if has_even_y(point) else ECC.ODD_PREFIX
    return prefix + xonly_bytes(point)


def decompress_point(data: bytes) -> Point:
    if len(data) != ECC.COMPRESSED_BYTES:
        raise PointError(f"Compressed point must be exactly {ECC.COMPRESSED_BYTES} bytes")
    prefix, x_bytes = data[:1], data[1:]
    if prefix not in (ECC.EVEN_PREFIX, ECC.ODD_PREFIX):
        raise PointError(f"Unidentified type byte for compressed point: {prefix.hex()}")
    point = lift_x(x_bytes)
    return point if prefix == ECC.EVEN_PREFIX else negate_point(point)
