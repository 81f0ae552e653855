"""
Scalar arithmetic modulo the secp256k1 group order, and the fixed-width 32-byte big-endian encodings of scalars
"""
from sigswap.core import ECC, ScalarError
from sigswap.cryptography.ecc import SECP256K1

__all__ = ["ORDER", "negate", "reduce", "int_to_bytes32", "bytes32_to_int", "scalar_to_bytes", "bytes_to_scalar",
           "scalar_to_hex", "scalar_from_hex"]

ORDER = SECP256K1.order
BYTE_LEN = ECC.COORD_BYTES


def negate(scalar: int) -> int:
    """(n - scalar) mod n"""
    return (ORDER - scalar) % ORDER


def reduce(value: int) -> int:
    """Reduce an integer of any width modulo n"""
    return value % ORDER


def int_to_bytes32(value: int) -> bytes:
    if not 0 <= value < 1 << (8 * BYTE_LEN):
        raise ScalarError(f"Integer does not fit in {BYTE_LEN} bytes")
    return value.to_bytes(BYTE_LEN, "big")


def bytes32_to_int(data: bytes) -> int:
    if len(data) != BYTE_LEN:
        raise ScalarError(f"Expected exactly {BYTE_LEN} bytes, received {len(data)}")
    return int.from_bytes(data, "big")


def scalar_to_bytes(scalar: int) -> bytes:
    """Encode a scalar in [0, n) as 32 zero-padded big-endian bytes"""
    if not 0 <= scalar < ORDER:
        raise ScalarError("Scalar out of range [0, n)")
    return scalar.to_bytes(BYTE_LEN, "big")


def bytes_to_scalar(data: bytes) -> int:
    """Decode 32 big-endian bytes as a scalar, rejecting values >= n rather than reducing them"""
    value = bytes32_to_int(data)
    if value >= ORDER:
        raise ScalarError("Encoded scalar is not less than the group order")
    return value


def scalar_to_hex(scalar: int) -> str:
    return scalar_to_bytes(scalar).hex()


def scalar_from_hex(hex_str: str) -> int:
    try:
        data = bytes.fromhex(hex_str)
    except ValueError as e:
        raise ScalarError(f"Invalid hex for scalar: {hex_str!r}") from e
    return bytes_to_scalar(data)
