"""
The values exchanged between Payer and Signer for a single payment unit
"""
import json
from dataclasses import dataclass
from enum import Enum

from sigswap.core import ECC, ADAPTOR, AdaptorError, ScalarError, SERIALIZED, get_stream, read_stream, expect_end
from sigswap.cryptography import ORDER, scalar_to_bytes, bytes_to_scalar

__all__ = ["AdaptorState", "AdaptorRecord", "CompletedSignature"]
BYTE_LEN = ECC.COORD_BYTES


class AdaptorState(Enum):
    """
    Lifecycle of one payment unit. Transitions only move forward and VERIFIED cannot be skipped on the way to COMPLETED
    """
    GENERATED = "generated"
    SHARED = "shared"
    VERIFIED = "verified"
    COMPLETED = "completed"
    EXTRACTED = "extracted"


def _check_x(name: str, value: bytes):
    if not isinstance(value, (bytes, bytearray)) or len(value) != BYTE_LEN:
        raise AdaptorError(f"{name} must be exactly {BYTE_LEN} bytes")


def _check_scalar(name: str, value: int):
    if not isinstance(value, int) or not 0 <= value < ORDER:
        raise AdaptorError(f"{name} must be an integer in [0, n)")


@dataclass(frozen=True)
class AdaptorRecord:
    """
    The Payer's pre-signature for one payment unit:
        scalar          s_a = r_p + c·k (mod n), not a valid signature on its own
        nonce_x         x(R_p), the Payer's nonce
        adaptor_nonce_x x(R_a) with R_a = R_p + T
    """
    scalar: int
    nonce_x: bytes
    adaptor_nonce_x: bytes

    def __post_init__(self):
        _check_scalar("Adaptor scalar", self.scalar)
        _check_x("Payer nonce x", self.nonce_x)
        _check_x("Adaptor nonce x", self.adaptor_nonce_x)

    def to_bytes(self) -> bytes:
        return scalar_to_bytes(self.scalar) + bytes(self.nonce_x) + bytes(self.adaptor_nonce_x)

    @classmethod
    def from_bytes(cls, byte_stream: SERIALIZED):
        stream = get_stream(byte_stream)
        try:
            scalar = bytes_to_scalar(read_stream(stream, BYTE_LEN, "adaptor scalar"))
        except ScalarError as e:
            raise AdaptorError(f"Invalid adaptor scalar: {e}") from e
        nonce_x = read_stream(stream, BYTE_LEN, "payer nonce x")
        adaptor_nonce_x = read_stream(stream, BYTE_LEN, "adaptor nonce x")
        expect_end(stream, "adaptor record")
        return cls(scalar, nonce_x, adaptor_nonce_x)

    def to_dict(self) -> dict:
        return {
            "s_a": scalar_to_bytes(self.scalar).hex(),
            "R_p": self.nonce_x.hex(),
            "R_a": self.adaptor_nonce_x.hex(),
        }

    @classmethod
    def from_dict(cls, data: dict):
        try:
            raw = b''.join(bytes.fromhex(data[key]) for key in ("s_a", "R_p", "R_a"))
        except (KeyError, TypeError, ValueError) as e:
            raise AdaptorError(f"Malformed adaptor record: {data!r}") from e
        if len(raw) != ADAPTOR.RECORD_BYTES:
            raise AdaptorError(f"Adaptor record fields must total {ADAPTOR.RECORD_BYTES} bytes")
        return cls.from_bytes(raw)

    def to_json(self):
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class CompletedSignature:
    """
    (x(R_a), s_c = s_a + t mod n): a standard BIP340 signature over the spend condition
    """
    nonce_x: bytes
    scalar: int

    def __post_init__(self):
        _check_x("Completed nonce x", self.nonce_x)
        _check_scalar("Completed scalar", self.scalar)

    def to_bytes(self) -> bytes:
        return bytes(self.nonce_x) + scalar_to_bytes(self.scalar)

    @classmethod
    def from_bytes(cls, byte_stream: SERIALIZED):
        stream = get_stream(byte_stream)
        nonce_x = read_stream(stream, BYTE_LEN, "signature nonce x")
        try:
            scalar = bytes_to_scalar(read_stream(stream, BYTE_LEN, "signature scalar"))
        except ScalarError as e:
            raise AdaptorError(f"Invalid signature scalar: {e}") from e
        expect_end(stream, "completed signature")
        return cls(nonce_x, scalar)

    @classmethod
    def from_hex(cls, sig_hex: str):
        try:
            raw = bytes.fromhex(sig_hex)
        except ValueError as e:
            raise AdaptorError(f"Invalid signature hex: {sig_hex!r}") from e
        if len(raw) != ECC.SIG_BYTES:
            raise AdaptorError(f"Signature must be exactly {ECC.SIG_BYTES} bytes")
        return cls.from_bytes(raw)

    def hex(self) -> str:
        return self.to_bytes().hex()
