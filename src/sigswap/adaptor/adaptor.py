"""
Schnorr adaptor signatures binding a BIP340 spend signature to the second half of a target BIP340 signature.

Notation: G generator, n group order, P the spender's even-y public key, m the spend-condition digest.
The target signature (R_s, t) over m_s under P_s satisfies t·G = R_s + e_s·P_s, so T = t·G is computable from public
data. The Payer pre-signs with R_a = R_p + T:

    s_a·G = R_p + c·P,   c = H(x(R_a) || x(P) || m)

and once the Signer adds t, (x(R_a), s_a + t) is a standard signature over m. Whoever sees both s_a and s_a + t
learns t.
"""
from secrets import token_bytes

from sigswap.core import ECC, ADAPTOR, AdaptorError, ExtractionError, NonceGenerationError, PointError, SchnorrError
from sigswap.cryptography import (SECP256K1, ORDER, Point, add_points, challenge, has_even_y, lift_x, negate,
                                  scalar_multiplication, schnorr_verify, scalar_to_bytes, xonly_bytes)
from sigswap.adaptor.nonce import RandFunc, generate_nonce
from sigswap.adaptor.records import AdaptorRecord, CompletedSignature
from sigswap.logger import get_logger

__all__ = ["build_adaptor_point", "generate_adaptor", "verify_adaptor", "VerifiedAdaptor", "accept_adaptor",
           "complete_adaptor", "extract_secret", "recover_signature"]

logger = get_logger(__name__)
BYTE_LEN = ECC.COORD_BYTES

_VERIFIER_KEY = object()


def _check_bytes32(name: str, value: bytes):
    if len(value) != BYTE_LEN:
        raise AdaptorError(f"{name} must be exactly {BYTE_LEN} bytes")


def build_adaptor_point(target_nonce_x: bytes, target_pubkey_x: bytes, target_msg: bytes) -> Point:
    """
    T = R + e·P where e = challenge(x(R), x(P), m) and R, P are the even-y lifts of the given x-coordinates.

    Raises a PointError if either x-coordinate is not on the curve.
    """
    _check_bytes32("Target nonce x", target_nonce_x)
    _check_bytes32("Target pubkey x", target_pubkey_x)
    _check_bytes32("Target message", target_msg)

    e = challenge(target_nonce_x, target_pubkey_x, target_msg)
    nonce_point = lift_x(target_nonce_x)
    pubkey = lift_x(target_pubkey_x)

    adaptor_point = add_points(nonce_point, scalar_multiplication(e, pubkey))
    if not adaptor_point:
        raise PointError("Adaptor point is the point at infinity")
    logger.debug(f"Adaptor point T: {adaptor_point.x:064x}")
    return adaptor_point


def generate_adaptor(secret_key: int, pubkey_x: bytes, adaptor_point: Point, msg: bytes,
                     randfunc: RandFunc = token_bytes, max_attempts: int = ADAPTOR.MAX_NONCE_ATTEMPTS) -> AdaptorRecord:
    """
    Payer side. Produces the pre-signature s_a for one payment unit.

    1) Draw (r, R) with y(R) even and set R_a = R + T. Redraw until y(R_a) is even, at most max_attempts times.
    2) c = challenge(x(R_a), x(P), m)
    3) If k·G has odd y, use n − c (P is always taken with even y).
    4) s_a = r + c·k (mod n)

    Every call draws a new nonce. Two records sharing a nonce under the same key leak the key.
    """
    if not 1 <= secret_key < ORDER:
        raise AdaptorError("Secret key must be in range [1, n)")
    _check_bytes32("Public key x", pubkey_x)
    _check_bytes32("Message", msg)
    if not adaptor_point or not SECP256K1.is_point_on_curve(adaptor_point):
        raise PointError("Adaptor point must be a finite curve point")

    key_point = SECP256K1.multiply_generator(secret_key)
    if xonly_bytes(key_point) != pubkey_x:
        raise AdaptorError("Secret key does not match the given public key")

    for attempt in range(1, max_attempts + 1):
        nonce = generate_nonce(randfunc)
        adaptor_nonce = add_points(nonce.point, adaptor_point)
        if adaptor_nonce and has_even_y(adaptor_nonce):
            break
    else:
        logger.error(f"No even-y adaptor nonce after {max_attempts} attempts. Random source is degenerate")
        raise NonceGenerationError(f"Could not find an even-y adaptor nonce in {max_attempts} attempts")

    adaptor_nonce_x = xonly_bytes(adaptor_nonce)
    c = challenge(adaptor_nonce_x, pubkey_x, msg)
    if not has_even_y(key_point):
        c = negate(c)
    s_a = (nonce.scalar + c * secret_key) % ORDER

    logger.debug(f"Adaptor nonce found after {attempt} attempt(s): R_a = {adaptor_nonce_x.hex()}")
    return AdaptorRecord(s_a, nonce.x_bytes, adaptor_nonce_x)


def verify_adaptor(record: AdaptorRecord, pubkey_x: bytes, msg: bytes, adaptor_point: Point | None = None) -> bool:
    """
    Signer side. Accepts iff s_a·G equals R_p + c·P or R_p + (n − c)·P, with c = challenge(x(R_a), x(P), m).

    The two candidates correspond to the two parities of the Payer's real key: BIP340 fixes P to even y, so a verifier
    that cannot see the secret key checks both challenge signs. When adaptor_point is given, x(R_p + T) must also
    equal x(R_a), tying the record to the committed T.

    A rejection is a normal outcome and is returned as False. A Payer nonce that does not lift to a curve point is a
    rejection too, as the record comes from the counterparty.
    """
    _check_bytes32("Public key x", pubkey_x)
    _check_bytes32("Message", msg)

    try:
        pubkey = lift_x(pubkey_x)
        payer_nonce = lift_x(record.nonce_x)
    except PointError as e:
        logger.warning(f"Adaptor rejected: {e}")
        return False

    if adaptor_point is not None:
        expected = add_points(payer_nonce, adaptor_point)
        if not expected or not has_even_y(expected) or xonly_bytes(expected) != record.adaptor_nonce_x:
            logger.warning("Adaptor rejected: R_a is not R_p + T")
            return False

    c = challenge(record.adaptor_nonce_x, pubkey_x, msg)
    lhs = SECP256K1.multiply_generator(record.scalar)
    rhs_even = add_points(payer_nonce, scalar_multiplication(c, pubkey))
    if lhs == rhs_even:
        return True
    rhs_odd = add_points(payer_nonce, scalar_multiplication(negate(c), pubkey))
    if lhs == rhs_odd:
        return True

    logger.warning(f"Adaptor rejected: s_a does not match R_p = {record.nonce_x.hex()}")
    return False


class VerifiedAdaptor:
    """
    Proof that an AdaptorRecord passed verify_adaptor for a given key and message. Only accept_adaptor creates these,
    and complete_adaptor accepts nothing else. Its fields cannot be reassigned.
    """
    __slots__ = ("record", "pubkey_x", "msg")

    def __init__(self, record: AdaptorRecord, pubkey_x: bytes, msg: bytes, *, _key: object = None):
        if _key is not _VERIFIER_KEY:
            raise AdaptorError("VerifiedAdaptor can only be obtained from accept_adaptor")
        object.__setattr__(self, "record", record)
        object.__setattr__(self, "pubkey_x", pubkey_x)
        object.__setattr__(self, "msg", msg)

    def __setattr__(self, name, value):
        raise AdaptorError("VerifiedAdaptor is read-only")

    def __delattr__(self, name):
        raise AdaptorError("VerifiedAdaptor is read-only")

    def __repr__(self):
        return f"VerifiedAdaptor(R_a={self.record.adaptor_nonce_x.hex()})"


def accept_adaptor(record: AdaptorRecord, pubkey_x: bytes, msg: bytes,
                   adaptor_point: Point | None = None) -> VerifiedAdaptor | None:
    """Run verify_adaptor and return the completion capability, or None if the record is rejected"""
    if not verify_adaptor(record, pubkey_x, msg, adaptor_point):
        return None
    return VerifiedAdaptor(record, pubkey_x, msg, _key=_VERIFIER_KEY)


def complete_adaptor(verified: VerifiedAdaptor, hidden_scalar: int) -> CompletedSignature:
    """
    Signer side. s_c = s_a + t (mod n). The result (x(R_a), s_c) is a valid BIP340 signature over the verified message
    exactly when t is the discrete log of the T the record was built with.
    """
    if not isinstance(verified, VerifiedAdaptor):
        raise AdaptorError("Completion requires a VerifiedAdaptor from accept_adaptor")
    if not 0 < hidden_scalar < ORDER:
        raise AdaptorError("Hidden scalar must be in range [1, n)")

    record = verified.record
    return CompletedSignature(record.adaptor_nonce_x, (record.scalar + hidden_scalar) % ORDER)


def extract_secret(completed: CompletedSignature, record: AdaptorRecord) -> int:
    """
    Payer side. t = s_c − s_a (mod n), from the signature observed after settlement and the Payer's own record.
    """
    if completed.nonce_x != record.adaptor_nonce_x:
        raise AdaptorError("Completed signature does not belong to this adaptor record")
    return (completed.scalar - record.scalar) % ORDER


def recover_signature(target_nonce_x: bytes, secret: int, target_msg: bytes, target_pubkey_x: bytes) -> bytes:
    """
    Assemble the target signature x(R_s) || t and check it against the target message and key before returning it.
    Raises an ExtractionError if it does not verify.
    """
    _check_bytes32("Target nonce x", target_nonce_x)
    sig = target_nonce_x + scalar_to_bytes(secret)
    try:
        valid = schnorr_verify(target_pubkey_x, target_msg, sig)
    except SchnorrError as e:
        raise ExtractionError(f"Extracted signature could not be checked: {e}") from e
    if not valid:
        raise ExtractionError("Extracted signature does not verify against the target message and key")
    logger.info(f"Recovered target signature for nonce {target_nonce_x.hex()}")
    return sig
