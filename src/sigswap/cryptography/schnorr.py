"""
BIP340 Schnorr signatures over secp256k1, and the challenge hash shared by standard and adaptor signatures
"""
from secrets import token_bytes

from sigswap.core import ECC, SchnorrError, PointError
from sigswap.cryptography.ecc import SECP256K1, Point, lift_x, has_even_y, xonly_bytes
from sigswap.cryptography.hash_functions import schnorr_aux_hash, schnorr_challenge_hash, schnorr_nonce_hash
from sigswap.cryptography.scalars import negate, int_to_bytes32

#  --- CONSTANTS
BYTE_LEN = ECC.COORD_BYTES
ORDER = SECP256K1.order
PRIME = SECP256K1.p

__all__ = ["challenge", "schnorr_sig", "schnorr_verify", "xonly_pubkey", "generate_secret_key", "split_signature"]


def challenge(nonce_x: bytes, pubkey_x: bytes, msg: bytes) -> int:
    """
    e = int(tagged_hash("BIP0340/challenge", bytes32(x(R)) || bytes32(x(P)) || m)) mod n

    All three inputs must be exactly 32 bytes. The tag must match the verifying party's; a different tag yields a
    different challenge and the signature will simply fail to verify.
    """
    for name, field in (("nonce x", nonce_x), ("pubkey x", pubkey_x), ("message", msg)):
        if len(field) != BYTE_LEN:
            raise SchnorrError(f"Challenge {name} must be exactly {BYTE_LEN} bytes")
    return int.from_bytes(schnorr_challenge_hash(nonce_x + pubkey_x + msg), "big") % ORDER


def xonly_pubkey(priv_key: int) -> bytes:
    """The 32-byte x-only public key for the given secret scalar"""
    if not 1 <= priv_key < ORDER:
        raise SchnorrError(f"Private key must be in range [1, {ORDER})")
    return xonly_bytes(SECP256K1.multiply_generator(priv_key))


def generate_secret_key() -> int:
    """Uniform secret scalar in [1, n)"""
    priv_key = 0
    while priv_key == 0:
        priv_key = int.from_bytes(token_bytes(BYTE_LEN), "big") % ORDER
    return priv_key


def split_signature(sig: bytes) -> tuple[bytes, int]:
    """Split a 64-byte signature into (x(R) bytes, s)"""
    if len(sig) != 2 * BYTE_LEN:
        raise SchnorrError(f"Signature must be exactly {2 * BYTE_LEN} bytes")
    return sig[:BYTE_LEN], int.from_bytes(sig[BYTE_LEN:], "big")


def schnorr_sig(priv_key: int, msg: bytes, aux_bytes: bytes = None) -> bytes:
    """
    Produces a BIP-340 Schnorr signature for the given 32-byte message and private key.

    Parameters
    ----------
    priv_key : int
        The signer's secret scalar in [1, n).
    msg : bytes
        The 32-byte message digest.
    aux_bytes : bytes
        Optional 32-byte auxiliary randomness mixed into the deterministic nonce. Defaults to 32 zero bytes.

    Returns
    -------
    bytes
        64-byte signature bytes32(x(R)) || bytes32(s)

    Algorithm (BIP-340)
    -------------------
    1) P = d·G. If y(P) is odd, d' = n − d; else d' = d.
    2) t = bytes32(d') XOR tagged_hash("BIP0340/aux", aux)
       k0 = int(tagged_hash("BIP0340/nonce", t || x(P) || m)) mod n, abort if zero.
    3) R = k0·G. If y(R) is odd, k = n − k0; else k = k0.
    4) e = challenge(x(R), x(P), m)
    5) s = (k + e·d') mod n
    """
    n = ORDER
    curve = SECP256K1
    aux_bytes = b'\x00' * BYTE_LEN if aux_bytes is None else aux_bytes

    # --- Input validation -- #
    if not (1 <= priv_key < n):
        raise SchnorrError(f"Private key must be in range [1, {n})")
    if len(msg) != BYTE_LEN:
        raise SchnorrError(f"Message to sign must be exactly {BYTE_LEN} bytes")
    if len(aux_bytes) != BYTE_LEN:
        raise SchnorrError(f"Auxiliary bytes must be exactly {BYTE_LEN} bytes")

    # 1. Public key with even y
    pubkey = curve.multiply_generator(priv_key)
    if not has_even_y(pubkey):
        priv_key = negate(priv_key)
    pubkey_x = xonly_bytes(pubkey)

    # 2. Deterministic nonce
    masked_key = priv_key ^ int.from_bytes(schnorr_aux_hash(aux_bytes), "big")
    k = int.from_bytes(schnorr_nonce_hash(int_to_bytes32(masked_key) + pubkey_x + msg), "big") % n
    if k == 0:
        raise SchnorrError("Generated 0-nonce for Schnorr signature")

    # 3. Public nonce with even y
    nonce_point = curve.multiply_generator(k)
    if not has_even_y(nonce_point):
        k = negate(k)
    nonce_x = xonly_bytes(nonce_point)

    # 4-5. Challenge and signature scalar
    e = challenge(nonce_x, pubkey_x, msg)
    s = (k + e * priv_key) % n

    sig = nonce_x + s.to_bytes(BYTE_LEN, "big")
    if not schnorr_verify(pubkey_x, msg, sig):
        raise SchnorrError("Generated invalid signature.")
    return sig


def schnorr_verify(xonly_pubkey: int | bytes, msg: bytes, sig: bytes) -> bool:
    """
    Verifies a BIP-340 Schnorr signature (x-only, secp256k1).

    Wrong lengths and a public key that is not on the curve raise a SchnorrError. Every other failure, including
    r >= p and s >= n, returns False.

    Algorithm (BIP-340) verification
    --------------------------------
    1) P = lift_x(x(P)) with even y
    2) e = challenge(r, x(P), m)
    3) R' = s·G − e·P
    4) Accept iff R' is not infinity, y(R') is even and x(R') == r
    """
    n = ORDER
    curve = SECP256K1
    if isinstance(xonly_pubkey, int):
        xonly_pubkey = int_to_bytes32(xonly_pubkey)

    # --- INPUT VALIDATION --- #
    if len(xonly_pubkey) != BYTE_LEN:
        raise SchnorrError(f"Public key must be exactly {BYTE_LEN} bytes")
    if len(msg) != BYTE_LEN:
        raise SchnorrError(f"Signed message must be exactly {BYTE_LEN} bytes")
    r_bytes, s = split_signature(sig)
    r = int.from_bytes(r_bytes, "big")
    if r >= PRIME or s >= n:
        return False

    try:
        pubkey = lift_x(xonly_pubkey)
    except PointError as e:
        raise SchnorrError("Given public key x coordinate not on curve") from e

    # --- MAIN ALGORITHM --- #
    e = challenge(r_bytes, xonly_pubkey, msg)
    nonce_point: Point = curve.add_points(curve.multiply_generator(s), curve.scalar_multiplication(n - e, pubkey))

    if not nonce_point or not has_even_y(nonce_point):
        return False
    return nonce_point.x == r
