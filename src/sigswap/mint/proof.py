"""
Payment units locked to a public key (Cashu NUT-10/NUT-11 P2PK proofs), their identifiers, and tokens carrying them
"""
import json
from dataclasses import dataclass, field, replace
from secrets import token_bytes

from sigswap.core import ECC, MINT, PointError, TokenError
from sigswap.cryptography import Point, SECP256K1, compress_point, hash_to_curve_prefix, sha256

__all__ = ["Proof", "Token", "hash_to_curve", "p2pk_secret", "p2pk_locking_key", "split_amount", "validate_token",
           "witness_signatures"]


def hash_to_curve(message: bytes) -> Point:
    """
    Cashu NUT-00 hash-to-curve: h = sha256(domain || message), then the first counter in little-endian 4 bytes for
    which 02 || sha256(h || counter) is a valid compressed point.
    """
    msg_hash = hash_to_curve_prefix(message)
    for counter in range(MINT.MAX_HASH_TO_CURVE_COUNTER):
        candidate_x = int.from_bytes(sha256(msg_hash + counter.to_bytes(4, "little")), "big")
        if SECP256K1.is_x_on_curve(candidate_x):
            return SECP256K1.lift_x(candidate_x)
    raise PointError("No valid point found for hash_to_curve")


def p2pk_secret(pubkey_x: bytes, nonce: bytes | None = None, tags: list | None = None) -> str:
    """NUT-10 well-known secret locking a proof to the even-y key with the given x-coordinate"""
    if len(pubkey_x) != ECC.COORD_BYTES:
        raise TokenError(f"Locking key must be an x-only key of {ECC.COORD_BYTES} bytes")
    nonce = token_bytes(ECC.COORD_BYTES) if nonce is None else nonce
    payload = {
        "nonce": nonce.hex(),
        "data": (ECC.EVEN_PREFIX + pubkey_x).hex(),
        "tags": tags or [],
    }
    return json.dumps([MINT.P2PK_KIND, payload], separators=(',', ':'))


def p2pk_locking_key(secret: str) -> bytes | None:
    """The x-only key a P2PK secret locks to, or None for a plain secret"""
    try:
        kind, payload = json.loads(secret)
    except (ValueError, TypeError):
        return None
    if kind != MINT.P2PK_KIND:
        return None
    try:
        data = bytes.fromhex(payload["data"])
    except (KeyError, TypeError, ValueError) as e:
        raise TokenError(f"Malformed P2PK secret: {secret}") from e
    if len(data) != ECC.COMPRESSED_BYTES:
        raise TokenError("P2PK data must be a compressed public key")
    return data[1:]


def witness_signatures(witness: str) -> list[str]:
    """Signatures listed in a NUT-11 witness {"signatures": [...]}"""
    try:
        return list(json.loads(witness)["signatures"])
    except (ValueError, KeyError, TypeError) as e:
        raise TokenError(f"Malformed proof witness: {witness}") from e


def split_amount(amount: int) -> list[int]:
    """Powers of two summing to amount, smallest first"""
    if amount <= 0:
        raise TokenError("Amount must be positive")
    return [1 << i for i in range(amount.bit_length()) if amount >> i & 1]


@dataclass(frozen=True)
class Proof:
    """
    A single payment unit. The spend condition message is sha256(secret), and the unit identifier Y is
    hash_to_curve(secret) in compressed hex.
    """
    amount: int
    secret: str
    C: str
    id: str = MINT.KEYSET_ID
    witness: str | None = None

    @property
    def y(self) -> str:
        return compress_point(hash_to_curve(self.secret.encode())).hex()

    @property
    def message_digest(self) -> bytes:
        return sha256(self.secret.encode())

    @property
    def locking_key(self) -> bytes | None:
        return p2pk_locking_key(self.secret)

    @property
    def signatures(self) -> list[str]:
        return [] if self.witness is None else witness_signatures(self.witness)

    def with_signatures(self, signatures: list[str]):
        return replace(self, witness=json.dumps({"signatures": signatures}))

    def to_dict(self) -> dict:
        proof_dict = {"amount": self.amount, "id": self.id, "secret": self.secret, "C": self.C}
        if self.witness is not None:
            proof_dict["witness"] = self.witness
        return proof_dict

    @classmethod
    def from_dict(cls, data: dict):
        try:
            return cls(int(data["amount"]), data["secret"], data["C"], data.get("id", MINT.KEYSET_ID),
                       data.get("witness"))
        except (KeyError, TypeError, ValueError) as e:
            raise TokenError(f"Malformed proof: {data!r}") from e


@dataclass(frozen=True)
class Token:
    """Proofs from a single mint, as handed from Payer to Signer"""
    mint: str
    proofs: list = field(default_factory=list)
    unit: str = MINT.DEFAULT_UNIT

    @property
    def amount(self) -> int:
        return sum(p.amount for p in self.proofs)

    def to_json(self) -> str:
        return json.dumps({
            "token": [{"mint": self.mint, "proofs": [p.to_dict() for p in self.proofs]}],
            "unit": self.unit,
        })

    @classmethod
    def from_json(cls, token_json: str):
        try:
            data = json.loads(token_json)
            entries = data["token"]
        except (ValueError, KeyError, TypeError) as e:
            raise TokenError("Token is not valid JSON token data") from e
        if not isinstance(entries, list) or len(entries) != 1:
            raise TokenError("Token must carry proofs from exactly one mint")
        try:
            mint, proofs = entries[0]["mint"], entries[0].get("proofs", [])
        except (KeyError, TypeError, AttributeError) as e:
            raise TokenError("Token entry is missing its mint") from e
        if not isinstance(proofs, list):
            raise TokenError("Token proofs must be a list")
        return cls(mint, [Proof.from_dict(p) for p in proofs], data.get("unit", MINT.DEFAULT_UNIT))


def validate_token(token: Token, expected_mint: str, expected_amount: int):
    """
    Reject a token from the wrong mint, with a repeated secret, or whose total differs from the expected amount.
    Any one of the three is enough.
    """
    if token.mint != expected_mint:
        raise TokenError(f"Token mint {token.mint} is not the expected mint {expected_mint}")
    secrets_seen = {p.secret for p in token.proofs}
    if len(secrets_seen) != len(token.proofs):
        raise TokenError("Token contains proofs with repeated secrets")
    if token.amount != expected_amount:
        raise TokenError(f"Token amount {token.amount} does not match the expected {expected_amount}")
