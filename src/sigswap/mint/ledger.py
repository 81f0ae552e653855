"""
An in-memory mint: issues proofs locked to a public key, redeems them against P2PK witness signatures, and reports
which proofs are spent together with the witness they were spent with
"""
from dataclasses import dataclass
from enum import Enum
from secrets import token_bytes

from sigswap.core import ECC, MINT, MintError, PointError, SchnorrError, TokenError
from sigswap.cryptography import compress_point, decompress_point, generate_secret_key, scalar_multiplication, \
    schnorr_verify
from sigswap.logger import get_logger
from sigswap.mint.proof import Proof, hash_to_curve, p2pk_secret, split_amount

__all__ = ["ProofState", "ProofStatus", "Mint"]

logger = get_logger(__name__)


class ProofState(Enum):
    UNSPENT = "UNSPENT"
    SPENT = "SPENT"


@dataclass(frozen=True)
class ProofStatus:
    """NUT-07 state of one proof, keyed by its Y"""
    y: str
    state: ProofState
    witness: str | None = None


class Mint:
    """
    Single-keyset mint. C = k·Y for each proof, where Y = hash_to_curve(secret). Spent proofs are remembered by Y
    along with their witness, so the completed spend signature becomes public after settlement.
    """

    def __init__(self, url: str = MINT.DEFAULT_URL, unit: str = MINT.DEFAULT_UNIT, secret_key: int | None = None):
        self.url = url
        self.unit = unit
        self._key = generate_secret_key() if secret_key is None else secret_key
        self._spent: dict[str, str | None] = {}

    def info(self) -> dict:
        return {
            "url": self.url,
            "unit": self.unit,
            "nuts": {nut: {"supported": True} for nut in MINT.SUPPORTED_NUTS},
        }

    def supports(self, *nuts: str) -> bool:
        nut_info = self.info()["nuts"]
        return all(nut_info.get(nut, {}).get("supported", False) for nut in nuts)

    def _sign(self, secret: str) -> str:
        return compress_point(scalar_multiplication(self._key, hash_to_curve(secret.encode()))).hex()

    def issue(self, amount: int, pubkey_x: bytes | None = None) -> list[Proof]:
        """
        Mint proofs for amount, split into powers of two. With pubkey_x, each proof is P2PK-locked to that key.
        """
        proofs = []
        for part in split_amount(amount):
            secret = p2pk_secret(pubkey_x) if pubkey_x is not None else token_bytes(ECC.COORD_BYTES).hex()
            proofs.append(Proof(part, secret, self._sign(secret)))
        logger.info(f"Issued {len(proofs)} proofs for {amount} {self.unit}" + (" (P2PK locked)" if pubkey_x else ""))
        return proofs

    def _check_proof(self, proof: Proof):
        try:
            valid_c = decompress_point(bytes.fromhex(proof.C)) == scalar_multiplication(
                self._key, hash_to_curve(proof.secret.encode()))
        except (ValueError, PointError) as e:
            raise MintError(f"Proof {proof.y} has a malformed signature C") from e
        if not valid_c:
            raise MintError(f"Proof {proof.y} was not issued by this mint")
        if proof.y in self._spent:
            raise MintError(f"Proof {proof.y} is already spent")

        try:
            locking_key = proof.locking_key
            signatures = proof.signatures
        except TokenError as e:
            raise MintError(str(e)) from e
        if locking_key is None:
            return

        for sig_hex in signatures:
            try:
                if schnorr_verify(locking_key, proof.message_digest, bytes.fromhex(sig_hex)):
                    return
            except (ValueError, SchnorrError):
                continue
        raise MintError(f"Proof {proof.y} has no valid P2PK witness signature")

    def redeem(self, proofs: list[Proof]) -> list[Proof]:
        """
        Spend the given proofs and return fresh unlocked proofs of the same total. All proofs are checked before any
        is marked spent.
        """
        ys = [p.y for p in proofs]
        if len(set(ys)) != len(ys):
            raise MintError("Duplicate proofs in redemption")
        for proof in proofs:
            self._check_proof(proof)

        for y, proof in zip(ys, proofs):
            self._spent[y] = proof.witness
        logger.info(f"Redeemed {len(proofs)} proofs")
        return self.issue(sum(p.amount for p in proofs))

    def check_states(self, proofs: list[Proof]) -> list[ProofStatus]:
        statuses = []
        for proof in proofs:
            y = proof.y
            if y in self._spent:
                statuses.append(ProofStatus(y, ProofState.SPENT, self._spent[y]))
            else:
                statuses.append(ProofStatus(y, ProofState.UNSPENT))
        return statuses
