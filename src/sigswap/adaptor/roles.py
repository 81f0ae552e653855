"""
The Payer and Signer halves of the exchange as plain functions over collections of payment units.

Every collection is a dict keyed by the unit identifier Y of the proof it belongs to. Nothing is kept between calls.
"""
from secrets import token_bytes

from sigswap.core import AdaptorError, ExtractionError
from sigswap.cryptography import Point
from sigswap.adaptor.adaptor import (VerifiedAdaptor, accept_adaptor, complete_adaptor, extract_secret,
                                     generate_adaptor, recover_signature)
from sigswap.adaptor.nonce import RandFunc
from sigswap.adaptor.records import AdaptorRecord, AdaptorState, CompletedSignature
from sigswap.logger import get_logger
from sigswap.mint.ledger import ProofState, ProofStatus
from sigswap.mint.proof import Proof, witness_signatures

__all__ = ["create_adaptors", "verify_adaptors", "complete_adaptors", "attach_witnesses", "find_completed_signature",
           "recover_event_signature"]

logger = get_logger(__name__)


# --- PAYER --- #

def create_adaptors(secret_key: int, pubkey_x: bytes, adaptor_point: Point, proofs: list[Proof],
                    randfunc: RandFunc = token_bytes) -> dict[str, AdaptorRecord]:
    """One adaptor record per proof, each with its own nonce"""
    adaptors = {}
    for proof in proofs:
        y = proof.y
        if y in adaptors:
            raise AdaptorError(f"Duplicate proof {y}")
        adaptors[y] = generate_adaptor(secret_key, pubkey_x, adaptor_point, proof.message_digest, randfunc)
        logger.debug(f"Proof {y} {AdaptorState.GENERATED.value}: {adaptors[y].to_json()}")
    return adaptors


def find_completed_signature(statuses: list[ProofStatus], adaptors: dict[str, AdaptorRecord] | None = None
                             ) -> tuple[str, CompletedSignature] | None:
    """
    The first spent proof carrying a witness signature, as (Y, signature). With adaptors given, only a signature whose
    nonce matches the R_a of that proof's record counts, and every spent proof is tried.
    """
    for status in statuses:
        if status.state is not ProofState.SPENT or status.witness is None:
            continue
        for signature in witness_signatures(status.witness):
            completed = CompletedSignature.from_hex(signature)
            if adaptors is None:
                return status.y, completed
            record = adaptors.get(status.y)
            if record is not None and completed.nonce_x == record.adaptor_nonce_x:
                return status.y, completed
        if adaptors is not None:
            logger.debug(f"Spent proof {status.y} carries no signature for its adaptor record")
    return None


def recover_event_signature(statuses: list[ProofStatus], adaptors: dict[str, AdaptorRecord], target_nonce_x: bytes,
                            target_msg: bytes, target_pubkey_x: bytes) -> bytes:
    """
    Extract t from a settled proof and return the verified target signature x(R_s) || t.
    Raises an ExtractionError while nothing has been spent.
    """
    found = find_completed_signature(statuses, adaptors)
    if found is None:
        raise ExtractionError("No spent proof with a witness signature for its adaptor record yet")
    y, completed = found

    secret = extract_secret(completed, adaptors[y])
    logger.info(f"Proof {y} {AdaptorState.EXTRACTED.value}")
    return recover_signature(target_nonce_x, secret, target_msg, target_pubkey_x)


# --- SIGNER --- #

def verify_adaptors(adaptors: dict[str, AdaptorRecord], proofs: list[Proof], pubkey_x: bytes,
                    adaptor_point: Point | None = None) -> dict[str, VerifiedAdaptor] | None:
    """
    Verify the record of every proof against sha256(secret). Returns the completion capabilities when all pass and
    None if any proof lacks a record or any record is rejected.
    """
    verified = {}
    for proof in proofs:
        y = proof.y
        record = adaptors.get(y)
        if record is None:
            logger.warning(f"No adaptor record for proof {y}")
            return None
        accepted = accept_adaptor(record, pubkey_x, proof.message_digest, adaptor_point)
        if accepted is None:
            logger.warning(f"Adaptor for proof {y} is invalid")
            return None
        verified[y] = accepted
    logger.info(f"All {len(verified)} adaptor signatures {AdaptorState.VERIFIED.value}")
    return verified


def complete_adaptors(verified: dict[str, VerifiedAdaptor], hidden_scalar: int) -> dict[str, CompletedSignature]:
    completed = {y: complete_adaptor(v, hidden_scalar) for y, v in verified.items()}
    logger.info(f"{len(completed)} adaptor signatures {AdaptorState.COMPLETED.value}")
    return completed


def attach_witnesses(proofs: list[Proof], signatures: dict[str, CompletedSignature]) -> list[Proof]:
    """Proofs carrying their completed spend signature as P2PK witness"""
    signed = []
    for proof in proofs:
        y = proof.y
        if y not in signatures:
            raise AdaptorError(f"No completed signature for proof {y}")
        signed.append(proof.with_signatures([signatures[y].hex()]))
    return signed
