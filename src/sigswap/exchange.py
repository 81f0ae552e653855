"""
The signature-for-payment exchange, end to end.

Payer: buys the Signer's signature over a Nostr event.
Signer: reveals that signature by claiming the Payer's locked payment.

    1) Both agree on the event id m_s
    2) Signer signs m_s privately and shares only the public nonce x(R_s)
    3) Payer computes T = R_s + e_s·P_s and one adaptor record per locked proof, then hands over the token
    4) Signer validates the token, verifies every record, completes them with t and redeems the proofs
    5) Payer reads the spent proofs' witnesses from the mint, extracts t and publishes the signed event
"""
import argparse
import time

from sigswap.adaptor import (AdaptorRecord, AdaptorState, attach_witnesses, build_adaptor_point,
                             complete_adaptors, create_adaptors, recover_event_signature, verify_adaptors)
from sigswap.core import MINT, AdaptorError, SigSwapError
from sigswap.cryptography import generate_secret_key, schnorr_sig, split_signature, xonly_pubkey
from sigswap.logger import get_logger, set_log_level
from sigswap.mint import Mint, Token, validate_token
from sigswap.nostr import NostrEvent, attach_signature, verify_event

__all__ = ["run_exchange", "main"]

logger = get_logger(__name__)


def run_exchange(payment_amount: int = 130, content: str = "Hello world", mint: Mint | None = None,
                 payer_key: int | None = None, signer_key: int | None = None) -> dict:
    """
    Run both roles against an in-memory mint and return the Signer's event, signed with the extracted signature.
    """
    mint = Mint() if mint is None else mint
    if not mint.supports(*MINT.SUPPORTED_NUTS):
        raise SigSwapError("Mint does not support NUT-07, NUT-10 and NUT-11")

    # --- Key pairs
    payer_key = generate_secret_key() if payer_key is None else payer_key
    signer_key = generate_secret_key() if signer_key is None else signer_key
    payer_pubkey = xonly_pubkey(payer_key)
    signer_pubkey = xonly_pubkey(signer_key)
    logger.info(f"Payer public key: {payer_pubkey.hex()}")
    logger.info(f"Signer public key: {signer_pubkey.hex()}")

    # --- Payer funds proofs locked to their own key
    proofs = mint.issue(payment_amount, payer_pubkey)

    # --- Step 1: agree on the event
    event = NostrEvent(pubkey=signer_pubkey.hex(), created_at=int(time.time()), content=content)
    event_id = event.id
    logger.info(f"Nostr event id: {event_id.hex()}")

    # --- Step 2: Signer signs privately and shares the public nonce
    secret_signature = schnorr_sig(signer_key, event_id)
    shared_nonce_x, hidden_scalar = split_signature(secret_signature)
    logger.info(f"Signer's public nonce (shared): {shared_nonce_x.hex()}")

    # --- Step 3: Payer commits to the event signature and pre-signs each proof
    adaptor_point = build_adaptor_point(shared_nonce_x, signer_pubkey, event_id)
    adaptors = create_adaptors(payer_key, payer_pubkey, adaptor_point, proofs)
    shared_adaptors = {y: record.to_dict() for y, record in adaptors.items()}
    locked_token = Token(mint.url, proofs).to_json()
    logger.info(f"Adaptors and locked token {AdaptorState.SHARED.value} with the Signer")

    # --- Step 4: Signer checks the token and the adaptors, then completes and claims
    received = Token.from_json(locked_token)
    validate_token(received, mint.url, payment_amount)
    received_adaptors = {y: AdaptorRecord.from_dict(d) for y, d in shared_adaptors.items()}
    signer_point = build_adaptor_point(shared_nonce_x, signer_pubkey, event_id)
    verified = verify_adaptors(received_adaptors, received.proofs, payer_pubkey, signer_point)
    if verified is None:
        raise AdaptorError("Adaptor signatures are invalid. Signer will not complete them")

    completed = complete_adaptors(verified, hidden_scalar)
    claimed = mint.redeem(attach_witnesses(received.proofs, completed))
    logger.info(f"Signer claimed {sum(p.amount for p in claimed)} {mint.unit}")

    # --- Step 5: Payer observes settlement and extracts the event signature
    statuses = mint.check_states(proofs)
    signature = recover_event_signature(statuses, adaptors, shared_nonce_x, event_id, signer_pubkey)
    logger.info(f"Extracted secret t: {signature[32:].hex()}")

    signed_event = attach_signature(event, signature)
    if not verify_event(signed_event):
        raise SigSwapError("Nostr event signature is invalid")
    logger.info("Nostr event signature is valid")
    return signed_event


def main(argv: list | None = None) -> int:
    parser = argparse.ArgumentParser(description="Buy a Nostr event signature with a locked Cashu payment")
    parser.add_argument("--amount", type=int, default=130, help="payment amount in sats")
    parser.add_argument("--content", default="Hello world", help="content of the event to be signed")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    set_log_level(args.log_level)
    try:
        signed_event = run_exchange(args.amount, args.content)
    except SigSwapError as e:
        logger.error(f"Exchange failed: {e}")
        return 1
    print(signed_event)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
