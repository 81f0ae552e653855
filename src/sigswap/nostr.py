"""
Nostr events (NIP-01): the message whose signature the Payer buys
"""
import json
from dataclasses import dataclass

from sigswap.core import ECC, NOSTR, SchnorrError
from sigswap.cryptography import schnorr_sig, schnorr_verify, sha256

__all__ = ["NostrEvent", "sign_event", "attach_signature", "verify_event"]


@dataclass(frozen=True)
class NostrEvent:
    pubkey: str
    created_at: int
    kind: int = NOSTR.TEXT_NOTE
    tags: tuple = ()
    content: str = ""

    def serialize(self) -> str:
        """[0, pubkey, created_at, kind, tags, content] as compact UTF-8 JSON"""
        return json.dumps([0, self.pubkey, self.created_at, self.kind, [list(t) for t in self.tags], self.content],
                          separators=(',', ':'), ensure_ascii=False)

    @property
    def id(self) -> bytes:
        return sha256(self.serialize().encode("utf-8"))

    def to_dict(self) -> dict:
        return {
            "pubkey": self.pubkey,
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": [list(t) for t in self.tags],
            "content": self.content,
        }


def attach_signature(event: NostrEvent, sig: bytes) -> dict:
    if len(sig) != ECC.SIG_BYTES:
        raise SchnorrError(f"Event signature must be exactly {ECC.SIG_BYTES} bytes")
    return {"id": event.id.hex(), **event.to_dict(), "sig": sig.hex()}


def sign_event(event: NostrEvent, secret_key: int, aux_bytes: bytes | None = None) -> dict:
    return attach_signature(event, schnorr_sig(secret_key, event.id, aux_bytes))


def verify_event(signed_event: dict) -> bool:
    """Recompute the id from the event fields and check the signature against it and the event pubkey"""
    try:
        event = NostrEvent(signed_event["pubkey"], signed_event["created_at"], signed_event["kind"],
                           tuple(tuple(t) for t in signed_event["tags"]), signed_event["content"])
        sig = bytes.fromhex(signed_event["sig"])
        pubkey_x = bytes.fromhex(event.pubkey)
    except (KeyError, TypeError, ValueError):
        return False
    if event.id.hex() != signed_event.get("id"):
        return False
    try:
        return schnorr_verify(pubkey_x, event.id, sig)
    except SchnorrError:
        return False
