"""
Shortcuts for the hash functions used by the exchange. Each function returns the bytes digest
"""
import hashlib

from sigswap.core import TAGS

__all__ = ["sha256", "tagged_sha256", "schnorr_aux_hash", "schnorr_nonce_hash", "schnorr_challenge_hash",
           "hash_to_curve_prefix"]


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


# --- TAGGED HASH FUNCTIONS --- #

def tagged_sha256(tag: bytes, data: bytes) -> bytes:
    """SHA256( SHA256(tag) || SHA256(tag) || data )"""
    tag_hash = sha256(tag)
    return sha256(tag_hash + tag_hash + data)


# --- SCHNORR BIP0340 TAGGED HASH FUNCTIONS --- #

def schnorr_aux_hash(data: bytes) -> bytes:
    return tagged_sha256(TAGS.AUX, data)


def schnorr_nonce_hash(data: bytes) -> bytes:
    return tagged_sha256(TAGS.NONCE, data)


def schnorr_challenge_hash(data: bytes) -> bytes:
    return tagged_sha256(TAGS.CHALLENGE, data)


# --- CASHU NUT-00 --- #

def hash_to_curve_prefix(message: bytes) -> bytes:
    """The domain separated message hash which seeds the hash-to-curve counter loop"""
    return sha256(TAGS.HASH_TO_CURVE + message)
