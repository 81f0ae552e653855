"""
The reference formats and protocol constants used by sigswap
"""
from typing import Final

__all__ = ["ECC", "TAGS", "ADAPTOR", "MINT", "NOSTR"]


class ECC:
    """
    Byte sizes of secp256k1 elements
    """
    COORD_BYTES: Final[int] = 32
    SIG_BYTES: Final[int] = 64
    COMPRESSED_BYTES: Final[int] = 33
    EVEN_PREFIX: Final[bytes] = b'\x02'
    ODD_PREFIX: Final[bytes] = b'\x03'


class TAGS:
    """
    Domain separation tags for tagged hashes
    """
    CHALLENGE: Final[bytes] = b'BIP0340/challenge'
    AUX: Final[bytes] = b'BIP0340/aux'
    NONCE: Final[bytes] = b'BIP0340/nonce'
    HASH_TO_CURVE: Final[bytes] = b'Secp256k1_HashToCurve_Cashu_'


class ADAPTOR:
    """
    Adaptor signature parameters
    """
    MAX_NONCE_ATTEMPTS: Final[int] = 64
    RECORD_BYTES: Final[int] = 96  # s_a || R_p || R_a


class MINT:
    """
    Defaults for the payment side of the exchange
    """
    DEFAULT_URL: Final[str] = "https://testnut.cashu.space"
    DEFAULT_UNIT: Final[str] = "sat"
    KEYSET_ID: Final[str] = "00ad268c4d1f5826"
    P2PK_KIND: Final[str] = "P2PK"
    MAX_HASH_TO_CURVE_COUNTER: Final[int] = 2 ** 16
    SUPPORTED_NUTS: Final[tuple] = ("7", "10", "11")


class NOSTR:
    """
    Nostr event constants
    """
    TEXT_NOTE: Final[int] = 1
