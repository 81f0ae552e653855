"""
The custom exceptions used throughout sigswap
"""
__all__ = ["SigSwapError", "ScalarError", "PointError", "SchnorrError", "ReadError", "AdaptorError",
           "NonceGenerationError", "ExtractionError", "TokenError", "MintError"]


class SigSwapError(Exception):
    """
    Parent class for sigswap errors
    """
    pass


class ScalarError(SigSwapError):
    """
    For scalars out of range or of the wrong byte width
    """
    pass


class PointError(SigSwapError):
    """
    For x-coordinates which do not lift to a curve point, or unexpected points at infinity
    """
    pass


class SchnorrError(SigSwapError):
    """
    Raised during Schnorr signatures for out of bound values
    """
    pass


class ReadError(SigSwapError):
    """
    For when trying to read data of length n from the stream and receiving data of length < n
    """
    pass


class AdaptorError(SigSwapError):
    """
    Malformed adaptor inputs or misuse of the adaptor protocol
    """
    pass


class NonceGenerationError(AdaptorError):
    """
    The nonce retry loop did not converge. Raised when the random source is degenerate
    """
    pass


class ExtractionError(AdaptorError):
    """
    No completed signature to extract from, or the extracted signature does not verify
    """
    pass


class TokenError(SigSwapError):
    """
    For tokens which fail decoding or validation
    """
    pass


class MintError(SigSwapError):
    """
    Raised by the mint when a redemption is rejected
    """
    pass
