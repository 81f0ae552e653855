"""
Encoding of adaptor records and completed signatures as shared between the parties
"""
from secrets import token_bytes, randbelow

import pytest

from sigswap.adaptor import AdaptorRecord, AdaptorState, CompletedSignature
from sigswap.core import ADAPTOR, AdaptorError, ReadError
from sigswap.cryptography import ORDER


def _random_record():
    return AdaptorRecord(randbelow(ORDER), token_bytes(32), token_bytes(32))


def test_record_layout():
    record = _random_record()
    raw = record.to_bytes()
    assert len(raw) == ADAPTOR.RECORD_BYTES
    assert raw[:32] == record.scalar.to_bytes(32, "big")
    assert raw[32:64] == record.nonce_x and raw[64:] == record.adaptor_nonce_x
    assert AdaptorRecord.from_bytes(raw) == record
    assert AdaptorRecord.from_dict(record.to_dict()) == record


def test_record_rejects_bad_fields():
    with pytest.raises(AdaptorError):
        AdaptorRecord(ORDER, token_bytes(32), token_bytes(32))
    with pytest.raises(AdaptorError):
        AdaptorRecord(1, token_bytes(31), token_bytes(32))
    with pytest.raises(ReadError):
        AdaptorRecord.from_bytes(token_bytes(95))
    with pytest.raises(ReadError):
        AdaptorRecord.from_bytes(_random_record().to_bytes() + b'\x00')
    with pytest.raises(AdaptorError):
        AdaptorRecord.from_bytes(ORDER.to_bytes(32, "big") + token_bytes(64))
    with pytest.raises(AdaptorError):
        AdaptorRecord.from_dict({"s_a": "00", "R_p": "11"})


def test_completed_signature_layout():
    sig = CompletedSignature(token_bytes(32), randbelow(ORDER))
    assert len(sig.to_bytes()) == 64
    assert CompletedSignature.from_hex(sig.hex()) == sig
    with pytest.raises(AdaptorError):
        CompletedSignature.from_hex(sig.hex()[:-2])
    with pytest.raises(AdaptorError):
        CompletedSignature.from_hex("not hex")


def test_states_are_ordered():
    assert [s.value for s in AdaptorState] == ["generated", "shared", "verified", "completed", "extracted"]
