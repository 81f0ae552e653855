"""
Adaptor signatures: generation, verification, completion and extraction
"""
from dataclasses import replace
from secrets import token_bytes

import pytest

from sigswap.adaptor import (AdaptorRecord, CompletedSignature, VerifiedAdaptor, accept_adaptor, build_adaptor_point,
                             complete_adaptor, extract_secret, generate_adaptor, generate_nonce, recover_signature,
                             verify_adaptor)
from sigswap.core import ECC, AdaptorError, ExtractionError, NonceGenerationError, PointError
from sigswap.cryptography import (ORDER, SECP256K1, add_points, has_even_y, multiply_generator, schnorr_sig,
                                  schnorr_verify, sha256, xonly_pubkey, int_to_bytes32)
from tests.utility import flip_one_bit, rand_priv

BYTE_LEN = ECC.COORD_BYTES


def _random_adaptor_point():
    t = rand_priv()
    return t, multiply_generator(t)


def test_adaptor_point_commits_to_target_signature(target):
    nonce_x, t, msg, pubkey_x = target
    adaptor_point = build_adaptor_point(nonce_x, pubkey_x, msg)
    assert adaptor_point == multiply_generator(t), "T must equal t·G for the hidden half of the target signature"


def test_adaptor_point_invalid_x(target):
    nonce_x, _, msg, pubkey_x = target
    off_curve = int_to_bytes32(SECP256K1.p)
    with pytest.raises(PointError):
        build_adaptor_point(off_curve, pubkey_x, msg)
    with pytest.raises(PointError):
        build_adaptor_point(nonce_x, off_curve, msg)
    with pytest.raises(AdaptorError):
        build_adaptor_point(nonce_x[:31], pubkey_x, msg)


def test_generate_then_verify(payer_key):
    pubkey_x = xonly_pubkey(payer_key)
    _, adaptor_point = _random_adaptor_point()
    msg = token_bytes(BYTE_LEN)

    record = generate_adaptor(payer_key, pubkey_x, adaptor_point, msg)

    assert verify_adaptor(record, pubkey_x, msg)
    assert verify_adaptor(record, pubkey_x, msg, adaptor_point)
    # R_a = R_p + T with even y
    adaptor_nonce = add_points(SECP256K1.lift_x(int.from_bytes(record.nonce_x, "big")), adaptor_point)
    assert has_even_y(adaptor_nonce) and adaptor_nonce.x.to_bytes(BYTE_LEN, "big") == record.adaptor_nonce_x


def test_pre_signature_is_not_a_signature(payer_key):
    pubkey_x = xonly_pubkey(payer_key)
    _, adaptor_point = _random_adaptor_point()
    msg = token_bytes(BYTE_LEN)
    record = generate_adaptor(payer_key, pubkey_x, adaptor_point, msg)
    assert not schnorr_verify(pubkey_x, msg, record.adaptor_nonce_x + record.scalar.to_bytes(BYTE_LEN, "big"))


def test_complete_and_extract(payer_key, target):
    nonce_x, t, target_msg, signer_pubkey = target
    pubkey_x = xonly_pubkey(payer_key)
    msg = token_bytes(BYTE_LEN)
    adaptor_point = build_adaptor_point(nonce_x, signer_pubkey, target_msg)

    record = generate_adaptor(payer_key, pubkey_x, adaptor_point, msg)
    verified = accept_adaptor(record, pubkey_x, msg, adaptor_point)
    assert isinstance(verified, VerifiedAdaptor)

    completed = complete_adaptor(verified, t)
    assert completed.nonce_x == record.adaptor_nonce_x
    assert schnorr_verify(pubkey_x, msg, completed.to_bytes()), "Completed signature must be a valid spend signature"

    extracted = extract_secret(completed, record)
    assert extracted == t
    sig = recover_signature(nonce_x, extracted, target_msg, signer_pubkey)
    assert schnorr_verify(signer_pubkey, target_msg, sig)


def test_fixed_scenario():
    payer_key = int.from_bytes(b'\x01' * BYTE_LEN, "big")
    signer_key = int.from_bytes(b'\x02' * BYTE_LEN, "big")
    pubkey_x = xonly_pubkey(payer_key)
    signer_pubkey = xonly_pubkey(signer_key)
    msg = sha256(b"spend condition")
    target_msg = sha256(b"target event")

    target_sig = schnorr_sig(signer_key, target_msg, bytes(BYTE_LEN))
    nonce_x, hidden = target_sig[:BYTE_LEN], int.from_bytes(target_sig[BYTE_LEN:], "big")
    adaptor_point = build_adaptor_point(nonce_x, signer_pubkey, target_msg)
    assert adaptor_point == multiply_generator(hidden)

    record = generate_adaptor(payer_key, pubkey_x, adaptor_point, msg)
    verified = accept_adaptor(record, pubkey_x, msg, adaptor_point)
    assert verified is not None

    completed = complete_adaptor(verified, hidden)
    assert schnorr_verify(pubkey_x, msg, completed.to_bytes())
    assert extract_secret(completed, record) == hidden
    assert recover_signature(nonce_x, hidden, target_msg, signer_pubkey) == target_sig


def test_wrong_message_rejected(payer_key):
    pubkey_x = xonly_pubkey(payer_key)
    _, adaptor_point = _random_adaptor_point()
    msg = token_bytes(BYTE_LEN)
    record = generate_adaptor(payer_key, pubkey_x, adaptor_point, msg)

    other_msg = token_bytes(BYTE_LEN)
    assert not verify_adaptor(record, pubkey_x, other_msg)
    assert accept_adaptor(record, pubkey_x, other_msg) is None
    assert not verify_adaptor(record, xonly_pubkey(rand_priv()), msg)


def test_wrong_adaptor_point_rejected(payer_key):
    pubkey_x = xonly_pubkey(payer_key)
    _, adaptor_point = _random_adaptor_point()
    _, other_point = _random_adaptor_point()
    msg = token_bytes(BYTE_LEN)
    record = generate_adaptor(payer_key, pubkey_x, adaptor_point, msg)
    assert not verify_adaptor(record, pubkey_x, msg, other_point)


def test_tampered_record_rejected(payer_key):
    pubkey_x = xonly_pubkey(payer_key)
    _, adaptor_point = _random_adaptor_point()
    msg = token_bytes(BYTE_LEN)
    record = generate_adaptor(payer_key, pubkey_x, adaptor_point, msg)
    raw = record.to_bytes()

    # Every byte of s_a, R_p and R_a
    for position in range(len(raw)):
        try:
            tampered = AdaptorRecord.from_bytes(flip_one_bit(raw, position))
        except AdaptorError:
            continue  # s_a pushed past n
        assert not verify_adaptor(tampered, pubkey_x, msg), f"Bit flip in byte {position} was accepted"
        assert not verify_adaptor(tampered, pubkey_x, msg, adaptor_point), \
            f"Bit flip in byte {position} was accepted against T"


def test_tampered_scalar_rejected(payer_key):
    pubkey_x = xonly_pubkey(payer_key)
    _, adaptor_point = _random_adaptor_point()
    msg = token_bytes(BYTE_LEN)
    record = generate_adaptor(payer_key, pubkey_x, adaptor_point, msg)
    assert not verify_adaptor(replace(record, scalar=(record.scalar + 1) % ORDER), pubkey_x, msg)


def test_wrong_hidden_scalar_gives_invalid_signature(payer_key, target):
    nonce_x, t, target_msg, signer_pubkey = target
    pubkey_x = xonly_pubkey(payer_key)
    msg = token_bytes(BYTE_LEN)
    adaptor_point = build_adaptor_point(nonce_x, signer_pubkey, target_msg)
    record = generate_adaptor(payer_key, pubkey_x, adaptor_point, msg)
    verified = accept_adaptor(record, pubkey_x, msg, adaptor_point)

    completed = complete_adaptor(verified, (t + 1) % ORDER or 1)
    assert not schnorr_verify(pubkey_x, msg, completed.to_bytes())

    with pytest.raises(ExtractionError):
        recover_signature(nonce_x, extract_secret(completed, record), target_msg, signer_pubkey)


def test_completion_requires_verification(payer_key):
    pubkey_x = xonly_pubkey(payer_key)
    t, adaptor_point = _random_adaptor_point()
    msg = token_bytes(BYTE_LEN)
    record = generate_adaptor(payer_key, pubkey_x, adaptor_point, msg)

    with pytest.raises(AdaptorError):
        complete_adaptor(record, t)
    with pytest.raises(AdaptorError):
        VerifiedAdaptor(record, pubkey_x, msg)


def test_verified_adaptor_is_read_only(payer_key):
    pubkey_x = xonly_pubkey(payer_key)
    t, adaptor_point = _random_adaptor_point()
    msg = token_bytes(BYTE_LEN)
    verified = accept_adaptor(generate_adaptor(payer_key, pubkey_x, adaptor_point, msg), pubkey_x, msg, adaptor_point)
    other = generate_adaptor(payer_key, pubkey_x, adaptor_point, token_bytes(BYTE_LEN))

    with pytest.raises(AdaptorError):
        verified.record = other
    with pytest.raises(AdaptorError):
        verified.msg = token_bytes(BYTE_LEN)
    with pytest.raises(AdaptorError):
        del verified.pubkey_x
    assert complete_adaptor(verified, t).nonce_x != other.adaptor_nonce_x


def test_extract_rejects_mismatched_pair(payer_key):
    pubkey_x = xonly_pubkey(payer_key)
    _, adaptor_point = _random_adaptor_point()
    record = generate_adaptor(payer_key, pubkey_x, adaptor_point, token_bytes(BYTE_LEN))
    unrelated = CompletedSignature(token_bytes(BYTE_LEN), 5)
    with pytest.raises(AdaptorError):
        extract_secret(unrelated, record)


def test_independent_nonces_per_record(payer_key):
    pubkey_x = xonly_pubkey(payer_key)
    _, adaptor_point = _random_adaptor_point()
    msg = token_bytes(BYTE_LEN)
    first = generate_adaptor(payer_key, pubkey_x, adaptor_point, msg)
    second = generate_adaptor(payer_key, pubkey_x, adaptor_point, msg)
    assert first.nonce_x != second.nonce_x
    assert first.scalar != second.scalar


def test_generation_input_checks(payer_key):
    pubkey_x = xonly_pubkey(payer_key)
    _, adaptor_point = _random_adaptor_point()
    msg = token_bytes(BYTE_LEN)
    with pytest.raises(AdaptorError):
        generate_adaptor(payer_key, xonly_pubkey(rand_priv()), adaptor_point, msg)
    with pytest.raises(AdaptorError):
        generate_adaptor(0, pubkey_x, adaptor_point, msg)
    with pytest.raises(AdaptorError):
        generate_adaptor(payer_key, pubkey_x, adaptor_point, msg[:16])


def test_degenerate_random_source_aborts(payer_key):
    pubkey_x = xonly_pubkey(payer_key)
    _, adaptor_point = _random_adaptor_point()

    # A source that always returns the same draw, chosen so R + T has odd y, can never succeed
    fill = 1
    while True:
        constant = bytes([fill]) * BYTE_LEN
        nonce = generate_nonce(lambda n: constant)
        if not has_even_y(add_points(nonce.point, adaptor_point)):
            break
        fill += 1

    with pytest.raises(NonceGenerationError):
        generate_adaptor(payer_key, pubkey_x, adaptor_point, token_bytes(BYTE_LEN), randfunc=lambda n: constant)
