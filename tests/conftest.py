"""
Fixtures used in the tests
"""
from secrets import token_bytes

import pytest

from sigswap.core import ECC
from sigswap.cryptography import SECP256K1, schnorr_sig, split_signature, xonly_pubkey
from sigswap.mint import Mint
from tests.utility import key_with_parity, rand_priv


@pytest.fixture()
def curve():
    return SECP256K1


@pytest.fixture(params=[True, False], ids=["even_y_key", "odd_y_key"])
def payer_key(request):
    return key_with_parity(request.param)


@pytest.fixture()
def target():
    """
    A Signer's private signature over a random message, as (nonce_x, t, msg, pubkey_x). Only nonce_x, msg and pubkey_x
    are public.
    """
    signer_key = rand_priv()
    msg = token_bytes(ECC.COORD_BYTES)
    nonce_x, t = split_signature(schnorr_sig(signer_key, msg, token_bytes(ECC.COORD_BYTES)))
    return nonce_x, t, msg, xonly_pubkey(signer_key)


@pytest.fixture()
def mint():
    return Mint(url="https://mint.test")
