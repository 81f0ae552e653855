"""
Schnorr adaptor signatures and the Payer/Signer roles built on them
"""
# adaptor/__init__.py
from sigswap.adaptor.adaptor import *
from sigswap.adaptor.nonce import *
from sigswap.adaptor.records import *
from sigswap.adaptor.roles import *
