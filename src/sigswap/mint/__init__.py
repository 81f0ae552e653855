"""
The payment side of the exchange: locked proofs, tokens and the mint which settles them
"""
# mint/__init__.py
from sigswap.mint.ledger import *
from sigswap.mint.proof import *
