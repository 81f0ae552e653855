"""
Elliptic curve arithmetic, scalar encodings, hash functions and BIP340 signatures
"""
# cryptography/__init__.py


from sigswap.cryptography.ecc import *
from sigswap.cryptography.hash_functions import *
from sigswap.cryptography.scalars import *
from sigswap.cryptography.schnorr import *
