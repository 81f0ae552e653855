"""
sigswap: sell a Schnorr signature for a payment that can only be claimed by revealing it
"""
__version__ = "0.1.0"
