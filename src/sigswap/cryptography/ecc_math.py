"""
Modular square roots for recovering y from x on a prime field curve
"""

__all__ = ["is_quadratic_residue", "modular_sqrt"]


def is_quadratic_residue(n: int, p: int) -> bool:
    """
    Euler's criterion. Returns True if n is a square mod p (0 included).
    """
    n = n % p
    if n == 0:
        return True
    return pow(n, (p - 1) >> 1, p) == 1


def modular_sqrt(n: int, p: int) -> int:
    """
    Assuming n is a quadratic residue mod p, we return r with r^2 = n (mod p).
    Uses the direct exponent when p = 3 (mod 4), as for secp256k1, and Tonelli-Shanks otherwise.
    """
    n = n % p
    if n == 0:
        return 0
    if not is_quadratic_residue(n, p):
        raise ValueError("Square root requested for a quadratic non-residue")

    if p & 3 == 3:
        return pow(n, (p + 1) >> 2, p)

    # p - 1 = 2^s * q with q odd
    q, s = p - 1, 0
    while q & 1 == 0:
        q >>= 1
        s += 1

    z = 2
    while is_quadratic_residue(z, p):
        z += 1

    m, c, t, r = s, pow(z, q, p), pow(n, q, p), pow(n, (q + 1) >> 1, p)
    while t != 1:
        # least i with t^(2^i) = 1
        i, temp = 1, (t * t) % p
        while temp != 1:
            i += 1
            temp = (temp * temp) % p
        b = pow(c, 1 << (m - i - 1), p)
        m, c = i, (b * b) % p
        t, r = (t * c) % p, (r * b) % p

    return r
