"""Key generation for the façade, mainly focusing on the generation of random probable primes.

Generates IFC key pairs roughly based on FIPS 186-5, relaxed to accept the small moduli (512 and 1024 bits) that
legacy callers still configure by default.

Typical usage example:

    p, q = generate_primes(1024)
    (n, e), (_, d, p, q) = generate_key_pair(1024, 65537)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
import secrets

logger = logging.getLogger(__name__)

MIN_KEY_SIZE: int = 256

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
_MINIMUM_PRIME_SEPARATION: int = 100


def _sieve(n: int = 10000) -> list[int]:
    """Implements the Sieve of Eratosthenes over odd numbers only.

    Args:
        n: The number up to which to generate primes. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    return [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]


def get_pre_primes(n: int = 10000) -> list[int]:
    """Get the small primes, sieving again only when a larger range is requested.

    Args:
        n: The number up to which primes are required. Must be >= 0.

    Returns:
        List of primes in ascending order, covering at least `n`.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if n > _SMALL_PRIMES_CAP or not _SMALL_PRIMES:
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _trial_division(no: int, n: int = 10000) -> bool:
    """Fast pre-check before Miller-Rabin using the cached small primes.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime * prime > no:
            return True
        if no % prime == 0:
            return no == prime
    return True


def _miller_rabin(w: int, iters: int) -> bool:
    """Perform the Miller-Rabin primality test as specified in FIPS 186-5.

    Args:
        w: Odd integer to be tested.
        iters: Number of Miller-Rabin iterations to perform.

    Returns:
        True if `w` is probably prime, False otherwise.
    """
    if w <= 3:
        return w in (2, 3)
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    for _ in range(iters):
        b = secrets.randbelow(w - 3) + 2
        z = pow(b, m, w)
        if z in (1, w - 1):
            continue
        for _ in range(1, a):
            z = pow(z, 2, w)
            if z == w - 1:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def _mr_rounds(bits: int) -> int:
    # FIPS 186-5 Appendix C.1
    if bits <= 512:
        return 40
    if bits <= 1024:
        return 56
    if bits <= 1536:
        return 64
    if bits <= 2048:
        return 70
    return 74


def check_prime(candidate: int, iters: int | None = None, n: int = 10000) -> bool:
    """Composite primality test: trial division by primes up to `n`, then Miller-Rabin.

    Args:
        candidate: The candidate prime to test.
        iters: Number of Miller-Rabin iterations to perform.
            If not provided will use defaults as per the FIPS 186-5 Appendix C.1
        n: The number up to which to generate primes for trial division.

    Returns:
        True if `candidate` is probably prime, False otherwise.
    """
    if candidate < 2:
        return False
    if not _trial_division(candidate, n):
        return False
    if candidate <= n:
        return True
    if iters is None:
        iters = _mr_rounds(candidate.bit_length())
    return _miller_rabin(candidate, iters)


def _generate_probable_prime(size: int, pub: int = 65537, prm_p: int | None = None) -> int:
    """Generate a probable prime of exactly `size` bits, suitable for use with exponent `pub`.

    Args:
        size: The size of the prime to generate in bits.
        pub: The public exponent the prime must be compatible with.
        prm_p: The other prime in the pair if this is the second generation.

    Returns:
        A probable prime number.

    Raises:
        RuntimeError: If generation loops way beyond a reasonable time and a bit.
    """
    ml = 1 if prm_p is None else 2
    rep_cap = size * 5 * ml
    # Top two bits ensure the product of two such primes has the full requested length.
    msk = (1 << size - 1) | (1 << size - 2) | 1
    for _ in range(rep_cap):
        byts = secrets.randbits(size) | msk
        if prm_p is not None and abs(prm_p - byts) <= (1 << max(size - _MINIMUM_PRIME_SEPARATION, 0)):
            continue
        if math.gcd(byts - 1, pub) == 1 and check_prime(byts):
            return byts
    raise RuntimeError(f"Run an improbable {rep_cap} amount of loops with no prime found. "
                       "Check system random number generator.")


def generate_primes(size: int, pub: int = 65537) -> tuple[int, int]:
    """Generates an IFC-suitable pair of prime numbers for a modulus of `size` bits.

    Odd sizes are split unevenly, the larger half going to `p`.

    Args:
        size: The modulus size to generate the prime pair for.
        pub: The public exponent. Must be odd and at least 3.

    Returns:
        A pair of distinct probable primes.

    Raises:
        ValueError: If `size` is below `MIN_KEY_SIZE` or `pub` does not meet requirements.
    """
    if size < MIN_KEY_SIZE:
        raise ValueError(f"Size must be at least {MIN_KEY_SIZE}.")
    if pub % 2 == 0 or pub < 3:
        raise ValueError("Public exponent does not meet requirements.")
    qs = size // 2
    p = _generate_probable_prime(size - qs, pub)
    q = _generate_probable_prime(qs, pub, p)
    while p == q:  # (Un)Likely story.
        q = _generate_probable_prime(qs, pub, p)
    return p, q


def generate_key_pair(size: int, pub: int = 65537) -> tuple[tuple[int, int], tuple[int, int, int, int]]:
    """Generates an RSA key pair.

    Args:
        size: The modulus size in bits.
        pub: The public exponent.

    Returns:
        A tuple of (public, private) sub-tuples: (modulus, exponent) and (modulus, exponent, p, q).
    """
    logger.debug("Generating %d-bit key pair with exponent %d", size, pub)
    p, q = generate_primes(size, pub)
    if p < q:
        p, q = q, p
    n = p * q
    totient = math.lcm(p - 1, q - 1)
    d = pow(pub, -1, totient)
    logger.debug("Generated %d-bit modulus", n.bit_length())
    return (n, pub), (n, d, p, q)


def recover_primes(n: int, pub: int, priv: int) -> tuple[int, int]:
    """Factors the modulus from a known exponent pair (NIST SP 800-56B, Appendix C).

    Args:
        n: The modulus.
        pub: The public exponent.
        priv: The private exponent.

    Returns:
        The prime factors (p, q) with p > q.

    Raises:
        ValueError: If the exponents do not belong to the modulus.
    """
    k = priv * pub - 1
    if k <= 0 or k % 2:
        raise ValueError("Exponents do not form an RSA key pair.")
    t, s = k, 0
    while t % 2 == 0:
        t //= 2
        s += 1
    for g in get_pre_primes(1000):
        x = pow(g, t, n)
        if x in (1, n - 1):
            continue
        for _ in range(s):
            y = pow(x, 2, n)
            if y == 1:
                p = math.gcd(x - 1, n)
                if not 1 < p < n:
                    break
                return max(p, n // p), min(p, n // p)
            if y == n - 1:
                break
            x = y
        else:
            raise ValueError("Exponents do not form an RSA key pair.")
    raise ValueError("Unable to factor modulus from the exponents.")
