"""
Transform length selection for FFT convolution.

Short transforms are padded to a power of two. Above a threshold the next
5-smooth size (2^p * 3^q * 5^r) is used instead, which avoids padding a
large signal to almost twice its length.
"""

from scipy import fft


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (int(n) - 1).bit_length()


def next_5_smooth(n: int) -> int:
    """Smallest integer >= n whose prime factors are only 2, 3 and 5."""
    if n <= 1:
        return 1
    return fft.next_fast_len(int(n), real=True)


def transform_length(n: int, threshold: int = 1024) -> int:
    """
    FFT length for a linear convolution of output length n.

    Args:
        n: Required output length (len(u) + len(v) - 1)
        threshold: Largest n padded to a power of two

    Returns:
        Transform length >= n
    """
    if n > threshold:
        return next_5_smooth(n)
    return next_power_of_two(n)
