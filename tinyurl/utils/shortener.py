"""Shortcode generation utility

This module provides a helper function for deriving short, deterministic
codes from a long URL and an integer seed. No shared counter or coordination
is needed; the price is a non-zero collision probability, which callers
resolve by retrying with the next seed.

Functions:
    generate_shortcode(target, seed):
        Generate a short code suitable for use as a URL slug.

Example:
    >>> from tinyurl.utils import generate_shortcode
    >>> generate_shortcode('abc', 0)
    '2e3lqf3'
"""

import string

import xxhash


ALPHABET = string.digits + string.ascii_lowercase
BASE = len(ALPHABET)  # base36: 10 digits + 26 lowercase letters

NEGATIVE_MARKER = '1'
NON_NEGATIVE_MARKER = '2'

MAX_SEED = 2**32 - 1


def _to_base36(value: int) -> str:
    digits = []
    while True:
        value, remainder = divmod(value, BASE)
        digits.append(ALPHABET[remainder])
        if value == 0:
            break
    return ''.join(reversed(digits))


def generate_shortcode(target: str, seed: int) -> str:
    """Derive a short code from a long URL and a seed.

    The code is the 32-bit xxHash of the URL (UTF-8) seeded with `seed`,
    read as a signed 32-bit integer. A marker character records the sign
    ('1' for negative, '2' otherwise) so the absolute value can be rendered
    in base36 without ambiguity.

    xxh32 mixes the seed into its whole internal state, so consecutive seeds
    land in unrelated parts of the code space.

    Args:
        target (str):
            Long URL to derive the code from. Must be non-empty.

        seed (int):
            Hash seed in [0, 2**32). Shortener attempts use 1, 2, 3, ...

    Returns:
        str: 2 to 8 characters from [0-9a-z], starting with '1' or '2'.

    Example:
        >>> generate_shortcode('abc', 0)
        '2e3lqf3'
    """
    if not isinstance(target, str):
        raise TypeError(f'Target must be of type string (given type: {type(target)}).')
    if not target:
        raise ValueError(f'Target must be a non-empty string (given value: {target!r}).')
    if not isinstance(seed, int):
        raise TypeError(f'Seed must be of type integer (given type: {type(seed)}).')
    if not 0 <= seed <= MAX_SEED:
        raise ValueError(f'Seed must be within [0, {MAX_SEED}] (given value: {seed}).')

    digest = xxhash.xxh32_intdigest(target.encode('utf-8'), seed=seed)
    signed = digest - 2**32 if digest >= 2**31 else digest

    marker = NEGATIVE_MARKER if signed < 0 else NON_NEGATIVE_MARKER
    return marker + _to_base36(abs(signed))
