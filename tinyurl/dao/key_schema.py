import functools
from collections.abc import Callable

from tinyurl.constants import KeyPrefix


__all__ = ['KeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class KeySchema:
    """Provide the two key projections of a short URL record.

    Both projections share one key namespace and are told apart by a tag:
    'fullURL#<long url>' and 'tinyURL#<short code>'.

    An optional prefix can be provided to namespace all generated keys,
    e.g. "tinyurl:prod" or "tinyurl:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def long_url_key(self, target: str) -> str:
        return f'{KeyPrefix.LONG_URL}#{target}'

    @prefix_key
    def short_code_key(self, shortcode: str) -> str:
        return f'{KeyPrefix.SHORT_CODE}#{shortcode}'
