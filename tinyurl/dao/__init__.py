from tinyurl.dao.key_schema import KeySchema
from tinyurl.dao.base import ShortURLBaseDAO


__all__ = [
    'KeySchema',
    'ShortURLBaseDAO',
]
