from tinyurl.dao.dynamodb.mixins import DynamoDBClientMixin
from tinyurl.dao.dynamodb.short_url_dynamodb_dao import ShortURLDynamoDBDAO


__all__ = [
    'DynamoDBClientMixin',
    'ShortURLDynamoDBDAO',
]
