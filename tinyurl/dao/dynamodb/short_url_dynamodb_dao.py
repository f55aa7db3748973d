"""Data Access Object (DAO) implementation for managing shortened URLs in DynamoDB

This module provides a DynamoDB-based implementation of ShortURLBaseDAO.

Both key projections of a record live in the same table, under an overloaded
string partition key `pk`:

    pk = 'fullURL#<long url>'   -> {fullURL, tinyURL, created}
    pk = 'tinyURL#<short code>' -> {fullURL, tinyURL, created}

They are written with a single TransactWriteItems call holding two
conditional Puts, so DynamoDB guarantees both-or-neither visibility.

Responsibilities:
    - Atomically insert both projections of a short URL record;
    - Attribute a cancelled transaction to the condition that failed;
    - Retrieve short URL records by short code;
    - Translate botocore failures into DAO exceptions.

Classes:
    ShortURLDynamoDBDAO:
        DAO for storing and retrieving ShortURLModel in a DynamoDB table.

Example:
    >>> from tinyurl.models import ShortURLModel
    >>> from tinyurl.dao.dynamodb import ShortURLDynamoDBDAO

    >>> dao = ShortURLDynamoDBDAO(table_name='tinyurl', region_name='eu-west-1')

    >>> outcome = dao.insert(ShortURLModel(target='https://example.com/page', shortcode='2e3lqf3'))
    >>> outcome.status
    <InsertStatus.SUCCESS: 'success'>

    >>> dao.get('2e3lqf3').target
    'https://example.com/page'
"""

import logging

from beartype import beartype
from botocore.exceptions import ClientError

from tinyurl.constants import Defaults
from tinyurl.models import ShortURLModel, InsertOutcome
from tinyurl.dao.base import ShortURLBaseDAO
from tinyurl.dao.dynamodb.mixins import DynamoDBClientMixin
from tinyurl.dao.dynamodb.helpers import handle_dynamodb_error
from tinyurl.dao.exceptions import DataStoreError, ShortURLNotFoundError
from tinyurl.types import DynamoDBItem


logger = logging.getLogger(__name__)

# CancellationReasons codes (one per TransactItem, in request order)
CONDITION_FAILED = 'ConditionalCheckFailed'
VALIDATION_ERROR = 'ValidationError'
NO_FAILURE = 'None'
TRANSACTION_CONFLICT = 'TransactionConflict'


class ShortURLDynamoDBDAO(DynamoDBClientMixin, ShortURLBaseDAO):
    """DynamoDB-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using DynamoDB as a data store.

    Attributes (see DynamoDBClientMixin):
        dynamodb (BaseClient):
            boto3 DynamoDB client.
        table_name (str):
            Table holding both key projections.
        keys (KeySchema):
            Key schema helper for generating partition key values.
        transaction_retries (int):
            Times a dual insert is re-issued after losing to a concurrent
            transaction on the same keys.

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> InsertOutcome:
            Atomically write the long URL and short code projections.
            Raises DataStoreError on connectivity issues, unknown transaction states
            or persistent transaction conflicts.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Retrieve a short URL record by shortcode (strongly consistent read).
            Raises ShortURLNotFoundError when the shortcode doesn't exist.
            Raises DataStoreError on connectivity issues.
    """

    transaction_retries = Defaults.DYNAMODB_TRANSACTION_RETRIES

    @handle_dynamodb_error
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> InsertOutcome:
        """Atomically insert both key projections of a short URL record

        The long URL Put is always the first TransactItem and the short code
        Put the second. DynamoDB reports one cancellation reason per item in
        request order, which is what lets us tell the two conditions apart.

        A transaction cancelled by a concurrent one touching the same keys
        (TransactionConflict) is re-issued up to `transaction_retries` times,
        so a racing registration of the same long URL is observed as
        LONG_URL_EXISTS on the next attempt.

        Args:
            short_url (ShortURLModel):
                Candidate record.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            InsertOutcome: see ShortURLBaseDAO.insert().

        Raises:
            DataStoreError:
                If DynamoDB is unreachable, throttles beyond the retry budget,
                keeps reporting transaction conflicts after `transaction_retries`
                attempts, or cancels the transaction for an unexpected reason.
        """
        item = short_url.to_item()
        long_url_key = self.keys.long_url_key(short_url.target)
        short_code_key = self.keys.short_code_key(short_url.shortcode)

        transact_items = [
            self._conditional_put(item, long_url_key),
            self._conditional_put(item, short_code_key),
        ]

        for _ in range(self.transaction_retries):
            try:
                self.dynamodb.transact_write_items(TransactItems=transact_items)
            except ClientError as e:
                error = e.response.get('Error', {})
                if error.get('Code') == 'ValidationException':
                    # e.g. partition key over 2048 bytes, item over 400KB
                    return InsertOutcome.invalid(error.get('Message') or 'DynamoDB rejected the request.')
                reasons = e.response.get('CancellationReasons')
                if error.get('Code') != 'TransactionCanceledException' or not reasons:
                    raise
                if self._lost_to_concurrent_transaction(reasons):
                    logger.debug(
                        'Concurrent transaction on the same keys. Re-issuing dual insert.',
                        extra={'shortcode': short_url.shortcode},
                    )
                    continue
                return self._interpret_cancellation(short_url, reasons)
            else:
                return InsertOutcome.success()

        raise DataStoreError(
            f"Dual insert for short code '{short_url.shortcode}' kept conflicting after {self.transaction_retries} attempts."
        )

    @handle_dynamodb_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a stored short URL record by shortcode

        Args:
            shortcode (str):
                The shortcode identifier for the shortened URL.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLModel: The stored record.

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in DynamoDB.
            DataStoreError:
                If DynamoDB connectivity issues occur.

        Example:
            >>> dao.get('2e3lqf3')
            ShortURLModel(target='https://example.com', shortcode='2e3lqf3', ...)
        """
        response = self.dynamodb.get_item(
            TableName=self.table_name,
            Key={'pk': {'S': self.keys.short_code_key(shortcode)}},
            ConsistentRead=True,
        )

        item = response.get('Item')
        if not item:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        return ShortURLModel.from_item(self._unmarshall(item))

    def _conditional_put(self, item: dict[str, str], key: str) -> DynamoDBItem:
        return {
            'Put': {
                'TableName': self.table_name,
                'Item': self._marshall({**item, 'pk': key}),
                'ConditionExpression': 'attribute_not_exists(pk)',
                'ReturnValuesOnConditionCheckFailure': 'ALL_OLD',
            }
        }

    @staticmethod
    def _lost_to_concurrent_transaction(reasons: list[DynamoDBItem]) -> bool:
        """True when a conflict, not a failed condition, cancelled the transaction."""
        codes = [reason.get('Code', NO_FAILURE) for reason in reasons]
        if len(codes) != 2 or codes[0] in (CONDITION_FAILED, VALIDATION_ERROR):
            return False
        return TRANSACTION_CONFLICT in codes

    def _interpret_cancellation(self, short_url: ShortURLModel, reasons: list[DynamoDBItem]) -> InsertOutcome:
        """Map per-item cancellation reasons to an InsertOutcome

        Precedence (first match wins):
            long URL   ValidationError         -> INVALID
            long URL   ConditionalCheckFailed  -> LONG_URL_EXISTS (record from ALL_OLD)
            long URL   None, short code CCF    -> SHORT_CODE_EXISTS
            short code ValidationError         -> INVALID
            anything else                      -> DataStoreError
        """
        if len(reasons) != 2:
            raise DataStoreError(f'Unknown transaction state: expected 2 cancellation reasons, got {len(reasons)}.')

        long_reason, short_reason = reasons
        long_code = long_reason.get('Code', NO_FAILURE)
        short_code = short_reason.get('Code', NO_FAILURE)

        if long_code == VALIDATION_ERROR:
            return InsertOutcome.invalid(f"Validation failed: {long_reason.get('Message', 'no details')}")

        if long_code == CONDITION_FAILED:
            existing = ShortURLModel.from_item(self._unmarshall(long_reason.get('Item', {})))
            logger.debug(
                'Long URL already registered.',
                extra={'shortcode': existing.shortcode, 'candidate': short_url.shortcode},
            )
            return InsertOutcome.long_url_exists(existing)

        if long_code == NO_FAILURE and short_code == CONDITION_FAILED:
            return InsertOutcome.short_code_exists()

        if short_code == VALIDATION_ERROR:
            return InsertOutcome.invalid(f"Validation failed: {short_reason.get('Message', 'no details')}")

        raise DataStoreError(f'Unknown transaction state (long URL: {long_code}, short code: {short_code}).')
