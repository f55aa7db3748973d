"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (e.g., DynamoDB, Redis).

Every record is stored as two key-addressed projections of the same logical
row, one keyed by the long URL and one keyed by the short code. Both
projections are created in one atomic operation, so either both keys resolve
or neither does.

Responsibilities:
    - Atomically register a ShortURLModel under both of its keys.
    - Report *which* uniqueness condition failed when registration is refused.
    - Retrieve ShortURLModel objects by short code.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from tinyurl.models import ShortURLModel, InsertStatus
        >>> from tinyurl.dao.dynamodb import ShortURLDynamoDBDAO

        >>> dao = ShortURLDynamoDBDAO(table_name='tinyurl', region_name='eu-west-1')

        >>> short_url = ShortURLModel(
        ...     target="https://example.com/blog/article-123",
        ...     shortcode="2e3lqf3",
        ... )
        >>> dao.insert(short_url).status
        <InsertStatus.SUCCESS: 'success'>

        >>> dao.insert(short_url).status
        <InsertStatus.LONG_URL_EXISTS: 'long_url_exists'>

        >>> dao.get("2e3lqf3").target
        'https://example.com/blog/article-123'
"""

from abc import ABC, abstractmethod

from tinyurl.models import ShortURLModel, InsertOutcome


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> InsertOutcome:
            Atomically insert the record under its long URL key and its short
            code key, each conditioned on the key being absent.
            Raises DataStoreError on connection or unclassified write failure.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Retrieve a ShortURLModel from the data store by short code.
            Raises ShortURLNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLDynamoDBDAO or
        ShortURLRedisDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Records are never updated or deleted through the DAO.
    """

    @abstractmethod
    def insert(self, short_url: ShortURLModel, **kwargs) -> InsertOutcome:
        """Atomically register a ShortURLModel under both of its keys.

        The two conditions are evaluated independently and reported with a
        fixed precedence: an existing long URL wins over a short code collision.

        Args:
            short_url (ShortURLModel):
                The candidate record.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            InsertOutcome:
                SUCCESS: both keys were created.
                LONG_URL_EXISTS: the long URL was already registered; `existing`
                    holds the stored record, nothing was written.
                SHORT_CODE_EXISTS: the long URL was free but the short code is
                    owned by another record; nothing was written.
                INVALID: the store rejected the write for a reason unrelated
                    to key collisions; `detail` explains why.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a ShortURLModel from the data store by its short code.

        Args:
            shortcode (str):
                The short code of the ShortURLModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel: The stored record.

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
