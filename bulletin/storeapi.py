"""
-----------------
bulletin.storeapi
-----------------

Bulletin Store API
^^^^^^^^^^^^^^^^^^

Defines the key-value substrate interface the record store is built on, the
record store interface itself, and the exceptions raised by both.
"""
from abc import abstractmethod


class Transaction:
    """A unit of work against a :class:`Substrate`.

    Writes are staged in the transaction and become visible to other readers
    only when the transaction commits. Reads through the transaction see the
    staged writes.
    """

    @abstractmethod
    def get(self, key):
        """Looks up the value stored under ``key``.

        :param key: ``str``, the key.

        Returns the ``str`` value, or ``None`` if there is no value under this key.
        """
        pass

    @abstractmethod
    def put(self, key, value):
        """Stages a write of ``value`` under ``key``.

        :param key: ``str``, the key.
        :param value: ``str``, the value.
        """
        pass

    @abstractmethod
    def scan(self, prefix):
        """Iterates over all entries whose key starts with ``prefix``.

        Returns an iterator of ``(key, value)`` tuples, ordered ascending by key.
        """
        pass


class Substrate:
    """Durable key-value storage.

    The substrate offers point reads, ordered prefix scans and atomic
    transactions. It is used as:

    .. code-block:: python

        with substrate.transaction() as txn:
            txn.put('a', '1')
            txn.put('b', '2')

    Leaving the ``with`` block normally commits both writes at once. Leaving it
    with an exception discards both writes and the exception propagates.

    Implementations raise :class:`SubstrateReadFailure` or
    :class:`SubstrateWriteFailure` when the underlying storage fails.
    """

    @abstractmethod
    def get(self, key):
        """Looks up the committed value stored under ``key``.

        Returns the ``str`` value, or ``None`` if there is no value under this key.
        """
        pass

    @abstractmethod
    def scan(self, prefix):
        """Iterates over the committed entries whose key starts with ``prefix``.

        Returns an iterator of ``(key, value)`` tuples, ordered ascending by key.
        """
        pass

    @abstractmethod
    def transaction(self):
        """Opens a new transaction.

        Returns a context manager that yields a :class:`Transaction`.
        """
        pass

    @abstractmethod
    def close(self):
        """Close and cleanup the underlying storage.
        """
        pass


class BulletinStore:
    """BulletinStore is the basic interface for interaction with the records.

    Records are only ever added: there is no update and no delete. Every record
    gets an identifier from a counter that starts at ``0`` and grows by one with
    every insert.
    """

    @abstractmethod
    def initialize(self):
        """Initializes the store, setting the identifier counter to ``0``.

        Must be called exactly once, before any other operation.
        """
        pass

    @abstractmethod
    def insert(self, owner, topic, body):
        """Stores a new record.

        This method is atomic: either the record and the advanced counter are
        both stored, or nothing is.

        :param owner: ``str``, the already verified identity of the caller.
        :param topic: ``str``, the topic.
        :param body: ``str``, the message.

        Returns the ``int`` identifier assigned to the record.
        """
        pass

    @abstractmethod
    def get_by_id(self, record_id):
        """Looks up a record by its identifier.

        Raises :class:`RecordNotFound` if there is no such record.
        """
        pass

    @abstractmethod
    def list_all(self):
        """Returns a ``list`` of all records, ascending by identifier.
        """
        pass

    @abstractmethod
    def list_by_owner(self, owner):
        """Returns a ``list`` of the records submitted by ``owner``, ascending by identifier.
        """
        pass

    @abstractmethod
    def list_by_topic(self, topic):
        """Returns a ``list`` of the records with the given ``topic``, ascending by identifier.
        """
        pass

    @abstractmethod
    def current_id(self):
        """Returns the identifier that the next insert will be assigned.
        """
        pass


class StoreException(Exception):
    """General store error.
    """
    pass


class StoreUninitialized(StoreException):
    """Raised on any operation attempted before the store was initialized.
    """
    pass


class StoreAlreadyInitialized(StoreException):
    """Raised when initializing a store that already holds a counter.
    """
    pass


class RecordNotFound(StoreException):
    """Raised if there is no record under the requested identifier.
    """
    pass


class IdOverflow(StoreException):
    """Raised when the identifier space is exhausted.
    """
    pass


class SubstrateFailure(StoreException):
    """Represents an error in the underlying key-value storage.
    """
    pass


class SubstrateReadFailure(SubstrateFailure):
    """Represents an error while reading from the underlying storage.
    """
    pass


class SubstrateWriteFailure(SubstrateFailure):
    """Represents an error while writing to the underlying storage.
    """
    pass
