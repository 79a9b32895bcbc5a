"""
------------------
bulletin.allocator
------------------

Identifier allocation for the bulletin store.

The counter holding the next identifier is a single entry in the substrate,
under :data:`COUNTER_KEY`. It is read and written through the transaction of
the operation that needs it and never cached between calls.
"""
from logging import getLogger
from bulletin.storeapi import StoreUninitialized, IdOverflow, SubstrateReadFailure


log = getLogger(__name__)


COUNTER_KEY = 'current_id'

MAX_ID = 2**128 - 1
"""Largest value the counter may hold. Identifiers are unsigned 128-bit integers."""


class IdAllocator:
    """Hands out unique, increasing identifiers.

    :param max_id: ``int``, the largest value the counter may reach. Defaults to :data:`MAX_ID`.
    """

    def __init__(self, max_id=MAX_ID):
        self.max_id = max_id

    def current(self, reader):
        """Reads the counter.

        :param reader: a :class:`bulletin.storeapi.Substrate` or an open
            :class:`bulletin.storeapi.Transaction`.

        Returns the counter value. Raises :class:`bulletin.storeapi.StoreUninitialized` if
        there is no counter.
        """
        value = reader.get(COUNTER_KEY)
        if value is None:
            raise StoreUninitialized('The store has not been initialized.')
        try:
            return int(value)
        except ValueError as e:
            raise SubstrateReadFailure('Corrupted counter value %r' % value) from e

    def next_id(self, txn):
        """Allocates the next identifier.

        The advanced counter is staged in ``txn`` and is persisted only when
        ``txn`` commits.

        :param txn: :class:`bulletin.storeapi.Transaction`, the open transaction.

        Returns the allocated ``int`` identifier.
        """
        record_id = self.current(txn)
        if record_id + 1 > self.max_id:
            raise IdOverflow('Identifier space exhausted at %d.' % record_id)
        txn.put(COUNTER_KEY, str(record_id + 1))
        log.debug('Allocated id %d', record_id)
        return record_id

    def reset(self, txn):
        """Stages the counter at ``0``.
        """
        txn.put(COUNTER_KEY, '0')
