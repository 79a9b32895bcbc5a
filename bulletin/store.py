"""
--------------
bulletin.store
--------------

The record store.

:class:`RecordStore` implements :class:`bulletin.storeapi.BulletinStore` on
top of any :class:`bulletin.storeapi.Substrate`. Records are kept one per key,
under ``messages/<id>``, with the identifier zero-padded so that the key order
of the substrate is the identifier order. Example:

.. code-block:: python

    from bulletin.naivestore import MemorySubstrate
    from bulletin.store import RecordStore

    store = RecordStore(MemorySubstrate())
    store.initialize()

    store.insert('alice', 'news', 'first')
    store.insert('bob', 'news', 'second')

    for record in store.list_by_topic('news'):
        print(record.id, record.owner, record.body)

would print::

    >> 0 alice first
    >> 1 bob second

"""
from logging import getLogger
from bulletin.allocator import IdAllocator, MAX_ID
from bulletin.model import Record, RecordSerializer, RecordParser, RecordFormatError
from bulletin.storeapi import (BulletinStore,
                               StoreUninitialized,
                               StoreAlreadyInitialized,
                               RecordNotFound,
                               SubstrateReadFailure)


log = getLogger(__name__)


RECORD_PREFIX = 'messages/'

_ID_WIDTH = len(str(MAX_ID))


def record_key(record_id):
    """Returns the substrate key for the record with the given identifier.
    """
    return '%s%0*d' % (RECORD_PREFIX, _ID_WIDTH, record_id)


class RecordStore(BulletinStore):
    """Append-only record store.

    The store keeps no state of its own: every call reads what it needs from
    the substrate. The host is expected to serialize calls against one store.

    :param substrate: :class:`bulletin.storeapi.Substrate`, the key-value storage.
    :param allocator: :class:`bulletin.allocator.IdAllocator`, optional identifier allocator.
    """

    def __init__(self, substrate, allocator=None):
        self.substrate = substrate
        self.allocator = allocator or IdAllocator()
        self.serializer = RecordSerializer()
        self.parser = RecordParser()

    def initialize(self):
        with self.substrate.transaction() as txn:
            try:
                self.allocator.current(txn)
            except StoreUninitialized:
                self.allocator.reset(txn)
            else:
                raise StoreAlreadyInitialized('The store has already been initialized.')
        log.info('Store initialized.')

    def insert(self, owner, topic, body):
        for name, value in (('owner', owner), ('topic', topic), ('body', body)):
            if not isinstance(value, str):
                raise TypeError('%s must be a str, not %s' % (name, type(value).__name__))

        with self.substrate.transaction() as txn:
            record_id = self.allocator.next_id(txn)
            record = Record(id=record_id, owner=owner, topic=topic, body=body)
            txn.put(record_key(record_id), self.serializer.serialize(record))
        log.debug('Stored %s', record)
        return record_id

    def get_by_id(self, record_id):
        if not isinstance(record_id, int):
            raise TypeError('record id must be an int, not %s' % type(record_id).__name__)
        self.allocator.current(self.substrate)
        if record_id < 0 or record_id > MAX_ID:
            raise RecordNotFound('No record with id %d' % record_id)
        value = self.substrate.get(record_key(record_id))
        if value is None:
            raise RecordNotFound('No record with id %d' % record_id)
        return self._parse(value)

    def list_all(self):
        return list(self._scan())

    def list_by_owner(self, owner):
        return list(self._scan(lambda record: record.owner == owner))

    def list_by_topic(self, topic):
        return list(self._scan(lambda record: record.topic == topic))

    def current_id(self):
        return self.allocator.current(self.substrate)

    def _parse(self, value):
        try:
            return self.parser.parse(value)
        except RecordFormatError as e:
            raise SubstrateReadFailure('Corrupted record: %s' % e) from e

    def _scan(self, predicate=None):
        self.allocator.current(self.substrate)
        for _, value in self.substrate.scan(RECORD_PREFIX):
            record = self._parse(value)
            if predicate is None or predicate(record):
                yield record
