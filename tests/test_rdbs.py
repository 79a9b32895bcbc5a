from bulletin.rdbs import RDBSSubstrate, EntryRecord, create_substrate
from bulletin.store import RecordStore
from bulletin.storeapi import SubstrateReadFailure, SubstrateWriteFailure, RecordNotFound
from sqlalchemy.exc import SQLAlchemyError
from unittest import mock
import tempfile
import os
import pytest


def test_create_substrate():
    substrate = create_substrate('sqlite://', verbose=True)
    assert isinstance(substrate, RDBSSubstrate)


def test_transaction_commit_and_get():
    substrate = create_substrate('sqlite://')
    assert substrate.get('a') is None

    with substrate.transaction() as txn:
        txn.put('a', '1')
        assert txn.get('a') == '1'
        txn.put('a', '2')

    assert substrate.get('a') == '2'


def test_transaction_rollback():
    substrate = create_substrate('sqlite://')

    with pytest.raises(RuntimeError):
        with substrate.transaction() as txn:
            txn.put('a', '1')
            raise RuntimeError('abort')

    assert substrate.get('a') is None


def test_scan_prefix_in_key_order():
    substrate = create_substrate('sqlite://')
    with substrate.transaction() as txn:
        for key in ['m/10', 'm/02', 'm%/x', 'm_/y', 'n/1', 'm/01']:
            txn.put(key, key.upper())

    assert list(substrate.scan('m/')) == [('m/01', 'M/01'), ('m/02', 'M/02'), ('m/10', 'M/10')]
    assert list(substrate.scan('m%')) == [('m%/x', 'M%/X')]
    assert [k for k, _ in substrate.scan('')] == sorted(['m/10', 'm/02', 'm%/x', 'm_/y', 'n/1', 'm/01'])


def test_read_failure_is_translated():
    sess = mock.MagicMock()
    sess.get.side_effect = SQLAlchemyError('connection lost')
    substrate = RDBSSubstrate(session_factory=lambda: sess)

    with pytest.raises(SubstrateReadFailure):
        substrate.get('a')
    assert sess.close.call_count == 1


def test_commit_failure_rolls_back():
    sess = mock.MagicMock()
    sess.commit.side_effect = SQLAlchemyError('constraint failed')
    substrate = RDBSSubstrate(session_factory=lambda: sess)

    with pytest.raises(SubstrateWriteFailure):
        with substrate.transaction() as txn:
            txn.put('a', '1')

    assert sess.rollback.call_count == 1
    assert sess.close.call_count == 1


def test_record_store_on_rdbs():
    store = RecordStore(create_substrate('sqlite://'))
    store.initialize()

    assert store.insert('alice', 'topic', 'message1') == 0
    assert store.insert('alice', 'topic', 'message2') == 1
    assert store.insert('bob', 'topic', 'message3') == 2

    assert [r.id for r in store.list_by_owner('alice')] == [0, 1]
    assert len(store.list_by_topic('topic')) == 3
    assert store.get_by_id(1).body == 'message2'
    with pytest.raises(RecordNotFound):
        store.get_by_id(99)


def test_record_store_on_rdbs_persists():
    with tempfile.TemporaryDirectory() as tmpdir:
        db_url = 'sqlite:///' + os.path.join(tmpdir, 'bulletin.db')

        store = RecordStore(create_substrate(db_url))
        store.initialize()
        store.insert('alice', 'topic', 'message1')

        reopened = RecordStore(create_substrate(db_url))
        assert reopened.current_id() == 1
        assert reopened.get_by_id(0).owner == 'alice'
