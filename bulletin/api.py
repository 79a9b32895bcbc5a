"""
------------
bulletin.api
------------

Request/response envelope for the bulletin store.

Requests are ``dict`` messages with exactly one key naming the operation and a
``dict`` of arguments as its value, for example:

.. code-block:: python

    execute(store, 'alice', {'add_message': {'topic': 'news', 'message': 'hello'}})
    query(store, {'get_messages_by_topic': {'topic': 'news'}})

Responses are plain ``dict`` objects, see :func:`to_json`.

The identity of the writer is never read from the message. It is passed to
:func:`execute` by the boundary that has verified it.
"""
import json
from logging import getLogger
from bulletin.storeapi import StoreException


log = getLogger(__name__)


class InvalidRequest(StoreException):
    """Raised when a request message is malformed.
    """
    pass


EXECUTE_MESSAGES = {
    'add_message': {'topic': str, 'message': str},
}

QUERY_MESSAGES = {
    'get_current_id': {},
    'get_all_message': {},
    'get_messages_by_addr': {'address': str},
    'get_messages_by_topic': {'topic': str},
    'get_messages_by_id': {'id': int},
}


def _unpack(msg, allowed):
    """Checks the message against the allowed messages.

    Returns the ``(name, arguments)`` tuple of the message.
    """
    if not isinstance(msg, dict) or len(msg) != 1:
        raise InvalidRequest('message must be a dict with exactly one key')
    name, args = next(iter(msg.items()))
    fields = allowed.get(name)
    if fields is None:
        raise InvalidRequest('unknown message %s' % name)
    if not isinstance(args, dict):
        raise InvalidRequest('arguments of %s must be a dict' % name)
    if set(args) != set(fields):
        raise InvalidRequest('%s takes arguments: %s' % (name, ', '.join(sorted(fields)) or 'none'))
    for field, field_type in fields.items():
        value = args[field]
        if not isinstance(value, field_type) or isinstance(value, bool):
            raise InvalidRequest('invalid value for %s.%s' % (name, field))
    return name, args


def execute(store, sender, msg):
    """Executes a write message.

    :param store: :class:`bulletin.storeapi.BulletinStore`, the store.
    :param sender: ``str``, the verified identity of the caller. Stored verbatim as the record owner.
    :param msg: ``dict``, the message.

    Returns the response ``dict``.
    """
    _, args = _unpack(msg, EXECUTE_MESSAGES)
    record_id = store.insert(sender, args['topic'], args['message'])
    return {'attributes': [['action', 'add_message'], ['id', str(record_id)]]}


def query(store, msg):
    """Executes a read message.

    :param store: :class:`bulletin.storeapi.BulletinStore`, the store.
    :param msg: ``dict``, the message.

    Returns the response ``dict``.
    """
    name, args = _unpack(msg, QUERY_MESSAGES)
    log.debug('Query %s %s', name, args)
    if name == 'get_current_id':
        return {'current_id': store.current_id()}
    if name == 'get_all_message':
        records = store.list_all()
    elif name == 'get_messages_by_addr':
        records = store.list_by_owner(args['address'])
    elif name == 'get_messages_by_topic':
        records = store.list_by_topic(args['topic'])
    else:
        records = [store.get_by_id(args['id'])]
    return {'messages': [record.to_dict() for record in records]}


def to_json(response):
    """Serializes a response ``dict`` as a JSON ``str``.
    """
    return json.dumps(response)
