from bulletin.model import Record, RecordSerializer, RecordParser, RecordFormatError
from io import BytesIO
import pytest


def test_serialize_record():
    rec_str = RecordSerializer().serialize(Record(id=0, owner='alice', topic='topic', body='message1'))
    lines = rec_str.split('\n')

    assert lines == ['record: 41 33 8', 'id:0', 'owner:"alice"', 'topic:"topic"', 'message1']


def test_serialize_record_sizes_are_in_bytes():
    rec_str = RecordSerializer().serialize(Record(id=7, owner='алиса', topic='t', body='здраво'))
    preamble = rec_str.split('\n')[0]

    # 'id:7\n' + 'owner:"алиса"\n' + 'topic:"t"\n'
    hdr_size = 5 + len('owner:"алиса"\n'.encode('utf-8')) + 10
    body_size = len('здраво'.encode('utf-8'))
    assert preamble == 'record: %d %d %d' % (hdr_size + body_size, hdr_size, body_size)


def test_parse_record():
    rec_str = '\n'.join(['record: 41 33 8', 'id:0', 'owner:"alice"', 'topic:"topic"', 'message1'])
    record = RecordParser().parse_record(BytesIO(rec_str.encode('utf-8')))

    assert record.id == 0
    assert record.owner == 'alice'
    assert record.topic == 'topic'
    assert record.body == 'message1'


def test_parse_keeps_special_characters():
    record = Record(id=12, owner='juno10c3slrqx3369mfsr9670au22zvq082jaej8ve4',
                    topic='multi\nline: "topic"', body='body\nwith\nnew lines\n')
    parsed = RecordParser().parse(RecordSerializer().serialize(record))

    assert parsed == record


def test_parse_empty_strings():
    record = Record(id=3, owner='', topic='', body='')
    assert RecordParser().parse(RecordSerializer().serialize(record)) == record


@pytest.mark.parametrize('data', [
    '',
    'garbage',
    'record: 1 2\nid:0\n',
    'record: 41 33 9\nid:0\nowner:"alice"\ntopic:"topic"\nmessage1',
    'record: 41 33 8\nid:0\nowner:"alice"\ntopic:"topic"\nmess',
    'record: 38 30 8\nid:0\nowner:"alice"\nname:"topic"\nmessage1',
    'record: 39 31 8\nid:x\nowner:"alice"\ntopic:"topic"\nmessage1',
    'record: 25 17 8\nid:0\ntopic:"topic"\nmessage1',
    'record: 37 29 8\nid:0\nowner:alice\ntopic:"topic"\nmessage1',
])
def test_parse_corrupted(data):
    with pytest.raises(RecordFormatError):
        RecordParser().parse(data)


def test_record_to_dict():
    record = Record(id=1, owner='alice', topic='topic', body='message2')

    assert record.to_dict() == {'id': 1, 'owner': 'alice', 'topic': 'topic', 'message': 'message2'}


def test_record_equality():
    assert Record(1, 'a', 't', 'b') == Record(1, 'a', 't', 'b')
    assert Record(1, 'a', 't', 'b') != Record(1, 'a', 't', 'c')
    assert Record(1, 'a', 't', 'b') != (1, 'a', 't', 'b')
