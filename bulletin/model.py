"""
--------------
bulletin.model
--------------

Bulletin record model and the text codec used to persist records.

A serialized record looks like this::

    record: 55 41 14
    id:0
    owner:"alice"
    topic:"announcements"
    Hello everyone

The preamble holds the total, header and body sizes in bytes. The ``owner`` and
``topic`` header values are JSON string literals, so any character survives a
round trip through the header.
"""
import json
from collections import namedtuple
from io import BytesIO, StringIO


RecordPreamble = namedtuple('RecordPreamble', ['total', 'header', 'body'])


class RecordFormatError(ValueError):
    """Raised when a serialized record cannot be parsed.
    """
    pass


class Record:
    """A single stored bulletin message.

    :param id: ``int``, the unique identifier assigned by the store.
    :param owner: ``str``, identity of the caller that submitted the record.
    :param topic: ``str``, the topic of the message.
    :param body: ``str``, the message itself.
    """

    def __init__(self, id, owner, topic, body):
        self.id = id
        self.owner = owner
        self.topic = topic
        self.body = body

    def to_dict(self):
        """Returns the record as a plain ``dict`` suitable for serialization by a boundary layer.
        """
        return {
            'id': self.id,
            'owner': self.owner,
            'topic': self.topic,
            'message': self.body,
        }

    def __eq__(self, obj):
        if not isinstance(obj, Record):
            return False
        return (self.id, self.owner, self.topic, self.body) == (obj.id, obj.owner, obj.topic, obj.body)

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return 'Record<%d by %s @ %s>' % (self.id, self.owner, self.topic)


class RecordSerializer:
    """Serializes :class:`Record` objects to ``str``.

    :param encoding: ``str``, the encoding used to compute the byte sizes in the preamble.
    """

    def __init__(self, encoding='utf-8'):
        self.encoding = encoding

    def serialize(self, record):
        """Serializes a record.

        :param record: :class:`Record`, the record to serialize.

        Returns the serialized record as ``str``.
        """
        hdr = self._serialize_header(record)
        hdr_size = len(hdr.encode(self.encoding))
        body_size = len(record.body.encode(self.encoding))
        total_size = hdr_size + body_size
        rec_str = 'record: %d %d %d\n' % (total_size, hdr_size, body_size)
        rec_str += hdr
        rec_str += record.body
        return rec_str

    def _serialize_header(self, record):
        hdr = ''
        hdr += 'id:%d\n' % record.id
        hdr += 'owner:' + json.dumps(record.owner, ensure_ascii=False) + '\n'
        hdr += 'topic:' + json.dumps(record.topic, ensure_ascii=False) + '\n'
        return hdr


class RecordParser:
    """Parses :class:`Record` objects serialized by :class:`RecordSerializer`.

    :param encoding: ``str``, the encoding of the serialized data.
    """

    def __init__(self, encoding='utf-8'):
        self.encoding = encoding

    def parse(self, data):
        """Parses a record from its serialized ``str`` form.

        Raises :class:`RecordFormatError` if the data is corrupted.
        """
        return self.parse_record(BytesIO(data.encode(self.encoding)))

    def parse_preamble(self, stream):
        pstr = stream.readline()
        if pstr:
            pstr = pstr.decode(self.encoding, errors='replace').strip()
        if not pstr or not pstr.startswith('record:'):
            raise RecordFormatError('Invalid preamble line')

        values = pstr[len('record:'):].split()
        if len(values) != 3:
            raise RecordFormatError('Invalid preamble values')
        try:
            preamble = RecordPreamble(*[int(v) for v in values])
        except ValueError as e:
            raise RecordFormatError('Invalid preamble values') from e
        if preamble.total != preamble.header + preamble.body:
            raise RecordFormatError('Preamble sizes do not add up')
        return preamble

    def parse_header(self, hdr_size, stream):
        data = stream.read(hdr_size)
        if len(data) != hdr_size:
            raise RecordFormatError('Invalid header size. %d read, expected %d' % (len(data), hdr_size))
        try:
            hdr_str = data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise RecordFormatError('Header is not valid %s' % self.encoding) from e
        fields = {}
        sio = StringIO(hdr_str)
        for ln in sio:
            ln = ln.rstrip('\n')
            prop, sep, value = ln.partition(':')
            if not sep:
                raise RecordFormatError('Invalid header line')
            if prop not in ('id', 'owner', 'topic'):
                raise RecordFormatError('Unknown property in header %s' % prop)
            try:
                fields[prop] = int(value) if prop == 'id' else json.loads(value)
            except ValueError as e:
                raise RecordFormatError('Invalid value for header property %s' % prop) from e
            if prop != 'id' and not isinstance(fields[prop], str):
                raise RecordFormatError('Header property %s must be a string' % prop)
        missing = {'id', 'owner', 'topic'} - set(fields)
        if missing:
            raise RecordFormatError('Missing header properties: %s' % ', '.join(sorted(missing)))
        return fields

    def parse_record(self, stream):
        """Parses a single record from a binary stream.

        :param stream: ``io.BytesIO``, stream positioned at the record preamble.

        Returns the parsed :class:`Record`.
        """
        preamble = self.parse_preamble(stream)
        header = self.parse_header(preamble.header, stream)
        body = stream.read(preamble.body)
        if len(body) != preamble.body:
            raise RecordFormatError('Invalid body size. The stream is either unreadable or corrupted.')
        try:
            body = body.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise RecordFormatError('Body is not valid %s' % self.encoding) from e
        return Record(id=header['id'], owner=header['owner'], topic=header['topic'], body=body)
