"""
-------------------
bulletin.naivestore
-------------------

Naive implementations of the :class:`bulletin.storeapi.Substrate`.

:class:`MemorySubstrate` keeps the entries in a ``dict`` and is useful for
tests and short-lived processes.

:class:`NaiveSubstrate` keeps the entries in a single plain-text data file,
encoded in UTF-8. Each entry is written as::

    entry: <total-size> <key-size> <value-size>
    <key><value>

with sizes in bytes, entries sorted by key. Plain text is chosen so that the
data file can also be read by other tools (such as ``grep``). The file is
rewritten on every commit, atomically, so it is never left in an inconsistent
state: the new content is written to a temporary file in the same directory,
synced, then renamed over the data file.

The naive substrate does not cache anything between calls, every read loads
the data file. This makes it unsuitable for large data sets, but a process
restart never loses a committed write.
"""

from collections import namedtuple
from contextlib import contextmanager
from io import BytesIO
from os import fsync, makedirs, remove
from os.path import exists, join as join_paths
from shutil import move
from tempfile import NamedTemporaryFile
from threading import RLock
from logging import getLogger
from bulletin.storeapi import Substrate, Transaction, SubstrateReadFailure, SubstrateWriteFailure


log = getLogger(__name__)


EntryPreamble = namedtuple('EntryPreamble', ['total', 'key', 'value'])


class EOFException(Exception):
    """Raised by the :class:`EntryParser` when there are no more entries in the stream.
    """
    pass


class EntrySerializer:
    """Serializes a key-value entry for the naive data file.
    """

    def __init__(self, encoding='utf-8'):
        self.encoding = encoding

    def serialize(self, key, value):
        """Returns the ``bytes`` of the serialized entry, including the trailing new line.
        """
        key_bytes = key.encode(self.encoding)
        value_bytes = value.encode(self.encoding)
        preamble = 'entry: %d %d %d\n' % (len(key_bytes) + len(value_bytes), len(key_bytes), len(value_bytes))
        return preamble.encode(self.encoding) + key_bytes + value_bytes + b'\n'


class EntryParser:
    """Parses entries written by :class:`EntrySerializer`.
    """

    def __init__(self, encoding='utf-8'):
        self.encoding = encoding

    def parse_preamble(self, stream):
        pstr = stream.readline()
        if not pstr:
            raise EOFException()
        pstr = pstr.decode(self.encoding).strip()
        if not pstr.startswith('entry:'):
            raise ValueError('Invalid preamble line')
        values = pstr[len('entry:'):].split()
        if len(values) != 3:
            raise ValueError('Invalid preamble values')
        return EntryPreamble(*[int(v) for v in values])

    def parse_entry(self, stream):
        """Parses one entry from the stream.

        Returns a ``(key, value)`` tuple. Raises :class:`EOFException` at the end of the stream.
        """
        preamble = self.parse_preamble(stream)
        key = stream.read(preamble.key)
        value = stream.read(preamble.value)
        if len(key) != preamble.key or len(value) != preamble.value:
            raise ValueError('Invalid entry size. The stream is either unreadable or corrupted.')
        if stream.read(1) != b'\n':
            raise ValueError('Missing entry terminator.')
        return key.decode(self.encoding), value.decode(self.encoding)


class SequentialEntryReader:
    """Reads entries from an incoming binary stream.

    This reader implements the context manager interface and closes the stream on exit:

    .. code-block:: python

        with SequentialEntryReader(open(path, 'rb'), EntryParser()) as reader:
            for key, value in reader.entries():
                print(key, value)

    :param stream: the binary stream to read entries from.
    :param parser: :class:`EntryParser`, the parser for the entries.
    """

    def __init__(self, stream, parser):
        self.stream = stream
        self.parser = parser

    def entries(self):
        """Returns an iterator over the ``(key, value)`` entries in the stream.
        """
        while True:
            try:
                yield self.parser.parse_entry(self.stream)
            except EOFException:
                break

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.stream.close()


class MemoryFile:
    """File-system backed in-memory buffer.

    Writes go to an in-memory buffer, which then can be flushed to the actual
    file in the file-system. Flushing is atomic: the buffer is first written to
    a temporary file in the same directory, the system buffers are synced, and
    then the temporary file is renamed as the actual file.

    :param name: ``str``, the file name, without the directory.
    :param path: ``str``, the directory holding the file.
    """

    def __init__(self, name, path):
        self.name = name
        self.path = path
        self.buffer = BytesIO()
        self.lock = RLock()

    def write(self, data):
        """Writes ``bytes`` to the in-memory buffer.
        """
        with self.lock:
            self.buffer.write(data)

    def flush(self):
        """Writes the in-memory buffer to the file in the file-system.
        """
        with self.lock:
            tmpf = NamedTemporaryFile(dir=self.path, delete=False)
            try:
                tmpf.write(self.buffer.getvalue())
                tmpf.flush()
                fsync(tmpf.fileno())
                tmpf.close()
                move(tmpf.name, join_paths(self.path, self.name))
            except Exception:
                tmpf.close()
                if exists(tmpf.name):
                    remove(tmpf.name)
                raise


class StagedTransaction(Transaction):
    """Transaction that stages writes over a snapshot of the committed entries.

    :param committed: ``dict``, snapshot of the committed entries.
    """

    def __init__(self, committed):
        self.committed = committed
        self.staged = {}

    def get(self, key):
        if key in self.staged:
            return self.staged[key]
        return self.committed.get(key)

    def put(self, key, value):
        self.staged[key] = value

    def scan(self, prefix):
        merged = dict(self.committed)
        merged.update(self.staged)
        return _scan_dict(merged, prefix)


def _scan_dict(data, prefix):
    for key in sorted(k for k in data if k.startswith(prefix)):
        yield key, data[key]


class MemorySubstrate(Substrate):
    """Volatile substrate that keeps the entries in a ``dict``.

    Subclasses change where the committed entries live by overriding
    :meth:`MemorySubstrate._load` and :meth:`MemorySubstrate._commit`.
    """

    def __init__(self):
        self.data = {}
        self.lock = RLock()

    def _load(self):
        """Returns a snapshot ``dict`` of the committed entries.
        """
        return dict(self.data)

    def _commit(self, staged):
        """Applies the staged entries of a transaction.
        """
        self.data.update(staged)

    def get(self, key):
        with self.lock:
            return self._load().get(key)

    def scan(self, prefix):
        with self.lock:
            data = self._load()
        return _scan_dict(data, prefix)

    @contextmanager
    def transaction(self):
        with self.lock:
            txn = StagedTransaction(self._load())
            yield txn
            if txn.staged:
                self._commit(txn.staged)

    def close(self):
        pass


class NaiveSubstrate(MemorySubstrate):
    """Substrate that keeps the entries in a plain-text data file.

    :param root_dir: ``str``, the directory holding the data file. It is created if missing.
    :param file_name: ``str``, the name of the data file.
    """

    def __init__(self, root_dir, file_name='bulletin.data'):
        super(NaiveSubstrate, self).__init__()
        self.root_dir = root_dir
        self.file_name = file_name
        self.serializer = EntrySerializer()
        makedirs(root_dir, exist_ok=True)
        log.info('Naive substrate at %s', self.data_path)

    @property
    def data_path(self):
        return join_paths(self.root_dir, self.file_name)

    def _load(self):
        if not exists(self.data_path):
            return {}
        try:
            with SequentialEntryReader(open(self.data_path, 'rb'), EntryParser()) as reader:
                return dict(reader.entries())
        except (OSError, ValueError) as e:
            raise SubstrateReadFailure('Failed to read %s: %s' % (self.data_path, e)) from e

    def _commit(self, staged):
        data = self._load()
        data.update(staged)
        mem_file = MemoryFile(name=self.file_name, path=self.root_dir)
        for key in sorted(data):
            mem_file.write(self.serializer.serialize(key, data[key]))
        try:
            mem_file.flush()
        except OSError as e:
            raise SubstrateWriteFailure('Failed to write %s: %s' % (self.data_path, e)) from e

    def close(self):
        log.info('Naive substrate closed')
