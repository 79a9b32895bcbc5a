"""
-------------
bulletin.rdbs
-------------

Relational database Substrate implementation.
"""
from contextlib import contextmanager
from logging import getLogger
from sqlalchemy import Column, String, Text, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from bulletin.storeapi import (Substrate,
                               Transaction,
                               SubstrateReadFailure,
                               SubstrateWriteFailure)


log = getLogger(__name__)

Base = declarative_base()


class EntryRecord(Base):
    """SQLAlchemy model representing a key-value entry.
    """

    __tablename__ = 'entries'

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)

    def __repr__(self):
        return 'Entry<%s>' % self.key

    def __str__(self):
        return self.__repr__()


def _scan_session(sess, prefix):
    qry = (sess.query(EntryRecord)
           .filter(EntryRecord.key.startswith(prefix, autoescape=True))
           .order_by(EntryRecord.key))
    return [(entry.key, entry.value) for entry in qry.all()]


class SessionTransaction(Transaction):
    """Transaction bound to a single SQLAlchemy session.

    :param session: the SQLAlchemy session.
    """

    def __init__(self, session):
        self.session = session

    def get(self, key):
        try:
            entry = self.session.get(EntryRecord, key)
        except SQLAlchemyError as e:
            raise SubstrateReadFailure(str(e)) from e
        return entry.value if entry is not None else None

    def put(self, key, value):
        try:
            self.session.merge(EntryRecord(key=key, value=value))
            self.session.flush()
        except SQLAlchemyError as e:
            raise SubstrateWriteFailure(str(e)) from e

    def scan(self, prefix):
        try:
            return iter(_scan_session(self.session, prefix))
        except SQLAlchemyError as e:
            raise SubstrateReadFailure(str(e)) from e


class RDBSSubstrate(Substrate):
    """Substrate that persists the entries in a relational database.

    The implementation relies on SQLAlchemy ORM framework. Each read opens and
    closes its own session; each transaction is a session that is committed
    when the transaction block completes and rolled back otherwise.

    :param session_factory: the SQLAlchemy SessionMaker function.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def _session(self):
        """Creates new session.
        """
        return self.session_factory()

    def get(self, key):
        sess = self._session()
        try:
            entry = sess.get(EntryRecord, key)
            return entry.value if entry is not None else None
        except SQLAlchemyError as e:
            raise SubstrateReadFailure(str(e)) from e
        finally:
            sess.close()

    def scan(self, prefix):
        sess = self._session()
        try:
            return iter(_scan_session(sess, prefix))
        except SQLAlchemyError as e:
            raise SubstrateReadFailure(str(e)) from e
        finally:
            sess.close()

    @contextmanager
    def transaction(self):
        sess = self._session()
        try:
            yield SessionTransaction(sess)
            try:
                sess.commit()
            except SQLAlchemyError as e:
                raise SubstrateWriteFailure(str(e)) from e
        except Exception:
            sess.rollback()
            raise
        finally:
            sess.close()

    def close(self):
        """Closes the substrate.

        Does nothing in this implementation.
        """
        pass


def create_substrate(db_url, verbose=False):
    """Creates new RDBSSubstrate.

    :param db_url(str): The database URL in SQLAlchemy form.
    :param verbose(bool): ``True`` to show extended messages from the database engine.

    Returns RDBSSubstrate object.
    """
    engine = create_engine(db_url, echo=verbose)
    Base.metadata.create_all(engine)
    session_factory = sessionmaker(bind=engine)
    log.info('RDBS substrate at %s', engine.url.render_as_string(hide_password=True))

    return RDBSSubstrate(session_factory)
