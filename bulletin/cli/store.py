"""
------------------
bulletin.cli.store
------------------

Opens the :class:`bulletin.store.RecordStore` selected on the command line.
"""
from logging import getLogger
from bulletin.naivestore import NaiveSubstrate
from bulletin.store import RecordStore


log = getLogger(__name__)


def _has_sqlalchemy():
    try:
        import sqlalchemy
    except ImportError:
        return False
    return True


def get_rdbs_substrate(args):
    """Creates and configures new :class:`bulletin.rdbs.RDBSSubstrate` based on
    the arguments passed.

    :param argparse.Namespace args: arguments.

    Returns ``None`` if SQLAlchemy is not available.
    """
    if not _has_sqlalchemy():
        log.info('SQLAlchemy is not present on your system. RDBSSubstrate cannot work without it.')
        return None

    from bulletin.rdbs import create_substrate

    if not args.db_url:
        raise ValueError('No Database URL')

    return create_substrate(db_url=args.db_url, verbose=args.verbose)


def get_naive_substrate(args):
    """Creates and configures new :class:`bulletin.naivestore.NaiveSubstrate`
    based on the arguments passed.

    :param argparse.Namespace args: arguments.
    """
    if not args.data_dir:
        raise ValueError('No data directory specified')

    return NaiveSubstrate(root_dir=args.data_dir)


def open_store(args):
    """Opens the record store configured by the command-line arguments.

    :param argparse.Namespace args: arguments.

    Returns :class:`bulletin.store.RecordStore`.
    """
    substrate = None

    if args.rdbs_store:
        substrate = get_rdbs_substrate(args)
        if substrate:
            log.info('Using RDBS substrate')
        else:
            log.warning('Unable to set up the RDBS substrate. Will fall back to using the naive substrate.')
    if not substrate:
        substrate = get_naive_substrate(args)
        log.info('Using naive substrate')

    return RecordStore(substrate)
