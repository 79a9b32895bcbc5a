"""
-------------------
bulletin.cli.parser
-------------------


Bulletin CLI main :mod:`argparse` parser.
"""
import argparse


def get_parent_parser(name, desc=''):
    """Creates the main (parent) :class:`argparse.ArgumentParser` for Bulletin CLI.

    Defines the main argument options such as the store location and the
    verbosity level.

    :param str name: the name of the program.
    :param str desc: program description.

    Returns the configured :class:`argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(prog=name, description=desc)

    parser.add_argument('-v', '--version',
                        help='Print program version and exit', action='store_true')
    parser.add_argument('-d', '--data-dir', dest='data_dir', help='Data store root directory')
    parser.add_argument('-U', '--db-url', dest='db_url', help='Database URL (SQLAlchemy form)',
                        default=None)
    parser.add_argument('--rdbs-store', dest='rdbs_store', action='store_true',
                        help='Use the RDBS substrate instead of the naive one. ' +
                        'The RDBS substrate keeps the records in a relational database.')

    parser.add_argument('--verbose', dest='verbose', action='store_true',
                        help='Verbose output.')

    return parser
