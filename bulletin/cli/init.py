"""
-----------------
bulletin.cli.init
-----------------

Bulletin store initialization command.
"""
from bulletin.cli.store import open_store


def get_parser(subparsers):
    """Configures the subparser for the ``init`` command.

    :param argparse.ArgumentParser subparser: subparser for commands.

    Returns :class:`argparse.ArgumentParser` configured for the ``init`` command.
    """
    return subparsers.add_parser('init', help='Initialize a new store')


def run_init(args):
    """Initializes the store.

    :param argparse.Namespace args: parsed command-line arguments.
    """
    store = open_store(args)
    try:
        store.initialize()
    finally:
        store.substrate.close()
    print('Store initialized.')
