"""
-----------------
bulletin.cli.post
-----------------

Posts a message to the bulletin store.

The owner of the message is the login name of the user running the command.
It is never taken from the command-line arguments.
"""
import getpass
from bulletin.api import execute
from bulletin.cli.store import open_store


def get_parser(subparsers):
    """Configures the subparser for the ``post`` command.

    :param argparse.ArgumentParser subparser: subparser for commands.

    Returns :class:`argparse.ArgumentParser` configured for the ``post`` command.
    """
    parser = subparsers.add_parser('post', help='Post a message')

    parser.add_argument('-t', '--topic', dest='topic', required=True, help='Message topic')
    parser.add_argument('message', help='The message')

    return parser


def run_post(args):
    """Posts the message and prints the id it was stored under.

    :param argparse.Namespace args: parsed command-line arguments.
    """
    store = open_store(args)
    try:
        response = execute(store, getpass.getuser(),
                           {'add_message': {'topic': args.topic, 'message': args.message}})
    finally:
        store.substrate.close()
    print(dict(response['attributes'])['id'])
