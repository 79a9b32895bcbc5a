"""
------------------
bulletin.cli.query
------------------

Bulletin query command line interface.
"""
from bulletin.api import query, to_json
from bulletin.cli.store import open_store


def get_parser(subparsers):
    """Configures the subparser for the ``query`` command.

    :param argparse.ArgumentParser subparser: subparser for commands.

    Returns :class:`argparse.ArgumentParser` configured for the ``query`` command.
    """
    parser = subparsers.add_parser('query', help='Query for messages')

    group = parser.add_mutually_exclusive_group()
    group.add_argument('--id', dest='f_id', metavar='ID', type=int,
                       default=None, help='Get the message with this id')
    group.add_argument('-o', '--owner', dest='f_owner', metavar='OWNER',
                       default=None, help='Filter by message owner')
    group.add_argument('-t', '--topic', dest='f_topic', metavar='TOPIC',
                       default=None, help='Filter by message topic')
    group.add_argument('--current-id', dest='current_id', action='store_true',
                       help='Print the id the next message will get')

    parser.add_argument('-F', '--format-output', dest='o_format',
                        default='{id:>6} [{owner:10}] {topic:15}: {message}',
                        metavar='FORMAT_STRING', help='Message output format string. ' +
                        'Available properties are: id, owner, topic and message.')
    parser.add_argument('--json', dest='o_json', action='store_true',
                        help='Print the raw JSON response.')
    return parser


def _to_message(args):
    """Builds the query message based on the parser arguments.
    """
    if args.current_id:
        return {'get_current_id': {}}
    if args.f_id is not None:
        return {'get_messages_by_id': {'id': args.f_id}}
    if args.f_owner is not None:
        return {'get_messages_by_addr': {'address': args.f_owner}}
    if args.f_topic is not None:
        return {'get_messages_by_topic': {'topic': args.f_topic}}
    return {'get_all_message': {}}


def format_record(record, fmt):
    """Format a record ``dict`` using the provided format.

    :param dict record: the record, as returned in the query response.
    :param str fmt: the format string. This is compatible with :func:`str.format`.

    Returns the formatted record as string.
    """
    return fmt.format(**record)


def run_query(args):
    """Runs the query and prints the result.

    :param argparse.Namespace args: parsed command-line arguments.
    """
    store = open_store(args)
    try:
        response = query(store, _to_message(args))
    finally:
        store.substrate.close()

    if args.o_json:
        print(to_json(response))
    elif 'current_id' in response:
        print(response['current_id'])
    else:
        for record in response['messages']:
            print(format_record(record, args.o_format))
