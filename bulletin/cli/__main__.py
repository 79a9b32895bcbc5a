import logging
import sys
from logging import getLogger
from bulletin.cli.parser import get_parent_parser
from bulletin.cli.init import get_parser as get_init_parser, run_init
from bulletin.cli.post import get_parser as get_post_parser, run_post
from bulletin.cli.query import get_parser as get_query_parser, run_query
from bulletin.storeapi import StoreException


log = getLogger('bulletin.cli')


def main(argv=None):
    parser = get_parent_parser('bulletin', 'Bulletin CLI')

    subparsers = parser.add_subparsers(dest='command', title='command', help='CLI commands')
    get_init_parser(subparsers)
    get_post_parser(subparsers)
    get_query_parser(subparsers)

    args = parser.parse_args(argv)

    if args.version:
        from bulletin.metadata import version
        print('bulletin', version)
        sys.exit(0)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    commands = {
        'init': run_init,
        'post': run_post,
        'query': run_query,
    }
    if args.command not in commands:
        parser.print_help()
        sys.exit(2)

    try:
        commands[args.command](args)
    except (StoreException, ValueError) as e:
        log.error('%s failed: %s', args.command, e)
        sys.exit(1)


if __name__ == '__main__':
    main()
