from bulletin.cli.parser import get_parent_parser


def test_get_parent_parser():
    parser = get_parent_parser(name='test', desc='unit test parser')

    args = parser.parse_args(args=['-v'])
    assert args.version is True

    args = parser.parse_args(args=['--version'])
    assert args.version is True

    args = parser.parse_args(args=[])
    assert args.version is False
    assert args.verbose is False
    assert args.rdbs_store is False
    assert args.data_dir is None
    assert args.db_url is None

    args = parser.parse_args(args=['-d', '/data-dir'])
    assert args.data_dir == '/data-dir'

    args = parser.parse_args(args=['--data-dir', '/data-dir'])
    assert args.data_dir == '/data-dir'

    args = parser.parse_args(args=['-U', 'sqlite://'])
    assert args.db_url == 'sqlite://'

    args = parser.parse_args(args=['--db-url', 'sqlite://', '--rdbs-store', '--verbose'])
    assert args.db_url == 'sqlite://'
    assert args.rdbs_store is True
    assert args.verbose is True
