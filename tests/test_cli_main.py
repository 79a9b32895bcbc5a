from bulletin.cli.__main__ import main
from bulletin.metadata import version
from unittest import mock
import bulletin.cli.__main__
import getpass
import json
import logging
import tempfile
import pytest


def test_cli_main_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(['-v'])

    assert exc.value.code == 0
    assert capsys.readouterr().out == 'bulletin %s\n' % version


@mock.patch.object(logging, 'basicConfig')
@mock.patch.object(bulletin.cli.__main__, 'run_init')
def test_cli_main_verbose(m_run_init, m_basicConfig):
    main(['--verbose', 'init'])

    m_basicConfig.assert_called_once_with(level=logging.DEBUG)
    assert m_run_init.call_count == 1


@mock.patch.object(bulletin.cli.__main__, 'run_query')
def test_cli_main_command_query(m_run_query):
    main(['-d', '/data', 'query', '--topic', 'news'])

    assert m_run_query.call_count == 1
    args = m_run_query.call_args[0][0]
    assert args.data_dir == '/data'
    assert args.f_topic == 'news'


def test_cli_main_no_command():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


@mock.patch.object(getpass, 'getuser')
def test_cli_init_post_query(m_getuser, capsys):
    with tempfile.TemporaryDirectory() as tmpdir:
        main(['-d', tmpdir, 'init'])
        assert capsys.readouterr().out == 'Store initialized.\n'

        m_getuser.return_value = 'alice'
        main(['-d', tmpdir, 'post', '-t', 'news', 'hello'])
        assert capsys.readouterr().out == '0\n'

        m_getuser.return_value = 'bob'
        main(['-d', tmpdir, 'post', '--topic', 'misc', 'hi there'])
        assert capsys.readouterr().out == '1\n'

        main(['-d', tmpdir, 'query', '--owner', 'alice', '-F', '{id}|{owner}|{topic}|{message}'])
        assert capsys.readouterr().out == '0|alice|news|hello\n'

        main(['-d', tmpdir, 'query', '--json'])
        response = json.loads(capsys.readouterr().out)
        assert [m['owner'] for m in response['messages']] == ['alice', 'bob']

        main(['-d', tmpdir, 'query', '--current-id'])
        assert capsys.readouterr().out == '2\n'


def test_cli_query_before_init_fails():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(SystemExit) as exc:
            main(['-d', tmpdir, 'query'])
        assert exc.value.code == 1


def test_cli_init_twice_fails():
    with tempfile.TemporaryDirectory() as tmpdir:
        main(['-d', tmpdir, 'init'])
        with pytest.raises(SystemExit) as exc:
            main(['-d', tmpdir, 'init'])
        assert exc.value.code == 1


def test_cli_missing_data_dir_fails():
    with pytest.raises(SystemExit) as exc:
        main(['query'])
    assert exc.value.code == 1
