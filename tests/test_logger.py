import pytest

from blogforge.config.settings import settings
from blogforge.utils.logger import log_file_path, logger, setup_logger
from main import build_parser


@pytest.fixture
def reset_logger():
	yield
	setup_logger()


def test_log_file_is_named_after_the_app(tmp_path, reset_logger):
	log_file = setup_logger('WARNING', tmp_path)

	assert log_file == tmp_path / f'{settings.APP_NAME.lower()}.log'
	assert log_file_path(tmp_path) == log_file


def test_file_sink_records_app_name_and_debug_messages(tmp_path, reset_logger, capsys):
	log_file = setup_logger('WARNING', tmp_path)

	logger.debug('outline decoded')
	logger.warning('section too short')
	logger.complete()

	written = log_file.read_text(encoding='utf-8')
	assert f'| {settings.APP_NAME} |' in written
	assert 'outline decoded' in written
	assert 'section too short' in written

	console = capsys.readouterr().err
	assert 'section too short' in console
	assert 'outline decoded' not in console


def test_cli_accepts_log_level():
	args = build_parser().parse_args(['--log-level', 'DEBUG', 'outline', 'Python asyncio'])

	assert args.log_level == 'DEBUG'
	assert build_parser().parse_args(['outline', 'Python asyncio']).log_level is None
