import sys
from pathlib import Path

from loguru import logger

from blogforge.config.settings import settings

CONSOLE_FORMAT = '<green>{time:HH:mm:ss}</green> | <magenta>{extra[app]}</magenta> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>'
FILE_FORMAT = '{time:YYYY-MM-DD HH:mm:ss.SSS} | {extra[app]} | {level: <8} | {name}:{function}:{line} - {message}'


def log_file_path(log_dir: Path | None = None) -> Path:
	"""One log file per app, named after APP_NAME (Blogforge -> blogforge.log)."""
	return (log_dir or settings.LOG_DIR) / f'{settings.APP_NAME.lower()}.log'


def setup_logger(level: str | None = None, log_dir: Path | None = None) -> Path:
	"""(Re)configure the stderr and file sinks; the CLI calls this again for --log-level."""
	level = (level or settings.LOG_LEVEL).upper()
	log_file = log_file_path(log_dir)

	logger.remove()
	logger.configure(extra={'app': settings.APP_NAME})

	logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
	# The file keeps DEBUG when the console is quieter
	logger.add(
		log_file,
		rotation='10 MB',
		retention=5,
		level='DEBUG' if level != 'TRACE' else level,
		format=FILE_FORMAT,
		encoding='utf-8',
	)
	return log_file


setup_logger()
