"""Centralized logging configuration for agent-orchestrator."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "agent_orchestrator"


def setup_logging(
	level: Optional[str] = None,
	log_dir: Optional[Path] = None,
	console: bool = True,
) -> logging.Logger:
	"""
	Set up logging with console and file handlers on the package logger.

	Args:
		level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to settings/LOG_LEVEL.
		log_dir: Directory for log files. Defaults to the settings log dir;
			no file handler is installed when it cannot be created.
		console: Whether to log to stdout

	Returns:
		Configured package logger
	"""
	from .config import get_settings

	settings = get_settings()
	level = level or settings.log_level
	log_level = getattr(logging, level.upper(), logging.INFO)

	logger = logging.getLogger(ROOT_LOGGER)
	logger.setLevel(log_level)

	# Avoid duplicate handlers
	if logger.handlers:
		return logger

	detailed_formatter = logging.Formatter(
		"%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
		datefmt="%Y-%m-%d %H:%M:%S",
	)
	simple_formatter = logging.Formatter(
		"%(asctime)s [%(levelname)s] %(message)s",
		datefmt="%H:%M:%S",
	)

	if console:
		console_handler = logging.StreamHandler(sys.stdout)
		console_handler.setLevel(log_level)
		console_handler.setFormatter(simple_formatter)
		logger.addHandler(console_handler)

	log_path = Path(log_dir) if log_dir is not None else settings.log_dir
	try:
		log_path.mkdir(parents=True, exist_ok=True)
	except OSError as e:
		logger.warning(f"File logging disabled, cannot create {log_path}: {e}")
		return logger

	file_handler = RotatingFileHandler(
		log_path / f"{ROOT_LOGGER}.log",
		maxBytes=10 * 1024 * 1024,  # 10 MB
		backupCount=5,
	)
	file_handler.setLevel(logging.DEBUG)  # File gets all logs
	file_handler.setFormatter(detailed_formatter)
	logger.addHandler(file_handler)

	return logger
