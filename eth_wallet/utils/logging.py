"""Structured logging setup for the wallet CLI."""

import sys
import logging
import logging.handlers
from pathlib import Path
import structlog
from structlog.stdlib import LoggerFactory

from eth_wallet.models.config import WalletConfig

# Event keys whose values must never reach a log sink
SECRET_KEYS = frozenset({"private_key", "raw_transaction"})
REDACTED = "***"

# Chatty third-party loggers kept at WARNING unless running verbose
NOISY_LOGGERS = ("urllib3", "requests")

_FILE_HANDLER_NAME = "eth_wallet_file"


def redact_secrets(logger, method_name, event_dict):
    """structlog processor masking key material in log events."""
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def _replace_file_handler(root_logger: logging.Logger, config: WalletConfig, level: int) -> None:
    for handler in list(root_logger.handlers):
        if handler.get_name() == _FILE_HANDLER_NAME:
            root_logger.removeHandler(handler)
            handler.close()

    if not config.log_file:
        return

    Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        config.log_file,
        maxBytes=config.log_max_size_mb * 1024 * 1024,
        backupCount=config.log_backup_count,
        encoding="utf-8",
    )
    file_handler.set_name(_FILE_HANDLER_NAME)
    file_handler.setLevel(level)
    root_logger.addHandler(file_handler)


def setup_logging(config: WalletConfig, verbose: bool = False) -> None:
    """
    Route structlog through stdlib logging.

    Console output goes to stderr so it never mixes with command output
    on stdout. Safe to call more than once; the file handler is replaced
    rather than duplicated.
    """
    level = logging.DEBUG if verbose else getattr(logging, config.log_level.upper())

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
    )
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        redact_secrets,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if config.log_format.lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _replace_file_handler(root_logger, config, level)
