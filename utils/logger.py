import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

_installed_handlers: List[logging.Handler] = []


def setup_logger(
    level: str = "INFO",
    fmt: str = '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 10_000_000,
    backup_count: int = 5,
) -> logging.Logger:
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper()))

    # Повторный вызов заменяет наши обработчики, чужие не трогаем
    for handler in _installed_handlers:
        logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(exist_ok=True, parents=True)
        handlers.append(
            RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        )

    formatter = logging.Formatter(fmt, datefmt)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        _installed_handlers.append(handler)
    return logger
