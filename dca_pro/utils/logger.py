"""
Logging de DCA Pro
==================
Loggers stdlib para los modulos de datos y callbacks: consola, archivo
rotativo general y archivo rotativo solo de errores.
"""
import functools
import logging
import os
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR = Path(os.getenv("DCA_LOG_DIR", str(Path(__file__).parent.parent.parent / "logs")))
LOG_DIR.mkdir(parents=True, exist_ok=True)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# (archivo, nivel, bytes maximos, respaldos)
ARCHIVOS_LOG = [
    ("dca_pro.log", logging.DEBUG, 10_000_000, 5),
    ("dca_pro_errors.log", logging.ERROR, 5_000_000, 3),
]

# Importaciones mas lentas que esto se registran como warning
UMBRAL_LENTO_SEG = 5.0


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Logger con consola (desde `level`) y archivos rotativos en LOG_DIR.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Archivo importado")
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level, formatter))
    for archivo, nivel, max_bytes, respaldos in ARCHIVOS_LOG:
        rotativo = RotatingFileHandler(
            LOG_DIR / archivo, maxBytes=max_bytes, backupCount=respaldos, encoding='utf-8'
        )
        logger.addHandler(_handler(rotativo, nivel, formatter))

    return logger


class LoggerMixin:
    """Agrega `self.logger` con el nombre de la clase"""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger


def log_execution_time(func):
    """
    Decorador que registra la duracion de `func` (debug, o warning si
    supera UMBRAL_LENTO_SEG) y la duracion hasta el fallo si lanza.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        inicio = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"{func.__name__} fallo despues de {time.perf_counter() - inicio:.3f}s: {e}")
            raise

        duracion = time.perf_counter() - inicio
        nivel = logging.WARNING if duracion > UMBRAL_LENTO_SEG else logging.DEBUG
        logger.log(nivel, f"{func.__name__} ejecutado en {duracion:.3f}s")
        return result

    return wrapper
