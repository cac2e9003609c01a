import functools
import logging

from dashboard.core.exceptions import StoreUnavailable


def translate_errors(*exc_types, message: str = "Хранилище недоступно"):
    """Превращает ошибки драйвера в StoreUnavailable. Повторов нет: их делает вызывающий слой"""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except exc_types as e:
                logging.getLogger(func.__module__).error(f"❌ {func.__name__}: {e}")
                raise StoreUnavailable(f"{message}: {e}") from e
        return wrapper
    return decorator
