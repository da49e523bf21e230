from .init import FORMAT, init_logger, init_sentry

__all__ = ("FORMAT", "init_logger", "init_sentry")
