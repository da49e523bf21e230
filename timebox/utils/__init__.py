from . import timespan

__all__ = ("timespan",)
