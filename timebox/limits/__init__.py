from . import timed

__all__ = ("timed",)
