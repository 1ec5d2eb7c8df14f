"""Common middleware for Rodada."""

from .observability import StructlogContextMiddleware

__all__ = ["StructlogContextMiddleware"]
