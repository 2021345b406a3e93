"""Security primitives."""
from .tokens import TokenProvider

__all__ = ["TokenProvider"]
