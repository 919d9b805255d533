"""Brace-style string formatting with replacement fields and named arguments."""

__version__ = "0.1.0"
__all__ = ["parsecontext", "args", "core"]