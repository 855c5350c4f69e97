"""Kernel types – Result."""

from authz_core.kernel.types.result import Err, Ok, Result

__all__ = ["Err", "Ok", "Result"]
