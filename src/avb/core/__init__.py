"""Core shared infrastructure."""

from avb.core.config import AvbSettings

__all__ = ["AvbSettings"]
