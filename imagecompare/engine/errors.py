"""Custom exceptions used across the comparison engine."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "ImageCompareError",
    "InputMissingError",
    "DecodeError",
    "PreconditionError",
    "OperationCancelled",
]


class ImageCompareError(Exception):
    """Base class for all engine errors."""

    pass


class InputMissingError(ImageCompareError, FileNotFoundError):
    """Raised when a mandatory input file does not exist."""

    def __init__(self, path: str, role: Optional[str] = None):
        self.path = str(path)
        self.role = role
        label = f"{role} image" if role else "image"
        super().__init__(f"Error file not found ({label}): {self.path}")


class DecodeError(ImageCompareError, ValueError):
    """Raised when image bytes cannot be decoded into a pixel buffer."""

    def __init__(self, path: str, reason: str, role: Optional[str] = None):
        self.path = str(path)
        self.role = role
        self.reason = reason
        label = f"{role} image" if role else "image"
        super().__init__(f"Cannot decode {label} {self.path}: {reason}")


class PreconditionError(ImageCompareError, ValueError):
    """Raised on programmer errors such as empty buffers or mixed grid sizes."""

    pass


class OperationCancelled(ImageCompareError):
    """Raised when a long-running scan notices its cancel event is set."""

    pass
