from .base import BaseGeometrySink, RecordingSink

__all__ = [
    "BaseGeometrySink",
    "RecordingSink",
]
