from .repository import DrillRepository

__all__ = ["DrillRepository"]
