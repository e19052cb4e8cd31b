from .ids     import IdGenerator
from .store   import AnnotationStore
from .history import EditHistory, HistoryEntry
from .session import EditorSession, Tool

__all__ = [
    "IdGenerator", "AnnotationStore",
    "EditHistory", "HistoryEntry",
    "EditorSession", "Tool",
]
