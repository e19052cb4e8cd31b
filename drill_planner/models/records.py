"""
Drill and routine records as stored by the repository.
"""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Drill:
    """
    A saved drill. `court_elements` is kept as the raw JSON list so it is
    passed through persistence unchanged.
    """
    name: str
    duration_minutes: float
    description: str = ""
    court_elements: List[dict] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "durationMinutes": self.duration_minutes,
            "courtElements": list(self.court_elements),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Drill":
        duration = d.get("durationMinutes", d.get("duration", 0))
        return cls(
            id=d.get("id"),
            name=d.get("name", ""),
            description=d.get("description") or "",
            duration_minutes=float(duration or 0),
            court_elements=list(d.get("courtElements") or []),
            created_at=d.get("createdAt", d.get("created_at")),
        )


@dataclass
class Routine:
    """An ordered list of drills practised in one session."""
    name: str
    drill_ids: List[int] = field(default_factory=list)
    description: str = ""
    id: Optional[int] = None
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "drillIds": list(self.drill_ids),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Routine":
        return cls(
            id=d.get("id"),
            name=d.get("name", ""),
            description=d.get("description") or "",
            drill_ids=[int(i) for i in d.get("drillIds") or []],
            created_at=d.get("createdAt", d.get("created_at")),
        )
