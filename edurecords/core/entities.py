"""
Core entities for the EduRecords platform.

Every entity carries an opaque ``id``, an immutable ``created_at`` timestamp
and an ``updated_at`` timestamp that stays ``None`` until the first
successful update. Relational fields hold embedded snapshots: full copies of
the related entity taken when the caller supplied it, never live references
into another collection.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple


class AbstractEntity:
    """Shared behaviour for all entity dataclasses."""

    id: str
    created_at: int
    updated_at: Optional[int]

    # Fields assigned by the repository and never replaced by an update.
    SYSTEM_FIELDS: Tuple[str, ...] = ("id", "created_at", "updated_at")

    @classmethod
    def entity_name(cls) -> str:
        return cls.__name__.lower()

    @classmethod
    def mutable_fields(cls) -> Tuple[str, ...]:
        """Names of the fields an update may replace."""
        return tuple(f.name for f in fields(cls) if f.name not in cls.SYSTEM_FIELDS)

    @property
    def is_updated(self) -> bool:
        return self.updated_at is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to a JSON-compatible dictionary.

        Nested entities are converted as well, so the result shares no
        mutable state with the entity it came from.
        """
        return asdict(self)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id})"


@dataclass
class Student(AbstractEntity):
    id: str
    name: str
    password: str
    created_at: int
    subjects: List["Subject"] = field(default_factory=list)
    updated_at: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Student":
        return cls(
            id=data["id"],
            name=data["name"],
            password=data["password"],
            created_at=data["created_at"],
            subjects=[Subject.from_dict(s) for s in data.get("subjects", [])],
            updated_at=data.get("updated_at"),
        )


@dataclass
class Subject(AbstractEntity):
    id: str
    name: str
    created_at: int
    students: List[Student] = field(default_factory=list)
    updated_at: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subject":
        return cls(
            id=data["id"],
            name=data["name"],
            created_at=data["created_at"],
            students=[Student.from_dict(s) for s in data.get("students", [])],
            updated_at=data.get("updated_at"),
        )


@dataclass
class Teacher(AbstractEntity):
    id: str
    name: str
    password: str
    created_at: int
    subjects: List[Subject] = field(default_factory=list)
    updated_at: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Teacher":
        return cls(
            id=data["id"],
            name=data["name"],
            password=data["password"],
            created_at=data["created_at"],
            subjects=[Subject.from_dict(s) for s in data.get("subjects", [])],
            updated_at=data.get("updated_at"),
        )


@dataclass
class Class(AbstractEntity):
    """A class group: one teacher and the students attending."""

    id: str
    name: str
    teacher: Teacher
    created_at: int
    students: List[Student] = field(default_factory=list)
    updated_at: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Class":
        return cls(
            id=data["id"],
            name=data["name"],
            teacher=Teacher.from_dict(data["teacher"]),
            created_at=data["created_at"],
            students=[Student.from_dict(s) for s in data.get("students", [])],
            updated_at=data.get("updated_at"),
        )


@dataclass
class Assignment(AbstractEntity):
    id: str
    name: str
    subject: Subject
    task: List[str]
    created_at: int
    iscompleted: bool = False
    issubmitted: bool = False
    updated_at: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Assignment":
        return cls(
            id=data["id"],
            name=data["name"],
            subject=Subject.from_dict(data["subject"]),
            task=list(data.get("task", [])),
            created_at=data["created_at"],
            iscompleted=data.get("iscompleted", False),
            issubmitted=data.get("issubmitted", False),
            updated_at=data.get("updated_at"),
        )


@dataclass
class Submission(AbstractEntity):
    id: str
    student: Student
    assignment: Assignment
    task: List[str]
    created_at: int
    issubmitted: bool = True
    updated_at: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Submission":
        return cls(
            id=data["id"],
            student=Student.from_dict(data["student"]),
            assignment=Assignment.from_dict(data["assignment"]),
            task=list(data.get("task", [])),
            created_at=data["created_at"],
            issubmitted=data.get("issubmitted", True),
            updated_at=data.get("updated_at"),
        )
