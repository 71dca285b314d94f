"""
Repository pattern implementations for data access.
"""

import logging
import threading
from abc import ABC
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from ..core.clock import SystemClock, uuid4_id
from ..core.entities import (
    AbstractEntity, Student, Subject, Teacher, Class, Assignment, Submission
)
from ..core.exceptions import (
    DeleteFailedError, RecordNotFoundError, UpdateFailedError, ValidationError
)
from ..core.interfaces import Clock, IdFactory, OrderedStore

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=AbstractEntity)


class BaseRepository(ABC, Generic[T]):
    """CRUD lifecycle and timestamp discipline for one entity type.

    Every public call holds the repository lock for its whole duration, so a
    read-modify-write such as an update is one atomic turn against the store.
    Entities are handed to the store as plain dicts and rebuilt on the way
    out, so callers always receive copies.
    """

    entity_type: Type[T]

    def __init__(self, store: OrderedStore, clock: Optional[Clock] = None,
                 id_factory: Optional[IdFactory] = None):
        self._store = store
        self._clock = clock or SystemClock()
        self._id_factory = id_factory or uuid4_id
        self._lock = threading.RLock()

    @property
    def entity_name(self) -> str:
        return self.entity_type.entity_name()

    def list_all(self) -> List[T]:
        """Return every stored entity in store order."""
        with self._lock:
            return [self._entity_from_dict(data) for data in self._store.values()]

    def get(self, entity_id: str) -> T:
        """Return the entity stored under entity_id."""
        with self._lock:
            data = self._store.fetch(entity_id)
        if data is None:
            logger.warning("%s %s not found", self.entity_name, entity_id)
            raise RecordNotFoundError(self.entity_name, entity_id)
        return self._entity_from_dict(data)

    def count(self) -> int:
        with self._lock:
            return len(self._store)

    def _create(self, **fields: Any) -> T:
        with self._lock:
            entity_id = self._id_factory()
            entity = self.entity_type(
                id=entity_id,
                created_at=self._clock.now(),
                updated_at=None,
                **fields
            )
            record = entity.to_dict()
            self._store.store(entity_id, record)
        logger.info("Created %s %s", self.entity_name, entity_id)
        return self._entity_from_dict(record)

    def _update(self, entity_id: str, **fields: Any) -> T:
        with self._lock:
            existing = self._store.fetch(entity_id)
            if existing is None:
                logger.warning("Update of %s %s failed: not found", self.entity_name, entity_id)
                raise UpdateFailedError(self.entity_name, entity_id)

            unknown = set(fields) - set(self.entity_type.mutable_fields())
            if unknown:
                raise ValidationError(
                    f"Cannot update {self.entity_name} fields: {', '.join(sorted(unknown))}",
                    {"fields": sorted(unknown)}
                )

            merged = dict(existing)
            merged.update(self._encode_fields(fields))
            merged["updated_at"] = self._clock.now()
            # Decode before writing so a malformed payload leaves the store untouched.
            try:
                entity = self._entity_from_dict(merged)
            except (KeyError, TypeError, ValueError) as e:
                raise ValidationError(
                    f"Invalid {self.entity_name} update: {e!r}",
                    {"id": entity_id, "fields": sorted(fields)}
                )
            self._store.store(entity_id, entity.to_dict())
        logger.info("Updated %s %s (%s)", self.entity_name, entity_id, ", ".join(sorted(fields)))
        return entity

    def _delete(self, entity_id: str) -> T:
        with self._lock:
            removed = self._store.remove(entity_id)
        if removed is None:
            logger.warning("Delete of %s %s failed: not found", self.entity_name, entity_id)
            raise DeleteFailedError(self.entity_name, entity_id)
        logger.info("Deleted %s %s", self.entity_name, entity_id)
        return self._entity_from_dict(removed)

    @staticmethod
    def _encode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
        """Turn supplied field values into their stored form.

        Entities become snapshots; lists are copied so the caller keeps no
        handle on stored state.
        """
        encoded = {}
        for name, value in fields.items():
            if isinstance(value, AbstractEntity):
                encoded[name] = value.to_dict()
            elif isinstance(value, list):
                encoded[name] = [
                    item.to_dict() if isinstance(item, AbstractEntity) else item
                    for item in value
                ]
            else:
                encoded[name] = value
        return encoded

    def _entity_from_dict(self, data: Dict[str, Any]) -> T:
        """Convert dictionary to entity instance."""
        return self.entity_type.from_dict(data)


class StudentRepository(BaseRepository[Student]):
    """Repository for Student entities."""

    entity_type = Student

    def create(self, name: str, password: str) -> Student:
        return self._create(name=name, password=password, subjects=[])

    def update(self, entity_id: str, **payload: Any) -> Student:
        """Merge any subset of name, password and subjects over the stored student."""
        return self._update(entity_id, **payload)

    def delete(self, entity_id: str) -> Student:
        return self._delete(entity_id)


class SubjectRepository(BaseRepository[Subject]):
    """Repository for Subject entities."""

    entity_type = Subject

    def create(self, name: str) -> Subject:
        return self._create(name=name, students=[])

    def update(self, entity_id: str, name: str) -> Subject:
        return self._update(entity_id, name=name)

    def delete(self, entity_id: str) -> Subject:
        return self._delete(entity_id)


class TeacherRepository(BaseRepository[Teacher]):
    """Repository for Teacher entities. Append-only apart from creation."""

    entity_type = Teacher

    def create(self, name: str, password: str) -> Teacher:
        return self._create(name=name, password=password, subjects=[])


class ClassRepository(BaseRepository[Class]):
    """Repository for Class entities. Append-only apart from creation."""

    entity_type = Class

    def create(self, name: str, teacher: Teacher) -> Class:
        return self._create(name=name, teacher=_snapshot(teacher), students=[])


class AssignmentRepository(BaseRepository[Assignment]):
    """Repository for Assignment entities."""

    entity_type = Assignment

    def create(self, name: str, subject: Subject, task: List[str]) -> Assignment:
        return self._create(
            name=name,
            subject=_snapshot(subject),
            task=list(task),
            iscompleted=False,
            issubmitted=False
        )

    def update(self, entity_id: str, name: str, subject: Subject, task: List[str]) -> Assignment:
        return self._update(entity_id, name=name, subject=subject, task=task)

    def delete(self, entity_id: str) -> Assignment:
        return self._delete(entity_id)


class SubmissionRepository(BaseRepository[Submission]):
    """Repository for Submission entities."""

    entity_type = Submission

    def create(self, student: Student, assignment: Assignment, task: List[str]) -> Submission:
        # A submission is submitted by definition, whatever the caller sends.
        return self._create(
            student=_snapshot(student),
            assignment=_snapshot(assignment),
            task=list(task),
            issubmitted=True
        )

    def update(self, entity_id: str, student: Student, assignment: Assignment,
               task: List[str]) -> Submission:
        return self._update(entity_id, student=student, assignment=assignment, task=task)

    def delete(self, entity_id: str) -> Submission:
        return self._delete(entity_id)


def _snapshot(entity: T) -> T:
    """Copy an entity so the stored relation is frozen at this moment."""
    return type(entity).from_dict(entity.to_dict())


class RepositoryRegistry:
    """The six repositories, each bound to its own store."""

    COLLECTIONS = ("students", "subjects", "teachers", "classes", "assignments", "submissions")

    def __init__(self, students: StudentRepository, subjects: SubjectRepository,
                 teachers: TeacherRepository, classes: ClassRepository,
                 assignments: AssignmentRepository, submissions: SubmissionRepository):
        self.students = students
        self.subjects = subjects
        self.teachers = teachers
        self.classes = classes
        self.assignments = assignments
        self.submissions = submissions

    @classmethod
    def build(cls, store_for: Callable[[str], OrderedStore], clock: Optional[Clock] = None,
              id_factory: Optional[IdFactory] = None) -> "RepositoryRegistry":
        """Wire one store per collection, sharing a clock and id factory."""
        clock = clock or SystemClock()
        id_factory = id_factory or uuid4_id
        return cls(
            students=StudentRepository(store_for("students"), clock, id_factory),
            subjects=SubjectRepository(store_for("subjects"), clock, id_factory),
            teachers=TeacherRepository(store_for("teachers"), clock, id_factory),
            classes=ClassRepository(store_for("classes"), clock, id_factory),
            assignments=AssignmentRepository(store_for("assignments"), clock, id_factory),
            submissions=SubmissionRepository(store_for("submissions"), clock, id_factory),
        )

    def as_dict(self) -> Dict[str, BaseRepository]:
        return {name: getattr(self, name) for name in self.COLLECTIONS}
