"""
REST API implementation for the EduRecords platform using FastAPI.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.entities import Student, Subject, Teacher, Assignment
from ..core.exceptions import (
    EduRecordsException, RecordNotFoundError, UpdateFailedError, DeleteFailedError,
    ValidationError
)
from ..persistence import RepositoryRegistry

logger = logging.getLogger(__name__)


# Full entity records. Used both as responses and as embedded snapshots in
# request bodies.
class SubjectRecord(BaseModel):
    id: str
    name: str
    created_at: int = Field(..., ge=0)
    students: List["StudentRecord"] = []
    updated_at: Optional[int] = Field(None, ge=0)


class StudentRecord(BaseModel):
    id: str
    name: str
    password: str
    created_at: int = Field(..., ge=0)
    subjects: List[SubjectRecord] = []
    updated_at: Optional[int] = Field(None, ge=0)


SubjectRecord.model_rebuild()


class TeacherRecord(BaseModel):
    id: str
    name: str
    password: str
    created_at: int = Field(..., ge=0)
    subjects: List[SubjectRecord] = []
    updated_at: Optional[int] = Field(None, ge=0)


class ClassRecord(BaseModel):
    id: str
    name: str
    teacher: TeacherRecord
    created_at: int = Field(..., ge=0)
    students: List[StudentRecord] = []
    updated_at: Optional[int] = Field(None, ge=0)


class AssignmentRecord(BaseModel):
    id: str
    name: str
    subject: SubjectRecord
    task: List[str]
    created_at: int = Field(..., ge=0)
    iscompleted: bool = False
    issubmitted: bool = False
    updated_at: Optional[int] = Field(None, ge=0)


class SubmissionRecord(BaseModel):
    id: str
    student: StudentRecord
    assignment: AssignmentRecord
    task: List[str]
    created_at: int = Field(..., ge=0)
    issubmitted: bool = True
    updated_at: Optional[int] = Field(None, ge=0)


# Request bodies
class StudentCreate(BaseModel):
    name: str
    password: str


class StudentUpdate(BaseModel):
    name: Optional[str] = None
    password: Optional[str] = None
    subjects: Optional[List[SubjectRecord]] = None


class SubjectCreate(BaseModel):
    name: str


class SubjectUpdate(BaseModel):
    name: str


class TeacherCreate(BaseModel):
    name: str
    password: str


class ClassCreate(BaseModel):
    name: str
    teacher: TeacherRecord


class AssignmentCreate(BaseModel):
    name: str
    subject: SubjectRecord
    task: List[str]


class AssignmentUpdate(AssignmentCreate):
    pass


class SubmissionCreate(BaseModel):
    student: StudentRecord
    assignment: AssignmentRecord
    task: List[str]


class SubmissionUpdate(SubmissionCreate):
    pass


class EduRecordsRestAPI:
    """REST API implementation for the EduRecords platform."""

    NOT_FOUND_ERRORS = (RecordNotFoundError, UpdateFailedError, DeleteFailedError)

    def __init__(self, repositories: RepositoryRegistry):
        self._repos = repositories

        # Create FastAPI app
        self.app = FastAPI(
            title="EduRecords API",
            description="Record store for students, teachers, subjects, classes, assignments and submissions",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc"
        )

        # Add CORS middleware
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self._setup_error_handlers()
        self._setup_routes()

    def _setup_error_handlers(self):
        """Map platform exceptions onto HTTP responses."""

        @self.app.exception_handler(EduRecordsException)
        async def handle_records_error(request: Request, exc: EduRecordsException):
            if isinstance(exc, self.NOT_FOUND_ERRORS):
                status_code = status.HTTP_404_NOT_FOUND
            elif isinstance(exc, ValidationError):
                status_code = status.HTTP_400_BAD_REQUEST
            else:
                logger.error("Request %s %s failed: %s", request.method, request.url.path, exc.message)
                status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            return JSONResponse(
                status_code=status_code,
                content={"detail": exc.message, "error": exc.error_code}
            )

    def _setup_routes(self):
        """Setup API routes."""
        repos = self._repos

        @self.app.get("/", response_model=Dict[str, str])
        async def root():
            """Root endpoint."""
            return {
                "message": "EduRecords API",
                "version": __version__,
                "docs": "/docs"
            }

        @self.app.get("/health", response_model=Dict[str, str])
        async def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        # Student endpoints
        @self.app.get("/students", response_model=List[StudentRecord])
        async def list_students():
            return [s.to_dict() for s in repos.students.list_all()]

        @self.app.get("/students/{student_id}", response_model=StudentRecord)
        async def get_student(student_id: str):
            return repos.students.get(student_id).to_dict()

        @self.app.post("/students", response_model=StudentRecord, status_code=status.HTTP_201_CREATED)
        async def create_student(data: StudentCreate):
            return repos.students.create(data.name, data.password).to_dict()

        @self.app.patch("/students/{student_id}", response_model=StudentRecord)
        async def update_student(student_id: str, data: StudentUpdate):
            """Merge the supplied fields over the stored student."""
            payload: Dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
            if "subjects" in payload:
                payload["subjects"] = [Subject.from_dict(s) for s in payload["subjects"]]
            return repos.students.update(student_id, **payload).to_dict()

        @self.app.delete("/students/{student_id}", response_model=StudentRecord)
        async def delete_student(student_id: str):
            return repos.students.delete(student_id).to_dict()

        # Subject endpoints
        @self.app.get("/subjects", response_model=List[SubjectRecord])
        async def list_subjects():
            return [s.to_dict() for s in repos.subjects.list_all()]

        @self.app.get("/subjects/{subject_id}", response_model=SubjectRecord)
        async def get_subject(subject_id: str):
            return repos.subjects.get(subject_id).to_dict()

        @self.app.post("/subjects", response_model=SubjectRecord, status_code=status.HTTP_201_CREATED)
        async def create_subject(data: SubjectCreate):
            return repos.subjects.create(data.name).to_dict()

        @self.app.put("/subjects/{subject_id}", response_model=SubjectRecord)
        async def update_subject(subject_id: str, data: SubjectUpdate):
            return repos.subjects.update(subject_id, data.name).to_dict()

        @self.app.delete("/subjects/{subject_id}", response_model=SubjectRecord)
        async def delete_subject(subject_id: str):
            return repos.subjects.delete(subject_id).to_dict()

        # Assignment endpoints
        @self.app.get("/assignments", response_model=List[AssignmentRecord])
        async def list_assignments():
            return [a.to_dict() for a in repos.assignments.list_all()]

        @self.app.get("/assignments/{assignment_id}", response_model=AssignmentRecord)
        async def get_assignment(assignment_id: str):
            return repos.assignments.get(assignment_id).to_dict()

        @self.app.post("/assignments", response_model=AssignmentRecord, status_code=status.HTTP_201_CREATED)
        async def create_assignment(data: AssignmentCreate):
            subject = Subject.from_dict(data.subject.model_dump())
            return repos.assignments.create(data.name, subject, data.task).to_dict()

        @self.app.put("/assignments/{assignment_id}", response_model=AssignmentRecord)
        async def update_assignment(assignment_id: str, data: AssignmentUpdate):
            """Replace name, subject snapshot and task list."""
            subject = Subject.from_dict(data.subject.model_dump())
            return repos.assignments.update(assignment_id, data.name, subject, data.task).to_dict()

        @self.app.delete("/assignments/{assignment_id}", response_model=AssignmentRecord)
        async def delete_assignment(assignment_id: str):
            return repos.assignments.delete(assignment_id).to_dict()

        # Submission endpoints
        @self.app.get("/submissions", response_model=List[SubmissionRecord])
        async def list_submissions():
            return [s.to_dict() for s in repos.submissions.list_all()]

        @self.app.get("/submissions/{submission_id}", response_model=SubmissionRecord)
        async def get_submission(submission_id: str):
            return repos.submissions.get(submission_id).to_dict()

        @self.app.post("/submissions", response_model=SubmissionRecord, status_code=status.HTTP_201_CREATED)
        async def create_submission(data: SubmissionCreate):
            student = Student.from_dict(data.student.model_dump())
            assignment = Assignment.from_dict(data.assignment.model_dump())
            return repos.submissions.create(student, assignment, data.task).to_dict()

        @self.app.put("/submissions/{submission_id}", response_model=SubmissionRecord)
        async def update_submission(submission_id: str, data: SubmissionUpdate):
            """Replace student snapshot, assignment snapshot and task list."""
            student = Student.from_dict(data.student.model_dump())
            assignment = Assignment.from_dict(data.assignment.model_dump())
            return repos.submissions.update(submission_id, student, assignment, data.task).to_dict()

        @self.app.delete("/submissions/{submission_id}", response_model=SubmissionRecord)
        async def delete_submission(submission_id: str):
            return repos.submissions.delete(submission_id).to_dict()

        # Teacher endpoints
        @self.app.get("/teachers", response_model=List[TeacherRecord])
        async def list_teachers():
            return [t.to_dict() for t in repos.teachers.list_all()]

        @self.app.get("/teachers/{teacher_id}", response_model=TeacherRecord)
        async def get_teacher(teacher_id: str):
            return repos.teachers.get(teacher_id).to_dict()

        @self.app.post("/teachers", response_model=TeacherRecord, status_code=status.HTTP_201_CREATED)
        async def create_teacher(data: TeacherCreate):
            return repos.teachers.create(data.name, data.password).to_dict()

        # Class endpoints
        @self.app.get("/classes", response_model=List[ClassRecord])
        async def list_classes():
            return [c.to_dict() for c in repos.classes.list_all()]

        @self.app.get("/classes/{class_id}", response_model=ClassRecord)
        async def get_class(class_id: str):
            return repos.classes.get(class_id).to_dict()

        @self.app.post("/classes", response_model=ClassRecord, status_code=status.HTTP_201_CREATED)
        async def create_class(data: ClassCreate):
            teacher = Teacher.from_dict(data.teacher.model_dump())
            return repos.classes.create(data.name, teacher).to_dict()
