"""
Request contracts for every insertable or updatable entity.

Identifiers, timestamps and other server-assigned fields are never part of
an insert contract; unknown keys are dropped. ``parse`` runs a contract over a
JSON payload and reports every failing field at once.
"""

import re
from datetime import date
from typing import Annotated, List, Literal, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from email_validator import validate_email, EmailNotValidError

from schoolsync.errors import ValidationError


Role = Literal["admin", "teacher", "student"]
AttendanceStatus = Literal["present", "absent", "late"]
PromotionStatus = Literal["pending", "promoted", "retained"]
Grade = Literal["A", "B", "C", "D", "F"]

# Passwords are taken exactly as typed
Password = Annotated[str, StringConstraints(strip_whitespace=False)]

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{3,30}$")


def normalize_email(value):
    try:
        return validate_email(value, check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValueError(str(e))


class Contract(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


def reject_null(value):
    if value is None:
        raise ValueError("May not be null")
    return value


# ---------------- USERS ---------------- #

class UserCreate(Contract):
    username: str
    password: Password
    role: Role
    full_name: str = Field(min_length=1, max_length=150)
    email: str
    profile_picture: Optional[str] = None
    current_class_id: Optional[int] = None
    academic_year: Optional[int] = None

    @field_validator("username")
    @classmethod
    def check_username(cls, value):
        if not USERNAME_PATTERN.match(value):
            raise ValueError(
                "Username must be 3-30 characters (letters, numbers, underscore, hyphen only)"
            )
        return value

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value):
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters long")
        if not re.search(r"[A-Z]", value):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", value):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", value):
            raise ValueError("Password must contain at least one number")
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value):
        return normalize_email(value)


class ProfileUpdate(Contract):
    """Fields a user may change on their own profile."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    full_name: Optional[str] = Field(None, min_length=1, max_length=150)
    email: Optional[str] = None
    profile_picture: Optional[str] = None

    @field_validator("full_name", "email", mode="before")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)

    @field_validator("email")
    @classmethod
    def check_email(cls, value):
        if value is None:
            return value
        return normalize_email(value)


class UserUpdate(ProfileUpdate):
    role: Optional[Role] = None
    current_class_id: Optional[int] = None
    academic_year: Optional[int] = None

    @field_validator("role", mode="before")
    @classmethod
    def check_role_not_null(cls, value):
        return reject_null(value)


class LoginRequest(Contract):
    username: str = Field(min_length=1)
    password: Password = Field(min_length=1)


# ---------------- CLASS LEVELS ---------------- #

class ClassLevelCreate(Contract):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    academic_year: int = Field(ge=1900, le=2999)


class ClassLevelUpdate(Contract):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    academic_year: Optional[int] = Field(None, ge=1900, le=2999)

    @field_validator("name", "academic_year", mode="before")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


# ---------------- ACADEMICS ---------------- #

class StudentAcademicsCreate(Contract):
    student_id: int
    class_level_id: int
    academic_year: int = Field(ge=1900, le=2999)
    overall_grade: Optional[Grade] = None
    promotion_status: PromotionStatus = "pending"
    remarks: Optional[str] = None


class StudentAcademicsUpdate(Contract):
    overall_grade: Optional[Grade] = None
    promotion_status: Optional[PromotionStatus] = None
    remarks: Optional[str] = None

    @field_validator("promotion_status", mode="before")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class PromotionRequest(Contract):
    new_class_id: int
    academic_year: int = Field(ge=1900, le=2999)
    remarks: Optional[str] = None


# ---------------- SUBJECTS ---------------- #

class SubjectCreate(Contract):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    teacher_id: Optional[int] = None
    class_level_id: int


class SubjectUpdate(Contract):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    teacher_id: Optional[int] = None
    class_level_id: Optional[int] = None

    @field_validator("name", "class_level_id", mode="before")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


# ---------------- ATTENDANCE ---------------- #

class AttendanceCreate(Contract):
    user_id: int
    subject_id: int
    class_level_id: int
    date: date
    status: AttendanceStatus
    marked_by: int
    notes: Optional[str] = None


class BulkAttendanceCreate(Contract):
    date: date
    subject_id: int
    class_level_id: int
    student_ids: List[int] = Field(min_length=1)
    status: AttendanceStatus
    marked_by: int
    notes: Optional[str] = None


class AttendanceUpdate(Contract):
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class AttendanceQuery(Contract):
    class_id: int
    date: date


class AttendanceSummaryQuery(Contract):
    user_id: int
    year: int = Field(ge=1900, le=2999)
    month: int = Field(ge=1, le=12)


class AttendanceMonthlyQuery(Contract):
    user_id: int
    year: int = Field(ge=1900, le=2999)


# ---------------- EXAM RESULTS ---------------- #

class ExamResultCreate(Contract):
    student_id: int
    subject_id: int
    academic_year: int = Field(ge=1900, le=2999)
    term: Literal[1, 2, 3]
    marks: int = Field(ge=0, le=100)
    grade: Optional[Grade] = None
    exam_date: date


class ExamResultUpdate(Contract):
    term: Optional[Literal[1, 2, 3]] = None
    marks: Optional[int] = Field(None, ge=0, le=100)
    grade: Optional[Grade] = None
    exam_date: Optional[date] = None

    @field_validator("term", "marks", "grade", "exam_date", mode="before")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


# ---------------- ANNOUNCEMENTS / MATERIALS ---------------- #

class AnnouncementCreate(Contract):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    author_id: int


class MaterialCreate(Contract):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    file_url: str = Field(min_length=1, max_length=500)
    uploaded_by: int
    subject_id: int


def format_errors(exc):
    fields = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        fields.append({"field": field, "message": message})
    return fields


def parse(contract, payload):
    if not isinstance(payload, dict):
        raise ValidationError(
            "Request body must be a JSON object",
            fields=[{"field": "__root__", "message": "Expected a JSON object"}]
        )

    try:
        return contract.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(fields=format_errors(exc)) from exc


def changes(update):
    """Only the fields the caller actually sent."""
    return update.model_dump(exclude_unset=True)
