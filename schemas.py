import math
import re
from datetime import date, datetime
from typing import Any, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from models import Priority, Status

DISPLAY_NAME_RE = re.compile(r"^[a-zA-Z\s]*$")
USERNAME_RE = re.compile(r"^[\w.]+$", re.ASCII)

# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72

# Upper bound for a single log-time call
MAX_DURATION = 1_000_000

DURATION_MESSAGE = "Duration must be a positive number."


def _required(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise PydanticCustomError("required", message)
    return value.strip()


class SignUpRequest(BaseModel):
    """Schema for creating a new user"""
    display_name: Optional[str] = Field(None, validate_default=True)
    email: Optional[str] = Field(None, validate_default=True)
    password: Optional[str] = Field(None, validate_default=True)
    username: Optional[str] = Field(None, validate_default=True)

    @field_validator("display_name")
    @classmethod
    def check_display_name(cls, value):
        value = _required(value, "Display name is required.")
        if not DISPLAY_NAME_RE.match(value):
            raise PydanticCustomError(
                "display_name",
                "Display name must contain only letters and whitespaces.",
            )
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value):
        value = _required(value, "Email is required.")
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError("email", "Invalid email address.") from None
        return value

    @field_validator("password")
    @classmethod
    def check_password(cls, value):
        if value is None or value == "":
            raise PydanticCustomError("required", "Password is required.")
        if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise PydanticCustomError(
                "password", "Password must be at most 72 bytes long."
            )
        return value

    @field_validator("username")
    @classmethod
    def check_username(cls, value):
        value = _required(value, "Username is required.")
        if not USERNAME_RE.match(value):
            raise PydanticCustomError(
                "username",
                "Username must only contain alphanumerical, dot or underscore.",
            )
        return value


class LoginRequest(BaseModel):
    """Schema for logging in with an email or a username"""
    identifier: Optional[str] = Field(None, validate_default=True)
    password: Optional[str] = Field(None, validate_default=True)

    @field_validator("identifier", "password")
    @classmethod
    def check_present(cls, value):
        if value is None or not value.strip():
            raise PydanticCustomError(
                "required", "Email/Username and password are required."
            )
        return value


class SignUpResponse(BaseModel):
    message: str
    token: str


class LoginResponse(BaseModel):
    msg: str
    token: str


class TaskCreate(BaseModel):
    """Schema for creating a new task"""
    title: Optional[str] = Field(None, max_length=255, validate_default=True)
    description: Optional[str] = Field(None, max_length=255)
    estimate: Optional[float] = Field(None, ge=0)
    due_date: Optional[date] = None
    priority: Optional[Priority] = None
    status: Optional[Status] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value):
        return _required(value, "Title is required.")


class TaskUpdate(BaseModel):
    """Schema for updating a task; omitted or null fields are left untouched"""
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=255)
    estimate: Optional[float] = Field(None, ge=0)
    due_date: Optional[date] = None
    priority: Optional[Priority] = None
    status: Optional[Status] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value):
        if value is None:
            return value
        if not value.strip():
            raise PydanticCustomError("title", "Title cannot be empty.")
        return value.strip()


class LogTimeRequest(BaseModel):
    """Schema for logging time against a task"""
    duration: Optional[float] = Field(None, validate_default=True)
    day: Optional[date] = None

    @field_validator("duration", mode="before")
    @classmethod
    def check_duration(cls, value: Any):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PydanticCustomError("duration", DURATION_MESSAGE)
        try:
            finite = math.isfinite(value)
        except OverflowError:
            finite = False
        if not finite or value <= 0:
            raise PydanticCustomError("duration", DURATION_MESSAGE)
        if value > MAX_DURATION:
            raise PydanticCustomError(
                "duration", f"Duration must be at most {MAX_DURATION}."
            )
        return value


class TaskLogResponse(BaseModel):
    """Schema for a time log entry"""
    id: int
    task_id: int
    day: date
    duration: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TaskResponse(BaseModel):
    """Schema for task response"""
    id: int
    user_id: int
    title: str
    description: Optional[str]
    estimate: Optional[float]
    due_date: Optional[date]
    priority: Priority
    status: Status
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TaskDetailResponse(TaskResponse):
    """Task with its time logs and the sum of their durations"""
    logs: List[TaskLogResponse] = []
    total_logged_time: float = 0


class LogTimeResponse(BaseModel):
    message: str
    log: TaskLogResponse


class ErrorResponse(BaseModel):
    error: str


class FieldError(BaseModel):
    field: str
    msg: str


class ValidationErrorResponse(BaseModel):
    errors: List[FieldError]
