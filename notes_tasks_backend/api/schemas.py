from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Pydantic models for serialization and validation.
# Request models leave every field optional so that a missing value is
# reported with the endpoint's own message instead of a generic one.

class SignupRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=128, description="Display name")
    email: Optional[str] = Field(None, description="Stored and compared exactly as given, after trimming")
    password: Optional[str] = None

class SigninRequest(BaseModel):
    email: Optional[str] = Field(None, description="Stored and compared exactly as given, after trimming")
    password: Optional[str] = None

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime

class UserResponse(BaseModel):
    user: UserOut

class AuthResponse(UserResponse):
    token: str

class OkResponse(BaseModel):
    ok: bool = True


class NoteCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None

class NoteUpdate(BaseModel):
    # None means "leave unchanged"
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None

class NoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

class NoteResponse(BaseModel):
    note: NoteOut

class NoteListResponse(BaseModel):
    notes: List[NoteOut]


class TaskCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    completed: Optional[bool] = None

class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    completed: bool
    created_at: datetime
    updated_at: datetime

class TaskResponse(BaseModel):
    task: TaskOut

class TaskListResponse(BaseModel):
    tasks: List[TaskOut]


def is_blank(value: Optional[str]) -> bool:
    """True for None or a string that is empty once trimmed."""
    return value is None or not value.strip()
