from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class TeacherLogin(BaseModel):
    password: str = Field(min_length=1)


class StudentLogin(BaseModel):
    student_id: str = Field(min_length=1, max_length=32)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: Role
