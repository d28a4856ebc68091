# /ata-backend/app/models/person_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional

from .enums import Language, ProgrammingPreference, Role

# --- Model Definitions ---

class PersonBase(BaseModel):
    """
    The base model for a class member. Contains fields common to create and read operations.
    """
    name: str = Field(..., min_length=2, description="The full name of the person.")
    email: str = Field(..., min_length=3, description="Login email; unique across the system.")
    roll_no: Optional[str] = Field(default=None, description="Roll number, unique within the class.")

    @field_validator('email')
    @classmethod
    def normalise_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError('Email must contain "@".')
        return v

class PersonCreate(PersonBase):
    """The model used for enrolling a new member. Role defaults to STUDENT."""
    role: Role = Field(default=Role.STUDENT)
    preferred_language: Optional[Language] = None
    programming_preference: Optional[ProgrammingPreference] = None

class PersonUpdate(BaseModel):
    """
    The model for updating a member's profile. All fields are optional to allow for
    partial updates. Role changes go through the dedicated role endpoint.
    """
    model_config = ConfigDict(from_attributes=True)

    name: Optional[str] = Field(default=None, min_length=2)
    email: Optional[str] = Field(default=None)
    roll_no: Optional[str] = Field(default=None)
    preferred_language: Optional[Language] = Field(default=None)
    programming_preference: Optional[ProgrammingPreference] = Field(default=None)

class RoleChange(BaseModel):
    role: Role

    @field_validator('role')
    @classmethod
    def only_student_or_cr(cls, v: Role) -> Role:
        if v == Role.ADMIN:
            raise ValueError('Members can only be switched between STUDENT and CR.')
        return v

class LanguageChange(BaseModel):
    preferred_language: Optional[Language] = None

class Person(PersonBase):
    """
    The full representation of a class member, as it is stored in the
    database and returned by the API.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="The unique, server-generated identifier for the person.")
    class_id: str = Field(..., description="The ID of the class this person belongs to.")
    role: Role
    preferred_language: Optional[Language] = None
    programming_preference: Optional[ProgrammingPreference] = None
    is_primary: bool = False

class PersonDeletionSummary(BaseModel):
    personId: str
    statusesRemoved: int
    preferencesRemoved: int

class IdentityContext(BaseModel):
    """Who is calling. Supplied by the auth layer and trusted verbatim."""
    person_id: str
    class_id: Optional[str] = None
    role: Role
