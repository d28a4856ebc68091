# /app/models/class_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class ClassBase(BaseModel):
    name: str = Field(..., min_length=1, description="Display name of the class, e.g. 'CSE 3rd Year'.")
    section: Optional[str] = Field(default=None, description="Optional section label.")

class ClassCreate(ClassBase):
    pass

class Class(ClassBase):
    model_config = ConfigDict(from_attributes=True)

    id: str

class ClassSummary(Class):
    """A class enriched with member counts for the admin overview."""
    studentCount: int = 0
    crCount: int = 0
