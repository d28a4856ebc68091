# /app/models/subject_model.py

from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Dict, List, Optional
from datetime import datetime

from .enums import SubjectType


def _distinct_option_names(options: List[str]) -> List[str]:
    """Strips blanks and drops case-insensitive repeats; the first spelling wins."""
    names = {}
    for raw in options:
        name = raw.strip() if raw else ""
        if name and name.lower() not in names:
            names[name.lower()] = name
    return list(names.values())

class SubjectOption(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str; subject_id: str; name: str

class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: SubjectType = Field(default=SubjectType.NORMAL)
    options: List[str] = Field(default_factory=list, description="Option names; ELECTIVE_GROUP only.")

    @model_validator(mode='after')
    def options_match_type(self):
        names = _distinct_option_names(self.options)
        if self.type == SubjectType.ELECTIVE_GROUP:
            if len(names) < 2:
                raise ValueError('An elective group needs at least two distinct options.')
        elif names:
            raise ValueError('A NORMAL subject cannot have options.')
        self.options = names
        return self

class SubjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)

class OptionsReplace(BaseModel):
    options: List[str] = Field(..., min_length=2)

    @model_validator(mode='after')
    def distinct_names(self):
        names = _distinct_option_names(self.options)
        if len(names) < 2:
            raise ValueError('An elective group needs at least two distinct options.')
        self.options = names
        return self

class Subject(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    class_id: str
    name: str
    type: SubjectType
    created_at: Optional[datetime] = None
    options: List[SubjectOption] = Field(default_factory=list)

class PreferenceSet(BaseModel):
    option_id: Optional[str] = Field(default=None, description="Null clears the preference.")

class Preference(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str; student_id: str; subject_id: str; option_id: str

class ElectiveMembership(BaseModel):
    """Students per option of an elective subject, plus those who never chose."""
    subjectId: str
    options: Dict[str, List[str]]
    unassigned: List[str]

class SubjectDeletionCheck(BaseModel):
    canDelete: bool
    reason: Optional[str] = None
