"""Structured resume produced by the upstream extraction step.

Sections are ordered most-recent-first, so index 0 of ``education`` and
``experience`` is the entry used whenever a single value is needed.
"""

from pydantic import BaseModel, ConfigDict, field_validator


class PersonalInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    linkedin: str | None = None
    github: str | None = None


class Education(BaseModel):
    """A single education entry."""
    model_config = ConfigDict(extra="ignore")

    degree: str | None = None
    institution: str | None = None
    year: str | None = None
    score: str | None = None  # CGPA or percentage, free text
    location: str | None = None


class Experience(BaseModel):
    """A single work experience entry."""
    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    company: str | None = None
    duration: str | None = None
    description: str | None = None
    location: str | None = None


class StructuredResume(BaseModel):
    model_config = ConfigDict(extra="ignore")

    personal_info: PersonalInfo | None = None
    education: list[Education] = []
    experience: list[Experience] = []
    skills: list[str] = []

    @field_validator("education", "experience", "skills", mode="before")
    @classmethod
    def _null_section_is_empty(cls, value):
        return [] if value is None else value

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(indent=indent)
