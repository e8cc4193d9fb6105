"""Domain schemas shared by the extraction and field-resolution pipelines."""

from models.schemas.intent import ExtractedValue, IntentResult, IntentType
from models.schemas.resume import Education, Experience, PersonalInfo, StructuredResume

__all__ = [
    "Education",
    "Experience",
    "ExtractedValue",
    "IntentResult",
    "IntentType",
    "PersonalInfo",
    "StructuredResume",
]
