from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.schemas.resume import StructuredResume


class ResolvedField(BaseModel):
    """Autofill answer for one form field.

    ``matched_source`` is a provenance tag: ``simple_extraction``, ``llm_error``,
    ``no_data``, ``intent_guard``, ``no_resume`` or the resume section the model used.
    """
    model_config = ConfigDict(populate_by_name=True)

    suggested_value: str = ""
    confidence: float = 0.0
    reasoning: str = ""
    matched_source: str | None = Field(None, alias="field_matched")


class ModelAnswer(BaseModel):
    """Four-field JSON the model is asked to answer an autofill prompt with."""
    suggested_value: str | None = None
    confidence: float = 0.0
    reasoning: str | None = None
    field_matched: str | None = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _missing_confidence_is_zero(cls, value):
        return 0.0 if value is None else value

    @field_validator("suggested_value", mode="before")
    @classmethod
    def _numbers_as_text(cls, value):
        # "2025" often comes back as a bare number for year fields
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class UploadResponse(BaseModel):
    success: bool = True
    file_name: str = ""
    text_length: int = 0
    preview: str = ""


class CurrentResumeResponse(BaseModel):
    file_name: str = ""
    uploaded_at: datetime
    text_length: int = 0
    preview: str = ""
    extracted: bool = False


class ExtractionResponse(BaseModel):
    success: bool = True
    structured_resume: StructuredResume


class ModelSummary(BaseModel):
    name: str
    family: str | None = None
    size_bytes: int = 0
    modified_at: str | None = None


class ModelListResponse(BaseModel):
    models: list[ModelSummary] = []
    active_model: str = ""


class ModelSwitchResponse(BaseModel):
    success: bool = True
    model: str
    previous_model: str = ""
