from pydantic import BaseModel, ConfigDict, Field


class FieldQuery(BaseModel):
    """Metadata describing one form field, as scraped by the browser extension."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    label: str | None = Field(None, alias="field_label")
    name: str | None = Field(None, alias="field_name")
    placeholder: str | None = Field(None, alias="field_placeholder")
    type: str | None = Field(None, alias="field_type")
    current_value: str | None = Field(None, alias="field_value_current")


class ModelSwitchRequest(BaseModel):
    model: str = ""
    # When set, the switch only happens if this is still the active model
    expected_model: str | None = None

    model_config = {"protected_namespaces": ()}
