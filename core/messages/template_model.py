import json
from pydantic import BaseModel, Field
from typing import Any, Dict, Literal, Mapping, Union


class StructuredModel(BaseModel):
    """Template model given as a key-value mapping"""
    kind: Literal["structured"] = "structured"
    values: Dict[str, Any] = Field(default_factory=dict)


class RawJsonModel(BaseModel):
    """Template model given as an already-encoded JSON object"""
    kind: Literal["raw"] = "raw"
    raw: str


TemplateModel = Union[StructuredModel, RawJsonModel]


def to_template_model(value: Any) -> TemplateModel:
    """
    Wrap whatever the caller passed as a template model into the tagged union

    Accepts mappings, JSON strings, pydantic models and the union members
    themselves.
    """
    if isinstance(value, (StructuredModel, RawJsonModel)):
        return value
    if isinstance(value, str):
        return RawJsonModel(raw=value)
    if isinstance(value, BaseModel):
        return StructuredModel(values=value.model_dump(mode="json"))
    if isinstance(value, Mapping):
        return StructuredModel(values=dict(value))
    raise ValueError(f"Unsupported template model type: {type(value).__name__}")


def resolve_template_model(value: Any) -> Dict[str, Any]:
    """
    Resolve a template model to the JSON object sent to Postmark

    Raises:
        ValueError: If a raw model is not valid JSON or not a JSON object
    """
    model = to_template_model(value)
    if isinstance(model, StructuredModel):
        return model.values

    try:
        decoded = json.loads(model.raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Template model is not valid JSON: {e.msg}") from e
    if not isinstance(decoded, dict):
        raise ValueError("Template model JSON must be an object")
    return decoded
