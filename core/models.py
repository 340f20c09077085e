from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal


class PostmarkModel(BaseModel):
    """Base for models that travel over the wire with PascalCase keys"""
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore"
    )

    def to_payload(self) -> dict:
        """Serialize for a request body, dropping unset optional fields"""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ApiResponse(PostmarkModel):
    """Generic Postmark acknowledgement (e.g. template deletion)"""
    error_code: int = 0
    message: str = ""
