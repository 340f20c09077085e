import uuid
from datetime import datetime
from enum import Enum
from pydantic import Field, field_validator, model_validator
from typing import Any, Dict, List, Optional, Union
from core.messages.template_model import resolve_template_model
from core.models import PostmarkModel


# Postmark leaves MessageID out when a message was not accepted
EMPTY_MESSAGE_ID = uuid.UUID(int=0)


class PostmarkStatus(str, Enum):
    """Client-side outcome of a send"""
    UNKNOWN = "Unknown"
    SUCCESS = "Success"


class MessageHeader(PostmarkModel):
    """Custom email header"""
    name: str
    value: str


class TemplatedMessage(PostmarkModel):
    """Email rendered server-side from a stored template"""
    from_email: str = Field(alias="From")
    to: str
    template_id: Optional[int] = None
    template_alias: Optional[str] = None
    template_model: Dict[str, Any] = Field(default_factory=dict)
    inline_css: bool = True
    cc: Optional[str] = None
    bcc: Optional[str] = None
    reply_to: Optional[str] = None
    tag: Optional[str] = None
    track_opens: Optional[bool] = None
    track_links: Optional[str] = None
    headers: Optional[List[MessageHeader]] = None
    metadata: Optional[Dict[str, str]] = None
    message_stream: Optional[str] = None

    @field_validator("template_model", mode="before")
    @classmethod
    def resolve_model(cls, v: Any) -> Dict[str, Any]:
        if v is None:
            return {}
        return resolve_template_model(v)

    @field_validator("headers", mode="before")
    @classmethod
    def headers_from_mapping(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return [{"Name": name, "Value": value} for name, value in v.items()]
        return v

    @model_validator(mode="after")
    def check_template_reference(self) -> "TemplatedMessage":
        if (self.template_id is None) == (self.template_alias is None):
            raise ValueError("Exactly one of template_id or template_alias must be set")
        return self


class SendResult(PostmarkModel):
    """Outcome of a single templated send"""
    message_id: uuid.UUID = Field(default=EMPTY_MESSAGE_ID, alias="MessageID")
    error_code: int = 0
    message: str = ""
    to: Optional[str] = None
    submitted_at: Optional[datetime] = None
    status: PostmarkStatus = PostmarkStatus.UNKNOWN

    @field_validator("message_id", mode="before")
    @classmethod
    def empty_message_id(cls, v: Any) -> Any:
        if v is None or v == "":
            return EMPTY_MESSAGE_ID
        return v

    @model_validator(mode="after")
    def derive_status(self) -> "SendResult":
        if self.error_code == 0 and self.message_id != EMPTY_MESSAGE_ID:
            self.status = PostmarkStatus.SUCCESS
        else:
            self.status = PostmarkStatus.UNKNOWN
        return self

    @property
    def is_trackable(self) -> bool:
        return self.message_id != EMPTY_MESSAGE_ID


def build_message(
    template: Union[int, str],
    template_model: Any,
    from_email: str,
    to: str,
    inline_css: bool = True,
    **options: Any
) -> TemplatedMessage:
    """Build a TemplatedMessage, treating an int as TemplateId and a str as TemplateAlias"""
    reference = {"template_id": template} if isinstance(template, int) else {"template_alias": template}
    return TemplatedMessage(
        from_email=from_email,
        to=to,
        template_model=template_model,
        inline_css=inline_css,
        **reference,
        **options
    )
