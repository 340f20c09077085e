from enum import Enum
from pydantic import Field, model_validator
from typing import List, Optional, Dict, Any
from core.models import PostmarkModel


class TemplateType(str, Enum):
    """Kind of template stored on the server"""
    STANDARD = "Standard"
    LAYOUT = "Layout"


class TemplateTypeFilter(str, Enum):
    """Template kinds accepted by the list endpoint"""
    ALL = "All"
    STANDARD = "Standard"
    LAYOUT = "Layout"


class Template(PostmarkModel):
    """Full template record"""
    template_id: int
    name: str
    subject: Optional[str] = None
    html_body: Optional[str] = None
    text_body: Optional[str] = None
    associated_server_id: int = 0
    active: bool = True
    alias: Optional[str] = None
    template_type: TemplateType = TemplateType.STANDARD
    layout_template: Optional[str] = None


class TemplateSummary(PostmarkModel):
    """Template as it appears in a listing"""
    template_id: int
    name: str
    active: bool = True
    alias: Optional[str] = None
    template_type: TemplateType = TemplateType.STANDARD
    layout_template: Optional[str] = None


class TemplateListResult(PostmarkModel):
    """One page of templates plus the size of the full matching set"""
    total_count: int
    templates: List[TemplateSummary] = Field(default_factory=list)


class CreateTemplateRequest(PostmarkModel):
    """Request to create a new template"""
    name: str = Field(min_length=1)
    subject: Optional[str] = None
    html_body: Optional[str] = None
    text_body: Optional[str] = None
    alias: Optional[str] = None
    template_type: Optional[TemplateType] = None
    layout_template: Optional[str] = None


class EditTemplateRequest(PostmarkModel):
    """Partial template update; only set fields are sent"""
    name: Optional[str] = Field(default=None, min_length=1)
    subject: Optional[str] = None
    html_body: Optional[str] = None
    text_body: Optional[str] = None
    alias: Optional[str] = None
    layout_template: Optional[str] = None


class ValidateTemplateRequest(PostmarkModel):
    """Template content to check and test-render"""
    subject: Optional[str] = None
    html_body: Optional[str] = None
    text_body: Optional[str] = None
    test_render_model: Optional[Dict[str, Any]] = None
    inline_css_for_html_test_render: Optional[bool] = None
    template_type: Optional[TemplateType] = None
    layout_template: Optional[str] = None


class TemplateValidationError(PostmarkModel):
    """Single syntax problem found in a template field"""
    message: str
    line: Optional[int] = None
    character_position: Optional[int] = None


class TemplateContentValidation(PostmarkModel):
    """Validation outcome for one of Subject / HtmlBody / TextBody"""
    content_is_valid: bool
    validation_errors: List[TemplateValidationError] = Field(default_factory=list)
    rendered_content: Optional[str] = None


class TemplateValidationResult(PostmarkModel):
    """Per-field validation plus the model shape inferred by the server"""
    all_content_is_valid: Optional[bool] = None
    subject: Optional[TemplateContentValidation] = None
    html_body: Optional[TemplateContentValidation] = None
    text_body: Optional[TemplateContentValidation] = None
    suggested_template_model: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def fill_aggregate(self) -> "TemplateValidationResult":
        # Older responses leave out the aggregate flag
        if self.all_content_is_valid is None:
            fields = [f for f in (self.subject, self.html_body, self.text_body) if f is not None]
            self.all_content_is_valid = all(f.content_is_valid for f in fields)
        return self
