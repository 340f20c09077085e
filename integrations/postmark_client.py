"""
Postmark template API client
Documentation: https://postmarkapp.com/developer/api/templates-api
"""
import httpx
from pydantic import ValidationError
from urllib.parse import quote
from typing import List, Dict, Any, Optional, Sequence, Union
from config import settings
from core.errors import (
    PostmarkApiError,
    PostmarkTransportError,
    PostmarkValidationError,
    error_from_envelope,
)
from core.messages.models import SendResult, TemplatedMessage, build_message
from core.messages.template_model import resolve_template_model
from core.models import ApiResponse
from core.templates.models import (
    CreateTemplateRequest,
    EditTemplateRequest,
    Template,
    TemplateListResult,
    TemplateSummary,
    TemplateType,
    TemplateTypeFilter,
    TemplateValidationResult,
    ValidateTemplateRequest,
)
from utils.logger import logger


TemplateRef = Union[int, str]

# Postmark caps list pages at 500 templates
MAX_PAGE_SIZE = 500


class PostmarkClient:
    """Client for the Postmark template and templated-send endpoints."""

    def __init__(
        self,
        server_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client; unset arguments fall back to settings."""
        self.server_token = server_token or settings.postmark_server_token
        self.base_url = (base_url or settings.postmark_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.postmark_timeout
        self.transport = transport

        token = self.server_token
        masked_token = f"{token[:4]}...{token[-4:]}" if len(token) > 12 else "***"
        logger.debug(f"Initializing Postmark client for {self.base_url} with server token: {masked_token}")

        self.headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "X-Postmark-Server-Token": self.server_token,
        }

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """Internal helper: one HTTP call, decoded JSON body or a raised PostmarkError."""
        url = f"{self.base_url}{path}"
        logger.debug(f"Postmark request: {method} {url}")
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                response = await client.request(method, url, headers=self.headers, **kwargs)
            except httpx.TimeoutException as e:
                logger.error(f"Postmark API timeout for {method} {url}")
                raise PostmarkTransportError(f"Request timed out: {method} {path}") from e
            except httpx.RequestError as e:
                logger.error(f"Postmark API Exception: {type(e).__name__}: {str(e)}")
                raise PostmarkTransportError(f"Failed to connect to Postmark: {str(e)}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_success:
            if body is None:
                logger.error(f"Postmark returned an unreadable body for {method} {url}")
                raise PostmarkTransportError(
                    "Response body is not valid JSON", status_code=response.status_code
                )
            return body

        logger.error(f"Postmark API HTTP Error: {response.status_code} for {method} {url}")
        if isinstance(body, dict) and "ErrorCode" in body:
            logger.error(f"Error body: {body}")
            try:
                error_code = int(body["ErrorCode"])
            except (TypeError, ValueError) as e:
                raise PostmarkTransportError(
                    f"HTTP {response.status_code} with unreadable ErrorCode", status_code=response.status_code
                ) from e
            raise error_from_envelope(response.status_code, error_code, str(body.get("Message", "")))

        logger.error(f"Error text: {response.text[:500]}")
        raise PostmarkTransportError(
            f"HTTP {response.status_code} without error details", status_code=response.status_code
        )

    @staticmethod
    def _template_path(template: TemplateRef) -> str:
        """Path of a template; aliases are escaped so they stay one path segment."""
        return f"/templates/{quote(str(template), safe='')}"

    @staticmethod
    def _parse(model_class, data: Any):
        """Validate a response body into a model; shape mismatches are transport failures."""
        try:
            return model_class.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected {model_class.__name__} response shape: {e}")
            raise PostmarkTransportError(f"Unexpected response shape for {model_class.__name__}") from e

    @staticmethod
    def _build(model_class, **fields):
        """Construct a request model, turning local argument errors into PostmarkValidationError."""
        try:
            return model_class(**fields)
        except (ValidationError, ValueError) as e:
            raise PostmarkValidationError(f"Invalid {model_class.__name__}: {e}") from e

    # ---- templates ----

    async def create_template(
        self,
        name: str,
        subject: Optional[str] = None,
        html_body: Optional[str] = None,
        text_body: Optional[str] = None,
        alias: Optional[str] = None,
        template_type: Optional[TemplateType] = None,
        layout_template: Optional[str] = None,
    ) -> Template:
        """Create a template; the server assigns its TemplateId."""
        request = self._build(
            CreateTemplateRequest,
            name=name,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            alias=alias,
            template_type=template_type,
            layout_template=layout_template,
        )
        payload = request.to_payload()
        data = await self._request("POST", "/templates", json=payload)

        # The create response only echoes identity fields
        template = self._parse(Template, {**payload, **data})
        logger.info(f"Created Postmark template {template.template_id} ({template.name})")
        return template

    async def get_template(self, template: TemplateRef) -> Template:
        """Get a template by id or alias, including deactivated ones."""
        data = await self._request("GET", self._template_path(template))
        return self._parse(Template, data)

    async def edit_template(
        self,
        template: TemplateRef,
        name: Optional[str] = None,
        subject: Optional[str] = None,
        html_body: Optional[str] = None,
        text_body: Optional[str] = None,
        alias: Optional[str] = None,
        layout_template: Optional[str] = None,
    ) -> Template:
        """
        Update the supplied fields of a template

        Fields left as None are not sent, so the server keeps their current
        values. The PUT response only echoes identity fields, so the
        stored record is fetched afterwards and returned.
        """
        request = self._build(
            EditTemplateRequest,
            name=name,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            alias=alias,
            layout_template=layout_template,
        )
        payload = request.to_payload()
        data = await self._request("PUT", self._template_path(template), json=payload)
        edited = self._parse(TemplateSummary, data)
        logger.info(f"Edited Postmark template {edited.template_id}")
        return await self.get_template(edited.template_id)

    async def delete_template(self, template: TemplateRef) -> ApiResponse:
        """Deactivate a template; the record stays retrievable with Active=false."""
        data = await self._request("DELETE", self._template_path(template))
        logger.info(f"Deleted Postmark template {template}")
        return self._parse(ApiResponse, data)

    async def get_templates(
        self,
        offset: int = 0,
        count: Optional[int] = None,
        template_type: Optional[TemplateTypeFilter] = None,
        layout_template: Optional[str] = None,
    ) -> TemplateListResult:
        """List one window of templates in the server's stable order."""
        if count is None:
            count = settings.postmark_page_size
        if offset < 0:
            raise PostmarkValidationError(f"offset must be >= 0, got {offset}")
        if not 1 <= count <= MAX_PAGE_SIZE:
            raise PostmarkValidationError(f"count must be between 1 and {MAX_PAGE_SIZE}, got {count}")

        params: Dict[str, Any] = {"Count": count, "Offset": offset}
        if template_type is not None:
            params["TemplateType"] = TemplateTypeFilter(template_type).value
        if layout_template:
            params["LayoutTemplate"] = layout_template

        data = await self._request("GET", "/templates", params=params)
        return self._parse(TemplateListResult, data)

    async def validate_template(
        self,
        subject: Optional[str] = None,
        html_body: Optional[str] = None,
        text_body: Optional[str] = None,
        test_render_model: Any = None,
        inline_css_for_html_test_render: Optional[bool] = None,
        template_type: Optional[TemplateType] = None,
        layout_template: Optional[str] = None,
    ) -> TemplateValidationResult:
        """Check template syntax and test-render it; nothing is stored."""
        try:
            render_model = resolve_template_model(test_render_model) if test_render_model is not None else None
        except ValueError as e:
            raise PostmarkValidationError(f"Invalid test render model: {e}") from e

        request = self._build(
            ValidateTemplateRequest,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            test_render_model=render_model,
            inline_css_for_html_test_render=inline_css_for_html_test_render,
            template_type=template_type,
            layout_template=layout_template,
        )
        data = await self._request("POST", "/templates/validate", json=request.to_payload())
        return self._parse(TemplateValidationResult, data)

    # ---- sending ----

    async def send_email_with_template(
        self,
        template: TemplateRef,
        template_model: Any,
        from_email: str,
        to: str,
        inline_css: bool = True,
        **options: Any,
    ) -> SendResult:
        """
        Send one email from a stored template

        Args:
            template: TemplateId (int) or TemplateAlias (str)
            template_model: Mapping, pydantic model or JSON object string
            from_email: Sender address (must be a confirmed signature)
            to: Recipient address(es)
            inline_css: Inline <style> rules into the rendered HTML
            **options: Any other TemplatedMessage field (cc, tag, metadata, ...)

        Returns:
            SendResult; a rejected send is returned, not raised
        """
        message = self._build_message(template, template_model, from_email, to, inline_css, **options)
        return await self.send_templated_message(message)

    async def send_templated_message(self, message: TemplatedMessage) -> SendResult:
        """Send a prepared TemplatedMessage."""
        try:
            data = await self._request("POST", "/email/withTemplate", json=message.to_payload())
        except PostmarkApiError as e:
            if e.status_code != 422:
                raise
            logger.error(f"Postmark rejected templated send to {message.to}: {e}")
            return SendResult(error_code=e.error_code, message=e.message, to=message.to)

        result = self._parse(SendResult, data)
        logger.info(f"Email sent to {message.to}, message ID: {result.message_id}")
        return result

    async def send_messages(self, messages: Sequence[TemplatedMessage]) -> List[SendResult]:
        """
        Send a batch of templated messages in one call

        Results line up positionally with the input. A message Postmark
        rejects gets a SendResult with a non-zero error_code in its slot;
        the rest of the batch is unaffected.
        """
        if not messages:
            return []

        payload = {"Messages": [m.to_payload() for m in messages]}
        data = await self._request("POST", "/email/batchWithTemplates", json=payload)
        if not isinstance(data, list) or len(data) != len(messages):
            logger.error(f"Batch response does not match {len(messages)} submitted messages")
            raise PostmarkTransportError("Batch response does not match the submitted messages")

        results = [self._parse(SendResult, item) for item in data]
        failed = sum(1 for r in results if r.error_code != 0)
        logger.info(f"Batch send: {len(results) - failed} accepted, {failed} rejected")
        return results

    def _build_message(self, template, template_model, from_email, to, inline_css, **options) -> TemplatedMessage:
        try:
            return build_message(template, template_model, from_email, to, inline_css, **options)
        except (ValidationError, ValueError) as e:
            raise PostmarkValidationError(f"Invalid templated message: {e}") from e
