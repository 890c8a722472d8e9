"""The ``send_email`` tool: sends mail through Resend with a per-request API key."""

import logging
import re
from typing import Annotated, Any, Dict, List, Optional, Union

import httpx
from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field, WithJsonSchema

from .config import DEFAULT_RESEND_API_URL, DEFAULT_TIMEOUT
from .models import RequestMetadata, ResultEnvelope

logger = logging.getLogger(__name__)

# Scanned in this order; the first header yielding a key wins.
API_KEY_HEADERS = ("x-resend-api-key", "x-api-key", "authorization")
_BEARER_RE = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)

MISSING_API_KEY_MESSAGE = (
    "Missing API key. Provide 'X-Resend-API-Key' or 'X-API-Key' header (or Authorization: Bearer <key>)."
)
MISSING_BODY_MESSAGE = "At least one of html_content or text_content must be provided."


def _check_email(value: str) -> str:
    """Reject invalid addresses but hand back exactly what the caller sent."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"invalid email address: {e}") from e
    return value


EmailAddress = Annotated[str, AfterValidator(_check_email), WithJsonSchema({"type": "string", "format": "email"})]

# Optional fields below default to None when omitted, but an explicit null
# fails validation: the annotations carry no None.


class Attachment(BaseModel):
    content: str = Field(description="Base64-encoded content")
    filename: str
    path: str = None
    content_type: str = None
    content_id: str = None


class Tag(BaseModel):
    name: str
    value: str


class SendEmailArgs(BaseModel):
    to_emails: List[EmailAddress] = Field(
        min_length=1, max_length=50, description="List of recipient email addresses (max 50)"
    )
    subject: str = Field(min_length=1, description="Email subject line")
    sender_email: EmailAddress = Field(description="Sender email address, verified in Resend")
    html_content: str = Field(default=None, description="HTML content of the email")
    text_content: str = Field(default=None, description="Plain text version of the email")
    cc_emails: List[EmailAddress] = Field(default=None, description="CC recipients")
    bcc_emails: List[EmailAddress] = Field(default=None, description="BCC recipients")
    reply_to: Union[EmailAddress, List[EmailAddress]] = Field(
        default=None, description="Reply-to email address(es)"
    )
    # passed through verbatim; Resend interprets it
    scheduled_at: str = Field(
        default=None, description="Schedule email for later (natural language or ISO 8601)"
    )
    attachments: List[Attachment] = Field(default=None, description="Attachments (max 40MB total)")
    tags: List[Tag] = Field(default=None, description="Custom tags as key/value pairs")


def extract_api_key(metadata: RequestMetadata) -> Optional[str]:
    """Return the caller's Resend API key from request headers, if any."""
    for header in API_KEY_HEADERS:
        value = metadata.first(header)
        if not value:
            continue
        if header == "authorization":
            match = _BEARER_RE.match(value)
            if match:
                return match.group(1)
        else:
            return value
    return None


def build_payload(args: SendEmailArgs) -> Dict[str, Any]:
    """Assemble the Resend request body.

    Optional fields are only added when the caller supplied them (and, for
    lists, supplied at least one entry); nothing is sent as null.
    """
    payload: Dict[str, Any] = {
        "from": args.sender_email,
        "to": list(args.to_emails),
        "subject": args.subject,
    }
    if args.html_content:
        payload["html"] = args.html_content
    if args.text_content:
        payload["text"] = args.text_content
    if args.cc_emails:
        payload["cc"] = list(args.cc_emails)
    if args.bcc_emails:
        payload["bcc"] = list(args.bcc_emails)
    if args.reply_to:
        payload["reply_to"] = args.reply_to if isinstance(args.reply_to, str) else list(args.reply_to)
    if args.scheduled_at:
        payload["scheduled_at"] = args.scheduled_at
    if args.attachments:
        payload["attachments"] = [a.model_dump(exclude_none=True) for a in args.attachments]
    if args.tags:
        payload["tags"] = [t.model_dump() for t in args.tags]
    return payload


class ResendClient:
    """Thin async client for the Resend ``/emails`` endpoint.

    A new ``httpx.AsyncClient`` is opened per send; nothing is retried.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_RESEND_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    async def send_email(self, *, api_key: str, payload: Dict[str, Any]) -> ResultEnvelope:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        response = None
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.api_url, headers=headers, json=payload)
                data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Resend request failed: %r", e)
            return ResultEnvelope.error(f"Email send failed: {str(e) or e.__class__.__name__}")
        except ValueError as e:
            # body was not JSON
            logger.warning(
                "Unparsable Resend response (HTTP %s): %.500s",
                response.status_code if response is not None else "?",
                response.text if response is not None else "",
            )
            return ResultEnvelope.error(f"Email send failed: {str(e) or e.__class__.__name__}")

        if not isinstance(data, dict):
            data = {}

        if not response.is_success:
            message = data.get("message") or f"HTTP {response.status_code}"
            logger.info("Resend rejected email (HTTP %s): %s", response.status_code, message)
            return ResultEnvelope.error(f"Email send failed: {message}")

        email_id = data.get("id")
        logger.info("Email accepted by Resend for %d recipient(s), id=%s", len(payload.get("to", [])), email_id)
        return ResultEnvelope.text(f"Email sent successfully. id: {email_id if email_id is not None else 'unknown'}")


def make_send_email_handler(client: ResendClient):
    """Bind ``client`` into a registry handler for the ``send_email`` tool."""

    async def send_email(args: SendEmailArgs, metadata: RequestMetadata) -> ResultEnvelope:
        api_key = extract_api_key(metadata)
        if not api_key:
            return ResultEnvelope.error(MISSING_API_KEY_MESSAGE)

        if not args.html_content and not args.text_content:
            return ResultEnvelope.error(MISSING_BODY_MESSAGE)

        return await client.send_email(api_key=api_key, payload=build_payload(args))

    return send_email
