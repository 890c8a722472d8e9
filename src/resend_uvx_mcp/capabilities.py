"""The prompts, tools and resources this server exposes."""

import json
from typing import Optional

import mcp.types as types
from pydantic import BaseModel, Field

from .email_tool import ResendClient, SendEmailArgs, make_send_email_handler
from .models import RequestMetadata, ResultEnvelope
from .registry import CapabilityKind, Registry

GREETING_URI = "https://example.com/greetings/default"
PROPERTY_INQUIRY_URI = "email-template://property-inquiry"

PROPERTY_INQUIRY_SUBJECT = "Interested by your property!"
PROPERTY_INQUIRY_TEXT = "\n".join(
    [
        "Hello,",
        "",
        "We came across your listing for your property and we're really interested!",
        "",
        "Here is the link to the property: {{property_link}}",
        "",
        "Would it be possible to schedule a visit?",
        "",
        "Looking forward to hearing back from you!",
        "",
        "Thanks,",
        "[SENDER_NAME]",
    ]
)


class GreetingPromptArgs(BaseModel):
    name: str = Field(description="Name to include in greeting")


class GreetArgs(BaseModel):
    name: str = Field(description="Name to greet")


async def greeting_template(args: GreetingPromptArgs, metadata: RequestMetadata) -> ResultEnvelope:
    message = types.PromptMessage(
        role="user",
        content=types.TextContent(type="text", text=f"Please greet {args.name} in a friendly manner."),
    )
    return ResultEnvelope(content=[message])


async def greet(args: GreetArgs, metadata: RequestMetadata) -> ResultEnvelope:
    return ResultEnvelope.text(f"Hello, {args.name}!")


async def greeting_resource(args: None, metadata: RequestMetadata) -> ResultEnvelope:
    return ResultEnvelope(
        content=[types.TextResourceContents(uri=GREETING_URI, mimeType="text/plain", text="Hello, world!")]
    )


async def property_inquiry_template(args: None, metadata: RequestMetadata) -> ResultEnvelope:
    payload = json.dumps({"subject": PROPERTY_INQUIRY_SUBJECT, "text": PROPERTY_INQUIRY_TEXT}, indent=2)
    return ResultEnvelope(
        content=[types.TextResourceContents(uri=PROPERTY_INQUIRY_URI, mimeType="application/json", text=payload)]
    )


def build_registry(client: Optional[ResendClient] = None) -> Registry:
    """Create the registry for one server instance."""
    registry = Registry()
    registry.register(
        CapabilityKind.PROMPT,
        "greeting-template",
        "A simple greeting prompt template",
        GreetingPromptArgs,
        greeting_template,
    )
    registry.register(CapabilityKind.TOOL, "greet", "A simple greeting tool", GreetArgs, greet)
    registry.register(
        CapabilityKind.RESOURCE,
        "greeting-resource",
        "Default greeting",
        None,
        greeting_resource,
        uri=GREETING_URI,
        mime_type="text/plain",
    )
    registry.register(
        CapabilityKind.RESOURCE,
        "property-inquiry-email-template",
        "Email template for enquiring about a property listing",
        None,
        property_inquiry_template,
        uri=PROPERTY_INQUIRY_URI,
        mime_type="application/json",
    )
    registry.register(
        CapabilityKind.TOOL,
        "send_email",
        "Send emails via Resend API. Provide html_content and/or text_content.",
        SendEmailArgs,
        make_send_email_handler(client or ResendClient()),
    )
    return registry
