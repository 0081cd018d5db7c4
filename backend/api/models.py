"""
Pydantic models used for request/response validation and API data contracts.

The contact form is deliberately parsed leniently: every field is optional at
the model level so that the endpoint itself can answer missing fields with the
generic 400 payload instead of FastAPI's default 422 error.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContactSubmission(BaseModel):
    """
    A contact form submission as received from the browser.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, description="Name of the person contacting us.", examples=["Jane Doe"])
    email: Optional[str] = Field(None, description="Reply address of the submitter.", examples=["jane@example.com"])
    subject: Optional[str] = Field(None, description="Subject line typed by the submitter.")
    message: Optional[str] = Field(None, description="Free text message body.")

    @field_validator("name", "email", "subject", "message", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Optional[str]:
        # form values arrive as strings; JSON may carry numbers or booleans
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float, bool)):
            return str(value) if value else ""
        return None

    def is_complete(self) -> bool:
        """True when all four fields are non-empty."""
        return all([self.name, self.email, self.subject, self.message])


class ContactResponse(BaseModel):
    """
    JSON body returned by the contact endpoint.
    """
    success: bool
    """Whether the message was relayed."""
    message: str
    """Human readable outcome, safe to show to the submitter."""


class MailMessage(BaseModel):
    """
    Outgoing email derived from a `ContactSubmission`. Lives only for one send.
    """
    sender: str
    """Formatted From header, e.g. 'Jane Doe <D247Online@outlook.com>'."""
    to: str
    """Destination mailbox."""
    reply_to: str
    """Submitter address, so replies go straight back to them."""
    subject: str
    """Subject header."""
    html: str
    """HTML alternative."""
    text: str
    """Plaintext alternative."""
