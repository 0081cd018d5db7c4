"""
FastAPI Router — Contact form relay
===================================

Purpose
-------
Receives a contact form submission and relays it by email to the site's
mailbox. Mounted by the application under ``/api/contact``.

Key Notes
---------
- Accepts JSON or form-encoded bodies with `name`, `email`, `subject`, `message`.
- Responses are always ``{"success": bool, "message": str}``:
  200 sent, 400 validation failure, 500 delivery failure.
- Failure details (message, SMTP code, SMTP command) are only logged.
- Nothing is stored and nothing is retried.
"""

import json
import logging
import re

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from backend.api.mail_rendering import build_mail_message
from backend.api.mail_transport import transport_from_settings
from backend.api.mailer import SmtpMailer, get_mailer
from backend.api.models import ContactResponse, ContactSubmission
from backend.database.config.config import Settings, get_settings

router = APIRouter()
"""Contact router; the application includes it with the `/api/contact` prefix."""

logger = logging.getLogger("uvicorn.error")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
"""Loose syntactic email check: something@something.something, no whitespace."""

FIELDS_REQUIRED_MESSAGE = "All fields are required"
INVALID_EMAIL_MESSAGE = "Invalid email address"
SUCCESS_MESSAGE = "Your message has been sent successfully! We'll get back to you within 24-48 hours."


def is_valid_email(email: str) -> bool:
    """Return True if `email` passes the syntactic check."""
    return bool(EMAIL_PATTERN.match(email))


def failure_message(contact_address: str) -> str:
    """Generic send failure text pointing at the fallback mailbox."""
    return f"Failed to send message. Please try again or email us directly at {contact_address}"


def _reply(status_code: int, success: bool, message: str) -> JSONResponse:
    body = ContactResponse(success=success, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def read_submission(request: Request) -> ContactSubmission:
    """
    Parse the request body into a `ContactSubmission`.

    JSON and form bodies are supported. Anything unparseable yields an empty
    submission, which then fails the required-fields check.
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
            form = await request.form()
            data = dict(form)
        else:
            raw = await request.body()
            data = json.loads(raw) if raw else {}
    except (ValueError, UnicodeDecodeError, MultiPartException, StarletteHTTPException) as e:
        logger.warning("Unreadable contact form body: %s", e)
        data = {}
    if not isinstance(data, dict):
        data = {}
    return ContactSubmission.model_validate(data)


@router.post("/", response_model=ContactResponse)
async def send_contact_message(
    request: Request,
    settings: Settings = Depends(get_settings),
    mailer: SmtpMailer = Depends(get_mailer),
):
    """Validate a contact form submission and email it to the site mailbox.

    Request body:
        {name, email, subject, message} as JSON or form fields.

    Behavior:
        - 400 when a field is missing/empty, or the email is malformed.
        - Renders HTML + plaintext bodies, selects the SMTP preset from
          EMAIL_USER and sends to CONTACT_RECIPIENT with Reply-To = submitter.
        - 500 with a generic message on any delivery failure.

    Response:
        {'success': bool, 'message': str}
    """
    submission = await read_submission(request)

    logger.info("📧 Contact form submission received")
    logger.info("EMAIL_USER: %s", "✅ Set" if settings.EMAIL_USER else "❌ Missing")
    logger.info("EMAIL_PASSWORD: %s", "✅ Set" if settings.EMAIL_PASSWORD else "❌ Missing")

    if not submission.is_complete():
        return _reply(400, False, FIELDS_REQUIRED_MESSAGE)

    if not is_valid_email(submission.email):
        return _reply(400, False, INVALID_EMAIL_MESSAGE)

    try:
        mail = build_mail_message(
            submission,
            sender=settings.EMAIL_USER,
            recipient=settings.CONTACT_RECIPIENT,
        )
        transport = transport_from_settings(settings)
        logger.info("📤 Attempting to send email...")
        await mailer.send(transport, mail)
    except Exception as e:
        logger.error("❌ Error sending contact form email: %s", e)
        logger.error(
            "Error details: message=%s code=%s command=%s",
            e,
            getattr(e, "code", None),
            getattr(e, "command", None),
        )
        return _reply(500, False, failure_message(settings.CONTACT_RECIPIENT))

    logger.info("✅ Contact form email sent from %s", submission.email)
    return _reply(200, True, SUCCESS_MESSAGE)
