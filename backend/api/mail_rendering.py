"""
Rendering of the contact notification email (HTML card + plaintext).

Submitted values are embedded verbatim. They are not HTML-escaped, so markup
typed into the form ends up in the HTML body as markup.
"""

import re
from datetime import datetime
from email.utils import formataddr
from typing import Optional, Tuple

from backend.api.models import ContactSubmission, MailMessage

EMAIL_STYLE = """
          body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
          .container { max-width: 600px; margin: 0 auto; padding: 20px; }
          .header { background: linear-gradient(135deg, #9333ea 0%, #4f46e5 100%); color: white; padding: 20px; border-radius: 8px 8px 0 0; }
          .content { background: #f9f9f9; padding: 30px; border: 1px solid #e0e0e0; }
          .field { margin-bottom: 20px; }
          .label { font-weight: bold; color: #666; display: block; margin-bottom: 5px; }
          .value { background: white; padding: 10px; border-radius: 4px; border: 1px solid #e0e0e0; }
          .footer { background: #f0f0f0; padding: 15px; text-align: center; font-size: 12px; color: #666; border-radius: 0 0 8px 8px; }
"""

_LINE_BREAKS = re.compile(r"[\r\n]+")


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Local time in the en-US 'M/D/YYYY, h:mm:ss AM' form shown in the email."""
    moment = moment or datetime.now()
    hour = moment.hour % 12 or 12
    return f"{moment.month}/{moment.day}/{moment.year}, {hour}:{moment:%M:%S %p}"


def header_safe(value: str) -> str:
    """Collapse CR/LF runs into a single space so the value fits on one header line."""
    return _LINE_BREAKS.sub(" ", value)


def render_contact_email(submission: ContactSubmission, submitted_at: str) -> Tuple[str, str]:
    """
    Render the HTML and plaintext bodies for a contact submission.

    Parameters
    ----------
    submission : ContactSubmission
        Validated submission; all four fields are present.
    submitted_at : str
        Timestamp string embedded in both renderings.

    Returns
    -------
    tuple[str, str]
        (html, text)
    """
    name, email, subject, message = (
        submission.name,
        submission.email,
        submission.subject,
        submission.message,
    )
    html = f"""
      <!DOCTYPE html>
      <html>
      <head>
        <style>{EMAIL_STYLE}        </style>
      </head>
      <body>
        <div class="container">
          <div class="header">
            <h2 style="margin: 0;">New Contact Form Submission - Deals247</h2>
          </div>
          <div class="content">
            <div class="field">
              <span class="label">From:</span>
              <div class="value">{name}</div>
            </div>
            <div class="field">
              <span class="label">Email:</span>
              <div class="value"><a href="mailto:{email}">{email}</a></div>
            </div>
            <div class="field">
              <span class="label">Subject:</span>
              <div class="value">{subject}</div>
            </div>
            <div class="field">
              <span class="label">Message:</span>
              <div class="value" style="white-space: pre-wrap;">{message}</div>
            </div>
            <div class="field">
              <span class="label">Submitted:</span>
              <div class="value">{submitted_at}</div>
            </div>
          </div>
          <div class="footer">
            <p>This email was sent from the Deals247 contact form at deals247.online</p>
          </div>
        </div>
      </body>
      </html>
    """
    text = (
        f"Name: {name}\nEmail: {email}\nSubject: {subject}\n\n"
        f"Message:\n{message}\n\nSubmitted: {submitted_at}"
    )
    return html, text


def build_mail_message(
    submission: ContactSubmission,
    sender: str,
    recipient: str,
    submitted_at: Optional[str] = None,
) -> MailMessage:
    """
    Derive the outgoing `MailMessage` for a submission.

    The From header shows the submitter's name but uses the configured sender
    mailbox; replies go to the submitter through Reply-To. Line breaks in the
    name and subject are folded to spaces in the headers only; the bodies keep them.
    """
    submitted_at = submitted_at or format_timestamp()
    html, text = render_contact_email(submission, submitted_at)
    return MailMessage(
        sender=formataddr((header_safe(submission.name), sender)),
        to=recipient,
        reply_to=submission.email,
        subject=f"Contact Form: {header_safe(submission.subject)}",
        html=html,
        text=text,
    )
