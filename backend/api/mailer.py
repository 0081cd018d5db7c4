"""
SMTP delivery for outgoing notification emails.

`SmtpMailer.send` builds a multipart/alternative message (plaintext + HTML),
opens a connection according to a `MailTransportConfig` and submits it with
`smtplib`. The blocking SMTP dialogue runs in the threadpool, so the request
handler awaits a single suspend point.

Failures are re-raised as `MailDeliveryError`, which records the SMTP stage
that failed (``CONN``, ``EHLO``, ``STARTTLS``, ``AUTH``, ``DATA``) and a code
(the SMTP reply code, or the socket error name). No retries.
"""

import errno
import smtplib
import socket
import ssl
from email.errors import MessageError
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Union

from fastapi.concurrency import run_in_threadpool

from backend.api.mail_transport import MailTransportConfig
from backend.api.models import MailMessage


class MailDeliveryError(Exception):
    """
    Raised when a message could not be handed to the SMTP server.

    Attributes
    ----------
    code : int | str | None
        SMTP reply code, socket error name (e.g. ``ECONNREFUSED``) or ``EAUTH``.
    command : str | None
        SMTP stage in progress when the failure happened.
    """

    def __init__(self, message: str, code: Union[int, str, None] = None, command: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.command = command


def _tls_context(transport: MailTransportConfig) -> ssl.SSLContext:
    context = ssl.create_default_context()
    if not transport.verify_certificates:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def build_mime_message(message: MailMessage) -> MIMEMultipart:
    """Assemble the multipart/alternative MIME document for `message`."""
    msg = MIMEMultipart("alternative")
    msg["Subject"] = message.subject
    msg["From"] = message.sender
    msg["To"] = message.to
    msg["Reply-To"] = message.reply_to
    msg.attach(MIMEText(message.text, "plain", "utf-8"))
    msg.attach(MIMEText(message.html, "html", "utf-8"))
    return msg


def _error_code(exc: Exception) -> Union[int, str, None]:
    if isinstance(exc, smtplib.SMTPResponseException):
        return exc.smtp_code
    if isinstance(exc, smtplib.SMTPRecipientsRefused) and exc.recipients:
        return next(iter(exc.recipients.values()))[0]
    if isinstance(exc, socket.gaierror):
        return "EDNS"
    if isinstance(exc, socket.timeout):
        return "ETIMEDOUT"
    if isinstance(exc, OSError) and exc.errno:
        return errno.errorcode.get(exc.errno, exc.errno)
    return None


class SmtpMailer:
    """
    Sends `MailMessage` objects through the SMTP server described by a transport.
    """

    def deliver(self, transport: MailTransportConfig, message: MailMessage) -> None:
        """
        Blocking SMTP delivery.

        Raises
        ------
        MailDeliveryError
            On any connection, TLS, authentication or submission failure.
        """
        if not transport.password:
            raise MailDeliveryError('Missing credentials for "PLAIN"', code="EAUTH", command="API")

        msg = build_mime_message(message)
        context = _tls_context(transport)
        command = "CONN"
        try:
            if transport.secure:
                server = smtplib.SMTP_SSL(transport.host, transport.port, context=context)
            else:
                server = smtplib.SMTP(transport.host, transport.port)
            with server:
                command = "EHLO"
                server.ehlo()
                if not transport.secure and (transport.require_tls or server.has_extn("starttls")):
                    command = "STARTTLS"
                    server.starttls(context=context)
                    server.ehlo()
                command = "AUTH"
                server.login(transport.username, transport.password)
                command = "DATA"
                server.send_message(msg, from_addr=transport.username, to_addrs=[message.to])
        except (smtplib.SMTPException, MessageError, OSError) as e:
            raise MailDeliveryError(str(e) or e.__class__.__name__, code=_error_code(e), command=command) from e

    async def send(self, transport: MailTransportConfig, message: MailMessage) -> None:
        """Deliver `message` without blocking the event loop."""
        await run_in_threadpool(self.deliver, transport, message)


def get_mailer() -> SmtpMailer:
    """FastAPI dependency providing the mail sender."""
    return SmtpMailer()
