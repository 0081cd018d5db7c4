"""
SMTP transport presets and provider selection.

Functions
---------
select_transport(sender, password, smtp_host, smtp_port) -> MailTransportConfig
    Pick one of three presets by substring match on the sender address.
transport_from_settings(settings) -> MailTransportConfig
    Same, reading the values from `Settings`.

Presets
-------
GMAIL      sender contains "@gmail.com"                  smtp.gmail.com:465, implicit TLS
OFFICE365  sender contains "@outlook.com"/"@hotmail.com" smtp.office365.com:587, STARTTLS required
GENERIC    anything else                                 SMTP_HOST:SMTP_PORT (smtp.gmail.com:587)

The Office365 and generic presets do not verify the server certificate.
Rules are checked in that order and the first match wins.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from backend.database.config.config import Settings

DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 587


class MailProvider(str, Enum):
    """Closed set of transport presets."""

    GMAIL = "gmail"
    OFFICE365 = "office365"
    GENERIC = "generic"


class MailTransportConfig(BaseModel):
    """
    Connection parameters for one outgoing email. Built fresh for every send.
    """

    model_config = ConfigDict(frozen=True)

    provider: MailProvider
    host: str
    port: int
    secure: bool = False
    """Implicit TLS from the first byte (SMTPS)."""
    require_tls: bool = False
    """Abort unless the server accepts STARTTLS."""
    verify_certificates: bool = True
    """When False, any server certificate is accepted."""
    username: str
    password: Optional[str] = None


def select_transport(
    sender: str,
    password: Optional[str] = None,
    smtp_host: Optional[str] = None,
    smtp_port: Optional[int] = None,
) -> MailTransportConfig:
    """
    Choose the transport preset for `sender`.

    Parameters
    ----------
    sender : str
        Outbound sender address; also used as the SMTP login.
    password : str | None
        SMTP password for `sender`.
    smtp_host, smtp_port
        Only consulted by the generic preset.
    """
    if "@gmail.com" in sender:
        return MailTransportConfig(
            provider=MailProvider.GMAIL,
            host="smtp.gmail.com",
            port=465,
            secure=True,
            username=sender,
            password=password,
        )
    if "@outlook.com" in sender or "@hotmail.com" in sender:
        return MailTransportConfig(
            provider=MailProvider.OFFICE365,
            host="smtp.office365.com",
            port=587,
            secure=False,
            require_tls=True,
            verify_certificates=False,
            username=sender,
            password=password,
        )
    return MailTransportConfig(
        provider=MailProvider.GENERIC,
        host=smtp_host or DEFAULT_SMTP_HOST,
        port=smtp_port or DEFAULT_SMTP_PORT,
        secure=False,
        verify_certificates=False,
        username=sender,
        password=password,
    )


def transport_from_settings(settings: Settings) -> MailTransportConfig:
    """Select the transport for the configured EMAIL_USER."""
    return select_transport(
        sender=settings.EMAIL_USER,
        password=settings.EMAIL_PASSWORD,
        smtp_host=settings.SMTP_HOST,
        smtp_port=settings.SMTP_PORT,
    )
