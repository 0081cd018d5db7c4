# pylint: disable=redefined-outer-name

import smtplib
import socket
import ssl
from email.errors import HeaderParseError

import pytest

from backend.api.mail_transport import select_transport
from backend.api.mailer import MailDeliveryError, SmtpMailer, build_mime_message
from backend.api.models import MailMessage


@pytest.fixture
def message() -> MailMessage:
    return MailMessage(
        sender="Jane Doe <D247Online@outlook.com>",
        to="D247Online@outlook.com",
        reply_to="jane@example.com",
        subject="Contact Form: Hi",
        html="<p>Hi</p>",
        text="Hi",
    )


@pytest.fixture
def smtp_mock(mocker):
    return mocker.patch("backend.api.mailer.smtplib.SMTP")


@pytest.fixture
def smtp_ssl_mock(mocker):
    return mocker.patch("backend.api.mailer.smtplib.SMTP_SSL")


def test_mime_message_has_both_alternatives(message):
    msg = build_mime_message(message)

    assert msg.get_content_subtype() == "alternative"
    assert msg["Reply-To"] == "jane@example.com"
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


def test_office365_delivery_uses_starttls_without_verification(smtp_mock, message):
    transport = select_transport("D247Online@outlook.com", password="pw")

    SmtpMailer().deliver(transport, message)

    smtp_mock.assert_called_once_with("smtp.office365.com", 587)
    server = smtp_mock.return_value
    context = server.starttls.call_args.kwargs["context"]
    assert context.verify_mode == ssl.CERT_NONE
    assert context.check_hostname is False
    server.login.assert_called_once_with("D247Online@outlook.com", "pw")
    send_kwargs = server.send_message.call_args.kwargs
    assert send_kwargs["from_addr"] == "D247Online@outlook.com"
    assert send_kwargs["to_addrs"] == ["D247Online@outlook.com"]


def test_generic_delivery_skips_starttls_when_not_offered(smtp_mock, message):
    smtp_mock.return_value.has_extn.return_value = False
    transport = select_transport("contact@deals247.online", password="pw", smtp_host="mail.local", smtp_port=25)

    SmtpMailer().deliver(transport, message)

    smtp_mock.assert_called_once_with("mail.local", 25)
    smtp_mock.return_value.starttls.assert_not_called()
    smtp_mock.return_value.send_message.assert_called_once()


def test_gmail_delivery_uses_implicit_tls(smtp_mock, smtp_ssl_mock, message):
    transport = select_transport("deals247@gmail.com", password="pw")

    SmtpMailer().deliver(transport, message)

    smtp_mock.assert_not_called()
    assert smtp_ssl_mock.call_args.args == ("smtp.gmail.com", 465)
    assert smtp_ssl_mock.call_args.kwargs["context"].verify_mode == ssl.CERT_REQUIRED
    smtp_ssl_mock.return_value.starttls.assert_not_called()


def test_missing_password_fails_before_connecting(smtp_mock, message):
    transport = select_transport("D247Online@outlook.com", password=None)

    with pytest.raises(MailDeliveryError) as exc_info:
        SmtpMailer().deliver(transport, message)

    assert exc_info.value.code == "EAUTH"
    smtp_mock.assert_not_called()


def test_auth_failure_reports_code_and_command(smtp_mock, message):
    smtp_mock.return_value.login.side_effect = smtplib.SMTPAuthenticationError(535, b"Authentication unsuccessful")
    transport = select_transport("D247Online@outlook.com", password="wrong")

    with pytest.raises(MailDeliveryError) as exc_info:
        SmtpMailer().deliver(transport, message)

    assert exc_info.value.code == 535
    assert exc_info.value.command == "AUTH"
    smtp_mock.return_value.send_message.assert_not_called()


def test_connection_refused_reports_conn_stage(smtp_mock, message):
    smtp_mock.side_effect = ConnectionRefusedError(111, "Connection refused")
    transport = select_transport("D247Online@outlook.com", password="pw")

    with pytest.raises(MailDeliveryError) as exc_info:
        SmtpMailer().deliver(transport, message)

    assert exc_info.value.command == "CONN"
    assert exc_info.value.code == "ECONNREFUSED"


def test_unknown_host_reports_dns_error(smtp_mock, message):
    smtp_mock.side_effect = socket.gaierror(-2, "Name or service not known")
    transport = select_transport("contact@deals247.online", password="pw")

    with pytest.raises(MailDeliveryError) as exc_info:
        SmtpMailer().deliver(transport, message)

    assert exc_info.value.code == "EDNS"


async def test_send_runs_delivery_off_the_event_loop(smtp_mock, message):
    transport = select_transport("D247Online@outlook.com", password="pw")

    await SmtpMailer().send(transport, message)

    smtp_mock.return_value.send_message.assert_called_once()


def test_message_errors_are_reported_at_data_stage(smtp_mock, message):
    smtp_mock.return_value.send_message.side_effect = HeaderParseError("header value appears to contain an embedded header")
    transport = select_transport("D247Online@outlook.com", password="pw")

    with pytest.raises(MailDeliveryError) as exc_info:
        SmtpMailer().deliver(transport, message)

    assert exc_info.value.command == "DATA"
