"""
API Package — Contact Router • Models • Mail Transport • Rendering • Delivery
============================================================================

Mission
-------
This package defines the backend's HTTP interface for the contact form and the
small mail stack behind it: request/response contracts, SMTP provider presets,
body rendering and delivery.

Contents
--------
- contact
    FastAPI router with a single endpoint:
      • POST / (mounted at /api/contact): validate the submission, render the
        email, pick the SMTP preset, send, answer {success, message}

- models
    Pydantic data contracts:
      • ContactSubmission (lenient parse of the form body)
      • ContactResponse ({success, message})
      • MailMessage (from/to/reply-to/subject/html/text of one outgoing email)

- mail_transport
    Provider presets selected by substring match on EMAIL_USER:
      • MailProvider enum: GMAIL, OFFICE365, GENERIC
      • select_transport(...) / transport_from_settings(settings) -> MailTransportConfig

- mail_rendering
    • render_contact_email(submission, submitted_at) -> (html, text)
    • build_mail_message(submission, sender, recipient) -> MailMessage

- mailer
    smtplib delivery run in the threadpool:
      • SmtpMailer.send(transport, message)
      • MailDeliveryError(code, command) on failure

Operational Notes
-----------------
- A transport is built for every send; nothing is cached between requests.
- Security: never log EMAIL_PASSWORD; only its set/missing status is logged.
- User-supplied fields are embedded in the HTML body without escaping.
"""
