"""notifications/services/channels.py

One sender per delivery method. Each returns `(message_id, error)`; exactly
one of the two is None. Senders never raise.

* email: Django's configured email backend (EMAIL_BACKEND / EMAIL_HOST / ...)
* sms, push: no provider is wired up; the message is logged and counted as sent
* in_app: nothing to transport, the row itself is the notification
"""

from __future__ import annotations

import logging
from email.utils import make_msgid

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.utils.html import format_html, linebreaks

from ..enums import DeliveryMethod

logger = logging.getLogger(__name__)


def _render_html(notification) -> str:
    return format_html(
        "<h2>{}</h2>{}",
        notification.title,
        linebreaks(notification.message or ""),
    )


def send_via_email(notification) -> tuple[str | None, str | None]:
    to = (getattr(notification.user, "email", "") or "").strip()
    if not to:
        return None, "User has no email address"
    try:
        msg = EmailMultiAlternatives(
            subject=notification.title,
            # Ensure we always have a plain-text body (some SMTP relays dislike empty text).
            body=(notification.message or "").strip() or " ",
            from_email=getattr(settings, "DEFAULT_FROM_EMAIL", ""),
            to=[to],
        )
        msg.attach_alternative(_render_html(notification), "text/html")

        message_id = make_msgid()
        msg.extra_headers = {**(msg.extra_headers or {}), "Message-ID": message_id}

        msg.send(fail_silently=False)
        return message_id, None
    except Exception as e:
        return None, str(e)


def send_via_sms(notification) -> tuple[str | None, str | None]:
    phone = (getattr(notification.user, "phone", "") or "").strip()
    if not phone:
        return None, "User has no phone number"
    logger.info("SMS placeholder: to=%s title=%r", phone, notification.title)
    return f"sms-{notification.id}", None


def send_via_push(notification) -> tuple[str | None, str | None]:
    logger.info("Push placeholder: user=%s title=%r", notification.user_id, notification.title)
    return f"push-{notification.id}", None


def send_in_app(notification) -> tuple[str | None, str | None]:
    return None, None


SENDERS = {
    DeliveryMethod.EMAIL: send_via_email,
    DeliveryMethod.SMS: send_via_sms,
    DeliveryMethod.PUSH: send_via_push,
    DeliveryMethod.IN_APP: send_in_app,
}
