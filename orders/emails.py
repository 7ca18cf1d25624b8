"""Email utilities for the orders app.

Uses Django's email backend, with links composed from FRONTEND_URL.
"""

import logging
from smtplib import SMTPException

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger("storefront.orders")


def send_order_paid_email(order) -> bool:
    """Send a payment confirmation email to the order's email address.

    Includes a link to view the order on the frontend using `FRONTEND_URL`.
    No-ops if no email is present. Delivery failures are logged, never raised.
    """
    to_email = order.email or getattr(order.user, "email", None)
    if not to_email:
        return False

    subject = f"Your order {order.number} is confirmed"
    frontend = getattr(settings, "FRONTEND_URL", "")
    order_url = f"{frontend.rstrip('/')}/orders/{order.id}" if frontend else order.number

    lines = [f"- {item.product_name} x{item.quantity}: {item.line_total}" for item in order.items.all()]
    body = (
        "Thank you for your purchase!\n\n"
        f"Order: {order.number}\n"
        f"Status: {order.status}\n"
        f"Payment: {order.payment_status}\n\n"
        + "\n".join(lines)
        + f"\n\nTotal: {order.total}\n\n"
        f"You can view your order here: {order_url}\n"
    )

    try:
        send_mail(subject, body, getattr(settings, "DEFAULT_FROM_EMAIL", None), [to_email])
    except (SMTPException, OSError) as exc:
        logger.warning(
            "order_email_failed",
            extra={"event": "order_email_failed", "order_id": order.id, "error": str(exc)},
        )
        return False
    logger.info("order_email_sent", extra={"event": "order_email_sent", "order_id": order.id})
    return True
