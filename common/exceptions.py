"""Domain error taxonomy shared by services and the HTTP layer.

Services raise these; views let them propagate and
`storefront_exception_handler` renders them as `{"detail", "code"}` with the
status code carried by the exception class.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger("storefront.errors")


class StorefrontError(Exception):
    """Base class for domain errors surfaced over HTTP."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    code = "error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(StorefrontError):
    default_detail = "Invalid input."
    code = "invalid"


class InvalidQuantity(ValidationError):
    default_detail = "Quantity must be at least 1."
    code = "invalid_quantity"


class InvalidOrderInput(ValidationError):
    default_detail = "Invalid order input."
    code = "invalid_order"


class InvalidStatusTransition(ValidationError):
    default_detail = "Status transition not allowed."
    code = "invalid_transition"


class InsufficientStock(StorefrontError):
    default_detail = "Insufficient stock."
    code = "insufficient_stock"

    def __init__(self, detail: str | None = None, *, product_id: int | None = None):
        self.product_id = product_id
        super().__init__(detail)


class NotFound(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    code = "not_found"


class PaymentFailed(StorefrontError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = "Payment failed."
    code = "payment_failed"


class PaymentProviderError(StorefrontError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Payment provider unavailable."
    code = "payment_provider_error"


class OrderPlacementFailed(StorefrontError):
    """Any downstream step of order placement failed; nothing was persisted."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Unable to place order."
    code = "order_placement_failed"


def storefront_exception_handler(exc, context):
    """DRF exception handler that understands `StorefrontError`.

    Everything else falls through to DRF's default handler.
    """

    if isinstance(exc, StorefrontError):
        view = context.get("view")
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            "request_failed",
            extra={
                "event": "request_failed",
                "code": exc.code,
                "status": exc.status_code,
                "view": view.__class__.__name__ if view is not None else None,
            },
        )
        return Response({"detail": exc.detail, "code": exc.code}, status=exc.status_code)
    return exception_handler(exc, context)
