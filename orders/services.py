"""Order services: placement, status machine, payment and idempotency.

`place_order` is the only multi-statement write in the storefront: order,
lines, stock decrements and the cart clear commit together or not at all.
"""

import hashlib
import json
import logging
import secrets
from collections import OrderedDict
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable, Optional, Tuple

from cart.services import clear_cart
from catalog.models import Product, ProductVariant, unit_price_for
from common.choices import OrderStatus, PaymentMethod, PaymentStatus
from common.exceptions import (
    InvalidOrderInput,
    InvalidStatusTransition,
    NotFound,
    OrderPlacementFailed,
    PaymentFailed,
)
from customer.selectors import get_address
from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone
from inventory.services import decrement_stock, restock
from payments.base import to_minor_units
from payments.providers import get_provider, get_provider_class

from .emails import send_order_paid_email
from .models import IdempotencyKey, Order, OrderItem

logger = logging.getLogger("storefront.orders")

MONEY_TOLERANCE = Decimal("0.01")
ORDER_NUMBER_ATTEMPTS = 5

ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}
CUSTOMER_CANCELLABLE = {OrderStatus.PENDING, OrderStatus.CONFIRMED}
ADMIN_CANCELLABLE = CUSTOMER_CANCELLABLE | {OrderStatus.PROCESSING}


@dataclass(frozen=True)
class OrderLine:
    product_id: int
    quantity: int
    variant_id: Optional[int] = None


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal


def generate_order_number(now=None) -> str:
    """Return `ORD-<year>-<12 uppercase hex>` built from 48 random bits."""

    year = (now or timezone.now()).year
    return f"ORD-{year}-{secrets.token_hex(6).upper()}"


def _to_money(value, name: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidOrderInput(f"Invalid {name}.")
    if not amount.is_finite() or amount < 0:
        raise InvalidOrderInput(f"{name.capitalize()} must be a non-negative amount.")
    return amount.quantize(Decimal("0.01"))


def _normalize_lines(items: Iterable) -> list[OrderLine]:
    lines = []
    for raw in items or []:
        line = raw if isinstance(raw, OrderLine) else OrderLine(
            product_id=raw.get("product_id"),
            quantity=raw.get("quantity"),
            variant_id=raw.get("variant_id"),
        )
        if line.product_id is None:
            raise InvalidOrderInput("Each item needs a product_id.")
        try:
            quantity = int(line.quantity)
            product_id = int(line.product_id)
            variant_id = None if line.variant_id is None else int(line.variant_id)
        except (TypeError, ValueError):
            raise InvalidOrderInput("product_id, variant_id and quantity must be integers.")
        if quantity < 1:
            raise InvalidOrderInput("Quantity must be at least 1.")
        lines.append(OrderLine(product_id=product_id, quantity=quantity, variant_id=variant_id))
    if not lines:
        raise InvalidOrderInput("Order must contain at least one item.")
    keys = [(line.product_id, line.variant_id) for line in lines]
    if len(set(keys)) != len(keys):
        raise InvalidOrderInput("Duplicate product lines are not allowed.")
    return lines


def _normalize_totals(totals) -> OrderTotals:
    if isinstance(totals, OrderTotals):
        raw = {"subtotal": totals.subtotal, "tax": totals.tax, "shipping": totals.shipping, "total": totals.total}
    else:
        raw = dict(totals or {})
    parsed = OrderTotals(
        subtotal=_to_money(raw.get("subtotal"), "subtotal"),
        tax=_to_money(raw.get("tax", "0"), "tax"),
        shipping=_to_money(raw.get("shipping", "0"), "shipping"),
        total=_to_money(raw.get("total"), "total"),
    )
    if abs(parsed.total - (parsed.subtotal + parsed.tax + parsed.shipping)) > MONEY_TOLERANCE:
        raise InvalidOrderInput("Total must equal subtotal + tax + shipping.")
    return parsed


def _resolve_shipping_address(*, user, shipping_address, shipping_address_id) -> dict:
    if shipping_address_id is not None:
        address = get_address(user_id=user.id, address_id=shipping_address_id)
        if address is None:
            raise NotFound("Address not found")
        return address.snapshot()
    if not shipping_address:
        raise InvalidOrderInput("A shipping address is required.")
    return dict(shipping_address)


def place_order(
    *,
    user,
    items,
    payment_method: str,
    totals,
    shipping_address: Optional[dict] = None,
    shipping_address_id: Optional[int] = None,
    notes: str = "",
) -> Order:
    """Turn the submitted lines into a pending order.

    Validation errors raise before anything is written. Inside the
    transaction the product rows are locked in id order, prices are read
    live, each product's stock is decremented with a guarded update and the
    user's cart is cleared. Any database failure there rolls everything
    back and surfaces as `OrderPlacementFailed`.
    """

    lines = _normalize_lines(items)
    parsed_totals = _normalize_totals(totals)
    if payment_method not in PaymentMethod.values:
        raise InvalidOrderInput("Unsupported payment method.")
    address = _resolve_shipping_address(
        user=user, shipping_address=shipping_address, shipping_address_id=shipping_address_id
    )

    try:
        order = _place_order_atomic(
            user=user,
            lines=lines,
            totals=parsed_totals,
            payment_method=payment_method,
            address=address,
            notes=notes,
        )
    except DatabaseError as exc:
        logger.exception(
            "order_placement_failed",
            extra={"event": "order_placement_failed", "user_id": user.id, "error": str(exc)},
        )
        raise OrderPlacementFailed() from exc

    logger.info(
        "order_placed",
        extra={
            "event": "order_placed",
            "order_id": order.id,
            "order_number": order.number,
            "user_id": user.id,
            "total": str(order.total),
            "lines": len(lines),
            "payment_method": payment_method,
        },
    )
    return order


@transaction.atomic
def _place_order_atomic(*, user, lines, totals: OrderTotals, payment_method, address, notes) -> Order:
    product_ids = sorted({line.product_id for line in lines})
    products = {
        p.id: p
        for p in Product.objects.select_for_update().filter(pk__in=product_ids, is_active=True).order_by("id")
    }
    for pid in product_ids:
        if pid not in products:
            raise NotFound(f"Product {pid} not found")

    variant_ids = [line.variant_id for line in lines if line.variant_id is not None]
    variants = {v.id: v for v in ProductVariant.objects.filter(pk__in=variant_ids, is_active=True)}

    priced = []
    for line in lines:
        product = products[line.product_id]
        variant = None
        if line.variant_id is not None:
            variant = variants.get(line.variant_id)
            if variant is None or variant.product_id != product.id:
                raise NotFound(f"Variant {line.variant_id} not found")
        priced.append((line, product, variant, unit_price_for(product, variant)))

    live_subtotal = sum((price * line.quantity for line, _, _, price in priced), Decimal("0.00"))
    if abs(live_subtotal - totals.subtotal) > MONEY_TOLERANCE:
        raise InvalidOrderInput("Subtotal does not match current prices.")

    order = _create_order(
        user=user,
        totals=totals,
        payment_method=payment_method,
        provider=get_provider_class(payment_method).name,
        address=address,
        notes=notes,
    )
    OrderItem.objects.bulk_create(
        [
            OrderItem(
                order=order,
                product=product,
                variant=variant,
                product_name=product.name,
                variant_sku=getattr(variant, "sku", ""),
                quantity=line.quantity,
                price=price,
            )
            for line, product, variant, price in priced
        ]
    )

    per_product = OrderedDict()
    for line in sorted(lines, key=lambda x: x.product_id):
        per_product[line.product_id] = per_product.get(line.product_id, 0) + line.quantity
    for product_id, quantity in per_product.items():
        decrement_stock(product_id=product_id, quantity=quantity, reference=order.number, reason="order")

    clear_cart(user=user)
    return order


def _create_order(*, user, totals: OrderTotals, payment_method, provider, address, notes) -> Order:
    for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
        number = generate_order_number()
        try:
            with transaction.atomic():
                return Order.objects.create(
                    user=user,
                    number=number,
                    email=getattr(user, "email", "") or "",
                    subtotal=totals.subtotal,
                    tax=totals.tax,
                    shipping=totals.shipping,
                    total=totals.total,
                    payment_method=payment_method,
                    payment_provider=provider,
                    shipping_address=address,
                    notes=notes or "",
                )
        except IntegrityError:
            if not Order.objects.filter(number=number).exists():
                raise
            logger.warning("order_number_collision", extra={"event": "order_number_collision", "attempt": attempt})
    raise OrderPlacementFailed("Could not allocate an order number.")


def _log_status_change(order: Order, prev: str, actor=None) -> None:
    logger.info(
        "order_status_changed",
        extra={
            "event": "order_status_changed",
            "order_id": order.id,
            "user_id": order.user_id,
            "actor_id": getattr(actor, "id", None),
            "status_from": prev,
            "status_to": order.status,
        },
    )


def _restock_order(order: Order) -> None:
    for item in order.items.all().order_by("product_id"):
        restock(product_id=item.product_id, quantity=item.quantity, reference=order.number, reason="order_cancelled")


@transaction.atomic
def transition_status(*, order: Order, new_status: str, actor=None) -> Order:
    """Move an order one step along its lifecycle.

    pending -> confirmed -> processing -> shipped -> delivered, with
    cancelled reachable from pending, confirmed and processing. Anything else
    raises `InvalidStatusTransition`.
    """

    order = Order.objects.select_for_update().get(pk=order.pk)
    if new_status not in OrderStatus.values:
        raise InvalidStatusTransition(f"Unknown status '{new_status}'.")
    if new_status not in ALLOWED_TRANSITIONS[order.status]:
        raise InvalidStatusTransition(f"Cannot move order from {order.status} to {new_status}.")
    prev = order.status
    if new_status == OrderStatus.CANCELLED and getattr(settings, "ORDERS_RESTOCK_ON_CANCEL", True):
        _restock_order(order)
    order.status = new_status
    order.save(update_fields=["status", "updated_at"])
    _log_status_change(order, prev, actor)
    return order


@transaction.atomic
def cancel_order(*, order: Order, by_admin: bool = False, actor=None) -> Order:
    """Cancel an order.

    Customers may cancel while pending or confirmed; admins also while
    processing. Cancelling an already-cancelled order is a no-op.
    """

    order = Order.objects.select_for_update().get(pk=order.pk)
    if order.status == OrderStatus.CANCELLED:
        return order
    allowed = ADMIN_CANCELLABLE if by_admin else CUSTOMER_CANCELLABLE
    if order.status not in allowed:
        raise InvalidStatusTransition(f"Order cannot be cancelled while {order.status}.")
    return transition_status(order=order, new_status=OrderStatus.CANCELLED, actor=actor)



def _reference_in_use(*, order: Order, reference: str, provider: str) -> bool:
    return (
        Order.objects.filter(payment_provider=provider, payment_reference=reference).exclude(pk=order.pk).exists()
    )


@transaction.atomic
def mark_payment(*, order: Order, success: bool, reference: str = "", provider: str = "") -> Order:
    """Record a payment outcome.

    pending -> paid | failed. Repeating the recorded outcome is a no-op; any
    other change raises `InvalidStatusTransition`.
    A provider reference can settle only one order; reuse raises `PaymentFailed`.
    """

    order = Order.objects.select_for_update().get(pk=order.pk)
    target = PaymentStatus.PAID if success else PaymentStatus.FAILED
    if order.payment_status == target:
        return order
    if order.payment_status != PaymentStatus.PENDING:
        raise InvalidStatusTransition(f"Payment already {order.payment_status}.")
    if reference and _reference_in_use(order=order, reference=reference, provider=provider or order.payment_provider):
        raise PaymentFailed("Payment reference already used by another order.")

    prev = order.payment_status
    order.payment_status = target
    fields = ["payment_status", "updated_at"]
    if reference:
        order.payment_reference = reference
        fields.append("payment_reference")
    if provider:
        order.payment_provider = provider
        fields.append("payment_provider")
    try:
        order.save(update_fields=fields)
    except IntegrityError:
        # Lost a race with another order recording the same reference.
        raise PaymentFailed("Payment reference already used by another order.")
    logger.info(
        "order_payment_changed",
        extra={
            "event": "order_payment_changed",
            "order_id": order.id,
            "user_id": order.user_id,
            "payment_from": prev,
            "payment_to": order.payment_status,
            "provider": order.payment_provider,
        },
    )
    if target == PaymentStatus.PAID:
        transaction.on_commit(lambda: send_order_paid_email(order))
    return order


def _check_captured_amount(*, order: Order, result) -> None:
    currency = settings.PAYMENT_CURRENCY.lower()
    expected = to_minor_units(order.total, currency)
    if result.amount != expected or (result.currency or "").lower() != currency:
        logger.warning(
            "order_capture_mismatch",
            extra={
                "event": "order_capture_mismatch",
                "order_id": order.id,
                "expected_amount": expected,
                "captured_amount": result.amount,
                "expected_currency": currency,
                "captured_currency": result.currency,
            },
        )
        raise PaymentFailed("Captured payment does not match the order total.")


def capture_payment(*, order: Order, provider_order_id: str) -> Order:
    """Capture funds for an order through its payment provider.

    The provider call happens outside any database transaction.

    - A declined payment marks the order `failed` and raises `PaymentFailed`.
    - A capture whose amount or currency differs from the order, or whose
      reference already paid another order, raises `PaymentFailed` and leaves
      the payment pending.
    - `PaymentProviderError` (outage, missing credentials) propagates as a 502
      and leaves the payment pending so the customer can retry.
    """

    if order.payment_status == PaymentStatus.PAID:
        return order
    if order.payment_status == PaymentStatus.FAILED:
        raise InvalidStatusTransition("Payment already failed.")
    if order.status == OrderStatus.CANCELLED:
        raise InvalidStatusTransition("Cannot pay a cancelled order.")

    provider = get_provider(order.payment_method)
    offline = order.payment_method == PaymentMethod.COD
    if not offline and not (provider_order_id or "").strip():
        raise InvalidOrderInput("provider_order_id is required for this payment method.")

    result = provider.capture_order(provider_order_id)
    if not result.success:
        if result.status.startswith("http_"):
            # The provider did not recognise the reference; nothing was charged.
            raise PaymentFailed(f"Payment could not be found ({result.status}).")
        mark_payment(order=order, success=False, reference=result.transaction_id or "", provider=provider.name)
        raise PaymentFailed(f"Payment was not completed ({result.status or 'declined'}).")
    if not offline:
        _check_captured_amount(order=order, result=result)
    return mark_payment(order=order, success=True, reference=result.transaction_id or "", provider=provider.name)


def with_idempotency(
    *,
    key: str,
    user,
    path: str,
    method: str,
    handler: Callable[[], Tuple[dict, int]],
    request_hash: Optional[str] = None,
) -> Tuple[dict, int]:
    """Run handler idempotently and persist its response for the given key and scope.

    - Scope is derived from the caller: for authenticated users, "user:<id>"; otherwise "anon".
    - If a record exists and the stored `request_hash` differs from the provided one, returns 409.
    - If a record exists but response is not yet stored, returns 409 to indicate in-progress.
    - If the handler raises, the key is released so the request can be retried.
    """

    scope = f"user:{getattr(user, 'id', None)}" if getattr(user, "id", None) else "anon"
    method = str(method).upper()
    path = str(path)

    try:
        with transaction.atomic():
            idem = IdempotencyKey.objects.create(
                key=key,
                user=user if getattr(user, "id", None) else None,
                scope=scope,
                path=path,
                method=method,
                request_hash=request_hash,
                expires_at=timezone.now() + timedelta(hours=24),
            )
    except IntegrityError:
        idem = IdempotencyKey.objects.get(key=key, scope=scope, path=path, method=method)
        # Guard against key reuse with different fingerprints
        if idem.request_hash and request_hash and idem.request_hash != request_hash:
            return {"detail": "Idempotency key reused with different request payload", "code": "conflict"}, 409
        if idem.response_json is not None and idem.response_code is not None:
            return idem.response_json, int(idem.response_code)
        return {"detail": "Request in progress", "code": "conflict"}, 409

    try:
        body, code = handler()
    except Exception:
        IdempotencyKey.objects.filter(id=idem.id).delete()
        raise

    safe_body = json.loads(json.dumps(body, default=str))
    IdempotencyKey.objects.filter(id=idem.id).update(response_json=safe_body, response_code=code)
    return body, code


def compute_request_hash(data: Optional[dict]) -> Optional[str]:
    """Compute a canonical SHA256 hash of the request body.

    Uses sorted keys JSON representation to stabilize the hash across equivalent payloads.
    Returns None when data is falsy.
    """
    if not data:
        return None
    payload = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
