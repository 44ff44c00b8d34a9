"""Shared order and payment status constants and helpers."""

STATUS_PENDING = "pending"
STATUS_PACKING = "packing"
STATUS_SENT = "sent"
# Held and returned: the parcel came back undelivered.
STATUS_HNR = "hnr"

ORDER_STATUSES = (STATUS_PENDING, STATUS_PACKING, STATUS_SENT, STATUS_HNR)

PAYMENT_NONE = "none"
PAYMENT_HALF = "half"
PAYMENT_FULL = "full"

PAYMENT_STATUSES = (PAYMENT_NONE, PAYMENT_HALF, PAYMENT_FULL)

FILTER_ALL = "all"

# Only delivered orders count towards revenue and profit.
REPORTABLE_STATUS = STATUS_SENT


def normalize_status(value: str | None) -> str:
    """Return a lowercase order status, rejecting unknown values."""

    status = (value or "").strip().lower()
    if status not in ORDER_STATUSES:
        raise ValueError(f"status must be one of {', '.join(ORDER_STATUSES)}")
    return status


def normalize_payment(value: str | None) -> str:
    """Return a lowercase payment status, rejecting unknown values."""

    payment = (value or "").strip().lower()
    if payment not in PAYMENT_STATUSES:
        raise ValueError(f"payment_status must be one of {', '.join(PAYMENT_STATUSES)}")
    return payment


__all__ = [
    "FILTER_ALL",
    "ORDER_STATUSES",
    "PAYMENT_FULL",
    "PAYMENT_HALF",
    "PAYMENT_NONE",
    "PAYMENT_STATUSES",
    "REPORTABLE_STATUS",
    "STATUS_HNR",
    "STATUS_PACKING",
    "STATUS_PENDING",
    "STATUS_SENT",
    "normalize_payment",
    "normalize_status",
]
