"""Enum definitions for meters, bills and payments."""

from enum import Enum


class MeterStatus(str, Enum):
    """Provisioning status of a meter. Only ACTIVE meters accept readings."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    DECOMMISSIONED = "Decommissioned"


class MeterAvailability(str, Enum):
    """Outcome of a meter registry lookup."""

    VALID = "valid"
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"


class BillStatus(str, Enum):
    """Bill lifecycle: PENDING on creation, PAID is terminal."""

    PENDING = "Pending"
    PAID = "Paid"


class PaymentMethod(str, Enum):
    """Means by which a bill was settled."""

    CASH = "Cash"
    CARD = "Card"
    TRANSFER = "Transfer"
    ONLINE = "Online"
