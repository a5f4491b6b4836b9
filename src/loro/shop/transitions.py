"""Quotation lifecycle: which status may follow which."""

from __future__ import annotations

QUOTATION_STATUSES = (
    "draft",
    "pending_internal",
    "pending_client",
    "negotiation",
    "approved",
    "rejected",
    "sourcing",
    "packing",
    "in_fulfillment",
    "paid",
    "outfordelivery",
    "delivered",
    "returned",
    "completed",
    "cancelled",
    "pending",
    "inprogress",
)

ALLOWED_TRANSITIONS: dict[str, list[str]] = {
    "draft": ["pending_internal", "pending_client", "cancelled"],
    "pending_internal": ["pending_client", "draft", "cancelled"],
    "pending_client": ["approved", "rejected", "negotiation", "pending_internal", "cancelled"],
    "negotiation": ["pending_internal", "pending_client", "approved", "rejected", "cancelled"],
    "approved": ["sourcing", "packing", "in_fulfillment", "cancelled", "negotiation"],
    "sourcing": ["packing", "in_fulfillment", "cancelled"],
    "packing": ["in_fulfillment", "outfordelivery", "cancelled"],
    "in_fulfillment": ["paid", "packing", "outfordelivery", "cancelled"],
    "paid": ["packing", "outfordelivery", "delivered", "cancelled"],
    "outfordelivery": ["delivered", "returned", "cancelled"],
    "delivered": ["completed", "returned", "cancelled"],
    "returned": ["completed", "cancelled", "sourcing", "packing"],
    # Legacy statuses
    "pending": ["inprogress", "approved", "rejected", "cancelled", "pending_internal", "pending_client"],
    "inprogress": ["completed", "cancelled", "in_fulfillment", "sourcing", "packing", "outfordelivery", "delivered"],
    "rejected": [],
    "completed": [],
    "cancelled": [],
}

# Statuses from which a quotation may be sent to the client for review.
SENDABLE_STATUSES = ("draft", "pending_internal")


def is_valid_transition(from_status: str, to_status: str) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, [])


def validate_transition(from_status: str, to_status: str) -> None:
    """Raise ValueError naming both statuses if the move is not allowed."""
    if not is_valid_transition(from_status, to_status):
        raise ValueError(f"Invalid status transition from {from_status} to {to_status}")
