"""Typed request context built by the authentication guard."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

ACCESS_LEVELS = (
    "owner",
    "admin",
    "manager",
    "supervisor",
    "developer",
    "support",
    "user",
    "member",
    "technician",
    "client",
)

# Roles allowed to manage other users' records.
ELEVATED_ROLES = ("owner", "admin", "manager")

# Back-office roles that may maintain shared records.
STAFF_ROLES = ("admin", "manager", "support", "developer", "owner")

# Everyone who works inside an organisation (excludes clients and members).
WORKFORCE_ROLES = (*STAFF_ROLES, "user", "technician")


@dataclass
class RequestContext:
    """Who is calling, and in which tenant scope."""

    user_id: int
    role: str
    organisation_id: int | None
    branch_id: int | None = None
    license_id: str | None = None
    license_plan: str | None = None
    claims: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> RequestContext:
        org = claims.get("org")
        branch = claims.get("branch")
        return cls(
            user_id=int(claims["sub"]),
            role=str(claims.get("role") or ""),
            organisation_id=int(org) if org is not None else None,
            branch_id=int(branch) if branch is not None else None,
            license_id=claims.get("license_id"),
            license_plan=claims.get("license_plan"),
            claims=claims,
        )

    @property
    def is_elevated(self) -> bool:
        return self.role.lower() in ELEVATED_ROLES
