"""Static plan → feature map used by the feature guard.

Plans are cumulative: each tier includes every feature of the tier below.
Module routers are gated on ``<module>.access``, which only the enterprise
plan grants.
"""

from __future__ import annotations

PLANS = ("starter", "professional", "business", "enterprise")

ENTERPRISE_ONLY_FEATURES: frozenset[str] = frozenset({
    "approvals.access",
    "assets.access",
    "claims.access",
    "clients.access",
    "communication.access",
    "docs.access",
    "journal.access",
    "leads.access",
    "leave.access",
    "licensing.access",
    "news.access",
    "notifications.access",
    "organisation.access",
    "products.access",
    "reports.access",
    "resellers.access",
    "rewards.access",
    "shop.access",
    "tasks.access",
    "tracking.access",
    "users.access",
    "warnings.access",
    "payslips.access",
    "client.portal.access",
})

STARTER_FEATURES: frozenset[str] = frozenset({
    "leads.basic",
    "clients.basic",
    "tasks.basic",
    "shop.basic",
    "quotations.basic",
    "inventory.single_location",
    "reports.basic",
    "mobile.basic",
    "support.email",
    "platform.hr",
    "platform.sales",
    "platform.crm",
    "platform.all",
    "assets.view",
    "claims.view",
    "journal.view",
    "products.view",
    "news.view",
    "notifications.basic",
    "organisation.basic",
    "users.basic",
    "payslips.basic",
    "approvals.basic",
})

PROFESSIONAL_FEATURES: frozenset[str] = STARTER_FEATURES | {
    "leads.advanced",
    "clients.advanced",
    "tasks.advanced",
    "claims.management",
    "competitor.analysis",
    "tracking.mapping",
    "geofencing.basic",
    "route.optimization",
    "shop.advanced",
    "quotations.advanced",
    "inventory.multi_location",
    "reports.advanced",
    "mobile.offline",
    "support.priority",
    "assets.advanced",
    "journal.advanced",
    "products.advanced",
    "communication.advanced",
    "notifications.advanced",
    "organisation.advanced",
    "users.advanced",
    "payslips.advanced",
    "approvals.advanced",
}

BUSINESS_FEATURES: frozenset[str] = PROFESSIONAL_FEATURES | {
    "tracking.unlimited",
    "geofencing.unlimited",
    "route.advanced_optimization",
    "branches.multi_management",
    "assets.tracking",
    "rewards.gamification",
    "feedback.advanced",
    "news.announcements",
    "resellers.management",
    "api.access",
    "integrations.custom",
    "support.technical_priority",
    "support.dedicated_manager",
    "branding.white_label",
    "analytics.predictive",
    "claims.premium",
    "clients.premium",
    "communication.premium",
    "docs.premium",
    "journal.premium",
    "leads.premium",
    "leads.access",
    "products.premium",
    "reports.premium",
    "shop.premium",
    "tasks.premium",
    "users.premium",
    "payslips.premium",
    "approvals.premium",
}

ENTERPRISE_FEATURES: frozenset[str] = BUSINESS_FEATURES | ENTERPRISE_ONLY_FEATURES | {
    "assets.enterprise",
    "claims.enterprise",
    "clients.enterprise",
    "communication.enterprise",
    "docs.enterprise",
    "journal.enterprise",
    "leads.enterprise",
    "licensing.manage",
    "news.enterprise",
    "notifications.enterprise",
    "organisation.enterprise",
    "products.enterprise",
    "reports.enterprise",
    "resellers.enterprise",
    "rewards.enterprise",
    "shop.enterprise",
    "tasks.enterprise",
    "tracking.enterprise",
    "users.enterprise",
    "payslips.enterprise",
    "approvals.enterprise",
}

PLAN_FEATURES: dict[str, frozenset[str]] = {
    "starter": STARTER_FEATURES,
    "professional": PROFESSIONAL_FEATURES,
    "business": BUSINESS_FEATURES,
    "enterprise": ENTERPRISE_FEATURES,
}


def module_feature(module: str) -> str:
    """Feature name gating a whole module router."""
    return f"{module}.access"


def missing_features(plan: str | None, required: tuple[str, ...] | list[str]) -> list[str]:
    """Return the required features the plan does not grant.

    An unknown or missing plan grants nothing.
    """
    granted = PLAN_FEATURES.get((plan or "").lower(), frozenset())
    return [f for f in required if f not in granted]
