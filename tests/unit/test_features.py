"""Tests for the plan to feature map."""

from __future__ import annotations

import pytest

from loro.licensing.features import (
    BUSINESS_FEATURES,
    ENTERPRISE_FEATURES,
    PLAN_FEATURES,
    PLANS,
    PROFESSIONAL_FEATURES,
    STARTER_FEATURES,
    missing_features,
    module_feature,
)


class TestPlanTiers:
    def test_tiers_are_cumulative(self) -> None:
        assert STARTER_FEATURES <= PROFESSIONAL_FEATURES <= BUSINESS_FEATURES <= ENTERPRISE_FEATURES

    def test_every_plan_mapped(self) -> None:
        assert set(PLANS) == set(PLAN_FEATURES)


class TestMissingFeatures:
    @pytest.mark.parametrize("module", ["assets", "leave", "news", "payslips", "resellers", "shop", "rewards"])
    def test_enterprise_grants_module_access(self, module: str) -> None:
        assert missing_features("enterprise", [module_feature(module)]) == []

    @pytest.mark.parametrize("plan", ["starter", "professional", "business"])
    def test_lower_plans_lack_module_access(self, plan: str) -> None:
        assert missing_features(plan, ["assets.access"]) == ["assets.access"]

    def test_plan_name_is_case_insensitive(self) -> None:
        assert missing_features("ENTERPRISE", ["shop.access"]) == []

    def test_unknown_plan_grants_nothing(self) -> None:
        assert missing_features("platinum", ["leads.basic", "shop.basic"]) == ["leads.basic", "shop.basic"]
        assert missing_features(None, ["leads.basic"]) == ["leads.basic"]

    def test_reports_only_missing(self) -> None:
        assert missing_features("professional", ["leads.basic", "resellers.management"]) == [
            "resellers.management"
        ]
