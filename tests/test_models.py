"""Tests for the UIL payload dataclasses."""

import pytest

from uil_console.models import (
    AnalyticsSummary,
    ComputedInsights,
    CrossPlatformAction,
    Entity,
    Insight,
    Profile,
)

from conftest import make_insight_payload, make_profile_payload, make_user


class TestEntity:

    @pytest.mark.unit
    def test_from_api(self):
        entity = Entity.from_api(make_user("user_001", "Ahmad Rizki", "VIP"))
        assert entity.id == "user_001"
        assert entity.name == "Ahmad Rizki"
        assert entity.tier == "VIP"
        assert entity.email == "user_001@email.com"

    @pytest.mark.unit
    def test_numeric_id_is_stringified(self):
        assert Entity.from_api({"id": 7}).id == "7"

    @pytest.mark.unit
    def test_missing_id_raises(self):
        with pytest.raises(KeyError):
            Entity.from_api({"name": "No Id"})


class TestProfile:

    @pytest.mark.unit
    def test_reads_upstream_section_keys(self, profile_payload):
        profile = Profile.from_api(profile_payload)
        assert profile.entity_id == "user_001"
        assert profile.commerce.total_orders == 45
        assert profile.commerce.recent_purchases[0].item == "Gaming Mouse Razer"
        assert profile.gaming.rank == "Diamond"
        assert profile.finance.credit_score == 750
        assert profile.finance.loan_history[0].status == "paid"
        assert profile.entity is not None and profile.entity.name == "User 001"

    @pytest.mark.unit
    def test_reads_platform_section_keys(self):
        profile = Profile.from_api({
            "entity_id": "u9",
            "commerce": {"total_spent": 120},
            "gaming": {"monthly_spend": 5},
            "finance": {"avg_transaction": 10, "monthly_transactions": 3},
        })
        assert profile.entity_id == "u9"
        assert profile.commerce.total_spent == 120
        assert profile.gaming.monthly_spend == 5
        assert profile.finance.monthly_transactions == 3

    @pytest.mark.unit
    def test_entity_id_falls_back_to_section_user_id(self):
        profile = Profile.from_api({"shopee_profile": {"user_id": "user_003"}})
        assert profile.entity_id == "user_003"

    @pytest.mark.unit
    def test_missing_entity_id_raises(self):
        with pytest.raises(ValueError):
            Profile.from_api({"commerce": {}})

    @pytest.mark.unit
    def test_empty_sequences_default(self):
        payload = make_profile_payload("user_002")
        payload["shopee_profile"]["recent_purchases"] = None
        payload["shopee_profile"]["favorite_categories"] = []
        profile = Profile.from_api(payload)
        assert profile.commerce.recent_purchases == []
        assert profile.commerce.favorite_categories == []

    @pytest.mark.unit
    def test_computed_insights_keep_extra_keys(self, profile_payload):
        ci = Profile.from_api(profile_payload).computed_insights
        assert ci.persona == "Hardcore Gamer"
        assert ci.user_segment == "VIP"
        assert ci.extra == {"churn_risk": "Low"}

    @pytest.mark.unit
    def test_to_dict_round_trips_key_fields(self, sample_profile):
        d = sample_profile.to_dict()
        assert d["entity_id"] == "user_001"
        assert d["gaming"]["games_played"][0] == "Free Fire"


class TestInsight:

    @pytest.mark.unit
    def test_data_sources_deduplicated_in_order(self):
        payload = make_insight_payload()
        payload["data_sources"] = ["shopee", "garena", "shopee"]
        insight = Insight.from_api(payload)
        assert insight.data_sources == ("shopee", "garena")

    @pytest.mark.unit
    def test_to_dict_lists_sources(self):
        d = Insight.from_api(make_insight_payload()).to_dict()
        assert d["data_sources"] == ["shopee", "garena", "seamoney"]
        assert d["confidence"] == 0.9


class TestAnalyticsSummary:

    @pytest.mark.unit
    def test_from_api(self, analytics_payload):
        summary = AnalyticsSummary.from_api(analytics_payload)
        assert summary.vip_users == 120
        assert summary.regular_users == 880
        assert summary.projected_annual_revenue == 12773988

    @pytest.mark.unit
    def test_missing_fields_default_to_zero(self):
        summary = AnalyticsSummary.from_api({})
        assert summary.total_users == 0
        assert summary.vip_percentage == 0.0


class TestCrossPlatformAction:

    @pytest.mark.unit
    def test_from_api(self):
        action = CrossPlatformAction.from_api({
            "action_id": "action_user_001_1724716800",
            "target_platforms": ["shopee", "garena"],
            "action_type": "targeted_promotion",
            "parameters": {"garena_action": {"bonus_points": 500}},
            "expected_outcome": "15% increase in gaming-related purchases",
            "priority": 1,
        })
        assert action.target_platforms == ["shopee", "garena"]
        assert action.parameters["garena_action"]["bonus_points"] == 500
        assert action.priority == 1

    @pytest.mark.unit
    def test_computed_insights_defaults(self):
        ci = ComputedInsights.from_api({})
        assert ci.user_value_score == 0.0
        assert ci.extra == {}
