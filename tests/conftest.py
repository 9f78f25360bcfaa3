"""
Shared fixtures for the UIL console test suite.

Provides upstream payloads, mock aiohttp objects and a scripted fake client
so that all tests run WITHOUT the UIL API.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest

from uil_console.errors import ApiResult, NetworkFailure
from uil_console.models import (
    ActionResult,
    AnalyticsSummary,
    CrossPlatformAction,
    Entity,
    Insight,
    Profile,
)


# ---------------------------------------------------------------------------
# Upstream payloads
# ---------------------------------------------------------------------------

def make_user(user_id: str, name: str = "", tier: str = "gold") -> Dict[str, Any]:
    return {
        "id": user_id,
        "name": name or user_id.replace("_", " ").title(),
        "email": f"{user_id}@email.com",
        "phone": "+62812345678",
        "registration_date": "2023-01-15T00:00:00Z",
        "tier": tier,
    }


def make_profile_payload(
    user_id: str,
    total_spent: float = 1_200_000,
    monthly_spend: float = 150_000,
    avg_transaction: float = 50_000,
    monthly_transactions: int = 40,
    persona: str = "Hardcore Gamer",
    segment: str = "VIP",
) -> Dict[str, Any]:
    """Profile in the upstream wire shape (``*_profile`` section keys)."""
    return {
        "user": make_user(user_id),
        "shopee_profile": {
            "user_id": user_id,
            "total_orders": 45,
            "total_spent": total_spent,
            "favorite_categories": ["Gaming", "Electronics", "Fashion"],
            "recent_purchases": [
                {"item": "Gaming Mouse Razer", "price": 450000, "date": "2024-08-20T00:00:00Z"},
                {"item": "Mechanical Keyboard", "price": 800000, "date": "2024-08-15T00:00:00Z"},
            ],
            "cart_abandonment_rate": 0.15,
            "last_active": "2024-08-26T00:00:00Z",
        },
        "garena_profile": {
            "user_id": user_id,
            "games_played": ["Free Fire", "PUBG Mobile", "Arena of Valor"],
            "total_game_hours": 450,
            "monthly_spend": monthly_spend,
            "rank": "Diamond",
            "achievements": ["Tournament Winner"],
            "social_connections": 234,
            "preferred_game_time": "evening",
        },
        "seamoney_profile": {
            "user_id": user_id,
            "wallet_balance": 850000,
            "credit_score": 750,
            "loan_history": [{"amount": 2000000, "status": "paid", "date": "2024-06-15T00:00:00Z"}],
            "monthly_transactions": monthly_transactions,
            "avg_transaction": avg_transaction,
            "savings_balance": 5200000,
            "investment_portfolio": 3400000,
        },
        "computed_insights": {
            "user_value_score": 100,
            "user_segment": segment,
            "persona": persona,
            "cross_sell_opportunity": "High - Gaming ecosystem",
            "churn_risk": "Low",
            "monthly_revenue_contribution": 354833,
        },
    }


def make_insight_payload(insight_type: str = "vip_treatment", user_id: str = "user_001") -> Dict[str, Any]:
    return {
        "user_id": user_id,
        "insight_type": insight_type,
        "confidence": 0.9,
        "data_sources": ["shopee", "garena", "seamoney"],
        "recommendation": "Activate VIP support, exclusive deals, and priority services",
        "potential_revenue": 800000,
        "created_at": "2024-08-27T00:00:00Z",
    }


@pytest.fixture
def users_payload():
    return [
        make_user("user_001", "Ahmad Rizki", "gold"),
        make_user("user_002", "Siti Nurhaliza", "platinum"),
        make_user("user_003", "Budi Santoso", "silver"),
    ]


@pytest.fixture
def profile_payload():
    return make_profile_payload("user_001")


@pytest.fixture
def insights_payload():
    return [
        make_insight_payload("cross_sell_gaming"),
        make_insight_payload("vip_treatment"),
    ]


@pytest.fixture
def analytics_payload():
    return {
        "total_users": 1000,
        "vip_users": 120,
        "regular_users": 880,
        "vip_percentage": 12.0,
        "total_monthly_revenue": 1064499,
        "avg_revenue_per_user": 354833,
        "projected_annual_revenue": 12773988,
        "last_updated": "2024-08-27T00:00:00Z",
    }


@pytest.fixture
def sample_profile(profile_payload):
    return Profile.from_api(profile_payload)


@pytest.fixture
def sample_summary(analytics_payload):
    return AnalyticsSummary.from_api(analytics_payload)


# ---------------------------------------------------------------------------
# HTTP mock fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_aiohttp_response():
    """Create a mock aiohttp response factory."""

    def _make(status=200, json_data=None, json_error=None):
        resp = AsyncMock()
        resp.status = status
        if json_error is not None:
            resp.json = AsyncMock(side_effect=json_error)
        else:
            resp.json = AsyncMock(return_value=json_data)
        resp.__aenter__ = AsyncMock(return_value=resp)
        resp.__aexit__ = AsyncMock(return_value=False)
        return resp

    return _make


@pytest.fixture
def mock_session_factory():
    """Build a mock ClientSession whose .request() yields the given response.

    The client uses ``async with session.request(method, url, **kwargs) as resp``
    so ``session.request`` returns an async context manager.
    """

    def _make(response_mock=None, request_error=None):
        session = AsyncMock()
        if request_error is not None:
            session.request = MagicMock(side_effect=request_error)
        else:
            ctx = AsyncMock()
            ctx.__aenter__ = AsyncMock(return_value=response_mock)
            ctx.__aexit__ = AsyncMock(return_value=False)
            session.request = MagicMock(return_value=ctx)
        session.close = AsyncMock()
        session.closed = False
        return session

    return _make


# ---------------------------------------------------------------------------
# Scripted fake client
# ---------------------------------------------------------------------------

class ScriptedClient:
    """
    Stand-in for ``UILClient`` with per-call control over results and timing.

    Results are looked up by ``(operation, entity_id)``; missing entries fail
    with a ``NetworkFailure``. ``hold(op, id)`` makes the next calls for that
    key wait until ``release(op, id)``.
    """

    base_url = "http://fake/api/v1"

    def __init__(self) -> None:
        self.results: Dict[Tuple[str, Optional[str]], ApiResult] = {}
        self.gates: Dict[Tuple[str, Optional[str]], asyncio.Event] = {}
        self.calls: List[Tuple[str, Optional[str]]] = []
        self.closed = False

    def set(self, operation: str, entity_id: Optional[str], result: ApiResult) -> None:
        self.results[(operation, entity_id)] = result

    def hold(self, operation: str, entity_id: Optional[str]) -> None:
        self.gates[(operation, entity_id)] = asyncio.Event()

    def release(self, operation: str, entity_id: Optional[str]) -> None:
        self.gates[(operation, entity_id)].set()

    async def _respond(self, operation: str, entity_id: Optional[str] = None) -> ApiResult:
        key = (operation, entity_id)
        self.calls.append(key)
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)
        result = self.results.get(key)
        if result is not None:
            return result
        return ApiResult.failed(NetworkFailure(f"{operation} unavailable"))

    def calls_for(self, operation: str) -> List[Optional[str]]:
        return [eid for op, eid in self.calls if op == operation]

    async def list_entities(self):
        return await self._respond("list_entities")

    async def get_profile(self, entity_id):
        return await self._respond("get_profile", entity_id)

    async def get_insights(self, entity_id):
        return await self._respond("get_insights", entity_id)

    async def get_analytics_summary(self):
        return await self._respond("get_analytics_summary")

    async def execute_actions(self, entity_id):
        return await self._respond("execute_actions", entity_id)

    async def health(self):
        return await self._respond("health")

    async def close(self):
        self.closed = True


def ok_profile(user_id: str, **kwargs: Any) -> ApiResult:
    return ApiResult.success(Profile.from_api(make_profile_payload(user_id, **kwargs)))


def ok_insights(user_id: str, *types: str) -> ApiResult:
    return ApiResult.success([
        Insight.from_api(make_insight_payload(t, user_id)) for t in (types or ("vip_treatment",))
    ])


def ok_entities(*user_ids: str) -> ApiResult:
    return ApiResult.success([Entity.from_api(make_user(uid)) for uid in user_ids])


def ok_actions(user_id: str) -> ApiResult:
    return ApiResult.success(ActionResult(
        accepted=True,
        actions=[CrossPlatformAction(action_id=f"action_{user_id}_1", action_type="targeted_promotion")],
        message=f"Executed 1 coordinated actions for user {user_id}",
    ))


@pytest.fixture
def scripted_client():
    return ScriptedClient()
