"""
Data model for UIL API payloads.

Every record is a dataclass with a ``from_api`` constructor that reads the
upstream JSON (tolerating missing keys) and ``to_dict`` for serialisation.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# Profile sections may arrive under the platform name or the upstream wire key
PLATFORM_KEYS: Dict[str, Tuple[str, ...]] = {
    "commerce": ("commerce", "shopee_profile"),
    "gaming": ("gaming", "garena_profile"),
    "finance": ("finance", "seamoney_profile"),
}

COMPUTED_INSIGHT_FIELDS = (
    "user_value_score",
    "user_segment",
    "persona",
    "monthly_revenue_contribution",
    "cross_sell_opportunity",
)


def _as_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    return int(value)


def _as_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    return float(value)


def _as_str_list(value: Any) -> List[str]:
    if not value:
        return []
    return [str(v) for v in value]


def _section(data: Dict[str, Any], platform: str) -> Dict[str, Any]:
    for key in PLATFORM_KEYS[platform]:
        section = data.get(key)
        if section is not None:
            return section
    return {}


@dataclass
class Entity:
    """A selectable user record from the catalog."""
    id: str
    name: str = ""
    email: str = ""
    tier: str = ""
    phone: str = ""
    registration_date: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> Entity:
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            email=data.get("email", ""),
            tier=data.get("tier", ""),
            phone=data.get("phone", ""),
            registration_date=data.get("registration_date", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Purchase:
    item: str
    price: float = 0.0
    date: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> Purchase:
        return cls(
            item=data.get("item", ""),
            price=_as_float(data.get("price")),
            date=data.get("date", ""),
        )


@dataclass
class CommerceProfile:
    """Shopping activity. ``recent_purchases`` is most-recent-first."""
    total_orders: int = 0
    total_spent: float = 0.0
    favorite_categories: List[str] = field(default_factory=list)
    recent_purchases: List[Purchase] = field(default_factory=list)
    cart_abandonment_rate: float = 0.0
    last_active: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> CommerceProfile:
        return cls(
            total_orders=_as_int(data.get("total_orders")),
            total_spent=_as_float(data.get("total_spent")),
            favorite_categories=_as_str_list(data.get("favorite_categories")),
            recent_purchases=[Purchase.from_api(p) for p in data.get("recent_purchases") or []],
            cart_abandonment_rate=_as_float(data.get("cart_abandonment_rate")),
            last_active=data.get("last_active", ""),
        )


@dataclass
class GamingProfile:
    rank: str = ""
    monthly_spend: float = 0.0
    total_game_hours: float = 0.0
    games_played: List[str] = field(default_factory=list)
    achievements: List[str] = field(default_factory=list)
    social_connections: int = 0
    preferred_game_time: str = ""
    last_session: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> GamingProfile:
        return cls(
            rank=data.get("rank", ""),
            monthly_spend=_as_float(data.get("monthly_spend")),
            total_game_hours=_as_float(data.get("total_game_hours")),
            games_played=_as_str_list(data.get("games_played")),
            achievements=_as_str_list(data.get("achievements")),
            social_connections=_as_int(data.get("social_connections")),
            preferred_game_time=data.get("preferred_game_time", ""),
            last_session=data.get("last_session", ""),
        )


@dataclass
class Loan:
    amount: float
    status: str = ""
    date: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> Loan:
        return cls(
            amount=_as_float(data.get("amount")),
            status=data.get("status", ""),
            date=data.get("date", ""),
        )


@dataclass
class FinanceProfile:
    credit_score: int = 0
    wallet_balance: float = 0.0
    investment_portfolio: float = 0.0
    monthly_transactions: int = 0
    avg_transaction: float = 0.0
    savings_balance: float = 0.0
    loan_history: List[Loan] = field(default_factory=list)
    last_transaction: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> FinanceProfile:
        return cls(
            credit_score=_as_int(data.get("credit_score")),
            wallet_balance=_as_float(data.get("wallet_balance")),
            investment_portfolio=_as_float(data.get("investment_portfolio")),
            monthly_transactions=_as_int(data.get("monthly_transactions")),
            avg_transaction=_as_float(data.get("avg_transaction")),
            savings_balance=_as_float(data.get("savings_balance")),
            loan_history=[Loan.from_api(loan) for loan in data.get("loan_history") or []],
            last_transaction=data.get("last_transaction", ""),
        )


@dataclass
class ComputedInsights:
    """Server-computed scoring; only read for display."""
    user_value_score: float = 0.0
    user_segment: str = ""
    persona: str = ""
    monthly_revenue_contribution: float = 0.0
    cross_sell_opportunity: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> ComputedInsights:
        return cls(
            user_value_score=_as_float(data.get("user_value_score")),
            user_segment=data.get("user_segment", ""),
            persona=data.get("persona", ""),
            monthly_revenue_contribution=_as_float(data.get("monthly_revenue_contribution")),
            cross_sell_opportunity=data.get("cross_sell_opportunity", ""),
            extra={k: v for k, v in data.items() if k not in COMPUTED_INSIGHT_FIELDS},
        )


@dataclass
class Profile:
    """Unified per-user profile across the three platforms."""
    entity_id: str
    commerce: CommerceProfile = field(default_factory=CommerceProfile)
    gaming: GamingProfile = field(default_factory=GamingProfile)
    finance: FinanceProfile = field(default_factory=FinanceProfile)
    computed_insights: ComputedInsights = field(default_factory=ComputedInsights)
    entity: Optional[Entity] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> Profile:
        commerce = _section(data, "commerce")
        gaming = _section(data, "gaming")
        finance = _section(data, "finance")
        user = data.get("user")
        entity = Entity.from_api(user) if user and user.get("id") else None

        entity_id = data.get("entity_id")
        if not entity_id and entity is not None:
            entity_id = entity.id
        if not entity_id:
            entity_id = commerce.get("user_id") or gaming.get("user_id") or finance.get("user_id")
        if not entity_id:
            raise ValueError("Profile payload carries no entity id")

        return cls(
            entity_id=str(entity_id),
            commerce=CommerceProfile.from_api(commerce),
            gaming=GamingProfile.from_api(gaming),
            finance=FinanceProfile.from_api(finance),
            computed_insights=ComputedInsights.from_api(data.get("computed_insights") or {}),
            entity=entity,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AnalyticsSummary:
    """Process-wide totals computed by the server."""
    total_users: int = 0
    vip_users: int = 0
    regular_users: int = 0
    vip_percentage: float = 0.0
    total_monthly_revenue: float = 0.0
    avg_revenue_per_user: float = 0.0
    projected_annual_revenue: float = 0.0
    last_updated: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> AnalyticsSummary:
        return cls(
            total_users=_as_int(data.get("total_users")),
            vip_users=_as_int(data.get("vip_users")),
            regular_users=_as_int(data.get("regular_users")),
            vip_percentage=_as_float(data.get("vip_percentage")),
            total_monthly_revenue=_as_float(data.get("total_monthly_revenue")),
            avg_revenue_per_user=_as_float(data.get("avg_revenue_per_user")),
            projected_annual_revenue=_as_float(data.get("projected_annual_revenue")),
            last_updated=data.get("last_updated", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Insight:
    """One cross-platform recommendation."""
    insight_type: str
    confidence: float = 0.0
    potential_revenue: float = 0.0
    data_sources: Tuple[str, ...] = ()
    recommendation: str = ""
    user_id: str = ""
    created_at: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> Insight:
        # Sources are a set; keep first-seen order for display
        sources = tuple(dict.fromkeys(_as_str_list(data.get("data_sources"))))
        return cls(
            insight_type=data.get("insight_type", ""),
            confidence=_as_float(data.get("confidence")),
            potential_revenue=_as_float(data.get("potential_revenue")),
            data_sources=sources,
            recommendation=data.get("recommendation", ""),
            user_id=data.get("user_id", ""),
            created_at=data.get("created_at", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["data_sources"] = list(self.data_sources)
        return d


@dataclass
class CrossPlatformAction:
    action_id: str
    target_platforms: List[str] = field(default_factory=list)
    action_type: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)
    expected_outcome: str = ""
    priority: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> CrossPlatformAction:
        return cls(
            action_id=str(data.get("action_id", "")),
            target_platforms=_as_str_list(data.get("target_platforms")),
            action_type=data.get("action_type", ""),
            parameters=dict(data.get("parameters") or {}),
            expected_outcome=data.get("expected_outcome", ""),
            priority=_as_int(data.get("priority")),
        )


@dataclass
class ActionResult:
    """Acknowledgement of a coordinated action request."""
    accepted: bool
    actions: List[CrossPlatformAction] = field(default_factory=list)
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
