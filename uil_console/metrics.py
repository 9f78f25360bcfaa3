"""
Derived metrics for the console views.

Pure functions over already-fetched records: currency formatting, chart
series, style/icon lookups and the flat tile/card dicts each view renders.
Nothing here touches the network or the store.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Sequence

from uil_console.config import UIL_CURRENCY_SYMBOL
from uil_console.models import AnalyticsSummary, Entity, Insight, Profile

# Months used to amortise lifetime commerce spend
COMMERCE_AMORTISATION_MONTHS = 12

# Take rate applied to monthly transaction volume
FINANCE_TAKE_RATE = 0.02

PLATFORM_LABELS: Dict[str, str] = {
    "commerce": "Shopee",
    "gaming": "Garena",
    "finance": "SeaMoney",
}

# Upstream insight sources use the brand names
SOURCE_PLATFORMS: Dict[str, str] = {
    "commerce": "commerce",
    "shopee": "commerce",
    "gaming": "gaming",
    "garena": "gaming",
    "finance": "finance",
    "seamoney": "finance",
}

SEGMENT_STYLES: Dict[str, str] = {
    "VIP": "vip",
    "High Value": "high_value",
    "Regular": "regular",
}

PERSONA_ICONS: Dict[str, str] = {
    "Hardcore Gamer": "\U0001F3AE",
    "Investor": "\U0001F4BC",
}

DEFAULT_STYLE = "default"
DEFAULT_PERSONA_ICON = "\U0001F60A"


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def round_half_up(value: float, ndigits: int = 0) -> float:
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def format_currency(amount: Optional[float], symbol: str = UIL_CURRENCY_SYMBOL) -> str:
    """
    Render an amount with no minor units, e.g. ``Rp 1.200.000``.

    Rounds half away from zero to whole units; thousands use ``.`` as in
    Indonesian Rupiah formatting.
    """
    if amount is None:
        return "-"
    whole = int(round_half_up(abs(amount)))
    digits = f"{whole:,}".replace(",", ".")
    sign = "-" if amount < 0 and whole else ""
    return f"{sign}{symbol} {digits}"


def _plain_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_percent(value: float, decimals: int = 1) -> str:
    return f"{round_half_up(value, decimals):.{decimals}f}%"


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def segment_style_key(tier_or_segment: Optional[str]) -> str:
    """Style token for a tier or segment label; unknown labels get ``default``."""
    return SEGMENT_STYLES.get(tier_or_segment or "", DEFAULT_STYLE)


def persona_icon(persona: Optional[str]) -> str:
    return PERSONA_ICONS.get(persona or "", DEFAULT_PERSONA_ICON)


def source_style_key(source: Optional[str]) -> str:
    return SOURCE_PLATFORMS.get((source or "").lower(), DEFAULT_STYLE)


# ---------------------------------------------------------------------------
# Chart series
# ---------------------------------------------------------------------------

def distribution_series(summary: Optional[AnalyticsSummary]) -> List[Dict[str, Any]]:
    """VIP vs Regular user counts, taken verbatim from the summary."""
    if summary is None:
        return []
    return [
        {"label": "VIP Users", "value": summary.vip_users, "color_key": "vip"},
        {"label": "Regular Users", "value": summary.regular_users, "color_key": "regular"},
    ]


def revenue_blend(profile: Optional[Profile]) -> List[Dict[str, Any]]:
    """
    Monthly revenue contributed by each platform.

    commerce: lifetime spend / 12
    gaming:   monthly spend as reported
    finance:  avg transaction x monthly transactions x 2% take rate
    """
    if profile is None:
        return []
    commerce = profile.commerce.total_spent / COMMERCE_AMORTISATION_MONTHS
    gaming = profile.gaming.monthly_spend
    finance = (
        profile.finance.avg_transaction
        * profile.finance.monthly_transactions
        * FINANCE_TAKE_RATE
    )
    return [
        {"platform": "commerce", "label": PLATFORM_LABELS["commerce"], "amount": commerce},
        {"platform": "gaming", "label": PLATFORM_LABELS["gaming"], "amount": gaming},
        {"platform": "finance", "label": PLATFORM_LABELS["finance"], "amount": finance},
    ]


def revenue_blend_total(profile: Optional[Profile]) -> float:
    return sum(entry["amount"] for entry in revenue_blend(profile))


# ---------------------------------------------------------------------------
# View-model builders
# ---------------------------------------------------------------------------

def summary_tiles(summary: Optional[AnalyticsSummary], symbol: str = UIL_CURRENCY_SYMBOL) -> List[Dict[str, Any]]:
    if summary is None:
        return []
    return [
        {"key": "total_users", "label": "Total Users",
         "value": summary.total_users, "display": f"{summary.total_users:,}"},
        {"key": "vip_users", "label": "VIP Users", "value": summary.vip_users,
         "display": str(summary.vip_users), "detail": format_percent(summary.vip_percentage)},
        {"key": "monthly_revenue", "label": "Monthly Revenue", "value": summary.total_monthly_revenue,
         "display": format_currency(summary.total_monthly_revenue, symbol)},
        {"key": "avg_revenue_per_user", "label": "Avg Revenue/User", "value": summary.avg_revenue_per_user,
         "display": format_currency(summary.avg_revenue_per_user, symbol)},
    ]


def revenue_projection(summary: Optional[AnalyticsSummary], symbol: str = UIL_CURRENCY_SYMBOL) -> Dict[str, str]:
    if summary is None:
        return {}
    return {
        "current_monthly": format_currency(summary.total_monthly_revenue, symbol),
        "projected_annual": format_currency(summary.projected_annual_revenue, symbol),
    }


def entity_cards(entities: Sequence[Entity], selected_id: Optional[str]) -> List[Dict[str, Any]]:
    return [
        {
            "id": entity.id,
            "name": entity.name,
            "email": entity.email,
            "tier": entity.tier,
            "style_key": segment_style_key(entity.tier),
            "selected": entity.id == selected_id,
        }
        for entity in entities
    ]


def profile_scorecard(profile: Optional[Profile], symbol: str = UIL_CURRENCY_SYMBOL) -> Dict[str, Any]:
    if profile is None:
        return {}
    ci = profile.computed_insights
    return {
        "value_score": f"{round_half_up(ci.user_value_score, 1):.1f}/100",
        "segment": ci.user_segment,
        "segment_style_key": segment_style_key(ci.user_segment),
        "persona": ci.persona,
        "persona_icon": persona_icon(ci.persona),
        "monthly_revenue": format_currency(ci.monthly_revenue_contribution, symbol),
        "cross_sell_opportunity": ci.cross_sell_opportunity,
    }


def platform_cards(profile: Optional[Profile], symbol: str = UIL_CURRENCY_SYMBOL) -> Dict[str, Dict[str, Any]]:
    if profile is None:
        return {}
    commerce, gaming, finance = profile.commerce, profile.gaming, profile.finance
    latest = commerce.recent_purchases[0].item if commerce.recent_purchases else None
    return {
        "commerce": {
            "total_orders": commerce.total_orders,
            "total_spent": format_currency(commerce.total_spent, symbol),
            "categories": list(commerce.favorite_categories),
            "latest_purchase": latest,
        },
        "gaming": {
            "rank": gaming.rank,
            "monthly_spend": format_currency(gaming.monthly_spend, symbol),
            "game_hours": f"{_plain_number(gaming.total_game_hours)}h",
            "games": ", ".join(gaming.games_played),
        },
        "finance": {
            "credit_score": finance.credit_score,
            "wallet_balance": format_currency(finance.wallet_balance, symbol),
            "investment_portfolio": format_currency(finance.investment_portfolio, symbol),
            "monthly_transactions": finance.monthly_transactions,
        },
    }


def insight_title(insight_type: str) -> str:
    return insight_type.replace("_", " ").strip().capitalize()


def insight_cards(insights: Sequence[Insight], symbol: str = UIL_CURRENCY_SYMBOL) -> List[Dict[str, Any]]:
    return [
        {
            "title": insight_title(insight.insight_type),
            "insight_type": insight.insight_type,
            "confidence": f"{round_half_up(insight.confidence * 100):.0f}%",
            "potential_revenue": format_currency(insight.potential_revenue, symbol),
            "sources": [
                {"name": source, "style_key": source_style_key(source)}
                for source in insight.data_sources
            ],
            "recommendation": insight.recommendation,
        }
        for insight in insights
    ]
