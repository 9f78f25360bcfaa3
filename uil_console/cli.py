"""
Command-line renderer for the UIL console.

Usage:
    python -m uil_console overview
    python -m uil_console users
    python -m uil_console analyze --user user_002
    python -m uil_console insights --user user_001
    python -m uil_console act --user user_001
    python -m uil_console health
    python -m uil_console --json overview
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from uil_console.config import ConsoleConfig, parse_timeout
from uil_console.console import AnalyticsConsole
from uil_console.metrics import format_currency
from uil_console.notifications import NotificationHub, print_notification
from uil_console.views import View, ViewModel

LOGGER_NAMES = ("api_client", "orchestrator", "console", "catalog", "store", "views",
                "actions", "notifications")


def _format_table(headers: List[str], rows: List[List[Any]]) -> str:
    """Format data as an aligned ASCII table."""
    if not rows:
        return "(no data)"

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines: List[str] = []
    lines.append(" | ".join(h.ljust(widths[i]) for i, h in enumerate(headers)))
    lines.append("-+-".join("-" * w for w in widths))
    for row in rows:
        lines.append(" | ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row)))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def render_overview(model: ViewModel) -> str:
    if not model.ready:
        return "Analytics summary unavailable."
    data = model.data
    lines = ["OVERVIEW", "=" * 45]
    for tile in data["tiles"]:
        detail = f"  ({tile['detail']})" if tile.get("detail") else ""
        lines.append(f"  {tile['label']:<22} {tile['display']}{detail}")
    lines.append("")
    lines.append("User distribution")
    lines.append(_format_table(
        ["Segment", "Users"],
        [[point["label"], point["value"]] for point in data["distribution"]],
    ))
    lines.append("")
    lines.append(f"Current monthly revenue:  {data['projection']['current_monthly']}")
    lines.append(f"Projected annual revenue: {data['projection']['projected_annual']}")
    return "\n".join(lines)


def render_users(model: ViewModel) -> str:
    rows = [
        ["*" if card["selected"] else "", card["id"], card["name"], card["email"], card["tier"]]
        for card in model.data.get("entities", [])
    ]
    return _format_table(["", "ID", "Name", "Email", "Tier"], rows)


def render_entity_analysis(model: ViewModel) -> str:
    data = model.data
    if not model.ready:
        return f"No profile available for {data.get('selected_id') or '(no selection)'}."
    card = data["scorecard"]
    platforms = data["platforms"]
    lines = [
        f"USER ANALYSIS: {data['selected_id']}",
        "=" * 45,
        f"  Value score:     {card['value_score']}",
        f"  Segment:         {card['segment']}",
        f"  Persona:         {card['persona_icon']} {card['persona']}",
        f"  Monthly revenue: {card['monthly_revenue']}",
        f"  Cross-sell:      {card['cross_sell_opportunity']}",
        "",
        "Cross-platform revenue",
        _format_table(
            ["Platform", "Monthly"],
            [[entry["label"], format_currency(entry["amount"])] for entry in data["revenue_blend"]],
        ),
        "",
    ]
    commerce, gaming, finance = platforms["commerce"], platforms["gaming"], platforms["finance"]
    lines.append(f"Shopee:   {commerce['total_orders']} orders, {commerce['total_spent']} spent, "
                 f"latest: {commerce['latest_purchase'] or '-'}")
    lines.append(f"          categories: {', '.join(commerce['categories']) or '-'}")
    lines.append(f"Garena:   {gaming['rank']} rank, {gaming['monthly_spend']}/month, "
                 f"{gaming['game_hours']} played")
    lines.append(f"          games: {gaming['games'] or '-'}")
    lines.append(f"SeaMoney: credit {finance['credit_score']}, wallet {finance['wallet_balance']}, "
                 f"portfolio {finance['investment_portfolio']}, "
                 f"{finance['monthly_transactions']} tx/month")
    return "\n".join(lines)


def render_insights(model: ViewModel) -> str:
    if not model.ready:
        return "No insights available."
    rows = [
        [card["title"], card["confidence"], card["potential_revenue"],
         ", ".join(source["name"] for source in card["sources"]), card["recommendation"]]
        for card in model.data["insights"]
    ]
    return _format_table(["Insight", "Confidence", "Potential", "Sources", "Recommendation"], rows)


RENDERERS = {
    View.OVERVIEW: render_overview,
    View.ENTITY_ANALYSIS: render_entity_analysis,
    View.INSIGHTS: render_insights,
}


def _emit(model: ViewModel, as_json: bool, renderer=None) -> None:
    if as_json:
        print(json.dumps(model.to_dict(), indent=2, default=str, ensure_ascii=False))
    else:
        print((renderer or RENDERERS[model.view])(model))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

async def _run(args: argparse.Namespace, config: ConsoleConfig) -> int:
    hub = NotificationHub()
    hub.add_sink("stdout", print_notification)

    async with AnalyticsConsole(config, notifier=hub) as console:
        if args.command == "health":
            result = await console.client.health()
            if not result:
                print(f"API unhealthy: {result.error}")
                return 1
            status: Dict[str, Any] = result.data
            print(f"API {status.get('status', 'ok')} (version {status.get('version', '?')}, "
                  f"{result.response_time_ms:.0f}ms)")
            return 0

        user = getattr(args, "user", None)
        if user:
            console.select(user)
        await console.wait_idle()

        if args.command == "overview":
            _emit(console.view_model(View.OVERVIEW), args.json)
        elif args.command == "users":
            _emit(console.view_model(View.ENTITY_ANALYSIS), args.json, render_users)
        elif args.command == "analyze":
            console.switch_view(View.ENTITY_ANALYSIS)
            _emit(console.view_model(), args.json)
        elif args.command == "insights":
            console.switch_view(View.INSIGHTS)
            _emit(console.view_model(), args.json)
        elif args.command == "act":
            console.switch_view(View.ACTIONS)
            model = console.view_model()
            if not model.ready:
                print("No user selected; nothing to execute.")
                return 1
            result = await console.execute_actions(model.data["selected_id"])
            return 0 if result else 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uil_console",
        description="UIL analytics console -- commerce, gaming and fintech in one view",
    )
    parser.add_argument("--base-url", help="API base URL (default: $UIL_API_BASE_URL)")
    parser.add_argument("--timeout", help="Request timeout in seconds; 0 disables")
    parser.add_argument("--json", action="store_true", help="Print view models as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("overview", help="Platform-wide analytics summary")
    subparsers.add_parser("users", help="List selectable users")
    for name, help_text in (
        ("analyze", "Unified profile for one user"),
        ("insights", "Cross-platform insights for one user"),
        ("act", "Execute coordinated actions for one user"),
    ):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("--user", help="User id (default: first user in the catalog)")
    subparsers.add_parser("health", help="Check API health")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = ConsoleConfig.from_env()
    if args.base_url:
        config.base_url = args.base_url.rstrip("/")
    if args.timeout is not None:
        config.request_timeout = parse_timeout(args.timeout)

    level = logging.DEBUG if args.verbose else getattr(logging, config.log_level.upper(), logging.INFO)
    for name in LOGGER_NAMES:
        logging.getLogger(name).setLevel(level)

    return asyncio.run(_run(args, config))


if __name__ == "__main__":
    sys.exit(main())
