"""Tests for the command-line renderer and configuration parsing."""

import argparse
import json
from unittest.mock import patch

import pytest

from uil_console import cli
from uil_console.config import ConsoleConfig, parse_timeout
from uil_console.console import AnalyticsConsole
from uil_console.errors import ApiResult
from uil_console.views import View, ViewModel

from conftest import ok_actions, ok_entities, ok_insights, ok_profile


@pytest.fixture
def seeded_client(scripted_client, sample_summary):
    c = scripted_client
    c.set("list_entities", None, ok_entities("user_001", "user_002"))
    c.set("get_analytics_summary", None, ApiResult.success(sample_summary))
    for uid in ("user_001", "user_002"):
        c.set("get_profile", uid, ok_profile(uid))
        c.set("get_insights", uid, ok_insights(uid))
    return c


def _args(command, **kwargs):
    defaults = {"json": False, "verbose": False, "base_url": None, "timeout": None}
    defaults.update(kwargs)
    return argparse.Namespace(command=command, **defaults)


async def _run(client, args):
    def factory(config, notifier=None):
        return AnalyticsConsole(config, client=client, notifier=notifier)

    with patch.object(cli, "AnalyticsConsole", factory):
        return await cli._run(args, ConsoleConfig(base_url="http://fake/api/v1"))


class TestConfig:

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", ["", "0", "none", "OFF", None])
    def test_timeout_disabled(self, raw):
        assert parse_timeout(raw) is None

    @pytest.mark.unit
    def test_timeout_seconds(self):
        assert parse_timeout("12.5") == 12.5

    @pytest.mark.unit
    def test_negative_timeout_rejected(self):
        with pytest.raises(ValueError):
            parse_timeout("-1")

    @pytest.mark.unit
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("UIL_API_BASE_URL", "http://uil.internal:9000/api/v1/")
        monkeypatch.setenv("UIL_REQUEST_TIMEOUT", "5")
        config = ConsoleConfig.from_env()
        assert config.base_url == "http://uil.internal:9000/api/v1"
        assert config.request_timeout == 5.0


class TestParser:

    @pytest.mark.unit
    def test_subcommands(self):
        parser = cli.build_parser()
        args = parser.parse_args(["--json", "analyze", "--user", "user_002"])
        assert args.command == "analyze"
        assert args.user == "user_002"
        assert args.json is True

    @pytest.mark.unit
    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()


class TestRenderers:

    @pytest.mark.unit
    def test_format_table(self):
        table = cli._format_table(["ID", "Name"], [["user_001", "Ahmad"]])
        lines = table.splitlines()
        assert lines[0].startswith("ID")
        assert "user_001 | Ahmad" in lines[2]
        assert cli._format_table(["ID"], []) == "(no data)"

    @pytest.mark.unit
    def test_overview_not_ready(self):
        assert cli.render_overview(ViewModel(View.OVERVIEW, False)) == "Analytics summary unavailable."

    @pytest.mark.unit
    def test_analysis_without_selection(self):
        model = ViewModel(View.ENTITY_ANALYSIS, False, {"selected_id": None})
        assert cli.render_entity_analysis(model) == "No profile available for (no selection)."


class TestCommands:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_overview(self, seeded_client, capsys):
        assert await _run(seeded_client, _args("overview")) == 0
        out = capsys.readouterr().out
        assert "Rp 12.773.988" in out
        assert "VIP Users" in out

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_users_marks_selection(self, seeded_client, capsys):
        assert await _run(seeded_client, _args("users")) == 0
        out = capsys.readouterr().out
        assert "user_002" in out
        assert "* | user_001" in out

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_analyze_json(self, seeded_client, capsys):
        code = await _run(seeded_client, _args("analyze", json=True, user="user_002"))
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["view"] == "entity-analysis"
        assert payload["ready"] is True
        assert payload["data"]["selected_id"] == "user_002"
        assert seeded_client.calls_for("get_profile") == ["user_001", "user_002"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_insights(self, seeded_client, capsys):
        assert await _run(seeded_client, _args("insights", user=None)) == 0
        assert "Vip treatment" in capsys.readouterr().out

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_act(self, seeded_client, capsys):
        seeded_client.set("execute_actions", "user_001", ok_actions("user_001"))
        assert await _run(seeded_client, _args("act", user=None)) == 0
        assert "[OK] Actions executed" in capsys.readouterr().out

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_act_failure_exit_code(self, seeded_client):
        assert await _run(seeded_client, _args("act", user="user_002")) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_health(self, seeded_client, capsys):
        seeded_client.set("health", None, ApiResult.success({"status": "healthy", "version": "1.0.0"}))
        assert await _run(seeded_client, _args("health")) == 0
        assert "API healthy" in capsys.readouterr().out

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_health_unreachable(self, seeded_client, capsys):
        assert await _run(seeded_client, _args("health")) == 1
        assert "unhealthy" in capsys.readouterr().out
