"""Unit tests for the admin command router and roster commands."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from commands.admin import is_admin
from commands.roster import parse_user_id
from commands_main import handle_commands
from conftest import FakeClock, FakePlatform, FakeProvider
from core.cooldown import CooldownTracker
from core.dispatch import DispatchOrchestrator
from core.monitor import ActivityMonitor
from core.settings import EngineConfig

ADMIN_ID = 1000


def make_monitor(roster=()):
    config = EngineConfig(initial_roster=tuple(roster))
    orch = DispatchOrchestrator(
        FakePlatform(),
        FakeProvider(),
        config,
        cooldowns=CooldownTracker(config.cooldown_seconds, clock=FakeClock()),
    )
    return ActivityMonitor(orch.platform, orch)


def make_message(author_id=ADMIN_ID, administrator=False, in_guild=True):
    message = MagicMock()
    message.author.id = author_id
    message.author.guild_permissions.administrator = administrator
    message.guild = MagicMock() if in_guild else None
    message.channel.send = AsyncMock()
    return message


def last_reply(message) -> str:
    return message.channel.send.await_args.args[0]


async def run(content, monitor, message=None):
    message = message or make_message()
    handled = await handle_commands(message, content, monitor=monitor, admin_ids={ADMIN_ID})
    return handled, message


class TestAdminCheck:
    def test_admin_id_passes_without_guild(self):
        assert is_admin(make_message(in_guild=False), [ADMIN_ID]) is True

    def test_guild_administrator_passes(self):
        assert is_admin(make_message(author_id=5, administrator=True), []) is True

    def test_regular_user_fails(self):
        assert is_admin(make_message(author_id=5), [ADMIN_ID]) is False
        assert is_admin(make_message(author_id=5, administrator=True, in_guild=False), []) is False


class TestRouting:
    @pytest.mark.asyncio
    async def test_unknown_command_not_handled(self):
        handled, message = await run("!dance", make_monitor())

        assert handled is False
        message.channel.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_admin_is_refused(self):
        monitor = make_monitor()
        handled, message = await run("!target add 42", monitor, make_message(author_id=5))

        assert handled is True
        assert "permission" in last_reply(message)
        assert len(monitor.roster) == 0


class TestTargetCommands:
    @pytest.mark.asyncio
    async def test_add_and_remove(self):
        monitor = make_monitor()

        _, message = await run("!target add 42", monitor)
        assert "Now watching `42`" in last_reply(message)
        assert monitor.roster.ids() == ["42"]

        _, message = await run("!target add <@42>", monitor)
        assert "already a target" in last_reply(message)

        _, message = await run("!target remove 42", monitor)
        assert "Stopped watching" in last_reply(message)
        assert len(monitor.roster) == 0

    @pytest.mark.asyncio
    async def test_set_and_clear(self):
        monitor = make_monitor(roster=["1"])

        await run("!target set 42 <@!7>", monitor)
        assert monitor.roster.ids() == ["42", "7"]

        _, message = await run("!target clear", monitor)
        assert len(monitor.roster) == 0
        assert "all friends" in last_reply(message)

    @pytest.mark.asyncio
    async def test_bad_ids_show_usage(self):
        monitor = make_monitor()

        _, message = await run("!target add alice", monitor)

        assert "Usage" in last_reply(message)
        assert len(monitor.roster) == 0

    @pytest.mark.asyncio
    async def test_list_targets(self):
        _, message = await run("!targets", make_monitor())
        assert "all friends" in last_reply(message)

        _, message = await run("!targets", make_monitor(roster=["42"]))
        assert "42" in last_reply(message)


class TestCooldownAndStatus:
    @pytest.mark.asyncio
    async def test_reset_one(self):
        monitor = make_monitor()
        monitor.orchestrator.cooldowns.record("42")

        _, message = await run("!cooldown reset 42", monitor)

        assert "reset" in last_reply(message)
        assert monitor.orchestrator.cooldowns.gate("42") is True

    @pytest.mark.asyncio
    async def test_reset_all(self):
        monitor = make_monitor()
        monitor.orchestrator.cooldowns.record("1")
        monitor.orchestrator.cooldowns.record("2")

        _, message = await run("!cooldown reset", monitor)

        assert "Cleared 2" in last_reply(message)

    @pytest.mark.asyncio
    async def test_status(self):
        _, message = await run("!status", make_monitor())

        assert "Monitor" in last_reply(message)


def test_parse_user_id():
    assert parse_user_id("42") == "42"
    assert parse_user_id("<@42>") == "42"
    assert parse_user_id("<@!42>") == "42"
    assert parse_user_id("alice") is None
