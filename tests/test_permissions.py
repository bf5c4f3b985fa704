"""
Tests for commands/permissions.py: ordered restriction checks.
"""

import pytest
from unittest.mock import AsyncMock

from commands.command_registry import Category, CommandDefinition
from commands.context import CallerContext
from commands.permissions import DENIAL_MESSAGES, DenialReason, can_invoke
from tests.helpers import ALICE, GROUP, OWNER_JID


async def _noop(ctx, args):
    return None


def make_definition(**flags) -> CommandDefinition:
    return CommandDefinition("cmd", Category.GENERAL, _noop, **flags)


def make_caller(user=ALICE, chat=None, is_owner=False, is_banned=False, is_admin=False):
    resolver = AsyncMock(return_value=is_admin)
    caller = CallerContext(user, chat or user, is_owner=is_owner, is_banned=is_banned, admin_resolver=resolver)
    return caller, resolver


@pytest.mark.asyncio
async def test_unrestricted_command_allowed():
    caller, _ = make_caller()
    result = await can_invoke(make_definition(), caller)
    assert result
    assert result.reason is None
    assert result.message is None


@pytest.mark.asyncio
async def test_banned_caller_denied_even_for_unrestricted_command():
    caller, _ = make_caller(is_banned=True)
    result = await can_invoke(make_definition(), caller)
    assert not result
    assert result.reason is DenialReason.BANNED
    assert result.message == "🚫 You are banned from using this bot!"


@pytest.mark.asyncio
async def test_ban_dominates_other_denials():
    caller, resolver = make_caller(chat=GROUP, is_banned=True)
    result = await can_invoke(make_definition(owner_only=True, admin_only=True, group_only=True), caller)
    assert result.reason is DenialReason.BANNED
    resolver.assert_not_awaited()


@pytest.mark.asyncio
async def test_banned_owner_is_not_denied():
    caller, _ = make_caller(user=OWNER_JID, is_owner=True, is_banned=True)
    assert await can_invoke(make_definition(owner_only=True), caller)


@pytest.mark.asyncio
async def test_owner_only_denied_for_others():
    caller, _ = make_caller()
    result = await can_invoke(make_definition(owner_only=True), caller)
    assert result.reason is DenialReason.OWNER_ONLY
    assert result.message == DENIAL_MESSAGES[DenialReason.OWNER_ONLY]


@pytest.mark.asyncio
async def test_group_only_denied_in_private_chat():
    caller, _ = make_caller()
    result = await can_invoke(make_definition(group_only=True), caller)
    assert result.reason is DenialReason.GROUP_ONLY
    assert result.message == "❌ This command can only be used in groups!"


@pytest.mark.asyncio
async def test_group_only_denied_for_owner_in_private_chat():
    caller, _ = make_caller(user=OWNER_JID, is_owner=True)
    result = await can_invoke(make_definition(group_only=True), caller)
    assert result.reason is DenialReason.GROUP_ONLY


@pytest.mark.asyncio
async def test_admin_only_in_private_chat_skips_lookup():
    caller, resolver = make_caller()
    assert await can_invoke(make_definition(admin_only=True), caller)
    resolver.assert_not_awaited()


@pytest.mark.asyncio
async def test_admin_only_denied_for_group_member():
    caller, resolver = make_caller(chat=GROUP, is_admin=False)
    result = await can_invoke(make_definition(admin_only=True, group_only=True), caller)
    assert result.reason is DenialReason.ADMIN_ONLY
    assert result.message == "❌ This command is admin only!"
    resolver.assert_awaited_once()


@pytest.mark.asyncio
async def test_admin_only_allowed_for_group_admin():
    caller, _ = make_caller(chat=GROUP, is_admin=True)
    assert await can_invoke(make_definition(admin_only=True, group_only=True), caller)


@pytest.mark.asyncio
async def test_owner_bypasses_admin_check_without_lookup():
    caller, resolver = make_caller(user=OWNER_JID, chat=GROUP, is_owner=True)
    assert await can_invoke(make_definition(admin_only=True, group_only=True), caller)
    resolver.assert_not_awaited()


@pytest.mark.asyncio
async def test_admin_status_is_resolved_once():
    caller, resolver = make_caller(chat=GROUP, is_admin=True)
    definition = make_definition(admin_only=True)
    await can_invoke(definition, caller)
    await can_invoke(definition, caller)
    resolver.assert_awaited_once()
