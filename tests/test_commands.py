"""
Tests for the command modules, driven through the dispatcher.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from bot.transport import TransportError
from commands import register_all_commands
from commands import owner_commands
from commands.dispatcher import Dispatcher
from commands.general_commands import to_fancy
from tests.helpers import ALICE, BOB, GROUP, OWNER_JID, FakeTransport, make_event, sent_text


@pytest.fixture
def run(registry, services):
    """Dispatch a message and return everything sent in reply."""
    register_all_commands(registry)
    dispatcher = Dispatcher(registry, services)

    async def _run(text, sender=OWNER_JID, chat=GROUP, **kwargs):
        before = len(services.transport.sent)
        await dispatcher.handle(make_event(text, sender=sender, chat=chat, **kwargs))
        return services.transport.sent[before:]

    return _run


def texts(sent):
    return [sent_text(content) for _, content in sent]


# --------------------------------------------------------------------------- #
# General                                                                      #
# --------------------------------------------------------------------------- #

@pytest.mark.asyncio
async def test_menu_lists_commands(run):
    menu = texts(await run(".menu", chat=ALICE))[0]
    assert "Test Bot Menu" in menu
    assert ".ping" in menu
    assert ".yts" in menu


@pytest.mark.asyncio
async def test_help_for_single_command(run):
    text = texts(await run(".help .calc", chat=ALICE))[0]
    assert "📖 *Command:* .calculate" in text

    assert texts(await run(".help nope", chat=ALICE)) == ["❌ Unknown command: nope"]


@pytest.mark.asyncio
async def test_calculate(run):
    assert texts(await run(".calc 2 + 3 x 4", chat=ALICE)) == ["🧮 *Calculator*\n\n2 + 3 x 4 = 14"]
    assert texts(await run(".calc 1 / 0", chat=ALICE)) == ["❌ Cannot divide by zero!"]
    assert texts(await run(".calc import os", chat=ALICE))[0].startswith("❌ Invalid expression!")


@pytest.mark.asyncio
async def test_text_tools(run):
    assert texts(await run(".upper hello world", chat=ALICE)) == ["HELLO WORLD"]
    assert texts(await run(".lower HeLLo", chat=ALICE)) == ["hello"]
    assert texts(await run(".reverse abc", chat=ALICE)) == ["cba"]
    assert texts(await run(".reverse", chat=ALICE)) == ["❌ Please provide text to reverse!"]


def test_to_fancy_maps_letters_only():
    assert to_fancy("Ab1") == "\U0001D4D0\U0001D4EB1"


@pytest.mark.asyncio
async def test_google_link_is_encoded(run):
    text = texts(await run(".google python asyncio", chat=ALICE))[0]
    assert "https://www.google.com/search?q=python+asyncio" in text


@pytest.mark.asyncio
async def test_poll(run):
    sent = await run(".poll Favorite color? | Red | Blue", chat=ALICE)
    assert sent[0][1] == {"poll": {"name": "Favorite color?", "values": ["Red", "Blue"], "selectableCount": 1}}

    assert texts(await run(".poll Question? | OnlyOne", chat=ALICE)) == ["❌ Please provide at least 2 options!"]


@pytest.mark.asyncio
async def test_quoted(run):
    sent = await run(".q", chat=ALICE, quoted_id="Q1", quoted_text="original")
    assert texts(sent) == ["📝 *Quoted Message:*\n\noriginal"]
    assert texts(await run(".q", chat=ALICE)) == ["❌ Please reply to a message!"]


@pytest.mark.asyncio
async def test_reminder_schedules(run, services):
    assert texts(await run(".remind 10 check the oven", chat=ALICE)) == ["⏰ Reminder set for 10 minute(s)!"]
    services.reminders.schedule.assert_called_once_with(ALICE, OWNER_JID, 10, "check the oven")

    assert texts(await run(".remind soon check", chat=ALICE)) == ["❌ Please provide a valid number of minutes!"]


@pytest.mark.asyncio
async def test_profile_without_record(run):
    assert texts(await run(".me", chat=ALICE)) == ["❌ User not found in database!"]


# --------------------------------------------------------------------------- #
# Group                                                                        #
# --------------------------------------------------------------------------- #

@pytest.fixture
def group_transport(services):
    transport = FakeTransport(admins=[OWNER_JID, BOB], members=[ALICE, BOB, OWNER_JID])
    services.transport = transport
    return transport


@pytest.mark.asyncio
async def test_tagall_mentions_everyone(run, group_transport):
    content = (await run(".tagall wake up"))[0][1]
    assert "wake up" in content["text"]
    assert set(content["mentions"]) == {ALICE, BOB, OWNER_JID}


@pytest.mark.asyncio
async def test_remove_mentioned(run, group_transport):
    sent = await run(".kick", mentioned=[ALICE])
    assert group_transport.calls == [("participants", GROUP, [ALICE], "remove")]
    assert texts(sent) == ["✅ Removed 1 user(s) successfully!"]


@pytest.mark.asyncio
async def test_remove_without_mention(run, group_transport):
    assert texts(await run(".remove")) == ["❌ Please mention a user to remove!"]
    assert group_transport.calls == []


@pytest.mark.asyncio
async def test_transport_failure_is_reported_by_handler(run, group_transport):
    group_transport.group_participants_update = AsyncMock(side_effect=TransportError("not admin"))
    assert texts(await run(".promote", mentioned=[ALICE])) == ["❌ Failed to promote user: not admin"]


@pytest.mark.asyncio
async def test_add_by_number(run, group_transport):
    sent = await run(".add +94773333333")
    assert group_transport.calls == [("participants", GROUP, ["94773333333@s.whatsapp.net"], "add")]
    assert texts(sent) == ["✅ Added @94773333333"]


@pytest.mark.asyncio
async def test_mute_updates_setting(run, group_transport, services):
    assert texts(await run(".mute")) == ["🔇 Group muted! Only admins can send messages."]
    assert group_transport.calls == [("setting", GROUP, "announcement")]
    services.settings.update_group_setting.assert_awaited_once_with(GROUP, "muted", True)


@pytest.mark.asyncio
async def test_member_cannot_use_admin_commands(run, group_transport):
    assert texts(await run(".mute", sender=ALICE)) == ["❌ This command is admin only!"]
    assert group_transport.calls == []


@pytest.mark.asyncio
async def test_group_admin_can_use_admin_commands(run, group_transport):
    assert texts(await run(".setname New Name", sender=BOB)) == ["✅ Group name changed to: *New Name*"]
    assert group_transport.calls == [("subject", GROUP, "New Name")]


@pytest.mark.asyncio
async def test_invite_link(run, group_transport):
    text = texts(await run(".invite"))[0]
    assert "https://chat.whatsapp.com/AbCdEfGhIjKlMnOpQrSt12" in text


@pytest.mark.asyncio
async def test_admins_listing(run, group_transport):
    content = (await run(".admins", sender=ALICE))[0][1]
    assert content["text"].startswith("👮 *Group Admins* (2)")
    assert content["mentions"] == [OWNER_JID, BOB]


@pytest.mark.asyncio
async def test_groupinfo(run, group_transport, services):
    services.settings.get_group_settings = AsyncMock(return_value={"antilink": True})
    text = texts(await run(".groupinfo", sender=ALICE))[0]
    assert "*Members:* 3" in text
    assert "Anti-Link: ✅" in text
    assert "Muted: ❌" in text


# --------------------------------------------------------------------------- #
# Moderation                                                                   #
# --------------------------------------------------------------------------- #

@pytest.mark.asyncio
async def test_antilink_toggle(run, services):
    assert texts(await run(".antilink on"))[0].startswith("✅ Anti-link enabled!")
    services.settings.update_group_setting.assert_awaited_once_with(GROUP, "antilink", True)
    assert texts(await run(".antilink maybe")) == ["❌ Usage: .antilink on/off"]


@pytest.mark.asyncio
async def test_warn_counts_up(run, services, transport):
    services.users.add_warning = AsyncMock(return_value=1)
    sent = await run(".warn", mentioned=[ALICE])
    assert texts(sent) == ["⚠️ User warned! (1/3)"]
    assert transport.calls == []


@pytest.mark.asyncio
async def test_third_warning_kicks(run, services, transport):
    services.users.add_warning = AsyncMock(return_value=3)
    sent = await run(".warn", mentioned=[ALICE])
    assert "🚫 User will be kicked!" in texts(sent)[0]
    assert transport.calls == [("participants", GROUP, [ALICE], "remove")]


@pytest.mark.asyncio
async def test_delete_quoted_message(run, transport):
    await run(".del", quoted_id="Q1", quoted_sender=ALICE)
    assert transport.calls == [("delete", GROUP, {
        "remoteJid": GROUP, "fromMe": False, "id": "Q1", "participant": ALICE,
    })]


# --------------------------------------------------------------------------- #
# Settings and owner                                                           #
# --------------------------------------------------------------------------- #

@pytest.mark.asyncio
async def test_global_toggle(run, services):
    assert texts(await run(".autoseen on", chat=OWNER_JID)) == ["✅ Auto seen enabled!"]
    services.settings.update_global_setting.assert_awaited_once_with("autoSeen", True)


@pytest.mark.asyncio
async def test_global_toggle_is_owner_only(run, services):
    assert texts(await run(".alwaysonline off", sender=ALICE, chat=ALICE)) == ["❌ This command is owner only!"]
    services.settings.update_global_setting.assert_not_awaited()


@pytest.mark.asyncio
async def test_addbadword(run, services):
    services.settings.add_bad_word = AsyncMock(side_effect=[True, False])
    assert texts(await run(".addbadword Spam", chat=OWNER_JID)) == ["✅ Added *spam* to the bad word list!"]
    assert texts(await run(".addbadword spam", chat=OWNER_JID)) == ["⚠️ *spam* is already in the bad word list."]


@pytest.mark.asyncio
async def test_ban_and_unban(run, services):
    await run(".ban", mentioned=[ALICE])
    services.users.set_banned.assert_awaited_with(ALICE, True)

    await run(".unban", mentioned=[ALICE])
    services.users.set_banned.assert_awaited_with(ALICE, False)
    services.users.reset_warnings.assert_awaited_once_with(ALICE)


@pytest.mark.asyncio
async def test_join_with_invite_link(run, transport):
    sent = await run(".join https://chat.whatsapp.com/AbCdEfGhIjKlMnOpQrSt12", chat=OWNER_JID)
    assert transport.calls == [("join", "AbCdEfGhIjKlMnOpQrSt12")]
    assert texts(sent) == ["✅ Successfully joined the group!"]

    assert texts(await run(".join nonsense", chat=OWNER_JID)) == ["❌ Invalid invite link!"]


@pytest.mark.asyncio
async def test_leave_only_in_groups(run, transport):
    assert texts(await run(".leave", chat=OWNER_JID)) == ["❌ This command only works in groups!"]
    await run(".leave")
    assert transport.calls == [("leave", GROUP)]


@pytest.mark.asyncio
async def test_broadcast(run, transport, monkeypatch):
    monkeypatch.setattr(owner_commands, "BROADCAST_DELAY", 0)
    transport.chats = [ALICE, BOB]

    sent = await run(".broadcast hello all", chat=OWNER_JID)

    recipients = [chat for chat, _ in sent]
    assert ALICE in recipients and BOB in recipients
    assert texts(sent)[-1] == "✅ Broadcast complete!\n\n✔️ Success: 2\n❌ Failed: 0"


@pytest.mark.asyncio
async def test_stats(run, services):
    services.users.count = AsyncMock(return_value=1200)
    services.users.count_banned = AsyncMock(return_value=2)
    services.groups.count = AsyncMock(return_value=3)
    services.command_logs.count = AsyncMock(return_value=45)
    services.command_logs.top_commands = AsyncMock(return_value=[{"command": "ping", "uses": 40}])

    text = texts(await run(".stats", chat=OWNER_JID))[0]
    assert "*Total Users:* 1,200" in text
    assert "*Banned Users:* 2" in text
    assert "1. ping (40)" in text


@pytest.mark.asyncio
async def test_block_failure_reported(run, transport):
    transport.update_block_status = AsyncMock(side_effect=TransportError("bridge down"))
    assert texts(await run(".block", chat=OWNER_JID, mentioned=[ALICE])) == ["❌ Error: bridge down"]


@pytest.mark.asyncio
async def test_health(run, services):
    services.monitoring = MagicMock()
    services.monitoring.format_health_status.return_value = "✅ Healthy"
    assert texts(await run(".health", chat=OWNER_JID)) == ["✅ Healthy"]
