import pytest

from gramkit.filters import (
    FILTER_CHANNEL,
    FILTER_COMMAND,
    FILTER_FORWARD,
    FILTER_FROM_BOT,
    FILTER_GROUP,
    FILTER_MEDIA,
    FILTER_MENTION,
    FILTER_PRIVATE,
    FILTER_REPLY,
    Filter,
    run_filter_chain,
)
from gramkit.message import (
    EntityKind,
    Media,
    MediaKind,
    Message,
    MessageEntity,
    NewMessage,
    ReplyHeader,
)
from gramkit.peers import PeerChannel, PeerChat, PeerUser, marked_id


def private_msg(user=5, **kwargs):
    return NewMessage(Message(id=1, peer_id=PeerUser(user), from_id=PeerUser(user), **kwargs))


def group_msg(chat=10, sender=7, **kwargs):
    return NewMessage(Message(id=2, peer_id=PeerChat(chat), from_id=PeerUser(sender), **kwargs))


def channel_msg(channel=20, **kwargs):
    return NewMessage(Message(id=3, peer_id=PeerChannel(channel), **kwargs), broadcast=True)


def test_no_filters_pass():
    assert run_filter_chain(private_msg(), []) is True
    assert run_filter_chain(group_msg(), None) is True


@pytest.mark.parametrize(
    "flt, private, group, channel",
    [
        (FILTER_PRIVATE, True, False, False),
        (FILTER_GROUP, False, True, False),
        (FILTER_CHANNEL, False, False, True),
    ],
)
def test_chat_kind_filters(flt, private, group, channel):
    assert run_filter_chain(private_msg(), [flt]) is private
    assert run_filter_chain(group_msg(), [flt]) is group
    assert run_filter_chain(channel_msg(), [flt]) is channel


def test_media_filter():
    with_media = private_msg(media=Media(kind=MediaKind.PHOTO))
    assert run_filter_chain(with_media, [FILTER_MEDIA]) is True
    assert run_filter_chain(private_msg(), [FILTER_MEDIA]) is False


def test_command_filter():
    cmd = private_msg(text="/start", entities=[MessageEntity(EntityKind.BOT_COMMAND, 0, 6)])
    assert run_filter_chain(cmd, [FILTER_COMMAND]) is True
    assert run_filter_chain(private_msg(text="hi"), [FILTER_COMMAND]) is False


def test_reply_and_forward_filters():
    reply = private_msg(reply_to=ReplyHeader(reply_to_msg_id=4))
    forward = private_msg(fwd_from=object())
    assert run_filter_chain(reply, [FILTER_REPLY]) is True
    assert run_filter_chain(forward, [FILTER_REPLY]) is False
    assert run_filter_chain(forward, [FILTER_FORWARD]) is True
    assert run_filter_chain(reply, [FILTER_FORWARD]) is False


def test_from_bot_filter():
    bot = group_msg()
    bot.sender_is_bot = True
    assert run_filter_chain(bot, [FILTER_FROM_BOT]) is True
    assert run_filter_chain(group_msg(), [FILTER_FROM_BOT]) is False


def test_mention_filter():
    assert run_filter_chain(group_msg(mentioned=True), [FILTER_MENTION]) is True
    assert run_filter_chain(group_msg(), [FILTER_MENTION]) is False


def test_func_filter():
    flt = Filter(func=lambda m: m.text() == "yes")
    assert run_filter_chain(private_msg(text="yes"), [flt]) is True
    assert run_filter_chain(private_msg(text="no"), [flt]) is False


def test_all_filters_must_pass():
    msg = group_msg(mentioned=True)
    assert run_filter_chain(msg, [FILTER_GROUP, FILTER_MENTION]) is True
    assert run_filter_chain(msg, [FILTER_GROUP, FILTER_PRIVATE]) is False


def test_users_whitelist():
    assert run_filter_chain(group_msg(sender=7), [Filter(users=[7])]) is True
    assert run_filter_chain(group_msg(sender=8), [Filter(users=[7])]) is False


def test_users_blacklist():
    assert run_filter_chain(group_msg(sender=7), [Filter(users=[7], blacklist=True)]) is False
    assert run_filter_chain(group_msg(sender=8), [Filter(users=[7], blacklist=True)]) is True


def test_blacklist_on_separate_filter():
    chain = [Filter(users=[7]), Filter(blacklist=True)]
    assert run_filter_chain(group_msg(sender=7), chain) is False
    assert run_filter_chain(group_msg(sender=9), chain) is True


def test_users_check_skipped_without_sender():
    msg = channel_msg()
    assert msg.sender_id() == 0
    assert run_filter_chain(msg, [Filter(users=[7])]) is True


def test_chats_use_bare_id():
    assert run_filter_chain(group_msg(chat=10), [Filter(chats=[10])]) is True
    assert run_filter_chain(group_msg(chat=11), [Filter(chats=[10])]) is False


def test_channels_use_marked_id():
    marked = marked_id(PeerChannel(20))
    assert run_filter_chain(channel_msg(20), [Filter(channels=[marked])]) is True
    assert run_filter_chain(channel_msg(20), [Filter(channels=[20])]) is False
    assert run_filter_chain(channel_msg(20), [Filter(channels=[marked], blacklist=True)]) is False


def test_last_user_list_wins():
    chain = [Filter(users=[7]), Filter(users=[8])]
    assert run_filter_chain(group_msg(sender=8), chain) is True
    assert run_filter_chain(group_msg(sender=7), chain) is False


def test_combined_lists_require_every_match():
    chain = [Filter(users=[7], chats=[10])]
    assert run_filter_chain(group_msg(chat=10, sender=7), chain) is True
    assert run_filter_chain(group_msg(chat=11, sender=7), chain) is False


def test_func_callback_ignored_for_messages():
    flt = Filter(func_callback=lambda q: False)
    assert run_filter_chain(private_msg(), [flt]) is True