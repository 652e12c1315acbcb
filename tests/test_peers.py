import pytest

from gramkit.peers import (
    InputPeerChannel,
    InputPeerChat,
    InputPeerUser,
    PeerChannel,
    PeerChat,
    PeerUser,
    marked_id,
    peer_id,
)


@pytest.mark.parametrize(
    "peer, expected",
    [
        (PeerUser(42), 42),
        (PeerChat(77), 77),
        (PeerChannel(1234), 1234),
        (InputPeerUser(42, 9), 42),
        (InputPeerChat(77), 77),
        (InputPeerChannel(1234, 9), 1234),
    ],
)
def test_peer_id_returns_bare_identifier(peer, expected):
    assert peer_id(peer) == expected


def test_peer_id_of_none_is_zero():
    assert peer_id(None) == 0


def test_marked_id_user_is_unchanged():
    assert marked_id(PeerUser(42)) == 42


def test_marked_id_chat_is_negated():
    assert marked_id(PeerChat(77)) == -77


def test_marked_id_channel_uses_offset():
    assert marked_id(PeerChannel(0)) == -1_000_000_000_000


@pytest.mark.parametrize("ident", [1, 55, 987654321])
def test_marked_channel_id_round_trips(ident):
    marked = marked_id(PeerChannel(ident))
    assert marked < -1_000_000_000_000
    assert -marked - 1_000_000_000_000 == ident


def test_input_peers_mark_like_plain_peers():
    assert marked_id(InputPeerChannel(5, 1)) == marked_id(PeerChannel(5))
    assert marked_id(InputPeerChat(5)) == marked_id(PeerChat(5))
    assert marked_id(InputPeerUser(5, 1)) == marked_id(PeerUser(5))


def test_marked_id_of_unknown_is_zero():
    assert marked_id(None) == 0
    assert marked_id("not a peer") == 0