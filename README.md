# gramkit

Building blocks for chat bot clients. The package has peer identifiers,
message models, participant and inline-query updates, and handler filters.
It also matches handler patterns and has an update dispatcher that sorts
handlers by group and priority.

The package uses only the Python standard library. It needs Python 3.10
or later.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `gramkit.peers`

- The peer types are `PeerUser`, `PeerChat`, `PeerChannel`,
  `InputPeerUser`, `InputPeerChat` and `InputPeerChannel`. They are frozen
  dataclasses.
- `peer_id(peer)` returns the bare id of a peer, or 0 when the peer is
  `None`.
- `marked_id(peer)` returns the signed id:
  - a user keeps its id;
  - a chat's id is negated;
  - a channel's id is moved below `-CHANNEL_ID_OFFSET`, so channel 5
    becomes `-1000000000005`.

### `gramkit.message`

- `Message` holds the raw content of a message: its id, `peer_id`,
  `from_id`, text, date, entities, `reply_to`, `fwd_from`, media,
  `grouped_id` and `mentioned`.
- `NewMessage` wraps a `Message`. Its `broadcast` field marks a channel
  peer as a broadcast channel (`True`), a supergroup (`False`) or unknown
  (`None`). It has these methods:
  - `chat_type()` returns a `ChatType`. It is backed by `is_private()`,
    `is_group()` and `is_channel()`.
  - `chat_id()`, `channel_id()` (the marked id) and `sender_id()` return
    ids.
  - `is_reply()` and `is_forward()` describe how the message was sent.
  - `reply_to_msg_id()` returns the id of the replied-to message.
    `topic_id()` returns the forum topic, or `None`.
  - `is_media()` and `media_type()` describe the attached media.
  - `document()`, `sticker()`, `video()`, `audio()` and `animation()`
    return the matching `Document`, or `None`.
  - `is_command()`, `get_command()` and `args()` read the message text.
  - `link(username=None)` builds a link to the message in a group or
    channel. It uses the given username, or the channel id when there is
    no username. Private chats give `""`.
- `Album` groups messages by `grouped_id`. It has `ids()`, `is_reply()`
  and `is_forward()`. The last two read the first message and raise
  `ValueError` when the album is empty.

### `gramkit.participant`

- `ParticipantUpdate` records a change of `ParticipantState` from `old` to
  `new`, together with the user and the actor.
- It has `is_added()`, `is_joined()`, `is_left()`, `is_kicked()`,
  `is_banned()`, `is_promoted()` and `is_demoted()`, which classify the
  change.

### `gramkit.inline`

- `InlineQuery` has `is_private()`, `is_group()` and `is_channel()`, which
  read its `InlineQueryPeerType`. `args()` returns the text after the
  first word of the query.
- `InlineSend` holds an `InlineMessageID` or an `InlineMessageID64`.
  - `chat_id()`, `message_id()` and `access_hash()` decode that id.
  - `get_peer()` returns an `InputPeerChannel`. It raises `TypeError` when
    the id is missing.

### `gramkit.groupcall`

- `GroupCallStream` steps through the chunks of a group call stream.
  - `current_channel()` returns the selected channel.
  - `select_channel(index)` selects a channel and moves to its
    `last_timestamp_ms`. An index out of range is ignored.
  - `next_chunk()` fetches the chunk at the current timestamp and then
    advances by `1000 >> scale` milliseconds. Iterating the stream yields
    chunks one after another.
- The chunks come from the `fetch` callable you supply, not from the
  package.
- `StreamError` is raised in these cases:
  - the stream has no channels;
  - the selection is invalid;
  - `fetch` returns `None` or something that is not bytes.

### `gramkit.filters`

- `Filter` holds flag conditions: `private`, `group`, `channel`, `media`,
  `command`, `reply`, `forward`, `from_bot` and `mention`.
- It holds the id lists `users`, `chats` and `channels`. A `blacklist` flag
  turns them into exclusion lists.
- `func` is an optional predicate on the message.
- Ready-made filters include `FILTER_PRIVATE`, `FILTER_GROUP` and
  `FILTER_COMMAND`.
- `run_filter_chain(message, filters)` tells whether a message passes all
  the filters.

### `gramkit.patterns`

- `match_message_pattern(pattern, text, bot_username=None)` checks new
  messages:
  - `"message"` matches everything;
  - `"cmd:<name>"` matches `/name`, `!name` or `?name`, and also
    `/name@bot_username` when a username is given;
  - any other string is a regular expression anchored at the start;
  - a compiled regular expression is searched as it is.
- `match_edit_pattern` and `match_inline_pattern` follow the same rules for
  edited messages and inline queries. Their catch-all patterns are `"edit"`
  and `"inline"`.
- `match_callback_pattern(pattern, data)` checks callback data, given as
  bytes or text:
  - `"callback"` and `"inlineCallback"` match everything;
  - any other string is an unanchored regular expression or a prefix of the
    data.

### `gramkit.dispatcher`

- `Dispatcher` registers handlers with these methods:
  - `add_message_handler`, `add_command_handler` and `add_edit_handler`;
  - `add_inline_handler`, `add_callback_handler` and
    `add_participant_handler`;
  - `add_raw_handler`;
  - `on(pattern, handler, filters=None)`, which takes names such as
    `"message"`, `"command:start"` or `"callback:vote"`. A non-string
    pattern registers a raw handler for that type. An unknown name raises
    `ValueError`.
- Each registration returns a `Handle`.
  - `set_group(group)` and `set_priority(priority)` change a handle and
    re-sort the handlers. Higher priorities run first.
  - `remove_handle(handle)` unregisters a handle.
  - `handles(kind)` shows the handles of one `HandlerKind` by group.
- Updates are sent to the handlers with `dispatch_message`,
  `dispatch_edit`, `dispatch_inline`, `dispatch_callback`,
  `dispatch_participant` and `dispatch_raw`.
  - Each call runs the matching handlers in the calling thread.
  - Each call returns the handles whose handler ran.
  - A handler that raises any other exception has the exception logged;
    dispatch continues.
- Groups change how handlers run:
  - In the default group every matching handler runs.
  - In any other group a handler that raises `EndGroup` stops the rest of
    that group.
  - New messages go to the `"conversation"` group first. An `EndGroup`
    raised there stops all further handling. After that they go to the
    default group only.
- `manage_pts(pts, pts_count)` advances the stored update sequence number.
  It always returns `True`.

## Example

```python
from gramkit.dispatcher import Dispatcher
from gramkit.message import Message, NewMessage
from gramkit.peers import PeerUser

dispatcher = Dispatcher()
seen = []

def on_ping(message):
    seen.append(message.text())

dispatcher.add_command_handler("ping", on_ping)

message = NewMessage(message=Message(id=1, text="/ping now", peer_id=PeerUser(42)))
dispatcher.dispatch_message(message)
print(seen)  # ['/ping now']
```

## What the package does not do

The package has no network client. It does not:

- connect to a chat service or log in;
- receive updates;
- send, edit, delete or forward messages;
- upload or download files.

Updates must be built as the package's own objects and passed to the
dispatcher by your code. Stream chunks come from the `fetch` callable you
give to `GroupCallStream`. There is no command-line tool.