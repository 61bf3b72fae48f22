import asyncio

from batepapo.visibility import is_visible, visibility_filter

MESSAGES = [
    {"from": "Alice", "to": "Todos", "text": "entra na sala...", "type": "status"},
    {"from": "Alice", "to": "Todos", "text": "hi", "type": "message"},
    {"from": "Alice", "to": "Bob", "text": "secret", "type": "private_message"},
    {"from": "Bob", "to": "Carol", "text": "psst", "type": "private_message"},
    {"from": "Carol", "to": "Bob", "text": "public reply", "type": "message"},
    {"from": "Dave", "to": "Todos", "text": "to everyone", "type": "private_message"},
]


def _texts(msgs):
    return [m["text"] for m in msgs]


def test_predicate():
    visible = [m for m in MESSAGES if is_visible(m, "Carol")]
    assert _texts(visible) == ["entra na sala...", "hi", "psst", "public reply", "to everyone"]
    visible = [m for m in MESSAGES if is_visible(m, "Alice")]
    assert "secret" in _texts(visible)
    assert "psst" not in _texts(visible)


def test_mongo_filter_matches_predicate(db):
    asyncio.run(db["messages"].insert_many([dict(m) for m in MESSAGES]))
    for user in ("Alice", "Bob", "Carol", "Dave", "Eve"):
        found = asyncio.run(db["messages"].find(visibility_filter(user), {"_id": 0}).to_list(length=None))
        expected = [m for m in MESSAGES if is_visible(m, user)]
        assert found == expected, user
