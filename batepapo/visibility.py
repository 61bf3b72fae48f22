"""Which messages a given participant is allowed to see."""
from typing import Any, Dict

from . import BROADCAST


def visibility_filter(user: str) -> Dict[str, Any]:
    """MongoDB filter matching public, broadcast and the user's own private messages."""
    return {
        "$or": [
            {"type": "message"},
            {"to": BROADCAST},
            {"$and": [
                {"type": "private_message"},
                {"$or": [{"to": user}, {"from": user}]},
            ]},
        ]
    }


def is_visible(message: Dict[str, Any], user: str) -> bool:
    mtype = message.get("type")
    if mtype == "message" or message.get("to") == BROADCAST:
        return True
    return mtype == "private_message" and user in (message.get("to"), message.get("from"))
