import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase

from .clock import clock_time
from .errors import NotFound, Unauthorized, ValidationError
from .sanitize import sanitize_fields
from .validation import validate_message
from .visibility import visibility_filter

logger = logging.getLogger("batepapo.messages")

USER_FIELDS = ("from", "to", "text", "type")


def serialize(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(doc)
    if "_id" in out:
        out["_id"] = str(out["_id"])
    return out


def _who(user: Optional[str]) -> str:
    if not isinstance(user, str):
        return ""
    return sanitize_fields({"user": user}, ("user",))["user"]


def _object_id(message_id: str) -> ObjectId:
    try:
        return ObjectId(message_id)
    except (InvalidId, TypeError):
        raise NotFound(f"message {message_id} not found") from None


class MessageService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.messages = db["messages"]
        self.participants = db["participants"]

    async def _is_participant(self, name: str) -> bool:
        return await self.participants.find_one({"name": name}) is not None

    def _prepare(self, sender: str, body: Any) -> Dict[str, Any]:
        if not isinstance(body, dict):
            raise ValidationError(["body: must be a JSON object"])
        fields = {k: body[k] for k in ("to", "text", "type") if k in body}
        fields["from"] = sender
        fields = sanitize_fields(fields, USER_FIELDS)
        fields["time"] = clock_time()
        return validate_message(fields).to_document()

    async def post(self, sender: str, body: Any) -> Dict[str, Any]:
        doc = self._prepare(sender, body)
        if not await self._is_participant(doc["from"]):
            raise ValidationError([f"participant {doc['from']} is not in the room"])
        res = await self.messages.insert_one(doc)
        doc["_id"] = res.inserted_id
        logger.info("message %s from=%s to=%s type=%s", doc["_id"], doc["from"], doc["to"], doc["type"])
        return serialize(doc)

    async def visible_to(self, user: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Messages ``user`` may read, oldest first, optionally only the last ``limit``."""
        query = visibility_filter(_who(user))
        if limit is None:
            docs = await self.messages.find(query, sort=[("_id", 1)]).to_list(length=None)
        else:
            # newest N, then back to oldest-first
            docs = await self.messages.find(query, sort=[("_id", -1)], limit=limit).to_list(length=None)
            docs.reverse()
        return [serialize(d) for d in docs]

    async def _owned(self, message_id: str, requester: str, action: str) -> Dict[str, Any]:
        doc = await self.messages.find_one({"_id": _object_id(message_id)})
        if doc is None:
            raise NotFound(f"message {message_id} not found")
        if doc.get("from") != requester:
            raise Unauthorized(f"{requester} is not allowed to {action} message {message_id}")
        return doc

    async def delete(self, message_id: str, requester: str) -> None:
        doc = await self._owned(message_id, _who(requester), "delete")
        await self.messages.delete_one({"_id": doc["_id"]})
        logger.info("message %s deleted by %s", message_id, requester)

    async def edit(self, message_id: str, requester: str, body: Any) -> Dict[str, Any]:
        fields = self._prepare(requester, body)
        if not await self._is_participant(fields["from"]):
            raise NotFound(f"participant {fields['from']} not found")
        doc = await self._owned(message_id, fields["from"], "edit")
        await self.messages.update_one({"_id": doc["_id"]}, {"$set": fields})
        logger.info("message %s edited by %s", message_id, requester)
        doc.update(fields)
        return serialize(doc)
