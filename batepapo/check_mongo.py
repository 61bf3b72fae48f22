"""Simple connectivity check for the MongoDB used by the backend.
Run this after starting MongoDB to verify Motor can connect:

    python -m batepapo.check_mongo
"""
import asyncio
import sys

import motor.motor_asyncio
from pymongo.errors import PyMongoError

from .config import get_settings


async def main() -> int:
    settings = get_settings()
    print('Using MONGODB_URI=', settings.mongodb_uri)
    client = motor.motor_asyncio.AsyncIOMotorClient(settings.mongodb_uri, serverSelectionTimeoutMS=5000)
    try:
        db = client[settings.database]
        participants = await db.participants.count_documents({})
        messages = await db.messages.count_documents({})
        print(f'Connected to MongoDB, database {settings.database}: '
              f'{participants} participant(s), {messages} message(s)')
        return 0
    except PyMongoError as e:
        print('Connection failed:', e)
        return 1
    finally:
        client.close()


if __name__ == '__main__':
    sys.exit(asyncio.run(main()))
