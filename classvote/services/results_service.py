from typing import Any, Dict, List

from classvote.storage_mongo import MongoStorage


# Every vote, newest first
async def list_votes(storage: MongoStorage) -> List[Dict[str, Any]]:
    return await storage.list_votes()
