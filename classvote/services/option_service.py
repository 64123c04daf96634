import logging
from typing import Any, Dict, List, Optional

from classvote.errors import ValidationError
from classvote.storage_mongo import MongoStorage
from classvote.uploads import StoredImage

logger = logging.getLogger(__name__)


# Create an option from a stored upload
async def create_option(storage: MongoStorage, title: Optional[str],
                        image: Optional[StoredImage]) -> Dict[str, Any]:
    if image is None:
        raise ValidationError("No image uploaded")
    if title is None:
        raise ValidationError("Title is required")

    option = await storage.insert_option({
        "title": title,
        "imagePath": image.public_url,
        "isActive": True,
    })
    logger.info(f"Created option {option['id']} ({image.filename})")
    return option


# Options visible to voters; order is whatever MongoDB returns
async def list_active_options(storage: MongoStorage) -> List[Dict[str, Any]]:
    return await storage.list_active_options()
