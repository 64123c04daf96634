import logging
from typing import Dict, Optional

from classvote.errors import DuplicateError, DuplicateVoteError, InvalidNameError
from classvote.models.vote_model import NAME_ERROR, is_valid_name, normalize_name
from classvote.storage_mongo import MongoStorage

logger = logging.getLogger(__name__)


async def cast_vote(storage: MongoStorage, name: Optional[str],
                    voter_class: Optional[str], choice: Optional[str]) -> Dict[str, bool]:
    """
    Record one vote per voter name, compared case-insensitively.

    The lookup below only short-circuits the common case. Two requests for
    the same name can both pass it; the unique index on normalizedName then
    rejects the second insert and that is reported as the same duplicate.
    """
    if not is_valid_name(name):
        logger.warning(f"Rejected vote with invalid name {name!r}")
        raise InvalidNameError(NAME_ERROR)

    normalized = normalize_name(name)
    if await storage.find_vote_by_normalized_name(normalized) is not None:
        logger.warning(f"Name '{normalized}' has already voted")
        raise DuplicateVoteError()

    try:
        await storage.insert_vote({"name": name, "class": voter_class, "choice": choice})
    except DuplicateError as e:
        logger.warning(f"Name '{normalized}' lost a concurrent vote insert")
        raise DuplicateVoteError() from e

    return {"success": True}
