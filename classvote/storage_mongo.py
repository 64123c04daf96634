# storage_mongo.py
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from classvote.database.connection import OPTIONS_COLLECTION_NAME, VOTES_COLLECTION_NAME
from classvote.errors import DuplicateError, InvalidNameError, StorageError, ValidationError
from classvote.models.option_model import Option
from classvote.models.vote_model import NAME_ERROR, Vote

logger = logging.getLogger(__name__)


def _public(document: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a stored document with Mongo's _id exposed as a string id."""
    doc = dict(document)
    doc["id"] = str(doc.pop("_id"))
    return doc


class MongoStorage:
    def __init__(self, db):
        """
        Wrap the options and votes collections of a database handle.

        Args:
            db: a motor database (or anything exposing the same async
                collection API)
        """
        self.db = db
        self.options = db[OPTIONS_COLLECTION_NAME]
        self.votes = db[VOTES_COLLECTION_NAME]

    async def ensure_indexes(self) -> None:
        """Create the unique index on normalizedName that makes one vote per name hold."""
        try:
            await self.votes.create_index("normalizedName", unique=True)
            await self.options.create_index([("isActive", ASCENDING)])
        except PyMongoError as e:
            logger.error(f"Failed to create indexes: {e}")
            raise StorageError(str(e)) from e
        logger.info("MongoDB indexes ensured")

    async def insert_option(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate and insert an option document

        Args:
            data: title, imagePath and optionally isActive

        Returns:
            The stored option with its id

        Raises:
            ValidationError: the document is incomplete
            DuplicateError: a unique index rejected it
            StorageError: any other database failure
        """
        try:
            option = Option.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(_first_message(e)) from e

        record = option.model_dump()
        await self._insert(self.options, record)
        logger.info(f"Option '{option.title}' saved with id {record['_id']}")
        return _public(record)

    async def list_active_options(self) -> List[Dict[str, Any]]:
        return await self._find(self.options, {"isActive": True})

    async def insert_vote(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate and insert a vote document.

        The name is checked again here and normalizedName/timestamp are
        derived by the Vote model, so a caller can never supply its own key.

        Args:
            data: name, class and choice (timestamp optional)

        Returns:
            The stored vote with its id

        Raises:
            InvalidNameError: the name is not letters and spaces only
            DuplicateError: the normalized name already voted
            StorageError: any other database failure
        """
        try:
            vote = Vote.model_validate(data)
        except PydanticValidationError as e:
            if any(err["loc"][:1] == ("name",) for err in e.errors()):
                raise InvalidNameError(NAME_ERROR) from e
            raise ValidationError(_first_message(e)) from e

        record = vote.model_dump(by_alias=True)
        await self._insert(self.votes, record)
        logger.info(f"Vote by '{vote.normalizedName}' saved with id {record['_id']}")
        return _public(record)

    async def find_vote_by_normalized_name(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            vote = await self.votes.find_one({"normalizedName": key})
        except PyMongoError as e:
            logger.error(f"Error looking up vote for '{key}': {e}")
            raise StorageError(str(e)) from e
        return _public(vote) if vote else None

    async def list_votes(self) -> List[Dict[str, Any]]:
        """All votes, most recent first."""
        return await self._find(self.votes, {}, sort=[("timestamp", DESCENDING)])

    async def check_health(self) -> bool:
        try:
            await self.db.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"MongoDB health check failed: {e}")
            return False

    async def _insert(self, collection, record: Dict[str, Any]) -> None:
        # insert_one sets record["_id"]
        try:
            await collection.insert_one(record)
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate key in {collection.name}: {e}")
            raise DuplicateError(str(e)) from e
        except PyMongoError as e:
            logger.error(f"Error inserting into {collection.name}: {e}")
            raise StorageError(str(e)) from e

    async def _find(self, collection, query: Dict[str, Any], sort=None) -> List[Dict[str, Any]]:
        try:
            cursor = collection.find(query)
            if sort:
                cursor = cursor.sort(sort)
            return [_public(doc) async for doc in cursor]
        except PyMongoError as e:
            logger.error(f"Error reading {collection.name}: {e}")
            raise StorageError(str(e)) from e


def _first_message(error: PydanticValidationError) -> str:
    err = error.errors()[0]
    field = ".".join(str(part) for part in err["loc"])
    return f"{field}: {err['msg']}" if field else err["msg"]
