from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError

from classvote.errors import ValidationError
from classvote.models.vote_model import VoteAck, VoteIn
from classvote.services import vote_service
from classvote.dependencies import get_storage
from classvote.storage_mongo import MongoStorage

vote_router = APIRouter(prefix="/api", tags=["Vote"])


async def read_vote_body(request: Request) -> VoteIn:
    """Accept the vote either as JSON or as a urlencoded/multipart form."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError as e:
            raise ValidationError("Malformed JSON body") from e
    else:
        data = dict(await request.form())

    if not isinstance(data, dict):
        raise ValidationError("Vote must be an object with name, class and choice")
    try:
        return VoteIn.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(str(e.errors()[0]["msg"])) from e


@vote_router.post("/vote", response_model=VoteAck)
async def cast_vote(request: Request, storage: MongoStorage = Depends(get_storage)):
    """
    Casts a vote. A voter name may only vote once, compared case-insensitively.
    """
    vote = await read_vote_body(request)
    return await vote_service.cast_vote(storage, vote.name, vote.voter_class, vote.choice)
