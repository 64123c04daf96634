from typing import List

from fastapi import APIRouter, Depends

from classvote.dependencies import get_storage
from classvote.models.vote_model import VoteOut
from classvote.services import results_service
from classvote.storage_mongo import MongoStorage

router = APIRouter(prefix="/api", tags=["Results"])


@router.get("/results", response_model=List[VoteOut])
async def get_results(storage: MongoStorage = Depends(get_storage)):
    """All recorded votes, most recent first."""
    return await results_service.list_votes(storage)
