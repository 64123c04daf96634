from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from classvote.config import Settings
from classvote.dependencies import get_settings, get_storage
from classvote.errors import VotingError
from classvote.models.option_model import OptionOut
from classvote.services import option_service
from classvote.storage_mongo import MongoStorage
from classvote.uploads import save_image

router = APIRouter(prefix="/api", tags=["Options"])


@router.post("/options", response_model=OptionOut, status_code=201)
async def create_option(
    title: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    storage: MongoStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    """
    Admin upload of a votable option: a title plus an image file
    (image/* only, at most 5MB by default).
    """
    stored = await save_image(image, settings)
    try:
        return await option_service.create_option(storage, title, stored)
    except VotingError:
        # drop the file of an option that was never recorded
        if stored is not None:
            stored.path.unlink(missing_ok=True)
        raise


@router.get("/options", response_model=List[OptionOut])
async def list_options(storage: MongoStorage = Depends(get_storage)):
    return await option_service.list_active_options(storage)
