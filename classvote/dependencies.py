from fastapi import Request

from classvote.config import Settings
from classvote.storage_mongo import MongoStorage


def get_storage(request: Request) -> MongoStorage:
    return request.app.state.storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
