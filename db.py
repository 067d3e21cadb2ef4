# db.py
from functools import lru_cache

from fastapi import Depends
from pymongo import MongoClient
from pymongo.database import Database

from config import Settings, get_settings

USERS_COLLECTION = "users"
FAVORITES_COLLECTION = "favs"


@lru_cache
def get_client(mongo_uri: str) -> MongoClient:
    # MongoClient connects lazily and pools connections across threads
    return MongoClient(mongo_uri)


def get_db(settings: Settings = Depends(get_settings)) -> Database:
    client = get_client(settings.mongo_uri)
    return client.get_default_database(default=settings.mongo_db_name)
