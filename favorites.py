# favorites.py
import json
import logging
from typing import Any, List, NewType

from pymongo.collection import Collection

logger = logging.getLogger(__name__)

# Owner of a favorite. Favorites reference users by email, nothing enforces it.
OwnerEmail = NewType("OwnerEmail", str)


def serialize_movie(movie: Any) -> str:
    """Compact JSON text of an arbitrary movie payload."""
    return json.dumps(movie, separators=(",", ":"), ensure_ascii=False)


# ---------------------------
# Add a favorite
# ---------------------------

def add_favorite(favs: Collection, owner: OwnerEmail, movie: Any) -> str:
    serialized = serialize_movie(movie)
    favs.insert_one({"email": owner, "movie": serialized})
    logger.info("Favorite saved for %s", owner)
    return serialized


# ---------------------------
# List favorites
# ---------------------------

def list_favorites(favs: Collection, owner: OwnerEmail) -> List[dict]:
    """
    Return every favorite stored for ``owner`` in store order.

    The owner filter is always applied here so callers cannot read another
    user's favorites.
    """
    cursor = favs.find({"email": owner}, {"_id": 0, "email": 1, "movie": 1})
    return list(cursor)
