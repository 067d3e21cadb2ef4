import logging
from contextlib import asynccontextmanager
from typing import Any, List, Optional

import requests
from fastapi import Body, Depends, FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth import auth_router
from config import get_settings
from db import FAVORITES_COLLECTION, get_db
from favorites import OwnerEmail, add_favorite, list_favorites
from models import CurrentUser, Favorite
from omdb import OMDbClient, UpstreamSearchError, get_omdb_client
from utils.auth_utils import get_current_user
from utils.logging_utils import mask_uri, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Raises a ValidationError, and so refuses to start, without MONGO_URI or JWT_SECRET
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Mongo URI: %s", mask_uri(settings.mongo_uri))
    logger.info("CineSearch Backend API started")
    yield
    logger.info("CineSearch Backend API shutting down")


app = FastAPI(
    title="CineSearch Backend API",
    description="User accounts, favorite movies and OMDb search",
    version="1.0.0",
    lifespan=lifespan,
)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"]
CORS_EXPOSE_HEADERS = ["Auth-Token", "Content-Length"]

# Responses built by the catch-all handler bypass CORSMiddleware
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    "Access-Control-Expose-Headers": ", ".join(CORS_EXPOSE_HEADERS),
}

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=CORS_METHODS,
    allow_headers=CORS_ALLOW_HEADERS,
    expose_headers=CORS_EXPOSE_HEADERS,
)

app.include_router(auth_router)

# -------------------------------
# Error handlers
# -------------------------------

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Preflights carrying Origin are answered by CORSMiddleware, bare OPTIONS end up here
    if request.method == "OPTIONS" and exc.status_code in (404, 405):
        return PlainTextResponse("OK")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request data", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
        headers=CORS_HEADERS,
    )

# -------------------------------
# Routes
# -------------------------------

@app.get("/", response_class=PlainTextResponse)
def root():
    return "Welcome to the CineSearch Backend API"


@app.post("/api/favorite")
def add_to_favorites(
    movie: Any = Body(None),
    user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    # an empty body is stored as an empty object
    if movie is None:
        movie = {}
    try:
        return add_favorite(db[FAVORITES_COLLECTION], OwnerEmail(user.email), movie)
    except (PyMongoError, TypeError, ValueError) as e:
        logger.exception("Error adding favorite for %s", user.email)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/favorite", response_model=List[Favorite])
def get_favorites(
    user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    try:
        return list_favorites(db[FAVORITES_COLLECTION], OwnerEmail(user.email))
    except PyMongoError as e:
        logger.exception("Error getting favorites for %s", user.email)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/search")
def search_movies(
    name: Optional[str] = None,
    title: Optional[str] = None,
    user: CurrentUser = Depends(get_current_user),
    client: OMDbClient = Depends(get_omdb_client),
):
    if title is not None:
        logger.debug("Ignoring title=%r, only name is searched", title)
    try:
        return client.search(name)
    except UpstreamSearchError as e:
        # "Movie not found!" lands here too and is answered with a 500
        raise HTTPException(status_code=500, detail=e.message)
    except requests.RequestException as e:
        logger.error("OMDb request failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=get_settings().port)
