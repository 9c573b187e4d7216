"""
HTTP routes of the recipe sharing API.

Every route validates its input with the request schemas, performs its
data store work through ``crud`` and answers with the
``{success, message, data}`` envelope.  Failures are raised as
``errors.ServiceError`` subclasses and formatted by the handlers
registered in ``errors.register_error_handlers``.

Run with::

    python -m recipeshare
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Path, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import crud, schemas
from .config import settings
from .db import SessionLocal, init_db
from .errors import ConflictError, NotFoundError, ValidationError, register_error_handlers
from .logging_config import setup_logging
from .responses import envelope

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize DB once at startup
    init_db()
    yield


setup_logging(settings.log_level, settings.log_file or None)

app = FastAPI(
    title=settings.project_name, version=settings.api_version, lifespan=lifespan
)
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _require_user(db: Session, user_id: int):
    user = crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def _require_recipe(db: Session, recipe_id: int):
    recipe = crud.get_recipe(db, recipe_id)
    if not recipe:
        raise NotFoundError("Recipe not found")
    return recipe


# Recipes


@app.post("/recipes", status_code=201)
def create_recipe(payload: schemas.RecipeCreate, db: Session = Depends(get_db)):
    # existence check and insert are not wrapped in one transaction;
    # the foreign key still rejects an owner deleted in between
    _require_user(db, payload.user_id)
    recipe = crud.create_recipe(db, payload)
    logger.info("Recipe %s created by user %s", recipe.id, recipe.user_id)
    return envelope(
        "Recipe created successfully",
        schemas.RecipeCreated(recipe_id=str(recipe.id)),
        status_code=201,
    )


@app.get("/recipes/feed")
def list_feed(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, le=settings.feed_max_page_size),
    cursor: Optional[int] = Query(None, ge=1, le=schemas.MAX_ID),
    db: Session = Depends(get_db),
):
    recipes = crud.list_feed(db, limit=limit, cursor=cursor)
    items = [schemas.FeedItem.model_validate(r) for r in recipes]

    headers = None
    if limit is not None and len(items) == limit:
        next_url = request.url.include_query_params(limit=limit, cursor=items[-1].id)
        headers = {"Link": f'<{next_url}>; rel="next"'}
    return envelope("Recipes fetched successfully", items, headers=headers)


@app.get("/recipes/search")
def search_recipes(
    query: Optional[str] = Query(None, max_length=200),
    db: Session = Depends(get_db),
):
    """Match ``query`` against title, ingredients and instructions.

    A query made only of whitespace is rejected like a missing one.
    """
    if not query or not query.strip():
        raise ValidationError("Query parameter is required")
    recipes = crud.search_recipes(db, query)
    return envelope(
        "Recipes fetched successfully",
        [schemas.RecipeRead.model_validate(r) for r in recipes],
    )


@app.put("/recipes/{recipe_id}")
def update_recipe(
    payload: schemas.RecipeUpdate,
    recipe_id: int = Path(..., ge=1, le=schemas.MAX_ID),
    db: Session = Depends(get_db),
):
    recipe = crud.update_recipe(db, recipe_id, payload)
    if recipe is None:
        raise NotFoundError("Recipe not found")
    logger.info("Recipe %s updated (%s)", recipe_id, ", ".join(payload.changes()) or "no fields")
    return envelope(
        "Recipe updated successfully", schemas.RecipeRecord.model_validate(recipe)
    )


@app.post("/recipes/{recipe_id}/likes", status_code=201)
def like_recipe(
    payload: schemas.LikeCreate,
    recipe_id: int = Path(..., ge=1, le=schemas.MAX_ID),
    db: Session = Depends(get_db),
):
    _require_recipe(db, recipe_id)
    _require_user(db, payload.user_id)
    if crud.get_like(db, recipe_id, payload.user_id):
        raise ConflictError("Recipe already liked")
    try:
        like = crud.create_like(db, recipe_id, payload.user_id)
    except IntegrityError:
        # a concurrent request inserted the same pair first
        db.rollback()
        raise ConflictError("Recipe already liked")
    logger.info("User %s liked recipe %s", payload.user_id, recipe_id)
    return envelope(
        "Recipe liked successfully",
        schemas.LikeRead.model_validate(like),
        status_code=201,
    )


@app.post("/recipes/{recipe_id}/comments", status_code=201)
def comment_recipe(
    payload: schemas.CommentCreate,
    recipe_id: int = Path(..., ge=1, le=schemas.MAX_ID),
    db: Session = Depends(get_db),
):
    _require_recipe(db, recipe_id)
    _require_user(db, payload.user_id)
    comment = crud.create_comment(db, recipe_id, payload)
    logger.info("User %s commented on recipe %s", payload.user_id, recipe_id)
    return envelope(
        "Comment added successfully",
        schemas.CommentRead.model_validate(comment),
        status_code=201,
    )


# Profiles


@app.get("/users/{user_id}/profile")
def read_profile(
    user_id: int = Path(..., ge=1, le=schemas.MAX_ID),
    db: Session = Depends(get_db),
):
    _require_user(db, user_id)
    profile = crud.get_profile(db, user_id)
    if not profile:
        raise NotFoundError("Profile not found")
    return envelope(
        "Profile fetched successfully", schemas.ProfileRead.model_validate(profile)
    )


@app.post("/users/{user_id}/profile")
def update_profile(
    payload: schemas.ProfileUpdate,
    user_id: int = Path(..., ge=1, le=schemas.MAX_ID),
    db: Session = Depends(get_db),
):
    _require_user(db, user_id)
    profile = crud.get_profile(db, user_id)
    if not profile:
        # profiles are created at registration, never implicitly here
        raise NotFoundError("Profile not found")
    profile = crud.update_profile(db, profile, payload)
    logger.info("Profile of user %s updated", user_id)
    return envelope(
        "Profile updated successfully", schemas.ProfileRead.model_validate(profile)
    )
