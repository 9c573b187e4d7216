from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from . import models, schemas


def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_recipe(db: Session, recipe_id: int) -> Optional[models.Recipe]:
    return db.query(models.Recipe).filter(models.Recipe.id == recipe_id).first()


def get_profile(db: Session, user_id: int) -> Optional[models.UserProfile]:
    return (
        db.query(models.UserProfile)
        .filter(models.UserProfile.user_id == user_id)
        .first()
    )


def create_recipe(db: Session, recipe: schemas.RecipeCreate) -> models.Recipe:
    db_recipe = models.Recipe(
        title=recipe.title,
        ingredients=recipe.ingredients,
        instructions=recipe.instructions,
        photo_url=recipe.photo_url,
        user_id=recipe.user_id,
    )
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def update_recipe(
    db: Session, recipe_id: int, changes: schemas.RecipeUpdate
) -> Optional[models.Recipe]:
    db_recipe = get_recipe(db, recipe_id)
    if not db_recipe:
        return None
    changes.apply_to(db_recipe)
    db_recipe.updated_at = models.utcnow()
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def list_feed(
    db: Session, limit: Optional[int] = None, cursor: Optional[int] = None
) -> List[models.Recipe]:
    """Recipes newest first, with author, comments and likes loaded.

    ``cursor`` is the id of the last recipe of the previous page.
    """
    query = db.query(models.Recipe).options(
        selectinload(models.Recipe.user).selectinload(models.User.profile),
        selectinload(models.Recipe.comments).selectinload(models.Comment.user),
        selectinload(models.Recipe.likes).selectinload(models.Like.user),
    )
    if cursor is not None:
        query = query.filter(models.Recipe.id < cursor)
    query = query.order_by(models.Recipe.id.desc())
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def search_recipes(db: Session, text: str) -> List[models.Recipe]:
    return (
        db.query(models.Recipe)
        .filter(
            or_(
                models.Recipe.title.icontains(text, autoescape=True),
                models.Recipe.ingredients.icontains(text, autoescape=True),
                models.Recipe.instructions.icontains(text, autoescape=True),
            )
        )
        .order_by(models.Recipe.id)
        .all()
    )


def update_profile(
    db: Session, db_profile: models.UserProfile, changes: schemas.ProfileUpdate
) -> models.UserProfile:
    changes.apply_to(db_profile)
    db_profile.updated_at = models.utcnow()
    db.commit()
    db.refresh(db_profile)
    return db_profile


def get_like(db: Session, recipe_id: int, user_id: int) -> Optional[models.Like]:
    return (
        db.query(models.Like)
        .filter(models.Like.recipe_id == recipe_id, models.Like.user_id == user_id)
        .first()
    )


def create_like(db: Session, recipe_id: int, user_id: int) -> models.Like:
    db_like = models.Like(recipe_id=recipe_id, user_id=user_id)
    db.add(db_like)
    db.commit()
    db.refresh(db_like)
    return db_like


def create_comment(
    db: Session, recipe_id: int, comment: schemas.CommentCreate
) -> models.Comment:
    db_comment = models.Comment(
        recipe_id=recipe_id, user_id=comment.user_id, content=comment.content
    )
    db.add(db_comment)
    db.commit()
    db.refresh(db_comment)
    return db_comment
