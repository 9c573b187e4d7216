# flake8: noqa
import pytest
from pydantic import ValidationError

from recipeshare import models, schemas


def test_partial_update_changes_only_sent_fields():
    update = schemas.RecipeUpdate.model_validate({"title": "New", "photoUrl": None})
    assert update.changes() == {"title": "New", "photo_url": None}


def test_partial_update_apply_to():
    recipe = models.Recipe(title="Old", ingredients="a", instructions="b", photo_url="u")
    schemas.RecipeUpdate.model_validate({"ingredients": "c"}).apply_to(recipe)
    assert (recipe.title, recipe.ingredients, recipe.photo_url) == ("Old", "c", "u")


def test_recipe_update_rejects_null_for_required_columns():
    with pytest.raises(ValidationError):
        schemas.RecipeUpdate.model_validate({"ingredients": None})


def test_recipe_create_accepts_snake_and_camel_names():
    a = schemas.RecipeCreate.model_validate(
        {"title": "t", "ingredients": "i", "instructions": "s", "userId": 3}
    )
    b = schemas.RecipeCreate(title="t", ingredients="i", instructions="s", user_id=3)
    assert a == b
