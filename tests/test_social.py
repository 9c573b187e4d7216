# flake8: noqa
from unittest.mock import patch

from recipeshare import crud, models


def test_like_recipe_once_per_user(client, make_user, make_recipe, db_session):
    author = make_user("author")
    fan = make_user("fan")
    rid = make_recipe(author)

    res = client.post(f"/recipes/{rid}/likes", json={"userId": fan})
    assert res.status_code == 201
    assert res.json()["data"]["user"] == {"id": fan, "username": "fan"}

    again = client.post(f"/recipes/{rid}/likes", json={"userId": fan})
    assert again.status_code == 409
    assert again.json()["message"] == "Recipe already liked"
    assert db_session.query(models.Like).count() == 1

    # a different user may still like it
    assert client.post(f"/recipes/{rid}/likes", json={"userId": author}).status_code == 201


def test_like_unknown_recipe_or_user(client, make_user, make_recipe):
    uid = make_user("gus")
    rid = make_recipe(uid)
    assert client.post("/recipes/999/likes", json={"userId": uid}).status_code == 404
    assert client.post(f"/recipes/{rid}/likes", json={"userId": 999}).status_code == 404


def test_comment_recipe(client, make_user, make_recipe):
    uid = make_user("ivy")
    rid = make_recipe(uid)

    res = client.post(f"/recipes/{rid}/comments", json={"userId": uid, "content": "Nice"})
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["content"] == "Nice"
    assert data["user"] == {"id": uid, "username": "ivy"}
    assert "createdAt" in data


def test_comment_requires_content(client, make_user, make_recipe):
    uid = make_user("jack")
    rid = make_recipe(uid)
    assert client.post(f"/recipes/{rid}/comments", json={"userId": uid, "content": " "}).status_code == 400
    assert client.post(f"/recipes/{rid}/comments", json={"userId": uid}).status_code == 400


def test_unknown_route_uses_envelope(client):
    res = client.get("/nope")
    assert res.status_code == 404
    assert res.json()["success"] is False


def test_duplicate_like_caught_by_unique_constraint(client, make_user, make_recipe, db_session):
    uid = make_user("racer")
    rid = make_recipe(uid)
    assert client.post(f"/recipes/{rid}/likes", json={"userId": uid}).status_code == 201

    # skip the lookup, as when two requests check before either inserts
    with patch.object(crud, "get_like", return_value=None):
        res = client.post(f"/recipes/{rid}/likes", json={"userId": uid})
    assert res.status_code == 409
    assert res.json() == {"success": False, "message": "Recipe already liked", "data": None}
    assert db_session.query(models.Like).count() == 1
