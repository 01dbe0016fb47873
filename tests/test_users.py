"""Test user registration, login and profile endpoints."""

import pytest


def register(client, username="alice", email="alice@example.com", password="password123"):
    return client.post(
        "/users/register",
        json={"username": username, "email": email, "password": password},
    )


def login(client, username="alice", password="password123"):
    return client.post("/users/login", json={"username": username, "password": password})


def test_register_user(client):
    response = register(client)

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["username"] == "alice"
    assert user["email"] == "alice@example.com"
    assert user["is_admin"] is False
    assert "password_hash" not in user


@pytest.mark.parametrize(
    "payload,message",
    [
        ({"username": "", "email": "a@example.com", "password": "password123"}, "All fields are required"),
        ({"username": "bob", "email": "not-an-email", "password": "password123"}, "Invalid email format"),
        ({"username": "bob", "email": "b@example.com", "password": "short"}, "at least 8 characters"),
    ],
)
def test_register_validation(client, payload, message):
    response = client.post("/users/register", json=payload)

    assert response.status_code == 400
    assert message in response.json()["detail"]


def test_register_duplicate_email(client):
    register(client)

    response = register(client, username="alice2")

    assert response.status_code == 409
    assert response.json()["detail"] == "Email already in use"


def test_register_duplicate_username(client):
    register(client)

    response = register(client, email="other@example.com")

    assert response.status_code == 409
    assert response.json()["detail"] == "Username already in use"


def test_login_returns_working_token(client):
    register(client)

    response = login(client)

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["username"] == "alice"

    details = client.get("/users/details", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert details.status_code == 200
    assert details.json()["user"]["email"] == "alice@example.com"


def test_login_wrong_password(client):
    register(client)

    response = login(client, password="wrong-password")

    assert response.status_code == 401


def test_login_unknown_user(client):
    response = login(client, username="nobody")

    assert response.status_code == 401


def test_details_requires_auth(client):
    assert client.get("/users/details").status_code == 401


def test_get_user_by_id(client, make_user):
    user = make_user("carol")

    response = client.get(f"/users/{user.id}")

    assert response.status_code == 200
    assert response.json() == {
        "id": user.id,
        "username": "carol",
        "email": "carol@example.com",
        "image_url": None,
    }


def test_get_user_not_found(client):
    assert client.get("/users/999").status_code == 404


def test_update_user_info(client, make_user, auth_headers):
    user = make_user("dave")

    response = client.put(
        "/users/updateUserInfo",
        headers=auth_headers(user),
        json={"username": "david", "email": "david@example.com"},
    )

    assert response.status_code == 200
    assert response.json()["user"]["username"] == "david"
    assert response.json()["user"]["email"] == "david@example.com"


def test_update_user_info_conflict(client, make_user, auth_headers):
    user = make_user("erin")
    make_user("frank")

    response = client.put(
        "/users/updateUserInfo",
        headers=auth_headers(user),
        json={"email": "frank@example.com"},
    )

    assert response.status_code == 409


def test_update_user_info_requires_a_field(client, make_user, auth_headers):
    user = make_user("gina")

    response = client.put("/users/updateUserInfo", headers=auth_headers(user), json={})

    assert response.status_code == 400


def test_update_user_image(client, make_user, auth_headers, assets):
    user = make_user("hank")

    response = client.put(
        "/users/updateUserImage",
        headers=auth_headers(user),
        files={"image": ("me.webp", b"fake webp", "image/webp")},
    )

    assert response.status_code == 200
    assert response.json()["user"]["image_url"].endswith("/me.webp")
    assert assets.uploads[0]["folder"] == "profile_pictures"
    assert assets.uploads[0]["transformation"] == [{"width": 500, "height": 500, "crop": "limit"}]


def test_update_user_image_rejects_non_image(client, make_user, auth_headers, assets):
    user = make_user("ivy")

    response = client.put(
        "/users/updateUserImage",
        headers=auth_headers(user),
        files={"image": ("script.sh", b"echo hi", "text/x-shellscript")},
    )

    assert response.status_code == 400
    assert assets.uploads == []


def test_update_user_image_without_file_keeps_current(client, make_user, auth_headers, assets):
    user = make_user("jack")

    response = client.put("/users/updateUserImage", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["user"]["image_url"] is None
    assert assets.uploads == []
