"""User CRUD endpoint tests."""

import pytest


def _create(client, headers, name="Jane", email="jane@example.com", password="janepass"):
    return client.post(
        "/api/users",
        headers=headers,
        json={"name": name, "email": email, "password": password},
    )


def _user_id(client, headers, email):
    users = client.get("/api/users", headers=headers).json()
    return next(user["id"] for user in users if user["email"] == email)


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("get", "/api/users"),
        ("post", "/api/users"),
        ("get", "/api/users/1"),
        ("put", "/api/users/1"),
        ("patch", "/api/users/1"),
        ("delete", "/api/users/1"),
    ],
)
def test_user_routes_require_authentication(client, method, path):
    """Test every users route rejects unauthenticated requests."""
    response = client.request(method.upper(), path)
    assert response.status_code == 401
    assert response.json() == {"message": "Unauthenticated."}


def test_list_users(client, auth_headers):
    """Test listing users includes the registered user."""
    _create(client, auth_headers)

    response = client.get("/api/users", headers=auth_headers)
    assert response.status_code == 200
    emails = [user["email"] for user in response.json()]
    assert emails == [auth_headers.email, "jane@example.com"]


def test_create_user(client, auth_headers):
    """Test administrative creation of a user."""
    response = _create(client, auth_headers)
    assert response.status_code == 201
    assert response.json() == {"message": "A New User successfully created"}


def test_created_user_can_login(client, auth_headers):
    """Test the password given at creation is hashed and usable for login."""
    _create(client, auth_headers)

    response = client.post(
        "/api/login", json={"email": "jane@example.com", "password": "janepass"}
    )
    assert response.status_code == 200


def test_create_user_does_not_need_confirmation(client, auth_headers):
    """Test creation accepts a password without confirmation."""
    response = _create(client, auth_headers, email="noconfirm@example.com")
    assert response.status_code == 201


def test_create_user_duplicate_email(client, auth_headers):
    """Test creation rejects an email already in use."""
    response = _create(client, auth_headers, email=auth_headers.email)
    assert response.status_code == 422
    assert response.json()["errors"]["email"] == ["The email has already been taken."]


def test_create_user_missing_name(client, auth_headers):
    """Test creation rejects a blank name."""
    response = _create(client, auth_headers, name="   ")
    assert response.status_code == 422
    assert response.json()["errors"]["name"] == ["The name field is required."]


def test_show_user(client, auth_headers):
    """Test getting a specific user."""
    user_id = _user_id(client, auth_headers, auth_headers.email)

    response = client.get(f"/api/users/{user_id}", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == user_id
    assert data["name"] == "Test User"
    assert data["email"] == auth_headers.email
    assert data["created_at"]
    assert data["updated_at"]
    assert "password_hash" not in data


def test_show_unknown_user(client, auth_headers):
    """Test getting a user that never existed."""
    response = client.get("/api/users/99999", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}


def test_show_non_integer_id(client, auth_headers):
    """Test a non-numeric id is a validation failure."""
    response = client.get("/api/users/abc", headers=auth_headers)
    assert response.status_code == 422
    assert "user_id" in response.json()["errors"]


def test_update_user(client, auth_headers):
    """Test updating a user's data."""
    _create(client, auth_headers)
    user_id = _user_id(client, auth_headers, "jane@example.com")
    before = client.get(f"/api/users/{user_id}", headers=auth_headers).json()

    response = client.put(
        f"/api/users/{user_id}",
        headers=auth_headers,
        json={
            "name": "Jane Doe",
            "email": "jane.doe@example.com",
            "password": "newpass",
            "password_confirmation": "newpass",
        },
    )
    assert response.status_code == 200
    assert response.json() == {"message": "A User data updated successfully"}

    after = client.get(f"/api/users/{user_id}", headers=auth_headers).json()
    assert after["id"] == before["id"]
    assert after["created_at"] == before["created_at"]
    assert after["name"] == "Jane Doe"
    assert after["email"] == "jane.doe@example.com"

    login = client.post(
        "/api/login", json={"email": "jane.doe@example.com", "password": "newpass"}
    )
    assert login.status_code == 200
    old_login = client.post(
        "/api/login", json={"email": "jane.doe@example.com", "password": "janepass"}
    )
    assert old_login.status_code == 401


def test_update_user_with_patch(client, auth_headers):
    """Test PATCH is routed to update as well."""
    user_id = _user_id(client, auth_headers, auth_headers.email)

    response = client.patch(
        f"/api/users/{user_id}",
        headers=auth_headers,
        json={
            "name": "Renamed",
            "email": auth_headers.email,
            "password": auth_headers.password,
            "password_confirmation": auth_headers.password,
        },
    )
    assert response.status_code == 200


def test_update_user_keeps_own_email(client, auth_headers):
    """Test the uniqueness check ignores the user being updated."""
    user_id = _user_id(client, auth_headers, auth_headers.email)

    response = client.put(
        f"/api/users/{user_id}",
        headers=auth_headers,
        json={
            "name": "Same Email",
            "email": auth_headers.email,
            "password": "another1",
            "password_confirmation": "another1",
        },
    )
    assert response.status_code == 200


def test_update_user_email_taken(client, auth_headers):
    """Test updating to another user's email fails."""
    _create(client, auth_headers)
    user_id = _user_id(client, auth_headers, "jane@example.com")

    response = client.put(
        f"/api/users/{user_id}",
        headers=auth_headers,
        json={
            "name": "Jane",
            "email": auth_headers.email,
            "password": "janepass",
            "password_confirmation": "janepass",
        },
    )
    assert response.status_code == 422
    assert response.json()["errors"]["email"] == ["The email has already been taken."]


def test_update_user_validation_failure(client, auth_headers):
    """Test update rejects an unconfirmed password."""
    user_id = _user_id(client, auth_headers, auth_headers.email)

    response = client.put(
        f"/api/users/{user_id}",
        headers=auth_headers,
        json={"name": "X", "email": auth_headers.email, "password": "abc"},
    )
    assert response.status_code == 422
    assert "password" in response.json()["errors"]


def test_update_unknown_user(client, auth_headers):
    """Test updating a missing user is 404 even with an invalid body."""
    response = client.put("/api/users/99999", headers=auth_headers, json={})
    assert response.status_code == 404


def test_delete_user(client, auth_headers):
    """Test deleting a user."""
    _create(client, auth_headers)
    user_id = _user_id(client, auth_headers, "jane@example.com")

    response = client.delete(f"/api/users/{user_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "User data deleted successfully"}

    response = client.get(f"/api/users/{user_id}", headers=auth_headers)
    assert response.status_code == 404


def test_delete_user_twice(client, auth_headers):
    """Test a second delete of the same user is 404."""
    _create(client, auth_headers)
    user_id = _user_id(client, auth_headers, "jane@example.com")

    assert client.delete(f"/api/users/{user_id}", headers=auth_headers).status_code == 200
    response = client.delete(f"/api/users/{user_id}", headers=auth_headers)
    assert response.status_code == 404


def test_deleted_user_tokens_stop_working(client, auth_headers):
    """Test deleting a user invalidates the tokens issued to them."""
    _create(client, auth_headers)
    token = client.post(
        "/api/login", json={"email": "jane@example.com", "password": "janepass"}
    ).json()["success"]["token"]
    user_id = _user_id(client, auth_headers, "jane@example.com")

    client.delete(f"/api/users/{user_id}", headers=auth_headers)

    response = client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_email_can_be_reused_after_delete(client, auth_headers, register_user):
    """Test a deleted user's email is free for a new registration."""
    _create(client, auth_headers)
    user_id = _user_id(client, auth_headers, "jane@example.com")
    client.delete(f"/api/users/{user_id}", headers=auth_headers)

    response = register_user(name="New Jane", email="jane@example.com")
    assert response.status_code == 200
