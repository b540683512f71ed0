def test_login_returns_token_and_user(client) -> None:
    response = client.post("/api/auth/login", json={"id": "12345", "pin": "1234"})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"]
    assert body["user"]["id"] == "12345"
    assert body["user"]["completedCourses"] == []


def test_login_with_wrong_pin(client) -> None:
    response = client.post("/api/auth/login", json={"id": "12345", "pin": "0000"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid Staff ID or PIN"


def test_login_with_unknown_id(client) -> None:
    response = client.post("/api/auth/login", json={"id": "nobody", "pin": "1234"})
    assert response.status_code == 401


def test_me_requires_token(client) -> None:
    assert client.get("/api/auth/me").status_code == 401
    bad = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_me(client, nurse_headers) -> None:
    response = client.get("/api/auth/me", headers=nurse_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Mike Ross"


def test_reset_pin_then_login(client, login) -> None:
    response = client.post("/api/auth/reset-pin", json={"id": "54321", "newPin": "4321"})

    assert response.status_code == 200
    assert response.json() == {"message": "PIN updated successfully. Please login.", "id": "54321"}
    login("54321", "4321")


def test_reset_pin_unknown_id(client) -> None:
    response = client.post("/api/auth/reset-pin", json={"id": "nobody", "newPin": "4321"})
    assert response.status_code == 404


def test_reset_pin_rejects_bad_pin(client) -> None:
    response = client.post("/api/auth/reset-pin", json={"id": "54321", "newPin": "43a1"})
    assert response.status_code == 422
    assert response.json()["message"] == "PIN must be 4 digits."


def test_change_pin(client, nurse_headers, login) -> None:
    response = client.post("/api/auth/change-pin", json={"newPin": "2468"}, headers=nurse_headers)
    assert response.status_code == 200
    login("54321", "2468")

    bad = client.post("/api/auth/change-pin", json={"newPin": "24"}, headers=nurse_headers)
    assert bad.status_code == 422


def test_token_for_deleted_user_is_rejected(client, educator_headers, login) -> None:
    headers = login("99901")
    client.delete("/api/users/99901", headers=educator_headers)
    assert client.get("/api/auth/me", headers=headers).status_code == 401
