from app.core.exceptions import TransportFailure
from app.services.store import DocumentStore


def test_my_progress(client, login) -> None:
    headers = login("12345")

    body = client.get("/api/progress/me", headers=headers).json()

    assert body["user"]["id"] == "12345"
    assert "pin" not in body["user"]
    assert body["level"] == {
        "level": 3,
        "xp": 1250,
        "xpIntoLevel": 250,
        "xpForNextLevel": 250,
        "progress": 0.5,
    }
    assert body["rank"] == 2
    assert body["totalCourses"] == 2


def test_educator_has_no_rank(client, educator_headers) -> None:
    assert client.get("/api/progress/me", headers=educator_headers).json()["rank"] == 0


def test_leaderboard(client, nurse_headers) -> None:
    board = client.get("/api/progress/leaderboard", headers=nurse_headers).json()

    assert [entry["id"] for entry in board] == ["99901", "12345", "54321"]
    assert [entry["rank"] for entry in board] == [1, 2, 3]
    assert board[0]["level"] == 5

    top = client.get("/api/progress/leaderboard", params={"limit": 1}, headers=nurse_headers).json()
    assert [entry["id"] for entry in top] == ["99901"]


def test_record_quiz_attempt(client, nurse_headers) -> None:
    attempt = {
        "courseId": "c2",
        "slideId": "s2",
        "question": 'What does the "C" stand for in RACE?',
        "selectedOption": "Contain",
        "isCorrect": True,
    }
    client.post("/api/progress/quiz-attempts", json=attempt, headers=nurse_headers)
    response = client.post("/api/progress/quiz-attempts", json=attempt, headers=nurse_headers)

    assert response.status_code == 200
    attempts = response.json()["quizAttempts"]
    assert len(attempts) == 2
    assert attempts[0]["selectedOption"] == "Contain"
    assert attempts[0]["timestamp"] > 0


def test_complete_course_once(client, nurse_headers) -> None:
    first = client.post(
        "/api/progress/complete", json={"courseId": "c2", "earnedXp": 50}, headers=nurse_headers
    )
    assert first.status_code == 200
    body = first.json()
    assert body["applied"] is True
    assert body["user"]["xp"] == 900
    assert body["user"]["completedCourses"] == ["c2"]
    assert body["newBadges"] == []

    again = client.post(
        "/api/progress/complete", json={"courseId": "c2", "earnedXp": 50}, headers=nurse_headers
    ).json()
    assert again["applied"] is False
    assert again["user"]["xp"] == 900


def test_complete_unknown_course(client, nurse_headers) -> None:
    response = client.post(
        "/api/progress/complete", json={"courseId": "nope", "earnedXp": 50}, headers=nurse_headers
    )
    assert response.status_code == 404


def test_complete_with_negative_xp(client, nurse_headers) -> None:
    response = client.post(
        "/api/progress/complete", json={"courseId": "c2", "earnedXp": -5}, headers=nurse_headers
    )
    assert response.status_code == 422


def test_milestone_and_first_course_badges(client, educator_headers, login) -> None:
    client.post(
        "/api/users/",
        json={"id": "777", "pin": "1234", "name": "Nina Park", "role": "Nurse", "xp": 950},
        headers=educator_headers,
    )
    headers = login("777")

    body = client.post(
        "/api/progress/complete", json={"courseId": "c1", "earnedXp": 100}, headers=headers
    ).json()

    assert body["user"]["xp"] == 1050
    assert body["newBadges"] == ["b1", "b2"]


def test_catalog_flags(client, nurse_headers) -> None:
    client.post("/api/progress/complete", json={"courseId": "c1", "earnedXp": 50}, headers=nurse_headers)

    catalog = client.get("/api/progress/catalog", headers=nurse_headers).json()

    assert catalog["categories"] == ["All", "Emergency", "Infection Control"]
    entries = {entry["course"]["id"]: entry for entry in catalog["courses"]}
    assert entries["c1"]["isNew"] is False
    assert entries["c1"]["isCompleted"] is True
    assert entries["c2"]["isNew"] is True
    assert entries["c2"]["isCompleted"] is False

    filtered = client.get(
        "/api/progress/catalog", params={"category": "Emergency"}, headers=nurse_headers
    ).json()
    assert [entry["course"]["id"] for entry in filtered["courses"]] == ["c2"]


def test_failed_save_leaves_user_unchanged(client, nurse_headers, monkeypatch) -> None:
    def unreachable_save(self, user):
        raise TransportFailure("Error updating user")

    monkeypatch.setattr(DocumentStore, "save_user", unreachable_save)

    response = client.post(
        "/api/progress/complete", json={"courseId": "c2", "earnedXp": 50}, headers=nurse_headers
    )

    assert response.status_code == 503
    assert response.json()["message"] == "Error updating user"
    me = client.get("/api/auth/me", headers=nurse_headers).json()
    assert me["xp"] == 850
    assert me["badges"] == ["b1"]
    assert me["completedCourses"] == []
