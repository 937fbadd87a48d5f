"""HTTP-level tests for the metrics and profile routers."""

ONBOARDING = {
    "ageYears": 25,
    "sex": "male",
    "heightCm": 180,
    "weightKg": 80,
    "goal": "lose",
    "activityLevel": "moderately_active",
}


def _create_onboarded(client, email="alex@example.com"):
    res = client.post("/api/profiles", json={"email": email, "firstName": "Alex"})
    assert res.status_code == 201
    profile_id = res.json()["id"]
    res = client.post(f"/api/profiles/{profile_id}/onboarding", json=ONBOARDING)
    assert res.status_code == 200
    return profile_id, res.json()


def test_calculate_metrics_returns_camel_case_result(client):
    res = client.post("/api/metrics/calculate", json=ONBOARDING)
    assert res.status_code == 200
    assert res.json() == {
        "bmi": 24.7,
        "bmiCategory": "normal",
        "bmr": 1805,
        "tdee": 2798,
        "dailyCalorieTarget": 2298,
        "macroTargets": {"proteinG": 172, "carbsG": 230, "fatsG": 77},
        "idealWeightRangeKg": {"min": 60, "max": 81},
    }


def test_calculate_metrics_defaults_activity_and_goal(client):
    body = {"ageYears": 30, "sex": "male", "heightCm": 175, "weightKg": 70}
    res = client.post("/api/metrics/calculate", json=body)
    assert res.status_code == 200
    data = res.json()
    assert data["bmr"] == 1649
    assert data["tdee"] == 1979
    assert data["dailyCalorieTarget"] == 1979


def test_calculate_metrics_rejects_out_of_range_input(client):
    body = dict(ONBOARDING, heightCm=1000, ageYears=5)
    res = client.post("/api/metrics/calculate", json=body)
    assert res.status_code == 422
    error = res.json()["error"]
    assert error["message"] == "Validation failed"
    fields = {e["field"] for e in error["details"]["validation_errors"]}
    assert fields == {"heightCm", "ageYears"}


def test_calculate_metrics_rejects_unknown_enum(client):
    res = client.post("/api/metrics/calculate", json=dict(ONBOARDING, goal="bulk"))
    assert res.status_code == 422


def test_onboarding_flow(client):
    profile_id, body = _create_onboarded(client)
    profile = body["profile"]
    assert profile["isOnboarded"] is True
    assert profile["dailyCalorieTarget"] == 2298
    assert profile["macroTargets"] == {"proteinG": 172, "carbsG": 230, "fatsG": 77}
    assert body["idealWeightRangeKg"] == {"min": 60, "max": 81}

    res = client.get(f"/api/profiles/{profile_id}")
    assert res.status_code == 200
    assert res.json()["bmiCategory"] == "normal"


def test_duplicate_email_returns_409(client):
    client.post("/api/profiles", json={"email": "alex@example.com"})
    res = client.post("/api/profiles", json={"email": "alex@example.com"})
    assert res.status_code == 409
    assert res.json()["error"]["details"]["field"] == "email"


def test_missing_profile_returns_404(client):
    res = client.get("/api/profiles/12345", headers={"X-Request-ID": "req-1"})
    assert res.status_code == 404
    error = res.json()["error"]
    assert error["status_code"] == 404
    assert error["request_id"] == "req-1"


def test_stats_and_update_require_onboarding(client):
    res = client.post("/api/profiles", json={"email": "new@example.com"})
    profile_id = res.json()["id"]
    assert client.get(f"/api/profiles/{profile_id}/stats").status_code == 403
    assert client.put(f"/api/profiles/{profile_id}", json={"goal": "gain"}).status_code == 403


def test_update_recomputes_metrics(client):
    profile_id, _ = _create_onboarded(client)
    res = client.put(f"/api/profiles/{profile_id}", json={"activityLevel": "sedentary", "goal": "maintain"})
    assert res.status_code == 200
    data = res.json()
    assert data["tdee"] == 2166
    assert data["dailyCalorieTarget"] == 2166
    assert data["macroTargets"] == {"proteinG": 135, "carbsG": 244, "fatsG": 72}


def test_weight_logs_and_stats(client):
    profile_id, _ = _create_onboarded(client)
    res = client.post(f"/api/profiles/{profile_id}/weight-logs", json={"weight": 176, "unit": "lbs"})
    assert res.status_code == 201
    assert res.json()["unit"] == "lbs"

    res = client.get(f"/api/profiles/{profile_id}/weight-logs")
    assert res.status_code == 200
    assert len(res.json()) == 1  # same day as onboarding, entry replaced

    res = client.get(f"/api/profiles/{profile_id}/stats")
    assert res.status_code == 200
    stats = res.json()
    assert stats["currentWeight"] == 80
    assert stats["targetWeight"] == 75
    assert stats["weightChange"] == 0
    assert stats["idealWeightRangeKg"] == {"min": 60, "max": 81}


def test_future_weight_log_returns_400(client):
    profile_id, _ = _create_onboarded(client)
    res = client.post(f"/api/profiles/{profile_id}/weight-logs", json={"weight": 80, "date": "2999-01-01"})
    assert res.status_code == 400
    assert res.json()["error"]["details"] == {"field": "date"}


def test_health_reports_database_connected(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "healthy", "database": "connected"}
