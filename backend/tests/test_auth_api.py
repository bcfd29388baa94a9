class TestSignup:
    def test_signup_starts_session(self, client):
        response = client.post("/api/v1/auth/signup", json={"email": "New@Example.com", "password": "secret1"})

        assert response.status_code == 201
        me = client.get("/api/v1/auth/me")
        assert me.status_code == 200
        assert me.get_json()["email"] == "new@example.com"

    def test_short_password(self, client):
        response = client.post("/api/v1/auth/signup", json={"email": "a@example.com", "password": "123"})
        assert response.status_code == 400

    def test_duplicate_email(self, client, make_user):
        make_user("taken@example.com")

        response = client.post("/api/v1/auth/signup", json={"email": "taken@example.com", "password": "secret1"})

        assert response.status_code == 409


class TestLogin:
    def test_invalid_credentials(self, client, make_user):
        make_user()

        response = client.post("/api/v1/auth/login", json={"email": "alex@example.com", "password": "wrong-pass"})

        assert response.status_code == 401

    def test_next_must_be_relative(self, client, make_user):
        make_user()

        response = client.post("/api/v1/auth/login", json={
            "email": "alex@example.com",
            "password": "secret-pass",
            "next": "https://evil.test/",
        })

        assert response.get_json()["redirect"] == "/dashboard"

    def test_next_is_honored(self, client, make_user):
        make_user()

        response = client.post("/api/v1/auth/login", json={
            "email": "alex@example.com",
            "password": "secret-pass",
            "next": "/dashboard/requests",
        })

        assert response.get_json()["redirect"] == "/dashboard/requests"


class TestSession:
    def test_dashboard_requires_session(self, client):
        response = client.get("/api/v1/dashboard")

        assert response.status_code == 401
        assert response.get_json()["redirect"] == "/login?next=/api/v1/dashboard"

    def test_logout_clears_session(self, auth_client):
        client, _ = auth_client

        client.post("/api/v1/auth/logout")

        assert client.get("/api/v1/auth/me").status_code == 401
