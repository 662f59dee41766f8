class TestLogin:
    def test_login_page_renders(self, client):
        response = client.get("/login")
        assert response.status_code == 200
        assert 'name="username"' in response.text

    def test_bad_credentials(self, client, regular_user):
        response = client.post("/login", data={"username": "jdoe", "password": "nope"})
        assert response.status_code == 400
        assert "Invalid username or password." in response.text

    def test_login_redirects_to_sites(self, login, regular_user):
        response = login("jdoe")
        assert response.headers["location"] == "/admin/sites"

    def test_login_honours_local_next(self, client, regular_user):
        response = client.post(
            "/login",
            data={"username": "jdoe", "password": "correct horse", "next": "/admin/users/1"},
            follow_redirects=False,
        )
        assert response.headers["location"] == "/admin/users/1"

    def test_login_ignores_offsite_next(self, client, regular_user):
        response = client.post(
            "/login",
            data={"username": "jdoe", "password": "correct horse", "next": "//evil.test/"},
            follow_redirects=False,
        )
        assert response.headers["location"] == "/admin/sites"


class TestSession:
    def test_admin_pages_need_login(self, client):
        response = client.get("/admin/sites", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    def test_json_clients_get_401(self, client):
        response = client.get("/admin/sites", headers={"accept": "application/json"}, follow_redirects=False)
        assert response.status_code == 401
        assert response.json() == {"detail": "Unauthorized"}

    def test_logout_ends_session(self, client, login, regular_user):
        login("jdoe")
        assert client.get("/admin/sites", follow_redirects=False).status_code == 200

        response = client.get("/logout", follow_redirects=False)

        assert response.headers["location"] == "/login"
        assert client.get("/admin/sites", follow_redirects=False).status_code == 303

    def test_admin_root_redirects_to_sites(self, client, login, regular_user):
        login("jdoe")
        response = client.get("/admin", follow_redirects=False)
        assert response.headers["location"] == "/admin/sites"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
