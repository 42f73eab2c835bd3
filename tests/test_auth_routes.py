import unittest

import httpx

from fake_backend import ApiTestCase, body_of, cookie_header, session_payload


class SignInTests(ApiTestCase):
    def test_signin_sets_both_session_cookies(self):
        self.backend.on("POST", "/auth/v1/token", json_body=session_payload())

        resp = self.client.post(
            "/authentication/signin",
            json={"email": "ada@example.com", "password": "correct horse"},
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["id"], "user-1")
        self.assertEqual(resp.json()["session"]["access_token"], "access-1")

        cookies = self.set_cookies(resp)
        access = cookies["sb-access-token"]
        refresh = cookies["sb-refresh-token"]
        self.assertTrue(access.startswith("sb-access-token=access-1;"))
        self.assertTrue(refresh.startswith("sb-refresh-token=refresh-1;"))
        for line in (access, refresh):
            self.assertIn("HttpOnly", line)
            self.assertIn("Secure", line)
            self.assertIn("Path=/", line)
            self.assertIn("samesite=lax", line.lower())
        self.assertIn("Max-Age=3600", access)
        self.assertIn("Max-Age=7776000", refresh)

        sent = self.backend.calls("POST", "/auth/v1/token")[0]
        self.assertEqual(sent.url.params["grant_type"], "password")
        self.assertEqual(body_of(sent), {"email": "ada@example.com", "password": "correct horse"})

    def test_signin_with_bad_credentials_sets_no_cookies(self):
        self.backend.on(
            "POST",
            "/auth/v1/token",
            status=400,
            json_body={"error": "invalid_grant", "error_description": "Invalid login credentials"},
        )

        resp = self.client.post(
            "/authentication/signin",
            json={"email": "ada@example.com", "password": "wrong"},
        )

        self.assertGreaterEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Invalid login credentials"})
        self.assertEqual(resp.headers.get_list("set-cookie"), [])

    def test_signin_with_unreadable_backend_answer_is_500(self):
        self.backend.on(
            "POST",
            "/auth/v1/token",
            handler=lambda request: httpx.Response(200, text="<html>gateway</html>"),
        )

        resp = self.client.post(
            "/authentication/signin",
            json={"email": "ada@example.com", "password": "correct horse"},
            headers={"Origin": "http://localhost:3000"},
        )

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Supabase returned a non-JSON response"})
        self.assertEqual(resp.headers.get_list("set-cookie"), [])
        self.assertEqual(resp.headers["access-control-allow-origin"], "http://localhost:3000")

    def test_signin_without_password_never_reaches_backend(self):
        resp = self.client.post("/authentication/signin", json={"email": "ada@example.com"})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Email and password are required"})
        self.assertEqual(self.backend.requests, [])


class SignUpTests(ApiTestCase):
    def test_signup_pending_confirmation_has_no_session(self):
        self.backend.on(
            "POST", "/auth/v1/signup", json_body={"id": "user-9", "email": "new@example.com"}
        )

        resp = self.client.post(
            "/authentication/signup",
            json={"email": "new@example.com", "password": "s3cret!!"},
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"user": {"id": "user-9", "email": "new@example.com"}, "session": None})

    def test_signup_with_autoconfirm_returns_session(self):
        self.backend.on("POST", "/auth/v1/signup", json_body=session_payload(user_id="user-9"))

        resp = self.client.post(
            "/authentication/signup",
            json={"email": "new@example.com", "password": "s3cret!!"},
        )

        self.assertEqual(resp.json()["user"]["id"], "user-9")
        self.assertEqual(resp.json()["session"]["refresh_token"], "refresh-1")

    def test_signup_error_is_reported(self):
        self.backend.on("POST", "/auth/v1/signup", status=422, json_body={"msg": "User already registered"})

        resp = self.client.post(
            "/authentication/signup",
            json={"email": "new@example.com", "password": "s3cret!!"},
        )

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "User already registered"})


class SignOutTests(ApiTestCase):
    def test_signout_revokes_and_clears_cookies(self):
        self.backend.on("POST", "/auth/v1/logout", status=204)

        resp = self.client.post("/authentication/signout", headers=cookie_header())

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"success": True})
        logout = self.backend.calls("POST", "/auth/v1/logout")[0]
        self.assertEqual(logout.headers["authorization"], "Bearer access-1")

        cookies = self.set_cookies(resp)
        self.assertIn("Max-Age=0", cookies["sb-access-token"])
        self.assertIn("Max-Age=0", cookies["sb-refresh-token"])

    def test_signout_with_expired_token_still_clears_cookies(self):
        self.backend.on("POST", "/auth/v1/logout", status=401, json_body={"msg": "invalid JWT"})

        resp = self.client.post("/authentication/signout", headers=cookie_header())

        self.assertEqual(resp.status_code, 200)
        self.assertIn("sb-access-token", self.set_cookies(resp))

    def test_signout_without_cookies_skips_backend(self):
        resp = self.client.post("/authentication/signout")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.backend.requests, [])


class CurrentUserTests(ApiTestCase):
    def test_user_without_cookies_is_401(self):
        resp = self.client.get("/authentication/user")

        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"user": None, "session": None})
        self.assertEqual(self.backend.requests, [])

    def test_user_with_valid_cookies(self):
        self.backend.on("GET", "/auth/v1/user", json_body={"id": "user-1", "email": "ada@example.com"})

        resp = self.client.get("/authentication/user", headers=cookie_header())

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["id"], "user-1")
        self.assertEqual(resp.json()["session"], {"access_token": "access-1", "refresh_token": "refresh-1"})
        self.assertEqual(resp.headers.get_list("set-cookie"), [])

    def test_user_after_refresh_gets_new_cookies(self):
        self.backend.on("GET", "/auth/v1/user", status=401, json_body={"msg": "token is expired"})
        self.backend.on("POST", "/auth/v1/token", json_body=session_payload(access="access-2", refresh="refresh-2"))

        resp = self.client.get("/authentication/user", headers=cookie_header())

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["session"]["access_token"], "access-2")
        cookies = self.set_cookies(resp)
        self.assertTrue(cookies["sb-access-token"].startswith("sb-access-token=access-2;"))
        self.assertTrue(cookies["sb-refresh-token"].startswith("sb-refresh-token=refresh-2;"))

    def test_user_with_dead_session_is_401(self):
        self.backend.on("GET", "/auth/v1/user", status=401, json_body={"msg": "token is expired"})
        self.backend.on("POST", "/auth/v1/token", status=400, json_body={"msg": "Invalid Refresh Token"})

        resp = self.client.get("/authentication/user", headers=cookie_header())

        self.assertEqual(resp.status_code, 401)


class RoutingTests(ApiTestCase):
    def test_unknown_path_is_json_404(self):
        resp = self.client.get("/authentication/nope")

        self.assertEqual(resp.status_code, 404)
        self.assertIn("error", resp.json())

    def test_preflight_is_answered_with_cors_headers(self):
        resp = self.client.options(
            "/authentication/signin",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers["access-control-allow-origin"], "http://localhost:3000")
        self.assertEqual(resp.headers["access-control-allow-credentials"], "true")
        self.assertEqual(self.backend.requests, [])

    def test_wrong_method_is_json_405(self):
        resp = self.client.get("/authentication/signin")

        self.assertEqual(resp.status_code, 405)
        self.assertIn("error", resp.json())


if __name__ == "__main__":
    unittest.main()
