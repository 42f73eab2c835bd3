import unittest

from fake_backend import ApiTestCase, body_of, cookie_header, session_payload


class FailureReportRoutesTests(ApiTestCase):
    def test_list_reports(self):
        self.backend.on("GET", "/rest/v1/technology-failures", json_body=[{"id": 1, "addition": "printer on fire"}])

        resp = self.client.get("/technology-failures")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [{"id": 1, "addition": "printer on fire"}])
        self.assertEqual(self.backend.requests[0].url.params["order"], "incident_date.asc")

    def test_submit_wraps_message(self):
        self.backend.on("POST", "/rest/v1/technology-failures", status=201)

        resp = self.client.post("/technology-failures", json={"addition": "DNS again"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"success": True, "message": "Message sent!"})
        self.assertEqual(body_of(self.backend.requests[0]), [{"addition": "DNS again"}])

    def test_submit_requires_message(self):
        resp = self.client.post("/technology-failures", json={"addition": "   "})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Message is required"})
        self.assertEqual(self.backend.requests, [])

    def test_backend_failure_is_500(self):
        self.backend.on("GET", "/rest/v1/technology-failures", status=503, json_body={"message": "upstream down"})

        resp = self.client.get("/technology-failures")

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "upstream down"})


class TaskRoutesTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.backend.on("GET", "/auth/v1/user", json_body={"id": "user-1"})

    def test_tasks_require_session(self):
        resp = self.client.get("/validate-auth")

        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Unauthorized"})
        self.assertEqual(self.backend.requests, [])

    def test_list_tasks_for_session_user(self):
        self.backend.on("GET", "/rest/v1/user_tasks", json_body=[{"id": 3, "task": "rotate keys"}])

        resp = self.client.get("/validate-auth", headers=cookie_header())

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"tasks": [{"id": 3, "task": "rotate keys"}]})
        query = self.backend.calls("GET", "/rest/v1/user_tasks")[0].url.params
        self.assertEqual(query["user_id"], "eq.user-1")
        self.assertEqual(query["order"], "created_at.desc")

    def test_create_task(self):
        created = {"id": 4, "user_id": "user-1", "task": "patch servers", "completed": False}
        self.backend.on("POST", "/rest/v1/user_tasks", status=201, json_body=[created])

        resp = self.client.post("/validate-auth", json={"task": "patch servers"}, headers=cookie_header())

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"task": created})
        insert = self.backend.calls("POST", "/rest/v1/user_tasks")[0]
        self.assertEqual(insert.headers["prefer"], "return=representation")
        self.assertEqual(body_of(insert), [{"user_id": "user-1", "task": "patch servers", "completed": False}])

    def test_create_task_requires_task(self):
        resp = self.client.post("/validate-auth", json={}, headers=cookie_header())

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Task is required"})
        self.assertEqual(self.backend.calls("POST", "/rest/v1/user_tasks"), [])

    def test_malformed_body_without_session_is_401(self):
        resp = self.client.post(
            "/validate-auth",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Unauthorized"})

    def test_malformed_body_with_session_is_400(self):
        resp = self.client.post(
            "/validate-auth",
            content="{not json",
            headers={"Content-Type": "application/json", **cookie_header()},
        )

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Invalid JSON body"})
        self.assertEqual(self.backend.calls("POST", "/rest/v1/user_tasks"), [])

    def test_non_string_task_is_400(self):
        resp = self.client.post("/validate-auth", json={"task": 7}, headers=cookie_header())

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Task must be a string"})

    def test_refreshed_cookies_survive_a_rejected_task(self):
        self.backend.on("GET", "/auth/v1/user", status=401, json_body={"msg": "token is expired"})
        self.backend.on("POST", "/auth/v1/token", json_body=session_payload(access="access-2", refresh="refresh-2"))

        resp = self.client.post("/validate-auth", json={}, headers=cookie_header())

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Task is required"})
        cookies = self.set_cookies(resp)
        self.assertTrue(cookies["sb-access-token"].startswith("sb-access-token=access-2;"))
        self.assertTrue(cookies["sb-refresh-token"].startswith("sb-refresh-token=refresh-2;"))

    def test_refreshed_session_reissues_cookies(self):
        self.backend.on("GET", "/auth/v1/user", status=401, json_body={"msg": "token is expired"})
        self.backend.on("POST", "/auth/v1/token", json_body=session_payload(access="access-2", refresh="refresh-2"))
        self.backend.on("GET", "/rest/v1/user_tasks", json_body=[])

        resp = self.client.get("/validate-auth", headers=cookie_header())

        self.assertEqual(resp.status_code, 200)
        cookies = self.set_cookies(resp)
        self.assertTrue(cookies["sb-access-token"].startswith("sb-access-token=access-2;"))


if __name__ == "__main__":
    unittest.main()
