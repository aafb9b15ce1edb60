import json

import httpx
import pytest

from modules.auth.service import (
    AuthService,
    CONNECTION_ERROR,
    get_auth_service,
    map_login_response,
    map_logout_response,
    map_signup_response,
    reset_auth_service,
)


class TestMapLoginResponse:
    def test_200_success(self, user_payload):
        """200 should succeed with the backend's message."""
        response = httpx.Response(200, json={"message": "Welcome", "user": user_payload})
        result = map_login_response(response)
        assert result.success is True
        assert result.message == "Welcome"
        assert result.data.id == "user-1"

    def test_201_success(self, user_payload):
        result = map_login_response(httpx.Response(201, json={"user": user_payload}))
        assert result.success is True

    def test_success_default_message(self, user_payload):
        """Missing message should default to 'Login successful'."""
        result = map_login_response(httpx.Response(200, json={"user": user_payload}))
        assert result.message == "Login successful"

    def test_401_fixed_message(self):
        """401 should ignore the body and use a fixed message."""
        response = httpx.Response(401, json={"message": "token expired"})
        result = map_login_response(response)
        assert result.success is False
        assert result.error == "Invalid email or password"

    def test_400_uses_body_message(self):
        response = httpx.Response(400, json={"message": "Email is required"})
        result = map_login_response(response)
        assert result.success is False
        assert result.error == "Email is required"

    def test_400_without_message(self):
        result = map_login_response(httpx.Response(400, json={}))
        assert result.error == "Invalid request"

    def test_400_with_non_object_body(self):
        result = map_login_response(httpx.Response(400, json=["bad"]))
        assert result.error == "Invalid request"

    @pytest.mark.parametrize("status", [403, 404, 409, 500, 502])
    def test_other_status_generic_failure(self, status):
        """Any other status should give the generic login failure."""
        result = map_login_response(httpx.Response(status, json={"message": "x"}))
        assert result.success is False
        assert result.error == "Login failed. Please try again."

    def test_success_without_user_raises(self):
        """A 2xx body without a user object is malformed."""
        with pytest.raises(ValueError):
            map_login_response(httpx.Response(200, json={"message": "ok"}))

    def test_user_without_id_raises(self):
        """A user object with no id cannot identify a session."""
        with pytest.raises(ValueError):
            map_login_response(httpx.Response(200, json={"user": {"username": "a", "email": "a@b.com"}}))

    def test_malformed_body_raises(self):
        with pytest.raises(ValueError):
            map_login_response(httpx.Response(200, text="<html>oops</html>"))


class TestMapSignupResponse:
    def test_success_default_message(self, user_payload):
        result = map_signup_response(httpx.Response(201, json={"user": user_payload}))
        assert result.success is True
        assert result.message == "Account created successfully"

    def test_409_email_exists(self):
        result = map_signup_response(httpx.Response(409, json={"message": "dup"}))
        assert result.success is False
        assert result.error == "Email already exists"

    def test_400_uses_body_message(self):
        result = map_signup_response(httpx.Response(400, json={"message": "Weak password"}))
        assert result.error == "Weak password"

    def test_other_status_generic_failure(self):
        result = map_signup_response(httpx.Response(500, json={}))
        assert result.error == "Signup failed. Please try again."


class TestMapLogoutResponse:
    def test_200_success(self):
        result = map_logout_response(httpx.Response(200))
        assert result.success is True
        assert result.data is None
        assert result.message == "Logged out successfully"

    def test_other_status_failure(self):
        result = map_logout_response(httpx.Response(204))
        assert result.success is False
        assert result.error == "Logout failed"


class TestAuthServiceLogin:
    @pytest.mark.asyncio
    async def test_login_sends_json_post(self, make_service, settings, user_payload):
        """Should POST email and password as JSON to the login endpoint."""
        requests: list[httpx.Request] = []
        service = make_service(200, {"user": user_payload}, recorder=requests)

        result = await service.login("ada@example.com", "secret")

        assert result.success is True
        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"{settings.api_base_url}/auth/login"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Accept"] == "application/json"
        assert json.loads(request.content) == {"email": "ada@example.com", "password": "secret"}

    @pytest.mark.asyncio
    async def test_login_rejected(self, make_service):
        service = make_service(401, {})
        result = await service.login("ada@example.com", "wrong")
        assert result.success is False
        assert result.error == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_login_transport_error(self, make_service):
        """Connectivity failures should become a failure envelope, not raise."""
        service = make_service(raises=httpx.ConnectError("refused"))
        result = await service.login("ada@example.com", "secret")
        assert result.success is False
        assert result.error == CONNECTION_ERROR

    @pytest.mark.asyncio
    async def test_login_timeout(self, make_service):
        service = make_service(raises=httpx.ReadTimeout("slow"))
        result = await service.login("ada@example.com", "secret")
        assert result.error == CONNECTION_ERROR

    @pytest.mark.asyncio
    async def test_login_malformed_success_body(self, make_service):
        """A 200 with a non-JSON body should be reported as a connectivity failure."""
        service = make_service(200, text="not json")
        result = await service.login("ada@example.com", "secret")
        assert result.success is False
        assert result.error == CONNECTION_ERROR

    @pytest.mark.asyncio
    async def test_login_malformed_400_body(self, make_service):
        service = make_service(400, text="{broken")
        result = await service.login("ada@example.com", "secret")
        assert result.error == CONNECTION_ERROR

    @pytest.mark.asyncio
    async def test_login_single_attempt(self, make_service):
        """A failed call should not be retried."""
        requests: list[httpx.Request] = []
        service = make_service(500, {}, recorder=requests)
        await service.login("ada@example.com", "secret")
        assert len(requests) == 1


class TestAuthServiceSignup:
    @pytest.mark.asyncio
    async def test_signup_omits_absent_optionals(self, make_service, settings, user_payload):
        """Optional fields left as None must not appear in the body."""
        requests: list[httpx.Request] = []
        service = make_service(201, {"user": user_payload}, recorder=requests)

        result = await service.signup("ada", "ada@example.com", "secret")

        assert result.success is True
        assert str(requests[0].url) == f"{settings.api_base_url}/auth/signup"
        body = json.loads(requests[0].content)
        assert body == {"username": "ada", "email": "ada@example.com", "password": "secret"}
        assert "phoneNumber" not in body
        assert "address" not in body

    @pytest.mark.asyncio
    async def test_signup_includes_given_optionals(self, make_service, user_payload):
        requests: list[httpx.Request] = []
        service = make_service(201, {"user": user_payload}, recorder=requests)

        await service.signup(
            "ada", "ada@example.com", "secret",
            phone_number="555", address="Lagos",
        )

        body = json.loads(requests[0].content)
        assert body["phoneNumber"] == "555"
        assert body["address"] == "Lagos"

    @pytest.mark.asyncio
    async def test_signup_conflict(self, make_service):
        service = make_service(409, {})
        result = await service.signup("ada", "ada@example.com", "secret")
        assert result.error == "Email already exists"

    @pytest.mark.asyncio
    async def test_signup_transport_error(self, make_service):
        service = make_service(raises=httpx.ConnectError("down"))
        result = await service.signup("ada", "ada@example.com", "secret")
        assert result.error == CONNECTION_ERROR


class TestAuthServiceLogout:
    @pytest.mark.asyncio
    async def test_logout_sends_bearer_token(self, make_service, settings):
        requests: list[httpx.Request] = []
        service = make_service(200, {}, recorder=requests)

        result = await service.logout("tok-123")

        assert result.success is True
        assert str(requests[0].url) == f"{settings.api_base_url}/auth/logout"
        assert requests[0].headers["Authorization"] == "Bearer tok-123"
        assert requests[0].content == b""

    @pytest.mark.asyncio
    async def test_logout_failure(self, make_service):
        service = make_service(401, {})
        result = await service.logout("tok-123")
        assert result.success is False
        assert result.error == "Logout failed"

    @pytest.mark.asyncio
    async def test_logout_transport_error(self, make_service):
        service = make_service(raises=httpx.ConnectError("down"))
        result = await service.logout("tok-123")
        assert result.error == "An error occurred during logout"


class TestAuthServiceLifecycle:
    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self, settings):
        """The service should leave an injected client open."""
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        async with AuthService(http_client=http_client, settings=settings):
            pass
        assert http_client.is_closed is False
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self, settings):
        service = AuthService(settings=settings)
        async with service:
            pass
        assert service._http.is_closed is True


class TestAuthServiceSingleton:
    def test_get_auth_service_caches(self):
        assert get_auth_service() is get_auth_service()

    def test_reset_auth_service(self):
        first = get_auth_service()
        reset_auth_service()
        assert get_auth_service() is not first
