"""Application repository client.

Keeps the working set (the logged-in user's applications) in memory and
synchronizes it with the tracker API over HTTP.
"""

import asyncio
import itertools
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, TypeVar, Union

import httpx
from pydantic import ValidationError

from config.settings import settings

from .exceptions import (
    AuthError,
    LoadError,
    MutationError,
    TrackerClientError,
    TrackerValidationError,
)
from .filters import ALL
from .models import ApplicationInput, ApplicationRecord, ApplicationStatus, UserProfile
from .session import TrackerSession

logger = logging.getLogger(__name__)

NETWORK_ERROR = "Network error. Please try again."
UNEXPECTED_RESPONSE = "Unexpected response from server"

T = TypeVar("T")


class ApplicationRepository:
    """
    Working-set owner and API client for one session.

    - ``load`` replaces the working set wholesale
    - ``create``/``update``/``delete`` patch it in place on success
    - failures raise and leave the working set untouched

    Mutations are serialized with a lock. Every request carries a sequence
    number; a load whose response arrives after a newer request has already
    been applied is discarded as stale.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[TrackerSession] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.api_base_url
        self.session = session or TrackerSession()
        self.timeout = timeout or settings.request_timeout
        self.applications: List[ApplicationRecord] = []

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )
        self._mutation_lock = asyncio.Lock()
        self._sequence = itertools.count(1)
        self._applied_sequence = 0

    async def __aenter__(self) -> "ApplicationRepository":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    # ============== HTTP Helpers ==============

    def _headers(self) -> Dict[str, str]:
        if self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    async def _request(
        self,
        method: str,
        path: str,
        error_cls: Type[TrackerClientError],
        **kwargs,
    ) -> httpx.Response:
        """Send a request, turning transport failures and timeouts into ``error_cls``"""
        try:
            return await self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out after {self.timeout}s")
            raise error_cls("Request timed out. Please try again.") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise error_cls(NETWORK_ERROR) from e

    @staticmethod
    def _error_message(response: httpx.Response, default: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return default
        if isinstance(body, dict) and body.get("message"):
            return body["message"]
        return default

    @staticmethod
    def _parse(
        response: httpx.Response,
        error_cls: Type[TrackerClientError],
        parse: Callable[[Any], T],
    ) -> T:
        """Decode a successful response body, turning malformed payloads into ``error_cls``"""
        try:
            return parse(response.json())
        except (ValueError, ValidationError, KeyError, TypeError) as e:
            logger.error(f"Malformed response from {response.request.url.path}: {e}")
            raise error_cls(UNEXPECTED_RESPONSE, status_code=response.status_code) from e

    def _mark_applied(self, sequence: int):
        self._applied_sequence = max(self._applied_sequence, sequence)

    def _index_of(self, app_id: str) -> int:
        for index, app in enumerate(self.applications):
            if app.id == app_id:
                return index
        return -1

    # ============== Working Set ==============

    async def load(self, status_filter: Union[ApplicationStatus, str, None] = ALL) -> List[ApplicationRecord]:
        """Replace the working set with the user's applications"""
        if not self.is_authenticated:
            self.applications = []
            return self.applications

        sequence = next(self._sequence)
        params = {}
        if status_filter and status_filter != ALL:
            params["status"] = ApplicationStatus(status_filter).value

        response = await self._request("GET", "/api/applications", LoadError, params=params)
        if not response.is_success:
            logger.error(f"Failed to load applications: {response.status_code}")
            raise LoadError(
                self._error_message(response, "Failed to load applications"),
                status_code=response.status_code,
            )

        records = self._parse(
            response,
            LoadError,
            lambda body: [ApplicationRecord.model_validate(item) for item in body],
        )
        if sequence < self._applied_sequence:
            logger.info(f"Discarding stale load response #{sequence}")
            return self.applications

        self.applications = records
        self._mark_applied(sequence)
        return self.applications

    @staticmethod
    def _coerce_input(data: Union[ApplicationInput, Mapping[str, Any]]) -> ApplicationInput:
        if isinstance(data, ApplicationInput):
            return data
        return ApplicationInput.model_validate(dict(data))

    def _require_login(self, action: str):
        if not self.is_authenticated:
            raise MutationError(f"Please login to {action} applications", status_code=401)

    async def create(self, data: Union[ApplicationInput, Mapping[str, Any]]) -> ApplicationRecord:
        """Create an application and append the server's copy to the working set"""
        self._require_login("add")
        payload = self._coerce_input(data)
        missing = payload.missing_fields()
        if missing:
            raise TrackerValidationError(missing)

        async with self._mutation_lock:
            sequence = next(self._sequence)
            response = await self._request(
                "POST", "/api/applications", MutationError, json=payload.to_payload()
            )
            if not response.is_success:
                raise MutationError(
                    self._error_message(response, "Failed to add application"),
                    status_code=response.status_code,
                )

            created = self._parse(response, MutationError, ApplicationRecord.model_validate)
            index = self._index_of(created.id)
            if index == -1:
                self.applications.append(created)
            else:
                self.applications[index] = created
            self._mark_applied(sequence)
            logger.info(f"Created application {created.id}")
            return created

    async def update(self, app_id: str, data: Union[ApplicationInput, Mapping[str, Any]]) -> ApplicationRecord:
        """Update an application, replacing it in place in the working set"""
        self._require_login("update")
        payload = self._coerce_input(data)
        missing = payload.missing_fields()
        if missing:
            raise TrackerValidationError(missing)

        async with self._mutation_lock:
            sequence = next(self._sequence)
            response = await self._request(
                "PUT", f"/api/applications/{app_id}", MutationError, json=payload.to_payload()
            )
            if not response.is_success:
                raise MutationError(
                    self._error_message(response, "Failed to update application"),
                    status_code=response.status_code,
                )

            updated = self._parse(response, MutationError, ApplicationRecord.model_validate)
            index = self._index_of(app_id)
            if index != -1:
                self.applications[index] = updated
            self._mark_applied(sequence)
            return updated

    async def delete(self, app_id: str):
        """Delete an application and drop it from the working set"""
        self._require_login("delete")

        async with self._mutation_lock:
            sequence = next(self._sequence)
            response = await self._request("DELETE", f"/api/applications/{app_id}", MutationError)
            if not response.is_success:
                raise MutationError("Failed to delete application", status_code=response.status_code)

            self.applications = [app for app in self.applications if app.id != app_id]
            self._mark_applied(sequence)

    def get(self, app_id: str) -> Optional[ApplicationRecord]:
        index = self._index_of(app_id)
        return self.applications[index] if index != -1 else None

    # ============== Authentication ==============

    async def _authenticate(self, path: str, payload: dict, default: str) -> UserProfile:
        response = await self._request("POST", path, AuthError, json=payload)
        if not response.is_success:
            raise AuthError(self._error_message(response, default), status_code=response.status_code)

        token, user = self._parse(
            response,
            AuthError,
            lambda body: (str(body["token"]), UserProfile.model_validate(body["user"])),
        )
        self.session.set_credential(token, user)
        # New identity: rebuild the working set from scratch
        self.applications = []
        await self.load()
        return user

    async def register(self, name: str, email: str, password: str) -> UserProfile:
        return await self._authenticate(
            "/api/auth/register",
            {"name": name, "email": email, "password": password},
            "Registration failed",
        )

    async def login(self, email: str, password: str) -> UserProfile:
        return await self._authenticate(
            "/api/auth/login",
            {"email": email, "password": password},
            "Login failed",
        )

    async def logout(self) -> str:
        """Drop the credential and the working set.

        The server call is informational only; the local credential is
        discarded even when it fails.
        """
        message = "Logged out successfully"
        try:
            response = await self._request("POST", "/api/auth/logout", AuthError)
            message = self._error_message(response, message)
        except AuthError as e:
            logger.warning(f"Logout request failed, discarding credential anyway: {e}")
        self.session.clear()
        self.applications = []
        return message

    async def me(self) -> UserProfile:
        """Validate the stored credential.

        Only a 401 discards it; other failures leave the session in place.
        """
        if not self.is_authenticated:
            raise AuthError("Not logged in", status_code=401)
        response = await self._request("GET", "/api/auth/me", AuthError)
        if response.status_code == 401:
            self.session.clear()
            self.applications = []
            raise AuthError(
                self._error_message(response, "Session expired, please login again"),
                status_code=response.status_code,
            )
        if not response.is_success:
            raise AuthError(
                self._error_message(response, "Could not verify session"),
                status_code=response.status_code,
            )
        user = self._parse(response, AuthError, UserProfile.model_validate)
        self.session.user = user
        self.session.save()
        return user

    async def forgot_password(self, email: str) -> str:
        response = await self._request(
            "POST", "/api/auth/forgot-password", AuthError, json={"email": email}
        )
        message = self._error_message(response, "Failed to request password reset")
        if not response.is_success:
            raise AuthError(message, status_code=response.status_code)
        return message

    async def reset_password(self, token: str, password: str) -> str:
        response = await self._request(
            "POST", f"/api/auth/reset-password/{token}", AuthError, json={"password": password}
        )
        message = self._error_message(response, "Failed to reset password")
        if not response.is_success:
            raise AuthError(message, status_code=response.status_code)
        return message
