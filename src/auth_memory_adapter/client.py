"""AuthClient — starts sign-in / sign-out flows against the auth framework's routes.

The browser helpers this mirrors navigate the window afterwards; here the
destination URL is returned in a :class:`SignInResult` for the caller to act on.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Literal, TypeVar

import httpx
from pydantic import BaseModel, Field

from auth_memory_adapter.exceptions import AuthClientError

logger = logging.getLogger(__name__)

# Providers whose callback can answer the caller directly instead of redirecting.
RETURNING_PROVIDERS = frozenset({"credentials", "email", "webauthn"})
# Providers that post straight to the callback route.
CALLBACK_PROVIDERS = frozenset({"credentials", "webauthn"})

_FORM_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "X-Auth-Return-Redirect": "1",
}

WebAuthnResponder = Callable[[str, dict[str, Any]], Awaitable[dict[str, Any]]]
AuthorizationParams = str | Mapping[str, str] | Sequence[tuple[str, str]]

M = TypeVar("M", bound=BaseModel)


class CsrfBody(BaseModel):
    csrf_token: str = Field(alias="csrfToken")


class RedirectBody(BaseModel):
    url: str | None = None


class WebAuthnOptionsBody(BaseModel):
    action: Literal["authenticate", "register"]
    options: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class SignInResult:
    """Where the caller should go next.

    Attributes:
        url:      Destination returned by the server, or the callback URL.
        response: Raw response, only when the caller opted out of redirecting
                  for a provider that supports it.
    """

    url: str
    response: httpx.Response | None = None

    @property
    def needs_reload(self) -> bool:
        """A URL with a fragment does not trigger navigation on its own."""
        return "#" in self.url


class AuthClient:
    """HTTP client for the framework's ``/auth`` routes.

    Every request fetches a fresh CSRF token first.

    Parameters:
        base_url:           Origin of the application, e.g. ``https://app.example.com``.
        base_path:          Path prefix the app is mounted under.
        http_client:        Shared ``httpx.AsyncClient``.  A short-lived client
                            is created per call when omitted.
        timeout:            Request timeout in seconds for the short-lived client.
        webauthn_responder: ``(action, options) -> credential`` coroutine that
                            performs the WebAuthn ceremony.  Required for the
                            ``webauthn`` provider.
    """

    def __init__(
        self,
        base_url: str,
        *,
        base_path: str = "",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        webauthn_responder: WebAuthnResponder | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._base_path = base_path.rstrip("/")
        self._http = http_client
        self._timeout = timeout
        self._webauthn_responder = webauthn_responder

    def _url(self, route: str) -> str:
        return f"{self._base_url}{self._base_path}/auth/{route}"

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http is not None:
            yield self._http
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    @staticmethod
    def _parse(model: type[M], response: httpx.Response) -> M:
        try:
            return model.model_validate(response.json())
        except ValueError as e:
            raise AuthClientError(
                f"Unexpected response from {response.request.url}: {e}"
            ) from e

    async def _csrf_token(self, client: httpx.AsyncClient) -> str:
        response = await client.get(self._url("csrf"))
        return self._parse(CsrfBody, response).csrf_token

    async def _webauthn_body(
        self,
        client: httpx.AsyncClient,
        provider_id: str,
        options: Mapping[str, Any],
    ) -> dict[str, str] | None:
        if self._webauthn_responder is None:
            raise AuthClientError("The webauthn provider requires a webauthn_responder")

        response = await client.get(self._url(f"webauthn-options/{provider_id}"), params=options)
        if not response.is_success:
            logger.error(
                "Fetching webauthn options failed: HTTP %s %s",
                response.status_code,
                response.text,
            )
            return None

        body = self._parse(WebAuthnOptionsBody, response)
        credential = await self._webauthn_responder(body.action, body.options)
        return {"data": json.dumps(credential), "action": body.action}

    async def sign_in(
        self,
        provider_id: str | None = None,
        *,
        callback_url: str | None = None,
        redirect: bool = True,
        authorization_params: AuthorizationParams | None = None,
        **options: Any,
    ) -> SignInResult | None:
        """Start a sign-in flow.

        Without a provider the sign-in page listing every provider is
        returned and no request is made.

        Args:
            provider_id: Provider to sign in with.
            callback_url: Where to land after signing in.  Defaults to ``base_url``.
            redirect: ``False`` returns the raw response for providers that
                support it (credentials, email, webauthn).
            authorization_params: Extra query parameters for the provider.
            **options: Extra form fields, e.g. ``email`` or ``password``.

        Returns:
            A :class:`SignInResult`, or ``None`` if the webauthn options
            request failed.
        """
        callback_url = callback_url or self._base_url
        if provider_id is None:
            return SignInResult(url=self._url("signin"))

        route = "callback" if provider_id in CALLBACK_PROVIDERS else "signin"
        url = self._url(f"{route}/{provider_id}")

        async with self._client() as client:
            webauthn_body: dict[str, str] = {}
            if provider_id == "webauthn":
                fetched = await self._webauthn_body(client, provider_id, options)
                if fetched is None:
                    return None
                webauthn_body = fetched

            csrf_token = await self._csrf_token(client)
            form = {
                **options,
                "csrfToken": csrf_token,
                "callbackUrl": callback_url,
                **webauthn_body,
            }
            response = await client.post(
                url,
                params=authorization_params,
                data=form,
                headers=_FORM_HEADERS,
            )

        body = self._parse(RedirectBody, response)
        destination = body.url or callback_url
        if redirect or provider_id not in RETURNING_PROVIDERS:
            return SignInResult(url=destination)
        return SignInResult(url=destination, response=response)

    async def sign_out(self, callback_url: str | None = None) -> SignInResult:
        """Sign the user out by asking the server to clear the session cookie."""
        callback_url = callback_url or self._base_url
        async with self._client() as client:
            csrf_token = await self._csrf_token(client)
            response = await client.post(
                self._url("signout"),
                data={"csrfToken": csrf_token, "callbackUrl": callback_url},
                headers=_FORM_HEADERS,
            )
        body = self._parse(RedirectBody, response)
        return SignInResult(url=body.url or callback_url)
