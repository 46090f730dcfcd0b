"""Firebase Authentication client over the Identity Toolkit REST API.

Implements the AuthProvider contract: email/password sign-in and sign-up,
sign-out, ID token refresh and change notifications. Firebase error codes
are classified into AuthErrorKind by table lookup.
"""

import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import httpx

from waterwise.exceptions import (
    AuthError,
    AuthErrorKind,
    NetworkUnavailableError,
    UnknownAuthError,
    auth_error_for,
)
from waterwise.models.credentials import Credential, Registration
from waterwise.models.identity import AccountStatus, Identity
from waterwise.session.protocols import IdentityCallback, Unsubscribe

logger = logging.getLogger(__name__)

DEFAULT_AUTH_URL = "https://identitytoolkit.googleapis.com/v1"
DEFAULT_TOKEN_URL = "https://securetoken.googleapis.com/v1"
DEFAULT_TIMEOUT = 10.0

# Refresh a little before the provider-side expiry
TOKEN_EXPIRY_MARGIN = 60

FIREBASE_ERROR_KINDS: dict[str, AuthErrorKind] = {
    "INVALID_PASSWORD": AuthErrorKind.INVALID_CREDENTIAL,
    "INVALID_LOGIN_CREDENTIALS": AuthErrorKind.INVALID_CREDENTIAL,
    "INVALID_EMAIL": AuthErrorKind.INVALID_CREDENTIAL,
    "MISSING_PASSWORD": AuthErrorKind.INVALID_CREDENTIAL,
    "MISSING_EMAIL": AuthErrorKind.INVALID_CREDENTIAL,
    "EMAIL_NOT_FOUND": AuthErrorKind.PRINCIPAL_NOT_FOUND,
    "USER_NOT_FOUND": AuthErrorKind.PRINCIPAL_NOT_FOUND,
    "TOO_MANY_ATTEMPTS_TRY_LATER": AuthErrorKind.RATE_LIMITED,
    "QUOTA_EXCEEDED": AuthErrorKind.RATE_LIMITED,
    "EMAIL_EXISTS": AuthErrorKind.EMAIL_IN_USE,
    "WEAK_PASSWORD": AuthErrorKind.WEAK_PASSWORD,
    "USER_DISABLED": AuthErrorKind.ACCOUNT_DISABLED,
    "OPERATION_NOT_ALLOWED": AuthErrorKind.UNKNOWN,
}

# Refresh failures meaning the remote session is gone
SESSION_ENDED_CODES = frozenset({
    "TOKEN_EXPIRED",
    "USER_DISABLED",
    "USER_NOT_FOUND",
    "INVALID_REFRESH_TOKEN",
})


def firebase_error_code(payload: Any) -> str | None:
    """Extract the error code from a Firebase error body.

    Firebase reports ``{"error": {"message": "CODE : optional detail"}}``.
    """
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict):
        message = error.get("message")
    elif isinstance(error, str):
        # The secure-token endpoint answers with OAuth-style bodies
        message = error
    else:
        return None
    if not isinstance(message, str) or not message:
        return None
    return message.split(":", 1)[0].strip().upper()


def classify_error(code: str | None, status_code: int | None = None) -> AuthErrorKind:
    """Map a Firebase error code (and HTTP status) to an AuthErrorKind."""
    if code and code in FIREBASE_ERROR_KINDS:
        return FIREBASE_ERROR_KINDS[code]
    if status_code == 429:
        return AuthErrorKind.RATE_LIMITED
    return AuthErrorKind.UNKNOWN


@dataclass
class _Tokens:
    id_token: str
    refresh_token: str
    expires_at: float

    @property
    def expired(self) -> bool:
        return time.time() >= self.expires_at - TOKEN_EXPIRY_MARGIN


class FirebaseAuthClient:
    """Email/password authentication against Firebase.

    Holds the current ID and refresh tokens in memory. Subscribers are
    told about every change of the signed-in identity, including the
    session ending remotely (detected on token refresh).
    """

    def __init__(
        self,
        api_key: str,
        auth_url: str = DEFAULT_AUTH_URL,
        token_url: str = DEFAULT_TOKEN_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Firebase web API key
            auth_url: Identity Toolkit base URL
            token_url: Secure Token base URL
            timeout: Request timeout in seconds
        """
        self._api_key = api_key
        self._auth_url = auth_url.rstrip("/")
        self._token_url = token_url.rstrip("/")
        self._timeout = timeout
        self._tokens: _Tokens | None = None
        self._identity: Identity | None = None
        self._subscribers: list[IdentityCallback] = []

    @property
    def current_identity(self) -> Identity | None:
        return self._identity

    @property
    def id_token(self) -> str | None:
        """Current ID token, for use as a bearer token."""
        return self._tokens.id_token if self._tokens else None

    @property
    def token_expired(self) -> bool:
        return self._tokens is None or self._tokens.expired

    async def authenticate(self, credential: Credential) -> Identity:
        """Sign in with email and password.

        Raises:
            AuthError: Classified provider or network failure
        """
        data = await self._post(
            f"{self._auth_url}/accounts:signInWithPassword",
            json={
                "email": credential.email,
                "password": credential.password.get_secret_value(),
                "returnSecureToken": True,
            },
        )
        identity = self._identity_from(data)
        self._store_tokens(data)
        logger.info(f"Signed in to Firebase as {identity.id}")
        self._set_identity(identity)
        return identity

    async def create_identity(self, registration: Registration) -> Identity:
        """Create an account and set its display name.

        Once ``accounts:signUp`` succeeds the account exists and is signed
        in; a failed display-name update is logged and the identity still
        carries ``registration.name``.

        Raises:
            AuthError: Classified provider or network failure of the sign-up
        """
        data = await self._post(
            f"{self._auth_url}/accounts:signUp",
            json={
                "email": registration.email,
                "password": registration.password.get_secret_value(),
                "returnSecureToken": True,
            },
        )
        self._store_tokens(data)

        try:
            profile = await self._post(
                f"{self._auth_url}/accounts:update",
                json={
                    "idToken": data["idToken"],
                    "displayName": registration.name,
                    "returnSecureToken": True,
                },
            )
        except AuthError as e:
            logger.warning(
                f"Display name update failed for {data.get('localId')}: "
                f"{e.kind.value}"
            )
            profile = {}
        if profile.get("idToken"):
            self._store_tokens(profile)

        identity = self._identity_from(
            {**data, **profile},
            name=registration.name,
            phone=registration.phone,
        )
        logger.info(f"Created Firebase account {identity.id}")
        self._set_identity(identity)
        return identity

    async def revoke_session(self) -> None:
        """Forget the tokens of the current session.

        Firebase has no client-side revocation call; signing out is local.
        """
        self._tokens = None
        if self._identity is not None:
            logger.info(f"Signed out of Firebase ({self._identity.id})")
        self._set_identity(None)

    async def refresh(self) -> str | None:
        """Exchange the refresh token for a new ID token.

        Returns:
            The new ID token, or None if there is no session or the
            provider ended it (subscribers are then notified with None)

        Raises:
            AuthError: Network or unclassified failures; the session is kept
        """
        if self._tokens is None:
            return None

        try:
            data = await self._post(
                f"{self._token_url}/token",
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": self._tokens.refresh_token,
                },
            )
        except AuthError as e:
            if e.detail in SESSION_ENDED_CODES:
                logger.warning(f"Firebase session ended remotely: {e.detail}")
                self._tokens = None
                self._set_identity(None)
                return None
            raise

        self._tokens = _Tokens(
            id_token=data["id_token"],
            refresh_token=data.get("refresh_token", self._tokens.refresh_token),
            expires_at=time.time() + int(data.get("expires_in", 3600)),
        )
        logger.debug("Refreshed Firebase ID token")
        return self._tokens.id_token

    async def valid_id_token(self) -> str | None:
        """Current ID token, refreshed first if it is about to expire."""
        if self._tokens is not None and self._tokens.expired:
            return await self.refresh()
        return self.id_token

    def subscribe(self, callback: IdentityCallback) -> Unsubscribe:
        """Register a callback for identity changes.

        Returns:
            A function that removes the callback (safe to call twice)
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set_identity(self, identity: Identity | None) -> None:
        if identity is None and self._identity is None:
            return
        self._identity = identity
        for callback in list(self._subscribers):
            try:
                callback(identity)
            except Exception:
                logger.exception("Auth state subscriber failed")

    def _store_tokens(self, data: dict[str, Any]) -> None:
        self._tokens = _Tokens(
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken", ""),
            expires_at=time.time() + int(data.get("expiresIn", 3600)),
        )

    def _identity_from(
        self,
        data: dict[str, Any],
        name: str | None = None,
        phone: str | None = None,
    ) -> Identity:
        email = data.get("email", "")
        display_name = name or data.get("displayName") or email.split("@")[0]
        return Identity(
            id=data["localId"],
            name=display_name,
            email=email,
            phone=phone,
            status=AccountStatus.ACTIVE,
            last_login_at=datetime.now(UTC),
        )

    async def _post(
        self,
        url: str,
        json: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """POST to Firebase and return the JSON body.

        Raises:
            AuthError: With ``detail`` set to the Firebase error code
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    url,
                    params={"key": self._api_key},
                    json=json,
                    data=data,
                )
        except httpx.TransportError as e:
            logger.warning(f"Firebase unreachable: {type(e).__name__}")
            raise NetworkUnavailableError(str(e)) from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.status_code != 200:
            code = firebase_error_code(body)
            kind = classify_error(code, resp.status_code)
            logger.warning(
                f"Firebase request failed: HTTP {resp.status_code} "
                f"code={code} kind={kind.value}"
            )
            raise auth_error_for(kind, code or f"HTTP {resp.status_code}")

        if not isinstance(body, dict):
            raise UnknownAuthError("Malformed Firebase response")
        return body
