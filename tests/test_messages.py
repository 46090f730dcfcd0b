"""Tests for error classification helpers and user-facing messages."""

import pytest

from waterwise.exceptions import (
    AuthError,
    AuthErrorKind,
    InvalidCredentialError,
    ResourceCreationFailedError,
    UnknownAuthError,
    auth_error_for,
)
from waterwise.config import Settings
from waterwise.messages import MESSAGES, message_for, user_message
from waterwise.models.identity import Identity


class TestMessageTable:
    """Tests for message_for."""

    @pytest.mark.parametrize("locale", sorted(MESSAGES))
    def test_every_kind_has_a_message(self, locale):
        for kind in AuthErrorKind:
            assert MESSAGES[locale][kind]

    @pytest.mark.parametrize("locale", sorted(MESSAGES))
    def test_messages_are_distinct(self, locale):
        messages = list(MESSAGES[locale].values())
        assert len(messages) == len(set(messages))

    def test_default_locale_is_portuguese(self):
        assert message_for(AuthErrorKind.INVALID_CREDENTIAL) == "Email ou senha incorretos."

    def test_english(self):
        assert message_for(AuthErrorKind.RATE_LIMITED, "en").startswith("Too many attempts")

    def test_accepts_kind_value(self):
        assert message_for("email_in_use", "en") == "This email is already in use."

    def test_unknown_kind_falls_back_to_generic(self):
        assert message_for("kaboom") == MESSAGES["pt-BR"][AuthErrorKind.UNKNOWN]

    def test_unknown_locale_uses_default(self):
        assert message_for(AuthErrorKind.NO_ACTIVE_SESSION, "fr") == (
            MESSAGES["pt-BR"][AuthErrorKind.NO_ACTIVE_SESSION]
        )


class TestUserMessage:
    """Tests for user_message."""

    def test_uses_configured_locale(self):
        settings = Settings(firebase_api_key="k", locale="en")
        error = InvalidCredentialError("INVALID_PASSWORD")
        assert user_message(error, settings) == MESSAGES["en"][AuthErrorKind.INVALID_CREDENTIAL]

    def test_defaults_to_environment_settings(self):
        assert user_message(UnknownAuthError("boom")) == (
            MESSAGES["pt-BR"][AuthErrorKind.UNKNOWN]
        )


class TestAuthErrors:
    """Tests for the AuthError hierarchy."""

    def test_auth_error_for_builds_subclass(self):
        error = auth_error_for(AuthErrorKind.INVALID_CREDENTIAL, "INVALID_PASSWORD")
        assert isinstance(error, InvalidCredentialError)
        assert error.detail == "INVALID_PASSWORD"

    def test_resource_failure_kind_falls_back(self):
        error = auth_error_for(AuthErrorKind.RESOURCE_CREATION_FAILED)
        assert isinstance(error, UnknownAuthError)

    def test_every_error_is_an_auth_error(self):
        for kind in AuthErrorKind:
            assert isinstance(auth_error_for(kind), AuthError)

    def test_resource_failure_carries_identity(self):
        identity = Identity(id="uid-1", name="Ana", email="ana@x.com")
        error = ResourceCreationFailedError(identity, "HTTP 500")
        assert error.identity == identity
        assert error.kind == AuthErrorKind.RESOURCE_CREATION_FAILED
        assert str(error) == "HTTP 500"
