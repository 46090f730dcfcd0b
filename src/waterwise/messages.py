"""User-facing messages for classified authentication errors."""

from waterwise.config import Settings, get_settings
from waterwise.exceptions import AuthError, AuthErrorKind

DEFAULT_LOCALE = "pt-BR"

MESSAGES: dict[str, dict[AuthErrorKind, str]] = {
    "pt-BR": {
        AuthErrorKind.INVALID_CREDENTIAL: "Email ou senha incorretos.",
        AuthErrorKind.PRINCIPAL_NOT_FOUND: "Nenhuma conta encontrada com este email.",
        AuthErrorKind.RATE_LIMITED: "Muitas tentativas. Aguarde alguns minutos e tente novamente.",
        AuthErrorKind.NETWORK_UNAVAILABLE: "Sem conexão com a internet. Verifique sua rede.",
        AuthErrorKind.RESOURCE_CREATION_FAILED: (
            "Conta criada, mas não foi possível cadastrar a propriedade. Tente novamente."
        ),
        AuthErrorKind.NO_ACTIVE_SESSION: "Sua sessão expirou. Entre novamente.",
        AuthErrorKind.EMAIL_IN_USE: "Este email já está em uso.",
        AuthErrorKind.WEAK_PASSWORD: "A senha deve ter pelo menos 6 caracteres.",
        AuthErrorKind.ACCOUNT_DISABLED: "Esta conta foi desativada.",
        AuthErrorKind.UNKNOWN: "Ocorreu um erro durante a autenticação. Tente novamente.",
    },
    "en": {
        AuthErrorKind.INVALID_CREDENTIAL: "Incorrect email or password.",
        AuthErrorKind.PRINCIPAL_NOT_FOUND: "No account found for this email.",
        AuthErrorKind.RATE_LIMITED: "Too many attempts. Wait a few minutes and try again.",
        AuthErrorKind.NETWORK_UNAVAILABLE: "No internet connection. Check your network.",
        AuthErrorKind.RESOURCE_CREATION_FAILED: (
            "Account created, but the property could not be registered. Try again."
        ),
        AuthErrorKind.NO_ACTIVE_SESSION: "Your session has expired. Please sign in again.",
        AuthErrorKind.EMAIL_IN_USE: "This email is already in use.",
        AuthErrorKind.WEAK_PASSWORD: "Password must be at least 6 characters.",
        AuthErrorKind.ACCOUNT_DISABLED: "This account has been disabled.",
        AuthErrorKind.UNKNOWN: "Something went wrong while signing in. Please try again.",
    },
}


def message_for(kind: AuthErrorKind | str, locale: str = DEFAULT_LOCALE) -> str:
    """Look up the user-facing message for an error kind.

    Unknown kinds or locales fall back to the generic message of the
    default locale, so raw collaborator details never reach the user.
    """
    table = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    try:
        kind = AuthErrorKind(kind)
    except ValueError:
        return MESSAGES[DEFAULT_LOCALE][AuthErrorKind.UNKNOWN]
    return table.get(kind, MESSAGES[DEFAULT_LOCALE][AuthErrorKind.UNKNOWN])


def user_message(error: AuthError, settings: Settings | None = None) -> str:
    """Message for a raised AuthError in the configured locale."""
    settings = settings or get_settings()
    return message_for(error.kind, settings.locale)
