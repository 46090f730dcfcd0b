"""Form validation for registration and property forms.

Each validator returns the problems it found, in form order; an empty
list means the form can be submitted.
"""

import re
from dataclasses import dataclass

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
LETTERS_AND_DIGITS = re.compile(r"(?=.*[A-Za-z])(?=.*[0-9])")

MIN_PASSWORD_LENGTH = 6
MIN_PHONE_DIGITS = 10


@dataclass(frozen=True)
class ValidationIssue:
    """A problem with one form field."""

    field: str
    message: str


def validate_registration(
    name: str,
    email: str,
    password: str,
    confirm_password: str,
    phone: str | None = None,
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    if not name.strip():
        issues.append(ValidationIssue("name", "Nome é obrigatório"))

    if not email.strip():
        issues.append(ValidationIssue("email", "Email é obrigatório"))
    elif not EMAIL_PATTERN.match(email):
        issues.append(ValidationIssue("email", "Email inválido"))

    if not password:
        issues.append(ValidationIssue("password", "Senha é obrigatória"))
    elif len(password) < MIN_PASSWORD_LENGTH:
        issues.append(
            ValidationIssue("password", "Senha deve ter pelo menos 6 caracteres")
        )
    elif not LETTERS_AND_DIGITS.search(password):
        issues.append(
            ValidationIssue("password", "Senha deve conter pelo menos uma letra e um número")
        )

    if password and password != confirm_password:
        issues.append(ValidationIssue("confirm_password", "Senhas não conferem"))

    if phone:
        digits = re.sub(r"\D", "", phone)
        if len(digits) < MIN_PHONE_DIGITS:
            issues.append(
                ValidationIssue("phone", "Telefone deve ter pelo menos 10 dígitos")
            )

    return issues


def _parse_float(value: str) -> float | None:
    try:
        return float(value.strip().replace(",", "."))
    except ValueError:
        return None


def validate_property_form(
    name: str,
    location: str,
    area: str,
    latitude: str,
    longitude: str,
) -> list[ValidationIssue]:
    """Validate the add/edit property form (raw text inputs)."""
    issues: list[ValidationIssue] = []

    if not name.strip():
        issues.append(ValidationIssue("name", "Nome é obrigatório"))

    if not location.strip():
        issues.append(ValidationIssue("location", "Localização é obrigatória"))

    if not area.strip():
        issues.append(ValidationIssue("area", "Área é obrigatória"))
    else:
        value = _parse_float(area)
        if value is None or value <= 0:
            issues.append(ValidationIssue("area", "Área deve ser um número positivo"))

    for field, label, raw in (
        ("latitude", "Latitude", latitude),
        ("longitude", "Longitude", longitude),
    ):
        if not raw.strip():
            issues.append(ValidationIssue(field, f"{label} é obrigatória"))
        elif _parse_float(raw) is None:
            issues.append(ValidationIssue(field, f"{label} deve ser um número válido"))

    return issues
