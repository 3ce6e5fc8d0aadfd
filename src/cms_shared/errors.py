"""Error taxonomy shared by the gateway, the forms and the HTTP layer."""

GENERIC_ALERT = "Ocurrió un error inesperado. Intenta de nuevo."
NETWORK_ALERT = "No se pudo conectar con el servidor"


class PanelError(Exception):
    """Base class for every error the admin panel surfaces to the operator."""


class FormValidationError(PanelError):
    """One or more form fields failed their schema rule. No request was sent."""

    def __init__(self, errors: dict[str, str]):
        super().__init__("Form validation failed")
        self.errors = errors


class NetworkError(PanelError):
    """The request never produced a response (DNS, refused connection, timeout)."""

    def __init__(self, message: str = NETWORK_ALERT):
        super().__init__(message)
        self.message = message


class AuthorizationExpired(PanelError):
    """The API answered 401. The session has already been cleared."""


class LoginRequired(PanelError):
    """A guarded screen was requested without an authenticated session."""


class ApiError(PanelError):
    """The API answered with a 4xx/5xx other than 401."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        self.message = message or GENERIC_ALERT
        super().__init__(f"{status_code}: {self.message}")


class TokenDecodeError(PanelError):
    """A magic-link token could not be decoded into a known user."""

    def __init__(self, reason: str = "Token inválido"):
        super().__init__(reason)
        self.reason = reason


class SaveInProgress(PanelError):
    """A save for the same draft/form is still pending."""
