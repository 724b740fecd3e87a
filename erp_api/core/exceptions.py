"""
core/exceptions.py
------------------
Domain error taxonomy.

Services raise these instead of building HTTP responses; the handler
registered in main.py renders them as:

    {"detail": "<message>", "code": "<code>", ...extra}

Every class carries its HTTP status so routes never need to translate.
"""

from typing import Any, Dict, Iterable, Optional

from fastapi import status


class ERPError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "code": self.code}
        body.update(self.extra)
        return body


class Unauthenticated(ERPError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"


class WrongTokenType(Unauthenticated):
    code = "wrong_token_type"


class Forbidden(ERPError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class CrossTenantAccess(Forbidden):
    code = "cross_tenant_access"


class NotFound(ERPError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class Conflict(ERPError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class InvalidInput(ERPError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_input"


class InvalidPermission(InvalidInput):
    code = "invalid_permission"

    def __init__(self, invalid: Iterable[str]) -> None:
        self.invalid = list(invalid)
        super().__init__(
            "Unknown permission(s): " + ", ".join(self.invalid),
            extra={"invalid": self.invalid},
        )
