"""
Typed domain errors raised by the tenancy and access core.

Routes do not catch these; they are translated to HTTP responses by the
exception handlers registered in ``context_service.api.app``.
"""

from typing import Optional


class ContextError(Exception):
    """Base class for errors raised by the core services"""


class LimitError(ContextError):
    """A plan cap was reached or a feature is not included in the plan"""

    def __init__(self, kind: str, plan: str, limit: Optional[int] = None, message: str = ""):
        self.kind = str(getattr(kind, "value", kind))
        self.plan = str(getattr(plan, "value", plan))
        self.limit = limit
        super().__init__(message or f"Plan limit reached: {self.kind} ({self.plan})")


class AuthorizationError(ContextError):
    """Caller lacks the role required for the operation"""

    VIEWER_RESTRICTED = "viewer restricted"
    EDITOR_REQUIRED = "editor access required"
    ADMIN_REQUIRED = "admin required"
    SELF_MODIFICATION = "cannot modify own access"
    PRIVILEGED_TARGET = "cannot restrict a privileged user"

    def __init__(self, reason: str, status_code: int = 403):
        self.reason = reason
        self.status_code = status_code
        super().__init__(reason)


class DependencyError(ContextError):
    """monday.com or the object store failed outright"""

    def __init__(self, service: str, message: str = ""):
        self.service = service
        super().__init__(message or f"{service} request failed")


class ValidationError(ContextError):
    """Malformed input; raised before any side effect"""


class RateLimitExceeded(ContextError):
    """Too many requests for a rate-limit bucket"""

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded, retry after {retry_after}s")
