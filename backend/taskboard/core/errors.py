"""Error kinds raised by the access services.

Each error carries a machine-readable ``kind`` and a ``context`` dict. Turning
them into user-visible text is left to the HTTP layer.
"""
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError


class TaskboardError(Exception):
    kind = "error"

    def __init__(self, **context: Any):
        self.context = context
        super().__init__(f"{self.kind}: {context}")


class ValidationError(TaskboardError):
    """Malformed or out-of-range input. ``errors`` lists one entry per field."""

    kind = "validation_error"

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        super().__init__(errors=errors)

    @classmethod
    def for_field(cls, field: str, reason: str, **extra: Any) -> "ValidationError":
        return cls([{"field": field, "reason": reason, **extra}])

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        errors = []
        for error in exc.errors():
            errors.append({
                "field": ".".join(str(part) for part in error["loc"]) or "__root__",
                "reason": error["type"],
                "ctx": {k: v for k, v in (error.get("ctx") or {}).items()
                        if isinstance(v, (str, int, float, bool))},
            })
        return cls(errors)


class NotFound(TaskboardError):
    kind = "not_found"

    def __init__(self, entity: str, id: Any):
        self.entity = entity
        self.id = id
        super().__init__(entity=entity, id=id)


class Forbidden(TaskboardError):
    kind = "forbidden"

    def __init__(self, action: str, entity: str, id: Optional[Any] = None):
        self.action = action
        self.entity = entity
        self.id = id
        super().__init__(action=action, entity=entity, id=id)


class StoreFailure(TaskboardError):
    kind = "store_failure"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(operation=operation)


class AuthError(TaskboardError):
    kind = "auth_error"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason=reason)
