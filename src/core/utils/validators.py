"""Request validation utilities."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from core.models.errors import ValidationFailedError

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Removes sensitive/internal fields like:
    - url
    - ctx
    - input
    - internal exception details
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "body"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        # Friendly rewrites for common cases
        msg_lower = msg.lower()
        if "field required" in msg_lower:
            msg = "This field is required"
        elif "valid integer" in msg_lower:
            msg = "Must be a whole number"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def validate_request(
    model: type[ModelT],
    data: dict[str, Any],
    *,
    message: str = "Invalid request parameters",
) -> ModelT:
    """Validate request data against a Pydantic model.

    Args:
        model: Pydantic model class
        data: Input data to validate
        message: Envelope message used when validation fails

    Returns:
        The validated model instance

    Raises:
        ValidationFailedError: With sanitized per-field errors in details
    """
    try:
        return model(**data)
    except ValidationError as exc:
        raise ValidationFailedError(
            message=message,
            details={"errors": sanitize_validation_errors(exc.errors())},
        ) from exc
