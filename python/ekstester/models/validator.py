"""
ekstester/models/validator.py

Validates untyped, decoded documents against a pydantic-based type using
TypeAdapter, reporting failures in the resolver's error taxonomy.
"""

from typing import Any, Type, TypeVar
from pydantic import ValidationError, TypeAdapter

from ekstester.config.errors import ConfigValidationError

T = TypeVar("T")


def validate_document(obj: Any, expected_type: Type[T]) -> T:
    """
    Validates that a decoded document conforms to the expected pydantic-based type.

    Args:
        obj (Any): The decoded document (usually a dict from YAML).
        expected_type (Type[T]): The type to validate against.

    Returns:
        T: The validated object, cast to the expected type.

    Raises:
        ConfigValidationError: If validation fails. The first failing field
            path is carried in `field`.
    """
    try:
        adapter = TypeAdapter(expected_type)
        return adapter.validate_python(obj)
    except ValidationError as e:
        errors = e.errors()
        field = ".".join(str(p) for p in errors[0]["loc"]) if errors else None
        raise ConfigValidationError(
            f"invalid {getattr(expected_type, '__name__', expected_type)} document: {e}",
            field=field,
        ) from e
