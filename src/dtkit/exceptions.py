"""Custom exceptions for decision tree training and prediction.

Every exception subclasses `DecisionTreeError`, so callers can catch any
failure raised by dtkit with a single handler. Each one also subclasses the
closest builtin exception so generic handlers keep working:

- TypeMismatchError (TypeError): A value's runtime type does not match what a
  predicate or the entropy calculation requires.
- AttributeMissingError (LookupError): A record lacks an attribute referenced
  during training or prediction.
- EmptyTrainingSetError (ValueError): Training was invoked with zero records.
- InvalidConfigurationError (ValueError): The category attribute is empty,
  collides with an ignored attribute, or the training options are invalid.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class DecisionTreeError(Exception):
    """Base exception for all dtkit errors."""


class TypeMismatchError(DecisionTreeError, TypeError):
    """Raised when a value's type is incompatible with the operation applied to it.

    Attributes:
        attribute (str | None): Attribute whose value failed the check, when known.
        value (Any): The offending value.
        expected (str): Human-readable description of what was expected.

    Examples:
        >>> err = TypeMismatchError(attribute="sex", value=1, expected="a categorical (str) value")
        >>> err.attribute
        'sex'
        >>> str(err)
        "Attribute 'sex' has value 1 of type int, expected a categorical (str) value"
    """

    attribute: str | None
    value: Any
    expected: str

    def __init__(self, *, attribute: str | None, value: Any, expected: str) -> None:
        """Initialize TypeMismatchError.

        Args:
            attribute (str | None): Attribute whose value failed the check.
            value (Any): The offending value.
            expected (str): Description of the expected value type.
        """
        subject = f"Attribute '{attribute}' has value" if attribute is not None else "Value"
        super().__init__(f"{subject} {value!r} of type {type(value).__name__}, expected {expected}")
        self.attribute = attribute
        self.value = value
        self.expected = expected

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Representation including the attribute, value and expectation.
        """
        return (
            f"{self.__class__.__name__}("
            f"attribute={self.attribute!r}, value={self.value!r}, expected={self.expected!r})"
        )


class AttributeMissingError(DecisionTreeError, LookupError):
    """Raised when a record does not carry a required attribute.

    Attributes:
        attribute (str): The attribute that was looked up.
        available_attributes (list[str]): Attributes present in the record.

    Examples:
        >>> err = AttributeMissingError(attribute="age", available_attributes=["weight", "sex"])
        >>> err.available_attributes
        ['weight', 'sex']
    """

    attribute: str
    available_attributes: list[str]

    def __init__(self, *, attribute: str, available_attributes: Iterable[str]) -> None:
        """Initialize AttributeMissingError.

        Args:
            attribute (str): The attribute that was looked up.
            available_attributes (Iterable[str]): Attributes present in the record.
        """
        self.attribute = attribute
        self.available_attributes = list(available_attributes)
        super().__init__(
            f"Record has no attribute '{attribute}'. Available attributes: {sorted(self.available_attributes)}"
        )

    def __str__(self) -> str:
        """Return the plain message (LookupError subclasses would otherwise quote it).

        Returns:
            str: The error message.
        """
        return str(self.args[0])

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Representation including the missing and available attributes.
        """
        return (
            f"{self.__class__.__name__}("
            f"attribute={self.attribute!r}, available_attributes={self.available_attributes!r})"
        )


class EmptyTrainingSetError(DecisionTreeError, ValueError):
    """Raised when training or scoring is invoked with no records."""

    def __init__(self, message: str = "Training set must contain at least one record") -> None:
        """Initialize EmptyTrainingSetError.

        Args:
            message (str): Description of the error.
        """
        super().__init__(message)


class InvalidConfigurationError(DecisionTreeError, ValueError):
    """Raised when the training configuration is invalid.

    Attributes:
        category_attribute (str | None): The configured category attribute, when known.

    Examples:
        >>> err = InvalidConfigurationError("category attribute must not be empty", category_attribute="")
        >>> err.category_attribute
        ''
    """

    category_attribute: str | None

    def __init__(self, message: str, *, category_attribute: str | None = None) -> None:
        """Initialize InvalidConfigurationError.

        Args:
            message (str): Description of the configuration problem.
            category_attribute (str | None): The configured category attribute.
        """
        super().__init__(message)
        self.category_attribute = category_attribute

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Representation including the message and category attribute.
        """
        return f"{self.__class__.__name__}(message={str(self)!r}, category_attribute={self.category_attribute!r})"
