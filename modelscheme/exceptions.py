"""Custom exceptions for model serialization."""


class SerializerError(Exception):
    """Base exception for serializer errors."""

    pass


class ConfigurationError(SerializerError):
    """Raised when a model, scheme or option set cannot be used."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class TypeMismatchError(SerializerError):
    """Raised when a record does not belong to the serializer's model."""

    def __init__(self, model_name: str, given_type: str):
        message = f"Not an instance of {model_name}: got {given_type}"
        super().__init__(message)
        self.model_name = model_name
        self.given_type = given_type


class UndefinedAttributeError(SerializerError):
    """Raised under the FAIL policy when an attribute has no value."""

    def __init__(self, model_name: str, attribute: str):
        message = f"Undefined attribute on {model_name} instance: {attribute}"
        super().__init__(message)
        self.model_name = model_name
        self.attribute = attribute


class EncodingError(SerializerError):
    """Raised when a value has no JSON representation."""

    def __init__(self, type_name: str, message: str | None = None):
        super().__init__(message or f"Can't encode {type_name} to JSON")
        self.type_name = type_name


class CircularReferenceError(SerializerError):
    """Raised when a record is reached again through its own associations."""

    def __init__(self, model_name: str, path: str):
        message = f"Circular reference to {model_name} instance at '{path}'"
        super().__init__(message)
        self.model_name = model_name
        self.path = path
