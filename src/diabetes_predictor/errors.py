from __future__ import annotations


class InvalidCode(ValueError):
    """A categorical value that is neither a known code nor a known label."""

    def __init__(self, variable: str, value: object, valid: tuple = ()) -> None:
        self.variable = variable
        self.value = value
        self.valid = tuple(valid)
        msg = f"Invalid value {value!r} for {variable}."
        if self.valid:
            msg += f" Valid: {list(self.valid)}"
        super().__init__(msg)


class InvalidValue(ValueError):
    pass


class SchemaMismatch(ValueError):
    pass


class DatasetLoadFailure(RuntimeError):
    pass


class ModelLoadError(RuntimeError):
    """The model artifact or its metadata sidecar could not be read."""


class ModelNotFittedError(RuntimeError):
    pass


class CapabilityError(RuntimeError):
    """The loaded estimator lacks a method the caller asked for."""
