"""Exceptions raised by the PET climatology package."""


class PETClimatologyError(Exception):
    """Base class for package errors."""


class InvalidInput(PETClimatologyError, ValueError):
    """Grid shapes, timestamps or dataset contents violate the input contract."""


class InvalidGeometry(PETClimatologyError, ValueError):
    """Region geometry is empty, invalid or has zero area."""


class NumericGuardWarning(RuntimeWarning):
    """Cells set to missing because a formula left its physical domain."""
