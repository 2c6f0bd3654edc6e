"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidQuantity(ValidationError):
    """A line item quantity was zero, negative or not an integer."""


class InvalidPaymentAmount(ValidationError):
    """A payment amount was not strictly positive."""


class InvalidDiscountAmount(ValidationError):
    """A discount amount was not strictly positive."""


class DiscountAlreadyApplied(ValidationError):
    """The same discount code was applied to an order twice."""


class InvalidStatusTransition(ValidationError):
    """The requested status change is not allowed from the current status."""


class OrderClosed(ValidationError):
    """A mutation was attempted on a cancelled order."""


class ItemNotInOrder(DomainException):
    """A shipment referenced a line that is not currently in the order."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ShipmentNotFound(EntityNotFoundError):
    """No shipment with the given id belongs to the order."""
