"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ConfigurationError(DomainException):
    """Operator registry is misconfigured or queried for an unknown operator"""

    pass


class UnsupportedOperatorError(ConfigurationError):
    """No capability bundle is registered for the requested operator type"""

    pass


class DuplicateOperatorError(ConfigurationError):
    """Two providers claim the same operator type"""

    pass


class CapabilityMismatchError(ConfigurationError):
    """Capability objects from different operator families were combined"""

    pass


class SpecificationError(DomainException):
    """Transaction specification is incomplete or malformed"""

    pass


class IncompleteSpecError(SpecificationError):
    """A required transaction field was never set"""

    pass


class InvalidAmountError(SpecificationError):
    """Transaction amount is zero or negative"""

    pass
