"""Domain-specific exceptions."""


class ServiceError(Exception):
    pass


class ListingServiceError(ServiceError):
    """The listing query failed (network, backend or payload fault)."""


class ConfigurationError(ServiceError):
    pass
