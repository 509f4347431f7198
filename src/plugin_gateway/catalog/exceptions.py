"""Exceptions raised by the operation catalog."""

from plugin_gateway.exceptions import PluginGatewayError


class CatalogError(PluginGatewayError):
    """Base exception for catalog errors."""
    pass


class DuplicateOperationError(CatalogError):
    """Raised when an operation name is already registered by another backend.

    Attributes:
        operation_name: The colliding operation name.
        backend_id: Backend that attempted the registration.
        existing_backend_id: Backend that already owns the name.
    """

    def __init__(self, operation_name: str, backend_id: str, existing_backend_id: str):
        super().__init__(
            message=(
                f"Operation '{operation_name}' from backend '{backend_id}' "
                f"is already registered by backend '{existing_backend_id}'"
            ),
            code="DUPLICATE_OPERATION",
        )
        self.operation_name = operation_name
        self.backend_id = backend_id
        self.existing_backend_id = existing_backend_id


class OperationNotFoundError(CatalogError):
    """Raised when a requested operation is not in the catalog.

    Attributes:
        operation_name: Name of the operation that was not found.
    """

    def __init__(self, operation_name: str):
        super().__init__(
            message=f"Operation '{operation_name}' not found in catalog",
            code="OPERATION_NOT_FOUND",
        )
        self.operation_name = operation_name
