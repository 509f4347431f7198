"""Exceptions raised by record stores."""

from plugin_gateway.exceptions import PluginGatewayError


class StoreError(PluginGatewayError):
    """Base exception for record store errors."""
    pass


class RecordNotFoundError(StoreError):
    """Raised when a record id is not in the store."""

    def __init__(self, store: str, record_id: str):
        super().__init__(
            message=f"Record '{record_id}' not found in store '{store}'",
            code="RECORD_NOT_FOUND",
        )
        self.store = store
        self.record_id = record_id
