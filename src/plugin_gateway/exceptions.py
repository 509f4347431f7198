"""Base exception for the plugin gateway."""


class PluginGatewayError(Exception):
    """Base exception for all plugin gateway errors."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)
