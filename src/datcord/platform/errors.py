class GatewayError(Exception):
    """Base class for gateway failures."""


class GatewayProtocolError(GatewayError):
    """The server sent something the client could not interpret."""
