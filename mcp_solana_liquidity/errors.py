"""Error types raised by the liquidity service and the tool dispatcher."""

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData


class LiquidityServiceError(Exception):
    """Base class for failures inside the liquidity data service."""


class ValidationError(LiquidityServiceError):
    """Input is malformed, e.g. a pool address that is not a valid public key."""


class NotFoundError(LiquidityServiceError):
    """The requested on-chain account does not exist."""


class FetchError(LiquidityServiceError):
    """An upstream HTTP, JSON or RPC call failed."""


class ProtocolError(McpError):
    """Boundary-level error reported back to the MCP host."""

    def __init__(self, code: int, message: str):
        super().__init__(ErrorData(code=code, message=message))
        self.code = code

    @classmethod
    def method_not_found(cls, message: str) -> "ProtocolError":
        return cls(METHOD_NOT_FOUND, message)

    @classmethod
    def invalid_params(cls, message: str) -> "ProtocolError":
        return cls(INVALID_PARAMS, message)

    @classmethod
    def internal_error(cls, message: str) -> "ProtocolError":
        return cls(INTERNAL_ERROR, message)
