"""
Exception taxonomy for the database gateway.

Every failure raised by the gateway derives from GatewayError so callers
can catch the whole family at once.
"""

from typing import Optional


class GatewayError(Exception):
    """Base class for all gateway errors"""
    pass


class ConnectionNotFound(GatewayError):
    """Raised when a connection id is not present in the registry"""

    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__(f"Connection '{connection_id}' not found")


class UnsupportedVendor(GatewayError):
    """Raised when dispatching on an unrecognized vendor tag or URI scheme"""

    def __init__(self, vendor: str):
        self.vendor = vendor
        super().__init__(f"Unsupported vendor: {vendor}")


class VendorOperationFailure(GatewayError):
    """
    Wraps a native driver error with gateway context.

    The original driver exception is available as __cause__.
    """

    def __init__(self, message: str, vendor: Optional[str] = None):
        self.vendor = vendor
        super().__init__(message)


class OracleOnlyOperationRejected(GatewayError):
    """Raised when an Oracle-only operation is called on another vendor"""

    def __init__(self, operation: str, vendor: str):
        self.operation = operation
        self.vendor = vendor
        super().__init__(f"{operation} is only available for Oracle connections (got {vendor})")


class ParameterLimitExceeded(GatewayError):
    """
    A multi-row VALUES insert would exceed the driver's bound-parameter
    ceiling (32767 arguments per statement for asyncpg).

    Not raised today: insert_batch leaves batch sizing to the caller, and
    MigrationEngine shrinks its batches to fit an adapter's max_bind_params.
    """
    pass


class IdentifierInjectionRisk(GatewayError):
    """
    Table and column identifiers are embedded in SQL text (quoted, not
    escaped). Identifiers must come from prior introspection, never from raw
    external input.

    Not raised today: documents the trust boundary.
    """
    pass
