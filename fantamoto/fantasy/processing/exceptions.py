"""
Error taxonomy for the sync pipeline.

Per-item failures inside a batch are caught and recorded in the batch
summary; these exceptions only escape for whole-operation failures.
"""


class SyncError(Exception):
    """Base class for sync and scoring errors."""
    pass


class NotFound(SyncError):
    """A race, season or rider required by the operation does not exist."""
    pass


class UpstreamUnavailable(SyncError):
    """The MotoGP API could not be reached or answered with an error."""
    pass


class UpstreamTimeout(UpstreamUnavailable):
    """The MotoGP API did not answer within the configured timeout."""
    pass


class InvalidState(SyncError):
    """The operation cannot run against the current state (e.g. race without external id)."""
    pass
