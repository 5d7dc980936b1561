"""Error taxonomy shared by the record clients, services and API."""


class DropZoneError(Exception):
    """
    Base exception class for all DropZone errors.
    """
    pass


class ValidationError(DropZoneError):
    """
    Raised when input is rejected before reaching the record store:
    a missing name, an unknown parent folder, a parent cycle, an invalid
    sort key or a delete of a non-empty folder.
    """
    pass


class BackendError(DropZoneError):
    """
    Raised when the record store reports failure, returns no results
    or answers with an unexpected shape.
    """
    pass
