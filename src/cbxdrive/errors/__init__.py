"""Custom exception hierarchy for cbxdrive."""

from __future__ import annotations


class CbxDriveError(Exception):
    """Base class for all custom errors raised by cbxdrive."""


# --- 3-layer hierarchy ---

class DomainError(CbxDriveError):
    """Base class for domain-level errors."""


class InfrastructureError(CbxDriveError):
    """Base class for infrastructure-level errors."""


class ApplicationError(CbxDriveError):
    """Base class for application-level errors."""


# --- Domain errors ---

class FolderNotFoundError(DomainError):
    """Raised when the requested folder is not part of the tree."""


class FolderNameError(DomainError):
    """Raised when a folder or smart folder name is empty."""


class SmartFolderNotFoundError(DomainError):
    """Raised when the requested smart folder definition does not exist."""


class InvalidTargetError(DomainError):
    """Raised when a bulk move or restore names a non-real folder.

    Smart folders, system views and ids missing from the tree are all invalid
    destinations.  The operation is rejected before anything is written.
    """


class InvalidSourceError(DomainError):
    """Raised when a restore is attempted outside the trash view."""


# --- Infrastructure errors ---

class StoreError(InfrastructureError):
    """Raised when the persistent key-value store cannot be read or written."""


class MalformedPersistedStateError(InfrastructureError):
    """Raised when a stored slice fails shape or whitelist validation.

    The settings layer catches it and substitutes the slice default, so it
    never reaches callers of :class:`cbxdrive.settings.PersistedState`.
    """


# --- Application errors ---

class LocationSyncError(ApplicationError):
    """Raised when the addressable location rejects a write."""
