from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UseCaseResponse:
    """Use Case output DTO base."""
    success: bool = True
    error: Optional[str] = None


@dataclass(frozen=True)
class BulkOperationResult(UseCaseResponse):
    """Outcome of a selection-wide action.

    ``affected_ids`` lists the assets that were actually changed; a rejected
    or empty action reports none.
    """
    affected_ids: tuple[int, ...] = ()
    selection_cleared: bool = False

    @classmethod
    def rejected(cls, message: str) -> "BulkOperationResult":
        return cls(success=False, error=message)

    @classmethod
    def noop(cls, *, selection_cleared: bool = False) -> "BulkOperationResult":
        return cls(selection_cleared=selection_cleared)


@dataclass(frozen=True)
class FolderOperationResult(UseCaseResponse):
    """Outcome of a folder or smart folder edit."""
    folder_id: Optional[str] = None
    removed_ids: tuple[str, ...] = ()

    @classmethod
    def rejected(cls, message: str) -> "FolderOperationResult":
        return cls(success=False, error=message)
