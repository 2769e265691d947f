from .base import BulkOperationResult, FolderOperationResult, UseCaseResponse

__all__ = ["BulkOperationResult", "FolderOperationResult", "UseCaseResponse"]
