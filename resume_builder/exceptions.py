"""exceptions.py
Defines custom exceptions for this project.
"""
from typing import List, Optional


class ResumeBuilderError(Exception):
    """Base exception for resume builder errors."""
    pass

# ------------------------ Content Validation Errors ------------------------
class ContentValidationError(ResumeBuilderError):
    """
    Raised when resume content fails the schema. Content that raises this is
    never persisted.

    Attributes:
        field_path (str): Dotted path of the first offending field
            (e.g. ``experience.1.id``). Empty for the document root.
        message (str): Human-readable description of the problem.
    """

    def __init__(self, field_path: str, message: str = "Invalid value"):
        self.field_path = field_path
        self.message = message
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        if self.field_path:
            return f"{self.message}: {self.field_path}"
        return self.message


class FieldPathError(ResumeBuilderError):
    """Raised when a form field path does not point at an editable field."""
    def __init__(self, path: str, message: str = "Unknown field path"):
        self.path = path
        self.message = message
        super().__init__(f"{message}: '{path}'")

# ------------------------ Document Access Errors ------------------------
class DocumentNotFoundError(ResumeBuilderError):
    """Raised when a document is missing or was deleted concurrently."""
    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"Resume '{document_id}' not found")


class ForbiddenError(ResumeBuilderError):
    """Raised when a session operates on a document it does not own."""
    def __init__(self, document_id: str, user_id: Optional[str] = None):
        self.document_id = document_id
        self.user_id = user_id
        message = f"Access to resume '{document_id}' is forbidden"
        if user_id:
            message += f" for user '{user_id}'"
        super().__init__(message)

# ------------------------ Sync Errors ------------------------
class TransientSyncError(ResumeBuilderError):
    """
    Raised when a persistence call fails for network or backend reasons.
    The autosave engine retries on the next edit.
    """
    def __init__(
        self,
        message: str = "Failed to sync resume",
        original_exception: Optional[Exception] = None
    ):
        self.original_exception = original_exception
        base_msg = message
        if original_exception:
            base_msg += f" | Original Exception: {original_exception}"
        super().__init__(base_msg)

# ------------------------ File Parser Errors ------------------------
class FileParserError(ResumeBuilderError):
    """Base exception for file parser errors."""
    pass

class FileNotSupportedError(FileParserError):
    """Raised when the current file path has an unsupported extension."""
    def __init__(
        self,
        extension: str,
        supported_extensions: List[str],
        context: Optional[str] = None
    ):
        self.extension = extension
        self.supported_extensions = supported_extensions
        message = (
            f"File with extension '{extension}' is not supported. "
            f"Supported extensions: {supported_extensions}"
        )
        if context:
            message += f" Context: {context}"
        super().__init__(message)

class FileTooLargeError(FileParserError):
    """Raised when a file exceeds the allowed file size."""
    def __init__(self, max_size: int, actual_size: int):
        super().__init__(
            f"File size is {actual_size} bytes, which exceeds the max allowed {max_size} bytes."
        )
        self.max_size = max_size
        self.actual_size = actual_size

class FileOpenError(FileParserError):
    """Raised when a file cannot be opened or read."""
    def __init__(self, file_path: str, original_error: str):
        super().__init__(
            f"Failed to open or read file: {file_path}. Original error: {original_error}"
        )
        self.file_path = file_path
        self.original_error = original_error

class FileEmptyError(FileParserError):
    """Raised when a file contains no parsable text."""
    def __init__(self, file_path: str, message: str | None = None):
        self.file_path = file_path
        if message is None:
            message = f"File `{file_path}` contains no parsable text."
        super().__init__(message)
