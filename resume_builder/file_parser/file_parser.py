"""file_parser.py

Holds abstract FileParser class inherited by filetype-specific parsers.
"""

import os
from abc import ABC, abstractmethod

from resume_builder.config import BUILDER_DEFAULTS
from resume_builder.exceptions import FileTooLargeError, FileEmptyError

from resume_builder.file_parser.helpers.check_file_extension import check_file_extension

class FileParser(ABC):
    """
    Abstract base class representing a generic resume file parser.

    Concrete parsers turn an uploaded resume into plain text that Magic
    Import can classify. All concrete parsers must implement `_read_text`.

    Args:
        file_path (str): Path to the file to parse.
        max_file_size_mb (float | None, optional): Maximum allowed file size in megabytes.
            If None, no size limit is enforced.

    Attributes:
        file_path (str): Path to the file.
        max_file_size_mb (float | None): Maximum allowed file size.
    """
    # Parent level allowance of file extensions supported in at least one concrete class
    ALLOWED_EXTENSIONS = [".pdf", ".docx", ".txt"]

    # Extensions supported by a specific concrete class (to be overwritten by children)
    SUPPORTED_EXTENSIONS = []

    def __init__(
        self,
        file_path: str,
        max_file_size_mb: float | None = BUILDER_DEFAULTS.MAX_FILE_SIZE_MB
    ):
        self.file_path = file_path
        self.max_file_size_mb = max_file_size_mb
        self._validate_file()
        check_file_extension(self.file_path, self.SUPPORTED_EXTENSIONS)

    def _validate_file(self):
        """Validate whether the file can be parsed by this parser.

        Raises:
            FileNotFoundError: Raised if the file cannot be found at file_path
            FileTooLargeError: Raised if the file exceeds the max_file_size_mb
        """
        if not os.path.exists(self.file_path):
            raise FileNotFoundError(f"File not found: {self.file_path}")

        if self.max_file_size_mb is not None:
            # Convert MB to bytes (1 MB = 1024 * 1024 bytes)
            max_size_bytes = self.max_file_size_mb * 1024 * 1024
            actual_size_bytes = os.path.getsize(self.file_path)

            if actual_size_bytes > max_size_bytes:
                raise FileTooLargeError(
                    max_size=max_size_bytes,
                    actual_size=actual_size_bytes
                )

    def parse(self) -> str:
        """
        Read the file located at `self.file_path` and return its text.

        Returns:
            str: The extracted text, with surrounding whitespace removed.

        Raises:
            FileOpenError: If the file cannot be opened or read.
            FileEmptyError: If the file contains no readable text.
        """
        full_text = self._read_text()
        if not full_text.strip():
            raise FileEmptyError(self.file_path)
        return full_text.strip()

    @abstractmethod
    def _read_text(self) -> str:
        """Return the raw text content of `self.file_path`."""
        pass
