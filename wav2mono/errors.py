# wav2mono/errors.py
"""
Error kinds raised by the wav2mono core.

Every error is scoped to one asset. Batch callers catch Wav2MonoError
(and OSError) per file and carry on with the next one.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class Wav2MonoError(Exception):
    """
    Base class for all per-asset failures.
    """


class UnreadableContainerError(Wav2MonoError):
    """
    Header or sample stream cannot be decoded (corrupt, truncated or an
    unsupported container variant). The original file is left untouched.
    """

    def __init__(self, file_path: Path | str, reason: str):
        self.file_path = Path(file_path)
        self.reason = reason
        super().__init__(f"Cannot decode {self.file_path}: {reason}")


class UnsupportedEncodingError(Wav2MonoError):
    """
    A (sample_format, bit_depth) pair outside the supported set.
    """

    def __init__(
        self,
        sample_format: str,
        bit_depth: int,
        file_path: Optional[Path | str] = None,
    ):
        self.sample_format = sample_format
        self.bit_depth = bit_depth
        self.file_path = Path(file_path) if file_path is not None else None

        message = f"Unsupported sample encoding: {sample_format} {bit_depth}-bit"
        if self.file_path is not None:
            message += f" ({self.file_path})"
        super().__init__(message)


class WriteFailureError(Wav2MonoError):
    """
    The output container could not be created or finalised.
    No partial output is left behind when this is raised.
    """

    def __init__(self, output_path: Path | str, reason: str):
        self.output_path = Path(output_path)
        self.reason = reason
        super().__init__(f"Cannot write {self.output_path}: {reason}")


class PathFailureError(Wav2MonoError):
    """
    The input path has no file name or no parent directory.
    Raised before any I/O is attempted.
    """

    def __init__(self, input_path: Path | str, reason: str):
        self.input_path = input_path
        self.reason = reason
        super().__init__(f"Invalid input path {str(input_path)!r}: {reason}")
