"""Drag-and-drop image validation.

Files are checked in order (type, then size, then the running file count)
and only the first problem is reported. That message is kept for
``ERROR_TTL`` seconds and then clears itself.
"""
from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

ACCEPTED_TYPES = ('image/jpeg', 'image/jpg', 'image/png', 'image/gif')
ERROR_TTL = 5.0


@dataclass
class UploadCandidate:
    filename: str
    content_type: str
    size: int
    stream: object = None


def candidate_from_storage(storage) -> UploadCandidate:
    """Wrap a werkzeug ``FileStorage``, measuring its size by seeking."""
    stream = storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return UploadCandidate(storage.filename or '', storage.mimetype or '', size, stream)


def validate_files(
    files: Iterable[UploadCandidate],
    selected_count: int,
    max_files: int = 10,
    accepted_types: Sequence[str] = ACCEPTED_TYPES,
    max_size_mb: float = 10,
) -> Tuple[List[UploadCandidate], List[str]]:
    valid: List[UploadCandidate] = []
    errors: List[str] = []
    for f in files:
        if f.content_type not in accepted_types:
            errors.append(f'{f.filename}: Invalid file type. Only images are allowed.')
            continue
        if f.size > max_size_mb * 1024 * 1024:
            errors.append(f'{f.filename}: File size exceeds {max_size_mb:g}MB limit.')
            continue
        if selected_count + len(valid) >= max_files:
            errors.append(f'Maximum {max_files} files allowed.')
            continue
        valid.append(f)
    return valid, errors


class DropZone:
    """Selected images plus the transient first-error message."""

    def __init__(
        self,
        max_files: int = 10,
        accepted_types: Sequence[str] = ACCEPTED_TYPES,
        max_size_mb: float = 10,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_files = max_files
        self.accepted_types = tuple(accepted_types)
        self.max_size_mb = max_size_mb
        self.clock = clock
        self.selected_files: List[UploadCandidate] = []
        self._error = ''
        self._error_at: Optional[float] = None

    @property
    def error(self) -> str:
        if self._error and self.clock() - self._error_at >= ERROR_TTL:
            self._error = ''
            self._error_at = None
        return self._error

    @property
    def full(self) -> bool:
        return len(self.selected_files) >= self.max_files

    def add_files(self, files: Iterable[UploadCandidate]) -> List[UploadCandidate]:
        valid, errors = validate_files(
            files,
            len(self.selected_files),
            self.max_files,
            self.accepted_types,
            self.max_size_mb,
        )
        if errors:
            self._error = errors[0]
            self._error_at = self.clock()
        self.selected_files.extend(valid)
        return valid

    def remove_file(self, index: int) -> UploadCandidate:
        return self.selected_files.pop(index)
