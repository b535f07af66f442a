"""Per-invocation copy options."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from treecopy.types import ErrorMode

DEFAULT_BUFFER_SIZE = 64 * 1024
DEFAULT_MAX_DEPTH = 512


class CopyOptions(BaseModel):
    """Options controlling a single copy_recursive call.

    Immutable once constructed. Invalid values (a negative depth or a
    non-positive buffer size) raise pydantic.ValidationError.
    """

    model_config = ConfigDict(frozen=True)

    overwrite: bool = False
    follow_symlinks: bool = False
    restrict_symlinks: bool = False
    content_only: bool = False
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0)
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=0)
    error_mode: ErrorMode = ErrorMode.FAIL_FAST

    @property
    def resilient(self) -> bool:
        """True if per-entry errors are recorded instead of raised."""
        return self.error_mode is ErrorMode.RESILIENT
