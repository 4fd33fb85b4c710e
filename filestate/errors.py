"""Error taxonomy for filestate.

Only InputError and ConfigError abort a run. Per-file errors are raised inside
the inspector and remediation engine and converted into result data there.
"""

from __future__ import annotations


class FilestateError(Exception):
    """Base application error"""


class InputError(FilestateError):
    """Malformed or non-object request"""

    def __init__(self, message: str, offset: int | None = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)


class ConfigError(FilestateError):
    """Missing or invalid settings"""


class PerFileCheckError(FilestateError):
    """Stat or read failure while inspecting one file"""


class PerFileFixError(FilestateError):
    """A remediation step failed for one file"""

    error_type = "fix_failed"


class UnknownIdentityError(PerFileFixError):
    """Requested owner or group does not exist on this system"""

    error_type = "unknown_identity"
