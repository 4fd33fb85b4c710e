"""Remediation engine — derive and apply an ordered fix plan for one file.

The plan is a short sequence of typed steps, always in the order
CREATE → WRITE_CONTENT → SET_MODE → SET_OWNERSHIP. Execution stops at the
first failing step; fixes already applied to the file are kept.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO

from filestate import identity
from filestate.errors import PerFileFixError, UnknownIdentityError
from filestate.evaluator import parse_mode
from filestate.inspector import DEFAULT_CHUNK_SIZE, ContentTarget, resolve_content_target
from filestate.models import ComplianceIssue, FileSpec, FixError, FixKind, IssueKind, has_issue

logger = logging.getLogger(__name__)

# Passed to os.chown for an identity that should stay unchanged
UNCHANGED_ID = -1


class RemediationStep(Enum):
    CREATE = "create"
    WRITE_CONTENT = "write_content"
    SET_MODE = "set_mode"
    SET_OWNERSHIP = "set_ownership"


def plan_remediation(spec: FileSpec, issues: list[ComplianceIssue]) -> list[RemediationStep]:
    """Derive the ordered remediation plan for a file's issues.

    A freshly created file has never been checked for content or mode, so
    creation pulls in both steps. Ownership is applied whenever it is
    requested, mismatch or not.
    """
    plan: list[RemediationStep] = []
    creating = has_issue(issues, IssueKind.FILE_MISSING)

    if creating:
        plan.append(RemediationStep.CREATE)
    if creating or has_issue(issues, IssueKind.CONTENT_MISMATCH):
        plan.append(RemediationStep.WRITE_CONTENT)
    if spec.mode and (creating or has_issue(issues, IssueKind.MODE_MISMATCH)):
        plan.append(RemediationStep.SET_MODE)
    if spec.owner or spec.group:
        plan.append(RemediationStep.SET_OWNERSHIP)

    return plan


@dataclass
class RemediationOutcome:
    """Result of one remediation pass. ``error`` is None on full success."""

    fixes_applied: list[FixKind] = field(default_factory=list)
    error: FixError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class RemediationEngine:
    """Applies remediation plans to files on the local filesystem."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.chunk_size = chunk_size

    def apply(self, spec: FileSpec, issues: list[ComplianceIssue]) -> RemediationOutcome:
        """Run the plan for ``spec``, stopping at the first failed step."""
        plan = plan_remediation(spec, issues)
        outcome = RemediationOutcome()
        content_mismatch = has_issue(issues, IssueKind.CONTENT_MISMATCH)

        for step in plan:
            logger.debug("%s: %s", spec.path, step.value)
            try:
                if step == RemediationStep.CREATE:
                    fixes = self._create(spec)
                elif step == RemediationStep.WRITE_CONTENT:
                    fixes = self._write_content(spec, content_mismatch)
                elif step == RemediationStep.SET_MODE:
                    fixes = self._set_mode(spec)
                else:
                    fixes = self._set_ownership(spec)
            except PerFileFixError as e:
                logger.warning("%s: %s failed: %s", spec.path, step.value, e)
                outcome.error = FixError(type=e.error_type, message=str(e))
                return outcome
            outcome.fixes_applied.extend(fixes)

        return outcome

    # --- Steps ---

    def _create(self, spec: FileSpec) -> list[FixKind]:
        try:
            with open(spec.path, "wb"):
                pass
        except OSError as e:
            raise PerFileFixError(f"Failed to create file: {spec.path} - {e}") from e
        return [FixKind.CREATED_FILE]

    def _write_content(self, spec: FileSpec, content_mismatch: bool) -> list[FixKind]:
        target = resolve_content_target(spec)
        if target is None:
            return []

        try:
            src = target.open()
        except OSError as e:
            raise PerFileFixError(
                f"Failed to read content source: {target.describe()} - {e}"
            ) from e

        with src:
            chunk = self._read_chunk(src, target)
            if not chunk:
                return []
            try:
                with open(spec.path, "wb") as dest:
                    while chunk:
                        dest.write(chunk)
                        chunk = self._read_chunk(src, target)
            except OSError as e:
                raise PerFileFixError(
                    f"Failed to write content to file: {spec.path} - {e}"
                ) from e

        return [FixKind.FIXED_CONTENT if content_mismatch else FixKind.WROTE_CONTENT]

    def _read_chunk(self, src: BinaryIO, target: ContentTarget) -> bytes:
        try:
            return src.read(self.chunk_size)
        except OSError as e:
            raise PerFileFixError(
                f"Failed to read content source: {target.describe()} - {e}"
            ) from e

    def _set_mode(self, spec: FileSpec) -> list[FixKind]:
        mode = parse_mode(spec.mode)
        if mode is None:
            raise PerFileFixError(f"Invalid mode '{spec.mode}' for file: {spec.path}")
        try:
            os.chmod(spec.path, mode)
        except OSError as e:
            raise PerFileFixError(
                f"Failed to set permissions on file: {spec.path} - {e}"
            ) from e
        return [FixKind.FIXED_PERMISSIONS]

    def _set_ownership(self, spec: FileSpec) -> list[FixKind]:
        uid = gid = UNCHANGED_ID
        fixes: list[FixKind] = []

        if spec.owner:
            uid = identity.uid_for(spec.owner)
            if uid is None:
                raise UnknownIdentityError(f"Unknown user: {spec.owner}")
            fixes.append(FixKind.FIXED_OWNER)

        if spec.group:
            gid = identity.gid_for(spec.group)
            if gid is None:
                raise UnknownIdentityError(f"Unknown group: {spec.group}")
            fixes.append(FixKind.FIXED_GROUP)

        try:
            os.chown(spec.path, uid, gid)
        except OSError as e:
            raise PerFileFixError(
                f"Failed to change ownership of file: {spec.path} - {e}"
            ) from e
        return fixes
