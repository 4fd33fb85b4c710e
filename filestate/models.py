"""Data models for file specs, compliance issues, fixes and run results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from filestate.codec.values import Value


@dataclass
class FileSpec:
    """One declared desired-state entry for a path.

    Empty strings mean "not requested"; a dimension that is not requested is
    never checked or fixed.
    """

    path: str
    mode: str = ""
    owner: str = ""
    group: str = ""
    content: str = ""
    content_source: str = ""


# --- Issues ---


class IssueKind(Enum):
    FILE_MISSING = "file_missing"
    STAT_FAILED = "stat_failed"
    MODE_MISMATCH = "mode_mismatch"
    OWNER_MISMATCH = "owner_mismatch"
    GROUP_MISMATCH = "group_mismatch"
    CONTENT_SOURCE_READ_ERROR = "content_source_read_error"
    CONTENT_READ_ERROR = "content_read_error"
    CONTENT_MISMATCH = "content_mismatch"


# Issues a remediation step knows how to correct
REMEDIABLE_ISSUES = frozenset(
    {
        IssueKind.FILE_MISSING,
        IssueKind.MODE_MISMATCH,
        IssueKind.OWNER_MISMATCH,
        IssueKind.GROUP_MISMATCH,
        IssueKind.CONTENT_MISMATCH,
    }
)


@dataclass(frozen=True)
class ComplianceIssue:
    """A specific detected deviation from a FileSpec."""

    kind: IssueKind
    current: str = ""
    required: str = ""
    detail: str = ""

    @property
    def remediable(self) -> bool:
        return self.kind in REMEDIABLE_ISSUES

    def render(self) -> str:
        if self.kind == IssueKind.FILE_MISSING:
            return self.kind.value
        if self.kind in (
            IssueKind.MODE_MISMATCH,
            IssueKind.OWNER_MISMATCH,
            IssueKind.GROUP_MISMATCH,
        ):
            return f"{self.kind.value}: current={self.current}, required={self.required}"
        return f"{self.kind.value}: {self.detail}"

    def __str__(self) -> str:
        return self.render()

    # --- Constructors ---

    @classmethod
    def file_missing(cls) -> ComplianceIssue:
        return cls(IssueKind.FILE_MISSING)

    @classmethod
    def stat_failed(cls, path: str) -> ComplianceIssue:
        return cls(IssueKind.STAT_FAILED, detail=f"Cannot stat file {path}")

    @classmethod
    def mismatch(cls, kind: IssueKind, current: str, required: str) -> ComplianceIssue:
        return cls(kind, current=current, required=required)

    @classmethod
    def content_source_read_error(cls, source: str) -> ComplianceIssue:
        return cls(IssueKind.CONTENT_SOURCE_READ_ERROR, detail=f"Cannot read {source}")

    @classmethod
    def content_read_error(cls, path: str) -> ComplianceIssue:
        return cls(IssueKind.CONTENT_READ_ERROR, detail=f"Cannot read {path}")

    @classmethod
    def content_mismatch(cls) -> ComplianceIssue:
        return cls(IssueKind.CONTENT_MISMATCH, detail="content differs from requirement")


def has_issue(issues: list[ComplianceIssue], kind: IssueKind) -> bool:
    return any(i.kind == kind for i in issues)


# --- Fixes ---


class FixKind(Enum):
    CREATED_FILE = "created_file"
    WROTE_CONTENT = "wrote_content"
    FIXED_CONTENT = "fixed_content"
    FIXED_PERMISSIONS = "fixed_permissions"
    FIXED_OWNER = "fixed_owner"
    FIXED_GROUP = "fixed_group"


@dataclass
class FixError:
    """Structured reason a remediation pass stopped."""

    type: str
    message: str


# --- Results ---


class RunStatus(Enum):
    SUCCESS = "success"
    NON_COMPLIANT = "non_compliant"
    PARTIAL_FAILURE = "partial_failure"


@dataclass
class FileResult:
    """Outcome for one processed FileSpec.

    ``fixes_applied`` and ``error`` are mutually exclusive; both are None when
    no remediation was attempted.
    """

    path: str
    issues: list[ComplianceIssue] = field(default_factory=list)
    fixes_applied: list[FixKind] | None = None
    error: FixError | None = None

    @property
    def compliant(self) -> bool:
        return not self.issues

    def to_value(self) -> Value:
        members = {
            "path": Value.string(self.path),
            "compliant": Value.boolean(self.compliant),
            "issues": Value.array([Value.string(i.render()) for i in self.issues]),
        }
        if self.error is not None:
            members["error"] = Value.object(
                {
                    "type": Value.string(self.error.type),
                    "message": Value.string(self.error.message),
                }
            )
        elif self.fixes_applied is not None:
            members["fixes_applied"] = Value.array(
                [Value.string(f.value) for f in self.fixes_applied]
            )
        return Value.object(members)


@dataclass
class Response:
    """Aggregated result of one run."""

    status: RunStatus = RunStatus.SUCCESS
    files_checked: int = 0
    files_fixed: int = 0
    compliance_issues: list[str] = field(default_factory=list)
    details: list[FileResult] = field(default_factory=list)

    def to_value(self) -> Value:
        return Value.object(
            {
                "status": Value.string(self.status.value),
                "files_checked": Value.integer(self.files_checked),
                "files_fixed": Value.integer(self.files_fixed),
                "compliance_issues": Value.array(
                    [Value.string(s) for s in self.compliance_issues]
                ),
                "details": Value.array([d.to_value() for d in self.details]),
            }
        )
