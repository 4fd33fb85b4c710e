"""Compliance evaluator — compare a FileSpec against inspected attributes.

Checks run in a fixed order that mirrors the remediation order:
existence → mode → owner → group → content. Only dimensions the spec
requests are checked.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from filestate.inspector import MODE_MASK, FileAttributes
from filestate.models import ComplianceIssue, FileSpec, IssueKind

_OCTAL_DIGITS = "01234567"


@dataclass
class Evaluation:
    issues: list[ComplianceIssue] = field(default_factory=list)

    @property
    def compliant(self) -> bool:
        return not self.issues

    @property
    def rendered_issues(self) -> list[str]:
        return [i.render() for i in self.issues]


def parse_mode(mode: str) -> int | None:
    """Parse an octal permission string. Returns None if it is not valid octal."""
    if not mode or any(ch not in _OCTAL_DIGITS for ch in mode):
        return None
    value = int(mode, 8)
    if value > MODE_MASK:
        return None
    return value


def format_mode(bits: int) -> str:
    return format(bits, "o")


def evaluate(spec: FileSpec, attrs: FileAttributes) -> Evaluation:
    """Produce the ordered issue list for one file."""
    result = Evaluation()

    if not attrs.exists:
        result.issues.append(ComplianceIssue.file_missing())
        return result

    if attrs.stat_error:
        result.issues.append(ComplianceIssue.stat_failed(spec.path))
        return result

    _check_mode(spec, attrs, result)
    _check_identity(IssueKind.OWNER_MISMATCH, spec.owner, attrs.owner, result)
    _check_identity(IssueKind.GROUP_MISMATCH, spec.group, attrs.group, result)
    _check_content(attrs, result)

    return result


def _check_mode(spec: FileSpec, attrs: FileAttributes, result: Evaluation):
    if not spec.mode:
        return
    required = parse_mode(spec.mode)
    # A malformed required mode can never be satisfied.
    if required is None or required != attrs.mode:
        result.issues.append(
            ComplianceIssue.mismatch(
                IssueKind.MODE_MISMATCH, format_mode(attrs.mode), spec.mode
            )
        )


def _check_identity(kind: IssueKind, required: str, current: str, result: Evaluation):
    if required and required != current:
        result.issues.append(ComplianceIssue.mismatch(kind, current, required))


def _check_content(attrs: FileAttributes, result: Evaluation):
    if attrs.content_error is not None:
        result.issues.append(attrs.content_error)
    elif attrs.content_matches is False:
        result.issues.append(ComplianceIssue.content_mismatch())
