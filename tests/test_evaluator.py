"""Tests for the compliance evaluator (pure function of spec + attributes)."""

from filestate.evaluator import evaluate, parse_mode
from filestate.inspector import FileAttributes
from filestate.models import ComplianceIssue, FileSpec, IssueKind


def _attrs(**overrides) -> FileAttributes:
    values = {
        "path": "/srv/app.conf",
        "mode": 0o644,
        "owner": "root",
        "group": "root",
    }
    values.update(overrides)
    return FileAttributes(**values)


def test_only_path_existing_file_is_compliant():
    result = evaluate(FileSpec(path="/srv/app.conf"), _attrs())
    assert result.compliant
    assert result.issues == []


def test_missing_file_short_circuits():
    spec = FileSpec(path="/srv/app.conf", mode="0600", owner="nobody", content="x")
    result = evaluate(spec, _attrs(exists=False, mode=None))
    assert not result.compliant
    assert result.rendered_issues == ["file_missing"]


def test_stat_failure_short_circuits():
    spec = FileSpec(path="/srv/app.conf", mode="0600")
    result = evaluate(spec, _attrs(stat_error="denied", mode=None))
    assert result.rendered_issues == ["stat_failed: Cannot stat file /srv/app.conf"]


def test_mode_compared_numerically():
    assert evaluate(FileSpec(path="/p", mode="0644"), _attrs()).compliant
    assert evaluate(FileSpec(path="/p", mode="644"), _attrs()).compliant

    result = evaluate(FileSpec(path="/p", mode="0600"), _attrs())
    assert result.rendered_issues == ["mode_mismatch: current=644, required=0600"]


def test_special_bits_are_part_of_mode():
    result = evaluate(FileSpec(path="/p", mode="0755"), _attrs(mode=0o4755))
    assert result.rendered_issues == ["mode_mismatch: current=4755, required=0755"]


def test_malformed_mode_is_always_a_mismatch():
    result = evaluate(FileSpec(path="/p", mode="rw-r--r--"), _attrs())
    assert result.rendered_issues == ["mode_mismatch: current=644, required=rw-r--r--"]


def test_parse_mode():
    assert parse_mode("0600") == 0o600
    assert parse_mode("4755") == 0o4755
    assert parse_mode("") is None
    assert parse_mode("0o600") is None
    assert parse_mode("0800") is None
    assert parse_mode("17777") is None
    assert parse_mode(" 600") is None


def test_fixed_check_order():
    spec = FileSpec(path="/p", mode="0600", owner="alice", group="staff", content="x")
    attrs = _attrs(content_matches=False)
    result = evaluate(spec, attrs)
    assert [i.kind for i in result.issues] == [
        IssueKind.MODE_MISMATCH,
        IssueKind.OWNER_MISMATCH,
        IssueKind.GROUP_MISMATCH,
        IssueKind.CONTENT_MISMATCH,
    ]
    assert result.rendered_issues == [
        "mode_mismatch: current=644, required=0600",
        "owner_mismatch: current=root, required=alice",
        "group_mismatch: current=root, required=staff",
        "content_mismatch: content differs from requirement",
    ]


def test_unrequested_dimensions_not_checked():
    spec = FileSpec(path="/p")
    attrs = _attrs(mode=0o777, owner="someone", group="else")
    assert evaluate(spec, attrs).compliant


def test_content_errors_do_not_imply_mismatch():
    error = ComplianceIssue.content_read_error("/p")
    result = evaluate(FileSpec(path="/p", content="x"), _attrs(content_error=error))
    assert result.rendered_issues == ["content_read_error: Cannot read /p"]

    error = ComplianceIssue.content_source_read_error("/src")
    result = evaluate(FileSpec(path="/p", content_source="/src"), _attrs(content_error=error))
    assert result.rendered_issues == ["content_source_read_error: Cannot read /src"]


def test_evaluation_is_pure():
    spec = FileSpec(path="/p", mode="0600")
    attrs = _attrs()
    assert evaluate(spec, attrs) == evaluate(spec, attrs)
    assert attrs.mode == 0o644
