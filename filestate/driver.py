"""Driver — run inspection, evaluation and remediation over a request.

Files are processed sequentially in request order. Per-file failures are
recorded in that file's result and never stop the run.
"""

from __future__ import annotations

import logging

from filestate.evaluator import evaluate
from filestate.inspector import DEFAULT_CHUNK_SIZE, inspect_file
from filestate.models import FileResult, Response, RunStatus
from filestate.remediation import RemediationEngine
from filestate.request import Request

logger = logging.getLogger(__name__)


class ComplianceRunner:
    """Checks (and optionally fixes) every FileSpec in a request."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.chunk_size = chunk_size
        self.engine = RemediationEngine(chunk_size=chunk_size)

    def run(self, request: Request) -> Response:
        response = Response()
        found_issues = False
        unresolved = False
        fix_failed = False

        for spec in request.files:
            if not spec.path:
                continue
            response.files_checked += 1

            attrs = inspect_file(spec, chunk_size=self.chunk_size)
            evaluation = evaluate(spec, attrs)
            result = FileResult(path=spec.path, issues=evaluation.issues)
            response.details.append(result)

            if evaluation.compliant:
                logger.info("%s: compliant", spec.path)
                continue

            found_issues = True
            response.compliance_issues.extend(evaluation.rendered_issues)
            logger.info("%s: %s", spec.path, "; ".join(evaluation.rendered_issues))

            if request.check_only:
                continue

            outcome = self.engine.apply(spec, evaluation.issues)
            if outcome.succeeded:
                response.files_fixed += 1
                result.fixes_applied = outcome.fixes_applied
                if not all(i.remediable for i in evaluation.issues):
                    unresolved = True
                logger.info(
                    "%s: fixed (%s)",
                    spec.path,
                    ", ".join(f.value for f in outcome.fixes_applied) or "nothing to apply",
                )
            else:
                fix_failed = True
                result.error = outcome.error
                logger.warning("%s: fix failed: %s", spec.path, outcome.error.message)

        if fix_failed:
            response.status = RunStatus.PARTIAL_FAILURE
        elif found_issues and (request.check_only or unresolved):
            response.status = RunStatus.NON_COMPLIANT
        else:
            response.status = RunStatus.SUCCESS

        return response
