"""Use Case: Check Staged Files - run every rule evaluator over the staged front-end files."""

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Optional

from ux_commit_check.domain.entities import CheckResult
from ux_commit_check.domain.request_calls import RequestCallClassifier
from ux_commit_check.domain.rules import RuleEvaluator, Violation
from ux_commit_check.domain.rules.double_submit import DoubleSubmitRule
from ux_commit_check.domain.rules.empty_state import EmptyStateRule
from ux_commit_check.domain.rules.initial_loading import InitialLoadingRule
from ux_commit_check.domain.rules.input_placeholder import InputPlaceholderRule
from ux_commit_check.domain.rules.success_toast import SuccessToastRule

if TYPE_CHECKING:
    from ux_commit_check.domain.config import CheckConfiguration
    from ux_commit_check.domain.entities import SourceUnit, StagedFile
    from ux_commit_check.domain.protocols import (
        ActionResolverProtocol,
        SourceParserProtocol,
        TelemetryPort,
    )

logger = logging.getLogger(__name__)


class CheckStagedFilesUseCase:
    """
    (files, config) -> CheckResult.

    Files are filtered by extension and ignore globs, parsed once, and handed
    to each evaluator. Unparsable files are skipped silently. An exception in
    one evaluator is contained to its (file, rule) pair: it is logged and
    counts as no violations, or as the rule-0 sentinel when failOnError is set.
    """

    def __init__(
        self,
        config: "CheckConfiguration",
        parser: "SourceParserProtocol",
        resolver: Optional["ActionResolverProtocol"] = None,
        telemetry: Optional["TelemetryPort"] = None,
        evaluators: Optional[Sequence[RuleEvaluator]] = None,
    ) -> None:
        self.config = config
        self.parser = parser
        self.telemetry = telemetry
        self.evaluators: list[RuleEvaluator] = (
            list(evaluators) if evaluators is not None else self.build_evaluators(config, resolver)
        )

    @staticmethod
    def build_evaluators(
        config: "CheckConfiguration", resolver: Optional["ActionResolverProtocol"] = None
    ) -> list[RuleEvaluator]:
        """The five evaluators in rule order, sharing one call classifier."""
        request_methods = config.rule(1).keywords("requestMethods") or config.rule(2).keywords(
            "requestMethods"
        )
        classifier = RequestCallClassifier(request_methods)
        return [
            DoubleSubmitRule(config.rule(1), classifier, resolver),
            InitialLoadingRule(config.rule(2), classifier, resolver),
            SuccessToastRule(config.rule(3), classifier),
            EmptyStateRule(config.rule(4)),
            InputPlaceholderRule(config.rule(5)),
        ]

    def execute(self, files: Iterable["StagedFile"]) -> CheckResult:
        result = CheckResult()
        for staged in files:
            if not self.config.accepts(staged.path):
                logger.debug("Skipping %s (extension or ignore pattern)", staged.path)
                continue
            unit = self._parse(staged)
            if unit is None:
                result.files_skipped += 1
                continue
            result.files_checked += 1
            if self.telemetry is not None:
                self.telemetry.step(f"Checking {staged.path}")
            for evaluator in self.evaluators:
                result.violations.extend(self._evaluate(evaluator, staged, unit, result))
        return result

    def _parse(self, staged: "StagedFile") -> Optional["SourceUnit"]:
        try:
            return self.parser.parse(staged.path, staged.text, staged.diff_text)
        except Exception as e:
            logger.warning("Parser failed on %s: %s", staged.path, e, exc_info=True)
            return None

    def _evaluate(
        self,
        evaluator: RuleEvaluator,
        staged: "StagedFile",
        unit: "SourceUnit",
        result: CheckResult,
    ) -> list[Violation]:
        try:
            return list(evaluator.evaluate(staged.path, unit, staged.diff_text) or [])
        except Exception as e:
            result.crashed_pairs += 1
            logger.warning(
                "Rule %s crashed on %s: %s", evaluator.rule, staged.path, e, exc_info=True
            )
            if self.config.fail_on_error:
                return [Violation.evaluator_crashed(file=staged.path, rule=evaluator.rule, error=e)]
            return []
