"""
Main analyzer orchestrating the rule scan and the structural detectors.
"""

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn

from .detectors.base import RuleConfig
from .detectors.claims import BuzzwordInflationDetector, ClaimConfig
from .detectors.cochange import CoChangeConfig, CoChangeDetector
from .detectors.dead_code import DeadCodeConfig, DeadCodeDetector
from .detectors.duplicates import DuplicateStringDetector, DuplicateStringsConfig
from .detectors.ratios import DocCodeConfig, DocCodeRatioDetector, VerbosityConfig, VerbosityDetector
from .detectors.repo_metrics import OverEngineeringConfig, OverEngineeringDetector
from .detectors.stubs import StubConfig, StubFunctionDetector
from .detectors.usage import InfrastructureConfig, InfrastructureUsageDetector
from .exclusion import is_excluded
from .file_classifier import detect_language
from .fs import FileSystem, LocalFileSystem
from .history import BlameSource, GitBlame, GitHistory, HistorySource
from .models import AutoFix, Certainty, RepoAnalysis, Severity, Violation
from .registry import PatternRegistry, default_registry
from .scanner import RuleScanner
from .walker import RepoWalker


logger = logging.getLogger(__name__)

THOROUGHNESS_LEVELS = ("quick", "normal")


@dataclass
class AnalyzerConfig:
    """Configuration for the main analyzer."""
    # Analysis toggles
    enable_multi_pass: bool = True
    enable_history: bool = True

    # Performance
    max_files: int = 1000

    # Sub-configs; None means defaults taken from the registry's rule
    doc_code_config: Optional[DocCodeConfig] = None
    verbosity_config: Optional[VerbosityConfig] = None
    dead_code_config: Optional[DeadCodeConfig] = None
    stub_config: Optional[StubConfig] = None
    duplicate_strings_config: Optional[DuplicateStringsConfig] = None
    over_engineering_config: Optional[OverEngineeringConfig] = None
    claim_config: Optional[ClaimConfig] = None
    infrastructure_config: Optional[InfrastructureConfig] = None
    cochange_config: Optional[CoChangeConfig] = None


@dataclass
class PipelineResult:
    """Everything one run over a repository produced."""
    root: str
    findings: list[Violation] = field(default_factory=list)
    summary: dict = field(default_factory=dict)
    # Rule id of each repository-level analyzer to its verdict
    verdicts: dict[str, str] = field(default_factory=dict)
    files_analyzed: int = 0
    skipped: int = 0
    error: Optional[str] = None
    duration: float = 0.0

    @property
    def has_critical(self) -> bool:
        return any(v.severity == Severity.CRITICAL for v in self.findings)


def build_summary(findings: list[Violation]) -> dict:
    """Finding counts by severity, certainty, fix strategy and rule."""
    by_rule = Counter(v.rule_id or v.category for v in findings)
    by_auto_fix = Counter(v.auto_fix.value for v in findings)
    return {
        "total": len(findings),
        "by_severity": {s.value: sum(1 for v in findings if v.severity == s) for s in Severity},
        "by_certainty": {c.value: sum(1 for v in findings if v.certainty == c) for c in Certainty},
        "by_auto_fix": {a.value: by_auto_fix[a.value] for a in AutoFix if by_auto_fix[a.value]},
        "top_patterns": dict(by_rule.most_common()),
    }


def _sort_key(violation: Violation):
    return violation.severity.rank, violation.file, violation.line


class SlopDetector:
    """Main slop detection orchestrator."""

    def __init__(
        self,
        config: Optional[AnalyzerConfig] = None,
        registry: Optional[PatternRegistry] = None,
        fs: Optional[FileSystem] = None,
        history: Optional[HistorySource] = None,
        blame: Optional[BlameSource] = None,
        console: Optional[Console] = None,
        show_progress: bool = False,
    ):
        self.config = config or AnalyzerConfig()
        self.registry = registry or default_registry()
        self.fs = fs or LocalFileSystem()
        self.console = console or Console()
        self.show_progress = show_progress

        if self.config.enable_history:
            self.history = history or GitHistory()
            self.blame = blame or GitBlame()
        else:
            self.history = None
            self.blame = None

        # A detector only runs when its rule is in the registry
        config = self.config
        self.doc_code_detector = self._build(DocCodeRatioDetector, DocCodeConfig, config.doc_code_config)
        self.verbosity_detector = self._build(VerbosityDetector, VerbosityConfig, config.verbosity_config)
        self.dead_code_detector = self._build(DeadCodeDetector, DeadCodeConfig, config.dead_code_config)
        self.stub_detector = self._build(StubFunctionDetector, StubConfig, config.stub_config)
        self.duplicate_detector = self._build(
            DuplicateStringDetector, DuplicateStringsConfig, config.duplicate_strings_config
        )

    def _rule_config(self, config_cls: type, override: Optional[RuleConfig]) -> Optional[RuleConfig]:
        if override is not None:
            return override
        rule = self.registry.get(config_cls.rule_id)
        if rule is None:
            return None
        return config_cls.from_rule(rule)

    def _build(self, detector_cls: type, config_cls: type, override: Optional[RuleConfig]):
        rule_config = self._rule_config(config_cls, override)
        return detector_cls(rule_config) if rule_config is not None else None

    def _file_detectors(self) -> list:
        return [
            detector for detector in (
                self.doc_code_detector,
                self.verbosity_detector,
                self.dead_code_detector,
                self.stub_detector,
                self.duplicate_detector,
            )
            if detector is not None
        ]

    def _repo_detectors(self, root: str) -> list[tuple[str, object]]:
        detectors = []
        over_engineering = self._rule_config(OverEngineeringConfig, self.config.over_engineering_config)
        if over_engineering is not None:
            detectors.append((over_engineering.rule_id, OverEngineeringDetector(over_engineering, self.fs)))
        claims = self._rule_config(ClaimConfig, self.config.claim_config)
        if claims is not None:
            detectors.append((claims.rule_id, BuzzwordInflationDetector(claims, self.fs)))
        infrastructure = self._rule_config(InfrastructureConfig, self.config.infrastructure_config)
        if infrastructure is not None:
            detectors.append((infrastructure.rule_id, InfrastructureUsageDetector(infrastructure, self.fs)))
        cochange = self._rule_config(CoChangeConfig, self.config.cochange_config)
        if cochange is not None and self.history is not None:
            detectors.append((cochange.rule_id, CoChangeDetector(cochange, self.history)))
        return detectors

    def analyze_repository(
        self,
        root: str,
        thoroughness: str = "normal",
        language: Optional[str] = None,
    ) -> PipelineResult:
        """
        Scan a repository for slop.

        Args:
            root: Path of the repository
            thoroughness: "quick" runs the rule scan only, "normal" adds the
                structural and repository-level detectors
            language: Only scan files of this language tag

        Returns:
            PipelineResult with every finding and its summary
        """
        if thoroughness not in THOROUGHNESS_LEVELS:
            raise ValueError(f"Unknown thoroughness: {thoroughness}")

        start_time = time.time()
        if not self.fs.is_dir(root):
            return PipelineResult(root=root, error=f"Not a directory: {root}", summary=build_summary([]))

        walker = RepoWalker(root, self.fs)
        files = [
            rel_path for rel_path in walker.iter_files(max_files=self.config.max_files)
            if language is None or detect_language(rel_path) == language
        ]
        multi_pass = thoroughness != "quick" and self.config.enable_multi_pass
        scanner = RuleScanner(self.registry, blame=self.blame, root=root)

        findings: list[Violation] = []
        verdicts: dict[str, str] = {}
        skipped = 0

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.console,
            disable=not self.show_progress,
        ) as progress:

            task = progress.add_task(f"Scanning {len(files)} files...", total=len(files))
            for rel_path in files:
                content = walker.read(rel_path)
                if content is not None:
                    findings.extend(scanner.scan(rel_path, content))
                    if multi_pass:
                        findings.extend(self._analyze_file(rel_path, content))
                progress.update(task, advance=1)
            skipped += walker.skipped

            if multi_pass:
                detectors = self._repo_detectors(root)
                task = progress.add_task("Analyzing repository structure...", total=len(detectors))
                for rule_id, detector in detectors:
                    result: RepoAnalysis = detector.analyze(root)
                    if result.error:
                        logger.debug("%s skipped: %s", rule_id, result.error)
                    findings.extend(result.violations)
                    verdicts[rule_id] = result.verdict.value
                    skipped += result.skipped
                    progress.update(task, advance=1)

        findings.sort(key=_sort_key)
        duration = time.time() - start_time
        logger.info("Scanned %d files in %.2fs: %d findings", len(files), duration, len(findings))

        return PipelineResult(
            root=root,
            findings=findings,
            summary=build_summary(findings),
            verdicts=verdicts,
            files_analyzed=len(files),
            skipped=skipped,
            duration=duration,
        )

    def _analyze_file(self, path: str, content: str) -> list[Violation]:
        """Run the per-file structural detectors that apply to a file."""
        findings: list[Violation] = []
        for detector in self._file_detectors():
            rule = self.registry.get(detector.config.rule_id)
            if rule is not None and is_excluded(path, rule.exclude):
                continue
            findings.extend(detector.analyze(content, path))
        return findings
