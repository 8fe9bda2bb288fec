"""
Infrastructure set up but never used.

Clients, pools, connections and similar components are found by the shape
of their construction, then every non-test source file is searched for a
line that uses the variable they were bound to.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from ..file_classifier import detect_language
from ..fs import FileSystem, LocalFileSystem
from ..models import InfraSetup, InfrastructureResult, Severity, Verdict
from ..walker import RepoWalker
from .base import RuleConfig


logger = logging.getLogger(__name__)

INFRASTRUCTURE_SUFFIXES = (
    "Client", "Connection", "Pool", "Service", "Provider",
    "Manager", "Factory", "Repository", "Gateway", "Adapter",
    "Handler", "Broker", "Queue", "Cache", "Store",
    "Transport", "Channel", "Socket", "Server", "Database",
)

GENERIC_NAME = re.compile(r"^[ijkxy]$")

MAX_MATCHES_PER_PATTERN = 100

_SUFFIX = "(?:" + "|".join(INFRASTRUCTURE_SUFFIXES) + ")"

# Each pattern captures the bound variable, then the component type if it can
INSTANTIATION_PATTERNS = {
    "javascript": (
        re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*new\s+(\w+" + _SUFFIX + ")"),
        re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:await\s+)?(?:create|connect|init|initialize|setup)(\w+)", re.IGNORECASE),
        re.compile(
            r"(?:const|let|var)\s+(\w+)\s*=\s*(?:await\s+)?\w+\.(?:create|connect|init|initialize|setup|open|start)\(",
            re.IGNORECASE,
        ),
    ),
    "python": (
        re.compile(r"(\w+)\s*=\s*(\w+" + _SUFFIX + r")\("),
        re.compile(r"(\w+)\s*=\s*\w+\.(\w+" + _SUFFIX + r")\("),
        re.compile(r"(\w+)\s*=\s*(?:create|connect|init|initialize|setup)_(\w+)\("),
        re.compile(r"(\w+)\s*=\s*await\s+(?:create|connect|init|initialize|setup)_(\w+)\("),
    ),
    "go": (
        re.compile(r"(\w+)\s*:=\s*(?:New|Create|Connect|Init|Setup)(\w+)\("),
        re.compile(r"(\w+)\s*:=\s*\w+\.(?:New|Create|Connect|Init|Setup)(\w+)\("),
        re.compile(r"var\s+(\w+)\s+.*=\s*(?:New|Create|Connect|Init|Setup)(\w+)\("),
        re.compile(r"(\w+)\s*:=\s*&(\w+" + _SUFFIX + r")\{"),
    ),
    "rust": (
        re.compile(r"let\s+(?:mut\s+)?(\w+)\s*=\s*(\w*" + _SUFFIX + r")::(?:new|create|connect|init|build)\("),
        re.compile(r"let\s+(?:mut\s+)?(\w+)\s*=\s*(\w+Builder)::new\(\).*\.build\(\)"),
        re.compile(r"let\s+(?:mut\s+)?(\w+)\s*=\s*(\w*" + _SUFFIX + r")::from"),
    ),
    "java": (
        re.compile(r"(?:\w+(?:<[^>]*>)?)\s+(\w+)\s*=\s*new\s+(\w+" + _SUFFIX + r")(?:<[^>]*>)?\s*\("),
        re.compile(r"(?:\w+(?:<[^>]*>)?)\s+(\w+)\s*=\s*(\w+(?:Factory|Builder))\.(?:create|build|get|new)\w*\("),
        re.compile(r"(?:\w+(?:<[^>]*>)?)\s+(\w+)\s*=\s*(\w+)\.builder\(\).*\.build\(\)"),
        re.compile(r"@(?:Autowired|Inject)\s+(?:private\s+)?(?:\w+(?:<[^>]*>)?)\s+(\w+)"),
    ),
}


def usage_patterns(name: str) -> tuple[re.Pattern, ...]:
    """Method or property access, indexing, call argument, return value."""
    escaped = re.escape(name)
    return (
        re.compile(rf"\b{escaped}\s*\.\w+"),
        re.compile(rf"\b{escaped}\s*\["),
        re.compile(rf"\(.*\b{escaped}\b.*\)"),
        re.compile(rf"\b{escaped}\s*\)"),
        re.compile(rf"return\s+.*\b{escaped}\b"),
    )


def find_setups(content: str, file_path: str, patterns: Optional[dict] = None) -> list[InfraSetup]:
    """Infrastructure components constructed in one file, one per variable."""
    table = patterns if patterns is not None else INSTANTIATION_PATTERNS
    language = detect_language(file_path, default="javascript")
    lines = content.split("\n")
    setups: dict[str, InfraSetup] = {}

    for pattern in table.get(language, table["javascript"]):
        for count, match in enumerate(pattern.finditer(content)):
            if count >= MAX_MATCHES_PER_PATTERN:
                break
            name = match.group(1)
            if len(name) < 2 or GENERIC_NAME.match(name):
                continue
            line = content.count("\n", 0, match.start()) + 1
            component = (match.group(2) if pattern.groups >= 2 else None) or "Infrastructure"
            setups[name] = InfraSetup(
                name=name,
                file=file_path,
                line=line,
                component_type=component,
                declaration=lines[line - 1].strip(),
            )
    return list(setups.values())


def looks_exported(setup: InfraSetup) -> bool:
    """Exported, or a parameter of the function declared on the same line."""
    declaration = setup.declaration.lower()
    if "export" in declaration or "module.exports" in declaration:
        return True
    return "function" in declaration and setup.name.lower() in declaration


@dataclass
class InfrastructureConfig(RuleConfig):
    """Configuration for the infrastructure usage check."""
    rule_id: str = "infrastructure_without_implementation"
    severity: Severity = Severity.HIGH
    description: str = "Infrastructure component set up but never used"
    max_files: int = 1000
    instantiation_patterns: dict = field(default_factory=lambda: dict(INSTANTIATION_PATTERNS))


class InfrastructureUsageDetector:
    """Report infrastructure components nothing ever touches."""

    def __init__(self, config: Optional[InfrastructureConfig] = None, fs: Optional[FileSystem] = None):
        self.config = config or InfrastructureConfig()
        self.fs = fs or LocalFileSystem()

    def analyze(self, root: str) -> InfrastructureResult:
        if not self.fs.is_dir(root):
            return InfrastructureResult(verdict=Verdict.SKIP, error=f"Not a directory: {root}")

        walker = RepoWalker(root, self.fs)
        sources: dict[str, list[str]] = {}
        setups: list[InfraSetup] = []
        for rel_path in walker.iter_files(max_files=self.config.max_files):
            content = walker.read(rel_path)
            if content is None:
                continue
            sources[rel_path] = content.split("\n")
            setups.extend(find_setups(content, rel_path, self.config.instantiation_patterns))

        for setup in setups:
            setup.usages = self.count_usages(setup, sources)

        violations = []
        for setup in setups:
            if setup.usages > 0 or looks_exported(setup):
                continue
            violations.append(self.config.violation(
                file=setup.file,
                line=setup.line,
                category="infrastructure_without_implementation",
                message=(
                    f'Infrastructure component "{setup.name}" ({setup.component_type}) '
                    "is created but never used"
                ),
                severity=Severity.HIGH,
                content=setup.declaration,
                details={"var_name": setup.name, "type": setup.component_type},
            ))

        return InfrastructureResult(
            violations=violations,
            verdict=Verdict.HIGH if violations else Verdict.OK,
            skipped=walker.skipped,
            setups_found=len(setups),
            usages_found=sum(1 for setup in setups if setup.usages > 0),
        )

    def count_usages(self, setup: InfraSetup, sources: dict[str, list[str]]) -> int:
        """Lines using the variable, across every source file."""
        patterns = usage_patterns(setup.name)
        count = 0
        for rel_path, lines in sources.items():
            for index, line in enumerate(lines):
                if rel_path == setup.file and index == setup.line - 1:
                    continue
                if any(p.search(line) for p in patterns):
                    count += 1
        return count
