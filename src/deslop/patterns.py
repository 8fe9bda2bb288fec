"""Built-in rule table.

Rule ids, severities, fix strategies, languages, exclusion globs and
descriptions are consumed by reports and downstream tooling, so they are kept
stable.
"""

import re

from .models import AutoFix, Severity
from .rules import (
    AgeCheckedRule,
    BuzzwordInflationRule,
    ConsecutiveLineRule,
    DocCodeRatioRule,
    DuplicateStringsRule,
    EntropyCheckedRule,
    MultiPassRule,
    OverEngineeringRule,
    PatternRule,
    ShotgunSurgeryRule,
    SimpleRule,
    VerbosityRatioRule,
)


CRITICAL = Severity.CRITICAL
HIGH = Severity.HIGH
MEDIUM = Severity.MEDIUM
LOW = Severity.LOW

REMOVE = AutoFix.REMOVE
REPLACE = AutoFix.REPLACE
ADD_LOGGING = AutoFix.ADD_LOGGING
FLAG = AutoFix.FLAG

SECRET_EXCLUDES = ("*.test.*", "*.spec.*", "*.example.*")

GENERIC_NAMING_DESCRIPTION = "Generic variable name that could be more descriptive"


def _secret(rule_id: str, pattern: str, description: str, extra_excludes: tuple[str, ...] = (), flags: int = 0) -> SimpleRule:
    """Secret detectors all share severity, fix strategy and base exclusions."""
    return SimpleRule(
        id=rule_id,
        pattern=re.compile(pattern, flags),
        exclude=SECRET_EXCLUDES + extra_excludes,
        severity=CRITICAL,
        auto_fix=FLAG,
        description=description,
    )


DEFAULT_RULES: tuple[PatternRule, ...] = (
    # Debug artifacts
    SimpleRule(
        id="console_debugging",
        pattern=re.compile(r"console\.(log|debug|info|warn)\("),
        exclude=("*.test.*", "*.spec.*", "*.config.*"),
        severity=MEDIUM,
        auto_fix=REMOVE,
        language="javascript",
        description="Console.log statements left in production code",
    ),
    SimpleRule(
        id="python_debugging",
        pattern=re.compile(r"(print\(|import pdb|breakpoint\(\)|import ipdb)"),
        exclude=("test_*.py", "*_test.py", "conftest.py"),
        severity=MEDIUM,
        auto_fix=REMOVE,
        language="python",
        description="Debug print/breakpoint statements in production",
    ),
    SimpleRule(
        id="rust_debugging",
        pattern=re.compile(r"(println!|dbg!|eprintln!)\("),
        exclude=("*_test.rs", "*_tests.rs"),
        severity=MEDIUM,
        auto_fix=REMOVE,
        language="rust",
        description="Debug print macros in production code",
    ),
    AgeCheckedRule(
        id="old_todos",
        pattern=re.compile(r"(TODO|FIXME|HACK|XXX):"),
        severity=LOW,
        auto_fix=FLAG,
        description="TODO/FIXME comments older than 90 days",
        age_threshold_days=90,
    ),
    ConsecutiveLineRule(
        id="commented_code",
        pattern=re.compile(r"^\s*(//|#)\s*\w{5,}"),
        severity=MEDIUM,
        auto_fix=REMOVE,
        description="Large blocks of commented-out code",
        min_consecutive_lines=5,
    ),
    SimpleRule(
        id="placeholder_text",
        pattern=re.compile(
            r"(lorem ipsum|test test test|asdf|foo bar baz|placeholder|replace this|todo: implement)",
            re.IGNORECASE,
        ),
        exclude=("*.test.*", "*.spec.*", "README.*", "*.md"),
        severity=HIGH,
        auto_fix=FLAG,
        description="Placeholder text that should be replaced",
    ),

    # Placeholder functions
    SimpleRule(
        id="placeholder_stub_returns_js",
        pattern=re.compile(r"return\s+(?:0|true|false|null|undefined|\[\]|\{\})\s*;?\s*$", re.MULTILINE),
        exclude=("*.test.*", "*.spec.*", "*.config.*"),
        severity=HIGH,
        auto_fix=FLAG,
        language="javascript",
        description="Stub return value (0, true, false, null, undefined, [], {})",
    ),
    SimpleRule(
        id="placeholder_not_implemented_js",
        pattern=re.compile(r"throw\s+new\s+Error\s*\(\s*['\"`].*(?:TODO|implement|not\s+impl)", re.IGNORECASE),
        exclude=("*.test.*", "*.spec.*"),
        severity=HIGH,
        auto_fix=FLAG,
        language="javascript",
        description='throw new Error("TODO: implement...") placeholder',
    ),
    SimpleRule(
        id="placeholder_empty_function_js",
        pattern=re.compile(r"(?:function\s+\w+\s*\([^)]*\)|=>\s*)\s*\{\s*\}"),
        exclude=("*.test.*", "*.spec.*", "*.d.ts"),
        severity=HIGH,
        auto_fix=FLAG,
        language="javascript",
        description="Empty function body (placeholder)",
    ),
    SimpleRule(
        id="placeholder_todo_rust",
        pattern=re.compile(r"\b(?:todo|unimplemented)!\s*\("),
        exclude=("*_test.rs", "*_tests.rs", "**/tests/**"),
        severity=HIGH,
        auto_fix=FLAG,
        language="rust",
        description="Rust todo!() or unimplemented!() macro",
    ),
    SimpleRule(
        id="placeholder_panic_todo_rust",
        pattern=re.compile(r"\bpanic!\s*\(\s*[\"'].*(?:TODO|implement)", re.IGNORECASE),
        exclude=("*_test.rs", "*_tests.rs", "**/tests/**"),
        severity=HIGH,
        auto_fix=FLAG,
        language="rust",
        description='Rust panic!("TODO: ...") placeholder',
    ),
    SimpleRule(
        id="placeholder_not_implemented_py",
        pattern=re.compile(r"raise\s+NotImplementedError"),
        exclude=("test_*.py", "*_test.py", "conftest.py", "**/tests/**"),
        severity=HIGH,
        auto_fix=FLAG,
        language="python",
        description="Python raise NotImplementedError placeholder",
    ),
    SimpleRule(
        id="placeholder_pass_only_py",
        pattern=re.compile(r"def\s+\w+\s*\([^)]*\)\s*:\s*(?:pass|\n\s+pass)\s*$", re.MULTILINE),
        exclude=("test_*.py", "*_test.py", "conftest.py"),
        severity=HIGH,
        auto_fix=FLAG,
        language="python",
        description="Python function with only pass statement",
    ),
    SimpleRule(
        id="placeholder_ellipsis_py",
        pattern=re.compile(r"def\s+\w+\s*\([^)]*\)\s*:\s*(?:\.\.\.|\n\s+\.\.\.)\s*$", re.MULTILINE),
        exclude=("*.pyi", "test_*.py", "*_test.py"),
        severity=HIGH,
        auto_fix=FLAG,
        language="python",
        description="Python function with only ellipsis (...)",
    ),
    SimpleRule(
        id="placeholder_panic_go",
        pattern=re.compile(r"panic\s*\(\s*[\"'].*(?:TODO|implement|not\s+impl)", re.IGNORECASE),
        exclude=("*_test.go", "**/testdata/**"),
        severity=HIGH,
        auto_fix=FLAG,
        language="go",
        description='Go panic("TODO: ...") placeholder',
    ),
    SimpleRule(
        id="placeholder_unsupported_java",
        pattern=re.compile(r"throw\s+new\s+UnsupportedOperationException\s*\("),
        exclude=("*Test.java", "**/test/**"),
        severity=HIGH,
        auto_fix=FLAG,
        language="java",
        description="Java throw new UnsupportedOperationException() placeholder",
    ),

    # Error handling
    SimpleRule(
        id="empty_catch_js",
        pattern=re.compile(r"catch\s*\([^)]*\)\s*\{\s*\}"),
        severity=HIGH,
        auto_fix=ADD_LOGGING,
        language="javascript",
        description="Empty catch blocks without error handling",
    ),
    SimpleRule(
        id="empty_except_py",
        pattern=re.compile(r"except\s*[^:]*:\s*pass\s*$"),
        severity=HIGH,
        auto_fix=ADD_LOGGING,
        language="python",
        description="Empty except blocks with just pass",
    ),

    # Code hygiene
    SimpleRule(
        id="magic_numbers",
        pattern=re.compile(r"(?<![a-zA-Z_\d])[0-9]{4,}(?![a-zA-Z_\d])"),
        exclude=("*.test.*", "*.spec.*", "*.config.*", "package.json", "package-lock.json"),
        severity=LOW,
        auto_fix=FLAG,
        description="Magic numbers that should be constants",
    ),
    SimpleRule(
        id="disabled_linter",
        pattern=re.compile(r"(eslint-disable|pylint: disable|#\s*noqa|@SuppressWarnings|#\[allow\()"),
        severity=MEDIUM,
        auto_fix=FLAG,
        description="Disabled linter rules that may hide issues",
    ),
    SimpleRule(
        id="unused_imports_hint",
        pattern=re.compile(r"^import .* from .* // unused$"),
        severity=LOW,
        auto_fix=REMOVE,
        description="Imports marked as unused",
    ),
    DuplicateStringsRule(
        id="duplicate_strings",
        exclude=("*.test.*", "*.spec.*"),
        severity=LOW,
        auto_fix=FLAG,
        description="Duplicate string literals that should be constants",
        max_occurrences=5,
    ),
    SimpleRule(
        id="mixed_indentation",
        pattern=re.compile(r"^\t+ +|^ +\t+"),
        exclude=("Makefile", "*.mk"),
        severity=LOW,
        auto_fix=REPLACE,
        description="Mixed tabs and spaces",
    ),
    SimpleRule(
        id="trailing_whitespace",
        pattern=re.compile(r"\s+$"),
        exclude=("*.md",),
        severity=LOW,
        auto_fix=REMOVE,
        description="Trailing whitespace at end of lines",
    ),
    SimpleRule(
        id="multiple_blank_lines",
        pattern=re.compile(r"^\s*\n\s*\n\s*\n", re.MULTILINE),
        severity=LOW,
        auto_fix=REPLACE,
        description="More than 2 consecutive blank lines",
    ),

    # Secrets
    SimpleRule(
        id="hardcoded_secrets",
        pattern=re.compile(
            r"(password|secret|api[_-]?key|token|credential|auth)[_-]?(key|token|secret|pass)?\s*[:=]\s*"
            r"[\"'`](?!\$\{)(?!\{\{)(?!<[A-Z_])(?![x*#]{8,})(?![X*#]{8,})[^\"'`\s]{8,}[\"'`]",
            re.IGNORECASE,
        ),
        exclude=("*.test.*", "*.spec.*", "*.example.*", "*.sample.*", "README.*", "*.md"),
        severity=CRITICAL,
        auto_fix=FLAG,
        description="Potential hardcoded credentials",
    ),
    _secret(
        "jwt_tokens",
        r"eyJ[A-Za-z0-9_-]{10,}\.eyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}",
        "Hardcoded JWT token",
    ),
    _secret("openai_api_key", r"sk-[a-zA-Z0-9]{32,}", "Hardcoded OpenAI API key"),
    _secret(
        "github_token",
        r"(ghp_[a-zA-Z0-9]{36}|gho_[a-zA-Z0-9]{36}|ghu_[a-zA-Z0-9]{36}|ghs_[a-zA-Z0-9]{36}"
        r"|ghr_[a-zA-Z0-9]{36}|github_pat_[a-zA-Z0-9]{22}_[a-zA-Z0-9]{59})",
        "Hardcoded GitHub token",
    ),
    _secret(
        "aws_credentials",
        r"(AKIA[0-9A-Z]{16}|aws_secret_access_key\s*[:=]\s*[\"'`][A-Za-z0-9/+=]{40}[\"'`])",
        "Hardcoded AWS credentials",
        flags=re.IGNORECASE,
    ),
    _secret(
        "google_api_key",
        r"(AIza[0-9A-Za-z_-]{35}|[0-9]+-[a-z0-9_]{32}\.apps\.googleusercontent\.com)",
        "Hardcoded Google/Firebase API key",
    ),
    _secret(
        "stripe_api_key",
        r"(sk_live_[a-zA-Z0-9]{24,}|sk_test_[a-zA-Z0-9]{24,}|rk_live_[a-zA-Z0-9]{24,}|rk_test_[a-zA-Z0-9]{24,})",
        "Hardcoded Stripe API key",
    ),
    _secret(
        "slack_token",
        r"(xoxb-[0-9]{10,}-[0-9]{10,}-[a-zA-Z0-9]{24}|xoxp-[0-9]{10,}-[0-9]{10,}-[a-zA-Z0-9]{24}"
        r"|xoxa-[0-9]{10,}-[a-zA-Z0-9]{24}"
        r"|https://hooks\.slack\.com/services/T[A-Z0-9]{8}/B[A-Z0-9]{8,}/[a-zA-Z0-9]{24})",
        "Hardcoded Slack token or webhook URL",
    ),
    _secret(
        "discord_token",
        r"(discord.*[\"'`][A-Za-z0-9_-]{24}\.[A-Za-z0-9_-]{6}\.[A-Za-z0-9_-]{27}[\"'`]"
        r"|https://discord(?:app)?\.com/api/webhooks/[0-9]+/[A-Za-z0-9_-]+)",
        "Hardcoded Discord token or webhook",
        flags=re.IGNORECASE,
    ),
    _secret("sendgrid_api_key", r"SG\.[a-zA-Z0-9_-]{22}\.[a-zA-Z0-9_-]{43}", "Hardcoded SendGrid API key"),
    _secret("twilio_credentials", r"(AC[a-f0-9]{32}|SK[a-f0-9]{32})", "Hardcoded Twilio credentials"),
    _secret("npm_token", r"npm_[a-zA-Z0-9]{36}", "Hardcoded NPM token"),
    _secret(
        "private_key",
        r"-----BEGIN\s+(RSA\s+)?PRIVATE\s+KEY-----",
        "Private key in source code",
        extra_excludes=("*.pem.example",),
    ),
    EntropyCheckedRule(
        id="high_entropy_string",
        pattern=re.compile(r"[\"'`][A-Za-z0-9+/=_-]{40,}[\"'`]"),
        exclude=("*.test.*", "*.spec.*", "*.example.*", "*.lock", "package-lock.json", "yarn.lock", "pnpm-lock.yaml"),
        severity=MEDIUM,
        auto_fix=FLAG,
        description="High-entropy string that may be a secret",
        entropy_threshold=4.5,
    ),

    # Library hygiene
    SimpleRule(
        id="process_exit",
        pattern=re.compile(r"process\.exit\("),
        exclude=("*.test.*", "cli.js", "index.js", "bin/*"),
        severity=HIGH,
        auto_fix=FLAG,
        language="javascript",
        description="process.exit() should not be in library code",
    ),
    SimpleRule(
        id="bare_urls",
        pattern=re.compile(r"https?://[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"),
        exclude=("*.test.*", "*.md", "package.json", "README.*"),
        severity=LOW,
        auto_fix=FLAG,
        description="Hardcoded URLs that should be configuration",
    ),
    DocCodeRatioRule(
        id="doc_code_ratio_js",
        exclude=("*.test.*", "*.spec.*", "*.d.ts"),
        severity=MEDIUM,
        auto_fix=FLAG,
        language="javascript",
        description="Documentation longer than code (JSDoc > 3x function body)",
        min_function_lines=3,
        max_ratio=3.0,
    ),

    # Phantom references
    SimpleRule(
        id="issue_pr_references",
        pattern=re.compile(
            r"//.*(?:#\d+|issue\s+#?\d+|PR\s+#?\d+|pull\s+request\s+#?\d+|fixed\s+in\s+#?\d+"
            r"|closes?\s+#?\d+|resolves?\s+#?\d+|iteration\s+\d+)",
            re.IGNORECASE,
        ),
        exclude=("*.md", "README.*", "CHANGELOG.*", "CONTRIBUTING.*"),
        severity=MEDIUM,
        auto_fix=REMOVE,
        description="Issue/PR/iteration references in comments (slop - remove context from code)",
    ),
    SimpleRule(
        id="file_path_references",
        pattern=re.compile(
            r"//.*(?:see|refer\s+to|in|per|documented\s+in)\s+"
            r"([a-zA-Z0-9_\-./]+\.(?:md|js|ts|json|yaml|yml|toml|txt))",
            re.IGNORECASE,
        ),
        exclude=("*.md", "README.*", "*.test.*", "*.spec.*"),
        severity=LOW,
        auto_fix=FLAG,
        description="File path references in comments that may be outdated",
    ),

    # Generic naming
    SimpleRule(
        id="generic_naming_js",
        pattern=re.compile(
            r"\b(?:const|let|var)\s+(data|result|item|temp|value|output|response|obj|ret|res|val|arr|str|num"
            r"|buf|ctx|cfg|opts|args|params)\s*[=:]",
            re.IGNORECASE,
        ),
        exclude=("*.test.*", "*.spec.*", "**/test/**", "**/tests/**"),
        severity=LOW,
        auto_fix=FLAG,
        language="javascript",
        description='Generic variable name that could be more descriptive (e.g., "data" -> "userData")',
    ),
    SimpleRule(
        id="generic_naming_py",
        pattern=re.compile(
            r"^(\s*)(?!.*\bfor\s+\w+\s+in\b)(data|result|item|temp|value|output|response|obj|ret|res|val|arr"
            r"|ctx|cfg|opts|args|params)\s*[:=]",
            re.IGNORECASE | re.MULTILINE,
        ),
        exclude=("*test*.py", "**/test_*.py", "**/tests/**", "conftest.py"),
        severity=LOW,
        auto_fix=FLAG,
        language="python",
        description=GENERIC_NAMING_DESCRIPTION,
    ),
    SimpleRule(
        id="generic_naming_rust",
        pattern=re.compile(
            r"\blet\s+(?:mut\s+)?(data|result|item|temp|value|output|response|obj|ret|res|val|buf|ctx|cfg"
            r"|opts|args)\s*[=:]",
            re.IGNORECASE,
        ),
        exclude=("*_test.rs", "*_tests.rs", "**/tests/**"),
        severity=LOW,
        auto_fix=FLAG,
        language="rust",
        description=GENERIC_NAMING_DESCRIPTION,
    ),
    SimpleRule(
        id="generic_naming_go",
        pattern=re.compile(
            r"\b(data|result|item|temp|value|output|response|obj|ret|res|val|buf|ctx|cfg|opts|args)\s*:=",
            re.IGNORECASE,
        ),
        exclude=("*_test.go", "**/tests/**", "**/testdata/**"),
        severity=LOW,
        auto_fix=FLAG,
        language="go",
        description=GENERIC_NAMING_DESCRIPTION,
    ),

    # Verbosity
    SimpleRule(
        id="verbosity_preambles",
        pattern=re.compile(
            r"//\s*(?:certainly|i'd\s+be\s+happy|great\s+question|absolutely|of\s+course|happy\s+to\s+help"
            r"|let\s+me\s+help|i\s+can\s+help)",
            re.IGNORECASE,
        ),
        exclude=("*.test.*", "*.spec.*", "*.md"),
        severity=LOW,
        auto_fix=FLAG,
        description="AI preamble phrases in comments - remove filler language",
    ),
    SimpleRule(
        id="verbosity_buzzwords",
        pattern=re.compile(
            r"\b(?:synergize|operationalize|paradigm\s+shift|best-in-class|world-class|cutting-edge"
            r"|game-changing|holistic|revolutionary|transformative|seamless|next-generation|bleeding-edge"
            r"|industry-leading)\b",
            re.IGNORECASE,
        ),
        exclude=("*.test.*", "*.spec.*", "*.md", "CHANGELOG.*", "README.*"),
        severity=LOW,
        auto_fix=FLAG,
        description="Marketing buzzwords that obscure technical meaning",
    ),
    SimpleRule(
        id="verbosity_hedging",
        pattern=re.compile(
            r"//.*\b(?:it'?s?\s+worth\s+noting|generally\s+speaking|more\s+or\s+less|arguably|perhaps"
            r"|possibly|might\s+be|should\s+work|i\s+think|i\s+believe|probably|maybe)\b",
            re.IGNORECASE,
        ),
        exclude=("*.test.*", "*.spec.*"),
        severity=LOW,
        auto_fix=FLAG,
        description="Hedging language in comments - be direct",
    ),
    VerbosityRatioRule(
        id="verbosity_ratio",
        exclude=("*.test.*", "*.spec.*", "*.md", "*.d.ts"),
        severity=MEDIUM,
        auto_fix=FLAG,
        description="Excessive inline comments (>2:1 comment-to-code ratio within function)",
        max_comment_ratio=2.0,
        min_code_lines=3,
    ),

    # Project-level structure
    OverEngineeringRule(
        id="over_engineering_metrics",
        severity=HIGH,
        auto_fix=FLAG,
        description="Excessive files/lines relative to public API (over-engineering indicator)",
        file_ratio_threshold=20,
        lines_per_export_threshold=500,
        depth_threshold=4,
    ),
    BuzzwordInflationRule(
        id="buzzword_inflation",
        severity=HIGH,
        auto_fix=FLAG,
        description="Quality claims (production-ready, secure, scalable) without supporting code evidence",
        min_evidence_matches=2,
    ),
    MultiPassRule(
        id="infrastructure_without_implementation",
        severity=HIGH,
        auto_fix=FLAG,
        description="Infrastructure component set up but never used",
    ),
    MultiPassRule(
        id="dead_code",
        severity=HIGH,
        auto_fix=FLAG,
        description="Unreachable code after a control flow terminator",
    ),
    MultiPassRule(
        id="placeholder_stub_functions",
        exclude=("*.test.*", "*.spec.*", "*.config.*"),
        severity=MEDIUM,
        auto_fix=FLAG,
        description="Function whose only statement returns a placeholder value",
    ),
    ShotgunSurgeryRule(
        id="shotgun_surgery",
        severity=MEDIUM,
        auto_fix=FLAG,
        description="Files that frequently change together across commits",
        commit_limit=100,
        cluster_threshold=5,
    ),
)
