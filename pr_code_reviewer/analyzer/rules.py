"""Rule catalog for the heuristic code analyzer.

Every rule is a fixed constant: a language scope, a severity, a score penalty
and a check. Whole-text checks receive the full text and its lines and return
the 1-based line to report, or ``None`` when the rule does not fire. Per-line
checks receive a ``LineContext`` and return the line to report the same way.
The function-length rule carries state across lines and is evaluated by the
engine itself; the catalog only holds its metadata.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from .models import Finding, Language, Severity

UNIVERSAL = "universal"

JS_SCOPES = (Language.JAVASCRIPT.value, Language.TYPESCRIPT.value)
PYTHON_SCOPES = (Language.PYTHON.value,)
JAVA_SCOPES = (Language.JAVA.value,)

MAX_LINE_LENGTH = 120
MAX_FUNCTION_LINES = 50
MIN_MAGIC_NUMBERS = 3

FUNCTION_MARKERS = ("function", "def ", "public ", "private ", "static ")
NETWORK_CALL_MARKERS = ("fetch(", "axios.", "http.", "URL(", "HttpURLConnection")
USER_INPUT_MARKERS = ("input", "user", "param")
INFINITE_LOOP_MARKERS = ("while(true)", "while (true)", "for(;;)")
NULLABLE_CALL_MARKERS = ("get", "find", "parse")
# A line after a return starting with one of these is not dead code
NON_CODE_PREFIXES = ("}", "//", "/*", "*", "#")

_URL_PATTERN = re.compile(r"https?://\S+")
_NUMBER_PATTERN = re.compile(r"\b\d{2,}\b")
MIN_MAGIC_VALUE = 10
_ALLOWED_NUMBERS = frozenset({10, 100, 1000})


class RuleKind(str, Enum):
    """How the engine evaluates a rule."""

    TEXT = "text"
    LINE = "line"
    FUNCTION_LENGTH = "function_length"


@dataclass(frozen=True)
class LineContext:
    """Inputs available to a per-line check."""

    number: int
    line: str
    next_line: str | None
    has_error_handling: bool


TextCheck = Callable[[str, list[str]], int | None]
LineCheck = Callable[[LineContext], int | None]


@dataclass(frozen=True)
class Rule:
    """A single detection rule."""

    rule_id: str
    title: str
    description: str
    severity: Severity
    penalty: int
    kind: RuleKind
    scopes: tuple[str, ...] = (UNIVERSAL,)
    check: TextCheck | LineCheck | None = None

    @property
    def is_universal(self) -> bool:
        return UNIVERSAL in self.scopes

    def finding(self, line: int) -> Finding:
        """Build the finding this rule reports at ``line``."""
        return Finding(
            title=self.title,
            description=self.description.format(line=line),
            severity=self.severity,
            line=line,
        )


def find_line_number(lines: list[str], *patterns: str) -> int:
    """Return the first 1-based line containing any of ``patterns``, or 1."""
    for index, line in enumerate(lines):
        if any(pattern in line for pattern in patterns):
            return index + 1
    return 1


def _contains(*patterns: str) -> TextCheck:
    def check(text: str, lines: list[str]) -> int | None:
        if any(pattern in text for pattern in patterns):
            return find_line_number(lines, *patterns)
        return None

    return check


def _call_without_marker(call: str, marker: str) -> TextCheck:
    def check(_text: str, lines: list[str]) -> int | None:
        for index, line in enumerate(lines):
            if call in line and marker not in line:
                return index + 1
        return None

    return check


def _loose_equality(text: str, lines: list[str]) -> int | None:
    if "==" in text and "===" not in text:
        return find_line_number(lines, "==")
    return None


def _hardcoded_url(text: str, lines: list[str]) -> int | None:
    match = _URL_PATTERN.search(text)
    if match:
        return find_line_number(lines, match.group(0))
    return None


def _bare_except(text: str, lines: list[str]) -> int | None:
    if "except:" in text and "except Exception:" not in text:
        return find_line_number(lines, "except:")
    return None


def _generic_exception_trace(text: str, lines: list[str]) -> int | None:
    if "catch (Exception e)" in text and "e.printStackTrace()" in text:
        return find_line_number(lines, "catch (Exception e)")
    return None


def _raw_array_list(text: str, lines: list[str]) -> int | None:
    if "new ArrayList()" in text and "ArrayList<" not in text:
        return find_line_number(lines, "new ArrayList()")
    return None


def _unchecked_array_loop(text: str, lines: list[str]) -> int | None:
    if "for (" in text and "[" in text and "try" not in text:
        return find_line_number(lines, "for (")
    return None


def _magic_numbers(text: str, lines: list[str]) -> int | None:
    numbers = [
        number
        for number in _NUMBER_PATTERN.findall(text)
        if int(number) >= MIN_MAGIC_VALUE and int(number) not in _ALLOWED_NUMBERS
    ]
    if len(numbers) >= MIN_MAGIC_NUMBERS:
        return find_line_number(lines, numbers[0])
    return None


def _empty_catch(text: str, lines: list[str]) -> int | None:
    if "catch" in text and "{}" in text:
        return find_line_number(lines, "catch")
    return None


def _missing_access_modifier(text: str, lines: list[str]) -> int | None:
    if "class " in text and "public class" not in text and "private class" not in text:
        return find_line_number(lines, "class ")
    return None


def _line_too_long(ctx: LineContext) -> int | None:
    return ctx.number if len(ctx.line) > MAX_LINE_LENGTH else None


def _unguarded_network_call(ctx: LineContext) -> int | None:
    if not ctx.has_error_handling and any(marker in ctx.line for marker in NETWORK_CALL_MARKERS):
        return ctx.number
    return None


def _sql_concatenation(ctx: LineContext) -> int | None:
    line = ctx.line
    if "SELECT" in line and "+" in line and any(marker in line for marker in USER_INPUT_MARKERS):
        return ctx.number
    return None


def _weak_password_check(ctx: LineContext) -> int | None:
    line = ctx.line
    if "password" in line.lower() and ".length" in line and "< 6" in line:
        return ctx.number
    return None


def _hardcoded_password(ctx: LineContext) -> int | None:
    line = ctx.line
    if "password" in line.lower() and "=" in line and "getPassword" not in line and "input" not in line:
        return ctx.number
    return None


def _infinite_loop(ctx: LineContext) -> int | None:
    if any(marker in ctx.line for marker in INFINITE_LOOP_MARKERS) and "break" not in ctx.line:
        return ctx.number
    return None


def _code_after_return(ctx: LineContext) -> int | None:
    if "return" not in ctx.line or not ctx.next_line:
        return None
    if ctx.next_line.startswith(NON_CODE_PREFIXES):
        return None
    return ctx.number + 1


def _unchecked_nullable_call(ctx: LineContext) -> int | None:
    line = ctx.line
    if "." not in line or "null" in line or "?" in line:
        return None
    if any(marker in line for marker in NULLABLE_CALL_MARKERS):
        return ctx.number
    return None


CATALOG: tuple[Rule, ...] = (
    # JavaScript / TypeScript
    Rule(
        "js-console-log",
        "Debug statements found",
        "console.log statements should be removed in production code",
        Severity.MEDIUM, 10, RuleKind.TEXT, JS_SCOPES, _contains("console.log"),
    ),
    Rule(
        "js-var-keyword",
        "Use of var keyword",
        "Use let or const instead of var for better scoping",
        Severity.LOW, 5, RuleKind.TEXT, JS_SCOPES, _contains("var "),
    ),
    Rule(
        "js-loose-equality",
        "Loose equality comparison",
        "Use strict equality (===) instead of loose equality (==)",
        Severity.MEDIUM, 8, RuleKind.TEXT, JS_SCOPES, _loose_equality,
    ),
    Rule(
        "js-inner-html",
        "Potential XSS vulnerability",
        "Using innerHTML can lead to XSS attacks. Consider using textContent or proper sanitization",
        Severity.HIGH, 15, RuleKind.TEXT, JS_SCOPES, _contains("innerHTML"),
    ),
    Rule(
        "js-eval",
        "Use of eval() function",
        "eval() is dangerous and should be avoided as it can execute arbitrary code",
        Severity.CRITICAL, 25, RuleKind.TEXT, JS_SCOPES, _contains("eval("),
    ),
    # Any language
    Rule(
        "unfinished-work",
        "Unfinished work detected",
        "TODO or FIXME comments indicate incomplete code",
        Severity.LOW, 5, RuleKind.TEXT, (UNIVERSAL,), _contains("TODO", "FIXME"),
    ),
    Rule(
        "hardcoded-url",
        "Hardcoded URLs detected",
        "Consider using environment variables or configuration files for URLs",
        Severity.MEDIUM, 8, RuleKind.TEXT, (UNIVERSAL,), _hardcoded_url,
    ),
    # Python
    Rule(
        "py-wildcard-import",
        "Wildcard import detected",
        "Avoid using wildcard imports as they pollute the namespace",
        Severity.MEDIUM, 10, RuleKind.TEXT, PYTHON_SCOPES, _contains("import *"),
    ),
    Rule(
        "py-bare-except",
        "Bare except clause",
        "Catch specific exceptions instead of using bare except",
        Severity.MEDIUM, 8, RuleKind.TEXT, PYTHON_SCOPES, _bare_except,
    ),
    Rule(
        "py-print",
        "Print statements found",
        "Consider using proper logging instead of print statements",
        Severity.LOW, 5, RuleKind.TEXT, PYTHON_SCOPES, _call_without_marker("print(", "# debug"),
    ),
    # Java
    Rule(
        "java-system-out",
        "Debug print statements found",
        "System.out.print statements should be removed in production code or replaced with proper logging",
        Severity.MEDIUM, 10, RuleKind.TEXT, JAVA_SCOPES, _call_without_marker("System.out.print", "// debug"),
    ),
    Rule(
        "java-generic-exception",
        "Generic exception handling with stack trace",
        "Avoid catching generic Exception and printing stack traces in production",
        Severity.MEDIUM, 8, RuleKind.TEXT, JAVA_SCOPES, _generic_exception_trace,
    ),
    Rule(
        "java-null-comparison",
        "Null comparison detected",
        "Consider using Objects.equals() or Optional to handle null values safely",
        Severity.LOW, 5, RuleKind.TEXT, JAVA_SCOPES, _contains("== null", "!= null"),
    ),
    Rule(
        "java-raw-type",
        "Raw type usage",
        "Use generic types instead of raw types for type safety",
        Severity.MEDIUM, 8, RuleKind.TEXT, JAVA_SCOPES, _raw_array_list,
    ),
    Rule(
        "java-array-bounds",
        "Potential array access without bounds checking",
        "Consider adding bounds checking or using enhanced for-loops to prevent ArrayIndexOutOfBoundsException",
        Severity.MEDIUM, 8, RuleKind.TEXT, JAVA_SCOPES, _unchecked_array_loop,
    ),
    Rule(
        "java-magic-numbers",
        "Magic numbers detected",
        "Consider extracting magic numbers into named constants for better readability",
        Severity.LOW, 5, RuleKind.TEXT, JAVA_SCOPES, _magic_numbers,
    ),
    Rule(
        "java-empty-catch",
        "Empty catch block",
        "Empty catch blocks suppress exceptions silently. Add proper error handling",
        Severity.HIGH, 15, RuleKind.TEXT, JAVA_SCOPES, _empty_catch,
    ),
    Rule(
        "java-access-modifier",
        "Missing access modifier",
        "Explicitly specify access modifiers (public, private, protected) for better code clarity",
        Severity.LOW, 3, RuleKind.TEXT, JAVA_SCOPES, _missing_access_modifier,
    ),
    # Line scan, any language
    Rule(
        "long-function",
        "Function too long",
        "Consider breaking down large functions into smaller, more manageable ones",
        Severity.MEDIUM, 12, RuleKind.FUNCTION_LENGTH,
    ),
    Rule(
        "long-line",
        "Line too long",
        "Line {line} exceeds 120 characters. Consider breaking it down for better readability",
        Severity.LOW, 2, RuleKind.LINE, (UNIVERSAL,), _line_too_long,
    ),
    Rule(
        "missing-error-handling",
        "Missing error handling",
        "Network requests should include proper error handling",
        Severity.MEDIUM, 10, RuleKind.LINE, (UNIVERSAL,), _unguarded_network_call,
    ),
    Rule(
        "sql-injection",
        "Potential SQL injection vulnerability",
        "Avoid string concatenation in SQL queries. Use parameterized queries instead",
        Severity.CRITICAL, 25, RuleKind.LINE, (UNIVERSAL,), _sql_concatenation,
    ),
    Rule(
        "weak-password-validation",
        "Weak password validation",
        "Password minimum length should be at least 8 characters",
        Severity.MEDIUM, 8, RuleKind.LINE, (UNIVERSAL,), _weak_password_check,
    ),
    Rule(
        "hardcoded-credentials",
        "Hardcoded credentials detected",
        "Avoid hardcoding passwords or sensitive information in source code",
        Severity.CRITICAL, 25, RuleKind.LINE, (UNIVERSAL,), _hardcoded_password,
    ),
    Rule(
        "infinite-loop",
        "Potential infinite loop",
        "Infinite loops should have clear exit conditions to prevent hanging",
        Severity.HIGH, 15, RuleKind.LINE, (UNIVERSAL,), _infinite_loop,
    ),
    Rule(
        "unreachable-code",
        "Unreachable code detected",
        "Code after return statement is unreachable and should be removed",
        Severity.MEDIUM, 8, RuleKind.LINE, (UNIVERSAL,), _code_after_return,
    ),
    Rule(
        "null-pointer",
        "Potential null pointer exception",
        "Consider adding null checks for methods that might return null",
        Severity.MEDIUM, 5, RuleKind.LINE, (UNIVERSAL,), _unchecked_nullable_call,
    ),
)


def _index_by_scope(rules: tuple[Rule, ...]) -> MappingProxyType:
    index: dict[str, list[Rule]] = {}
    for rule in rules:
        for scope in rule.scopes:
            index.setdefault(scope, []).append(rule)
    return MappingProxyType({scope: tuple(scoped) for scope, scoped in index.items()})


RULES_BY_SCOPE = _index_by_scope(CATALOG)


def applicable_rules(language: Language | str | None, rules: tuple[Rule, ...] = CATALOG) -> list[Rule]:
    """Rules active for ``language``, in catalog order.

    Unknown languages only get the universal rules.
    """
    resolved = Language.parse(language)
    index = RULES_BY_SCOPE if rules is CATALOG else _index_by_scope(rules)
    selected = {*index.get(UNIVERSAL, ()), *index.get(resolved.value, ())}
    return [rule for rule in rules if rule in selected]
