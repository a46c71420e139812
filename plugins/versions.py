"""Version constraint matching for plugin dependencies.

Constraints are normalized to PEP 440 specifier sets so that exact pins
and ranges go through the same comparison. npm-style caret and tilde
ranges and ``x`` wildcards are translated first.

Examples:
    satisfies("1.4.0", "^1.2")         -> True
    satisfies("2.0.0", ">=1.0 <2.0")   -> False
    satisfies("1.0.0-beta.1", "1.x")   -> True
"""

import re

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

_WILDCARDS = {"", "*", "x", "X", "latest"}
_OPERATOR = re.compile(r"^(~=|==|!=|<=|>=|<|>|=|\^|~)?\s*(.+)$")


def parse_version(value: str) -> Version:
    """Parse a plugin version string.

    Raises:
        ValueError: If the string is not a valid version
    """
    try:
        return Version(value)
    except InvalidVersion as e:
        raise ValueError(f"invalid version: {value!r}") from e


def _release(text: str) -> list[int]:
    return list(parse_version(text).release)


def _caret(text: str) -> str:
    parts = _release(text)[:3]
    # Bump the first non-zero component; when all given ones are zero,
    # bump the last one given (^0.0 -> <0.1.0, ^0 -> <1.0.0)
    bump = next((i for i, p in enumerate(parts) if p), len(parts) - 1)
    upper = parts[:bump] + [parts[bump] + 1]
    upper += [0] * (3 - len(upper))
    bound = ".".join(str(p) for p in upper)
    return f">={text},<{bound}"


def _tilde(text: str) -> str:
    parts = _release(text)
    if len(parts) == 1:
        upper = f"{parts[0] + 1}.0.0"
    else:
        upper = f"{parts[0]}.{parts[1] + 1}.0"
    return f">={text},<{upper}"


def _translate_term(term: str) -> str:
    match = _OPERATOR.match(term)
    if match is None:
        raise ValueError(f"invalid version constraint: {term!r}")
    op, rest = match.group(1) or "", match.group(2).strip()

    # 1.x / 1.2.* wildcards
    if re.search(r"\.(x|X|\*)$", rest):
        base = re.sub(r"(\.(x|X|\*))+$", "", rest)
        parse_version(base)
        if op in ("", "=", "=="):
            return f"=={base}.*"
        if op == "!=":
            return f"!={base}.*"
        raise ValueError(f"wildcard not allowed with {op!r}: {term!r}")

    if op == "^":
        return _caret(rest)
    if op == "~":
        return _tilde(rest)
    if op in ("", "="):
        return f"=={rest}"
    return f"{op}{rest}"


def to_specifier(constraint: str | None) -> SpecifierSet:
    """Convert a constraint string into a SpecifierSet.

    Raises:
        ValueError: If the constraint cannot be parsed
    """
    text = (constraint or "").strip()
    if text in _WILDCARDS:
        return SpecifierSet()

    # Operators may be separated from versions by whitespace: ">= 1.0"
    text = re.sub(r"(~=|==|!=|<=|>=|<|>|=|\^|~)\s+", r"\1", text)
    terms = [t for t in re.split(r"[,\s]+", text) if t]

    try:
        return SpecifierSet(",".join(_translate_term(t) for t in terms))
    except (InvalidSpecifier, ValueError) as e:
        raise ValueError(f"invalid version constraint: {constraint!r}") from e


def satisfies(version: str, constraint: str | None) -> bool:
    """Check whether a plugin version meets a dependency constraint.

    Pre-release versions are allowed to match.
    """
    spec = to_specifier(constraint)
    try:
        parsed = Version(version)
    except InvalidVersion:
        return False
    return spec.contains(parsed, prereleases=True)
