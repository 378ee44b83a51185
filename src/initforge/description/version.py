"""Platform version parsing and version ranges.

Versions follow the ``major.minor.patch`` scheme with an optional qualifier,
either dot-separated (``2.7.0.RELEASE``, ``2.1.0.M1``) or dash-separated
(``3.2.0-SNAPSHOT``, ``3.2.0-RC1``).  Ranges use the usual interval notation::

    "3.0.0"             -> 3.0.0 <= v
    "[3.0.0,3.2.0)"     -> 3.0.0 <= v < 3.2.0
    "(3.0.0,3.2.0]"     -> 3.0.0 <  v <= 3.2.0
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Optional

_VERSION_PATTERN = re.compile(
    r"^(?P<major>\d+)\.(?P<minor>\d+)(?:\.(?P<patch>\d+))?"
    r"(?:[.-](?P<qualifier>[A-Za-z][A-Za-z-]*?)(?P<qualifier_version>\d+)?)?$"
)

# Known qualifiers, lowest first.  A release (no qualifier) ranks highest.
_QUALIFIER_RANKS: dict[str, int] = {
    "M": 1,
    "RC": 2,
    "BUILD-SNAPSHOT": 3,
    "SNAPSHOT": 3,
    "RELEASE": 4,
    "GA": 4,
}
_RELEASE_RANK = 4
_UNKNOWN_QUALIFIER_RANK = 0


class InvalidVersionError(ValueError):
    """Raised when a version or range string cannot be parsed."""


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A parsed platform version."""

    major: int
    minor: int
    patch: int = 0
    qualifier: Optional[str] = None
    qualifier_version: Optional[int] = None

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse *text* into a ``Version``.

        Raises:
            InvalidVersionError: If *text* is not a recognised version.
        """
        match = _VERSION_PATTERN.match(text.strip()) if text else None
        if match is None:
            raise InvalidVersionError(f"Invalid version: {text!r}")
        qualifier = match.group("qualifier")
        qualifier_version = match.group("qualifier_version")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch") or 0),
            qualifier=qualifier.upper() if qualifier else None,
            qualifier_version=int(qualifier_version) if qualifier_version else None,
        )

    @classmethod
    def safe_parse(cls, text: str | None) -> Optional["Version"]:
        """Like :meth:`parse` but return ``None`` instead of raising."""
        if not text:
            return None
        try:
            return cls.parse(text)
        except InvalidVersionError:
            return None

    @property
    def is_release(self) -> bool:
        return self._qualifier_rank() == _RELEASE_RANK

    def _qualifier_rank(self) -> int:
        if self.qualifier is None:
            return _RELEASE_RANK
        return _QUALIFIER_RANKS.get(self.qualifier, _UNKNOWN_QUALIFIER_RANK)

    def _sort_key(self) -> tuple:
        return (
            self.major,
            self.minor,
            self.patch,
            self._qualifier_rank(),
            self.qualifier_version or 0,
            self.qualifier if self._qualifier_rank() == _UNKNOWN_QUALIFIER_RANK else "",
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.qualifier:
            text += f"-{self.qualifier}"
            if self.qualifier_version is not None:
                text += str(self.qualifier_version)
        return text


@dataclass(frozen=True)
class VersionRange:
    """An interval of versions; ``upper`` may be open-ended."""

    lower: Version
    lower_inclusive: bool = True
    upper: Optional[Version] = None
    upper_inclusive: bool = False

    @classmethod
    def parse(cls, text: str) -> "VersionRange":
        """Parse a range expression.

        Raises:
            InvalidVersionError: If the expression is malformed.
        """
        raw = (text or "").strip()
        if not raw:
            raise InvalidVersionError("Empty version range")
        if raw[0] not in "[(":
            return cls(lower=Version.parse(raw))
        if raw[-1] not in ")]" or "," not in raw:
            raise InvalidVersionError(f"Invalid version range: {text!r}")
        low_text, high_text = (part.strip() for part in raw[1:-1].split(",", 1))
        lower = Version.parse(low_text)
        upper = Version.parse(high_text)
        if upper < lower:
            raise InvalidVersionError(f"Upper bound below lower bound in {text!r}")
        return cls(
            lower=lower,
            lower_inclusive=raw[0] == "[",
            upper=upper,
            upper_inclusive=raw[-1] == "]",
        )

    @classmethod
    def between(cls, minimum: str | None, maximum: str | None) -> "VersionRange":
        """Build ``[minimum, maximum)``; a missing minimum means ``0.0.0``."""
        lower = Version.parse(minimum) if minimum else Version(0, 0, 0)
        upper = Version.parse(maximum) if maximum else None
        return cls(lower=lower, upper=upper)

    def match(self, version: Version) -> bool:
        if self.lower_inclusive:
            if version < self.lower:
                return False
        elif version <= self.lower:
            return False
        if self.upper is None:
            return True
        if self.upper_inclusive:
            return version <= self.upper
        return version < self.upper

    def __contains__(self, version: object) -> bool:
        if isinstance(version, str):
            parsed = Version.safe_parse(version)
            return parsed is not None and self.match(parsed)
        if isinstance(version, Version):
            return self.match(version)
        return False

    def __str__(self) -> str:
        if self.upper is None and self.lower_inclusive:
            return f">={self.lower}"
        left = "[" if self.lower_inclusive else "("
        right = "]" if self.upper_inclusive else ")"
        return f"{left}{self.lower},{self.upper or ''}{right}"
