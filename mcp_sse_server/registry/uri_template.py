"""
URI Template Matcher

Module: registry.uri_template
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - Compile "scheme://seg/{name}/..." patterns
  - Positional single-segment placeholders
  - Overlap detection between templates of the same scheme
  - Expansion of a template into a concrete URI

ARCHITECTURE:
A resource URI is split on the first "://" into a scheme and a path. The
path is a "/"-separated list of segments. A template segment is either a
literal (compared byte for byte) or a single placeholder "{name}" that binds
exactly one non-empty concrete segment. There is no cross-segment wildcard.

match() never raises: a non-matching URI simply yields None. Values are bound
raw and unvalidated; producers coerce and validate them.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

SCHEME_SEPARATOR = "://"

_PLACEHOLDER = re.compile(r"^\{([A-Za-z_][A-Za-z0-9_]*)\}$")


def split_uri(uri: str) -> Optional[Tuple[str, str]]:
    """
    Split a URI into (scheme, path)

    Args:
        uri: Concrete URI such as "greeting://Ada"

    Returns:
        (scheme, path) or None if the string carries no scheme
    """
    if not isinstance(uri, str):
        return None
    scheme, sep, path = uri.partition(SCHEME_SEPARATOR)
    if not sep or not scheme:
        return None
    return scheme, path


@dataclass(frozen=True)
class Segment:
    """One template segment: a literal or a named placeholder"""
    value: str
    is_placeholder: bool = False


class UriTemplate:
    """
    Compiled URI pattern with named single-segment placeholders

    Usage:
        template = UriTemplate.compile("doc://{type}/{filename}")
        template.match("doc://images/logo.png")
        # -> {"type": "images", "filename": "logo.png"}
    """

    def __init__(self, pattern: str, scheme: str, segments: List[Segment]):
        self.pattern = pattern
        self.scheme = scheme
        self.segments = tuple(segments)

    @classmethod
    def compile(cls, pattern: str) -> "UriTemplate":
        """
        Compile a pattern

        Args:
            pattern: URI pattern ("scheme://literal/{name}")

        Returns:
            UriTemplate: Compiled matcher

        Raises:
            ValueError: If the pattern is malformed
        """
        parts = split_uri(pattern)
        if parts is None:
            raise ValueError(f"Pattern has no scheme: {pattern!r}")
        scheme, path = parts

        segments: List[Segment] = []
        seen = set()
        for raw in path.split("/"):
            placeholder = _PLACEHOLDER.match(raw)
            if placeholder:
                name = placeholder.group(1)
                if name in seen:
                    raise ValueError(
                        f"Duplicate placeholder '{name}' in {pattern!r}"
                    )
                seen.add(name)
                segments.append(Segment(name, is_placeholder=True))
            elif "{" in raw or "}" in raw:
                raise ValueError(
                    f"Placeholder must span a whole segment: {raw!r} in {pattern!r}"
                )
            else:
                segments.append(Segment(raw))

        return cls(pattern, scheme, segments)

    @property
    def parameter_names(self) -> List[str]:
        """Placeholder names in positional order"""
        return [s.value for s in self.segments if s.is_placeholder]

    @property
    def is_exact(self) -> bool:
        """True when the pattern has no placeholder"""
        return not self.parameter_names

    def match(self, uri: str) -> Optional[Dict[str, str]]:
        """
        Match a concrete URI

        Args:
            uri: Concrete URI

        Returns:
            dict of placeholder name -> raw segment, or None on no match
        """
        parts = split_uri(uri)
        if parts is None:
            return None
        scheme, path = parts
        if scheme != self.scheme:
            return None

        concrete = path.split("/")
        if len(concrete) != len(self.segments):
            return None

        params: Dict[str, str] = {}
        for segment, value in zip(self.segments, concrete):
            if segment.is_placeholder:
                if value == "":
                    return None
                params[segment.value] = value
            elif segment.value != value:
                return None
        return params

    def overlaps(self, other: "UriTemplate") -> bool:
        """
        Check whether some concrete URI could match both templates

        Args:
            other: Template to compare with

        Returns:
            bool: True if the two templates are ambiguous
        """
        if self.scheme != other.scheme:
            return False
        if len(self.segments) != len(other.segments):
            return False
        for mine, theirs in zip(self.segments, other.segments):
            if mine.is_placeholder or theirs.is_placeholder:
                continue
            if mine.value != theirs.value:
                return False
        return True

    def expand(self, **params: str) -> str:
        """
        Build a concrete URI from placeholder values

        Raises:
            KeyError: If a placeholder value is missing
        """
        path = "/".join(
            str(params[s.value]) if s.is_placeholder else s.value
            for s in self.segments
        )
        return f"{self.scheme}{SCHEME_SEPARATOR}{path}"

    def __repr__(self) -> str:
        return f"UriTemplate({self.pattern!r})"


# ============================================================================
# Unit Tests
# ============================================================================

if __name__ == "__main__":
    import unittest

    class TestUriTemplate(unittest.TestCase):
        """Test suite for UriTemplate"""

        def test_single_placeholder(self):
            """Test binding one placeholder"""
            template = UriTemplate.compile("greeting://{name}")
            self.assertEqual(template.match("greeting://Ada"), {"name": "Ada"})

        def test_segment_count_mismatch(self):
            """Test different segment count never matches"""
            template = UriTemplate.compile("doc://{type}/{filename}")
            self.assertIsNone(template.match("doc://images"))
            self.assertIsNone(template.match("doc://a/b/c"))

        def test_other_scheme(self):
            """Test other scheme never matches"""
            template = UriTemplate.compile("log://{filename}")
            self.assertIsNone(template.match("text://app.log"))

        def test_invalid_pattern(self):
            """Test malformed patterns are rejected"""
            with self.assertRaises(ValueError):
                UriTemplate.compile("no-scheme/{x}")
            with self.assertRaises(ValueError):
                UriTemplate.compile("doc://pre{x}")

    unittest.main()
