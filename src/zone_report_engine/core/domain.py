"""Domain name helpers (Punycode conversion and input sanitizing).

Labels are converted with plain Punycode; no IDNA nameprep mapping is
applied, so "straße" and "strasse" stay distinct.
"""

from __future__ import annotations

from collections.abc import Callable

ACE_PREFIX = "xn--"


def sanitize_domain(domain: str) -> str:
    """Strip surrounding whitespace and one trailing dot (the root "." is kept)."""
    domain = domain.strip()
    if domain == ".":
        return domain
    return domain[:-1] if domain.endswith(".") else domain


def _convert(domain: str, convert_label: Callable[[str], str]) -> str:
    if domain in ("", "."):
        return domain
    labels = domain.split(".")
    out: list[str] = []
    for label in labels:
        if not label:
            out.append(label)
            continue
        try:
            out.append(convert_label(label))
        except UnicodeError as e:
            raise ValueError(f"Invalid domain label {label!r} in {domain!r}") from e
    return ".".join(out)


def _label_to_ascii(label: str) -> str:
    if label.isascii():
        return label
    return ACE_PREFIX + label.encode("punycode").decode("ascii")


def _label_to_unicode(label: str) -> str:
    if not label.isascii() or not label.lower().startswith(ACE_PREFIX):
        return label
    return label[len(ACE_PREFIX):].encode("ascii").decode("punycode")


def to_ascii(domain: str) -> str:
    """Return the Punycode (ASCII-compatible) form of a domain."""
    return _convert(domain, _label_to_ascii)


def to_unicode(domain: str) -> str:
    """Return the Unicode form of a Punycode domain; other labels pass through."""
    return _convert(domain, _label_to_unicode)
