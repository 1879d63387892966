"""
OS label cleaning and classification.

Stored driver entries keep the cleaned label (``clean_os_label``); family/version
badges (``classify``) are derived at query time only.
"""
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

_PARENTHESIZED = re.compile(r"\(.*\)")
_VERSION = re.compile(r"\d+(\.\d+)?")
_NATURAL_CHUNK = re.compile(r"(\d+)")

WINDOWS_YEARS = ("2025", "2022", "2019")

# (family, substrings, badge); first family with a matching substring wins.
_FAMILIES = (
    ("Windows", ("Windows",), "badge-blue"),
    ("RHEL", ("Red Hat", "RHEL"), "badge-red"),
    ("Ubuntu", ("Ubuntu",), "badge-green"),
    ("ESXi", ("ESXi",), "badge-green"),
    ("Oracle", ("Oracle",), "badge-red"),
)


@dataclass(frozen=True)
class OSClassification:
    family: str
    version_tag: str = ""
    badge: str = ""

    @property
    def display(self) -> str:
        return f"{self.family} {self.version_tag}" if self.version_tag else self.family


def clean_os_label(raw: Optional[str]) -> str:
    """Strip parenthesized qualifiers: 'Windows Server 2022 (LTSC)' -> 'Windows Server 2022'."""
    if raw is None:
        return ""
    return _PARENTHESIZED.sub("", str(raw)).strip()


def classify(raw: Optional[str]) -> OSClassification:
    if not raw:
        return OSClassification(family="Unknown")

    for family, needles, badge in _FAMILIES:
        if not any(needle in raw for needle in needles):
            continue
        if family == "Windows":
            tag = next((year for year in WINDOWS_YEARS if year in raw), "Server")
        else:
            match = _VERSION.search(raw)
            tag = match.group(0) if match else ""
        return OSClassification(family=family, version_tag=tag, badge=badge)

    return OSClassification(family=raw)


def natural_key(label: str) -> tuple:
    # Digit runs compare as numbers, the rest case-insensitively.
    parts = _NATURAL_CHUNK.split(label.casefold())
    return tuple((0, int(p), "") if _NATURAL_CHUNK.fullmatch(p) else (1, 0, p) for p in parts if p)


def sort_os_labels(labels: Iterable[str]) -> List[str]:
    """Deduplicated, naturally ordered OS labels ('RHEL 8' before 'RHEL 10')."""
    return sorted({label for label in labels if label}, key=lambda label: (natural_key(label), label))
