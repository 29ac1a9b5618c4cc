"""
Bundlediff Manifest Comparison Engine

Compares the main-section headers of two descriptors. Headers present on
both sides are parsed into clauses and compared as sets of canonical
clause keys, so clause order and parameter order never count as a change.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Mapping, Optional

from core.exceptions import MalformedHeaderError
from core.header_parser import parse_header

logger = logging.getLogger(__name__)

SIDE_A = "A"
SIDE_B = "B"


class DiffKind(str, Enum):
    UNCHANGED = "unchanged"
    VALUE_DIFFERS = "value_differs"
    ONLY_IN_A = "only_in_a"
    ONLY_IN_B = "only_in_b"


@dataclass(frozen=True)
class HeaderDiff:
    """Outcome for a single header."""
    header: str
    kind: DiffKind

    # For VALUE_DIFFERS: sorted canonical clause keys
    only_in_a: tuple[str, ...] = ()
    only_in_b: tuple[str, ...] = ()

    # For ONLY_IN_A / ONLY_IN_B: the untouched header value
    raw_value: Optional[str] = None

    @property
    def is_difference(self) -> bool:
        return self.kind != DiffKind.UNCHANGED


@dataclass(frozen=True)
class DiffReport:
    """
    Result of comparing two manifests.

    Entries are ordered by header name, so two reports built from the same
    inputs iterate identically.
    """
    entries: tuple[HeaderDiff, ...] = ()

    @property
    def has_differences(self) -> bool:
        return any(entry.is_difference for entry in self.entries)

    @property
    def headers(self) -> list[str]:
        return [entry.header for entry in self.entries]

    def get(self, header: str) -> Optional[HeaderDiff]:
        for entry in self.entries:
            if entry.header == header:
                return entry
        return None

    def of_kind(self, kind: DiffKind) -> list[HeaderDiff]:
        return [entry for entry in self.entries if entry.kind == kind]

    @property
    def unchanged(self) -> list[HeaderDiff]:
        return self.of_kind(DiffKind.UNCHANGED)

    @property
    def value_differences(self) -> list[HeaderDiff]:
        return self.of_kind(DiffKind.VALUE_DIFFERS)

    @property
    def missing_in_b(self) -> list[HeaderDiff]:
        """Headers only present in A."""
        return self.of_kind(DiffKind.ONLY_IN_A)

    @property
    def missing_in_a(self) -> list[HeaderDiff]:
        """Headers only present in B."""
        return self.of_kind(DiffKind.ONLY_IN_B)

    def __contains__(self, header: str) -> bool:
        return self.get(header) is not None

    def __iter__(self) -> Iterator[HeaderDiff]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def _header_keys(header: str, value: str, side: str) -> frozenset[str]:
    try:
        return parse_header(header, value).keys
    except MalformedHeaderError as e:
        raise e.with_side(side) from e


def compare_header(header: str, value_a: str, value_b: str) -> HeaderDiff:
    """
    Compare one header present on both sides.

    Raises:
        MalformedHeaderError: either value is unparsable; `side` names which
    """
    keys_a = _header_keys(header, value_a, SIDE_A)
    keys_b = _header_keys(header, value_b, SIDE_B)

    if keys_a == keys_b:
        return HeaderDiff(header=header, kind=DiffKind.UNCHANGED)

    return HeaderDiff(
        header=header,
        kind=DiffKind.VALUE_DIFFERS,
        only_in_a=tuple(sorted(keys_a - keys_b)),
        only_in_b=tuple(sorted(keys_b - keys_a)),
    )


def compare_manifests(
    manifest_a: Mapping[str, str],
    manifest_b: Mapping[str, str],
    ignored: Optional[Iterable[str]] = None
) -> DiffReport:
    """
    Main entry point for comparing two manifests.

    Args:
        manifest_a: Header name to raw value, first side (e.g. the local build)
        manifest_b: Header name to raw value, second side (e.g. the baseline)
        ignored: Header names excluded from the report entirely

    Returns:
        DiffReport with one entry per non-ignored header of either side

    Raises:
        MalformedHeaderError: a common header could not be parsed. The
            comparison is aborted; no partial report is produced.
    """
    ignored = frozenset(ignored or ())
    names_a = set(manifest_a) - ignored
    names_b = set(manifest_b) - ignored
    common = names_a & names_b

    entries = []
    for header in sorted(names_a | names_b):
        if header in common:
            entries.append(compare_header(header, manifest_a[header], manifest_b[header]))
        elif header in names_a:
            entries.append(HeaderDiff(header=header, kind=DiffKind.ONLY_IN_A, raw_value=manifest_a[header]))
        else:
            entries.append(HeaderDiff(header=header, kind=DiffKind.ONLY_IN_B, raw_value=manifest_b[header]))

    report = DiffReport(entries=tuple(entries))
    logger.debug(
        f"Compared {len(common)} common header(s): "
        f"{len(report.value_differences)} differ, "
        f"{len(report.missing_in_b)} only in A, {len(report.missing_in_a)} only in B"
    )
    return report
