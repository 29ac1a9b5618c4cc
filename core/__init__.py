# Bundlediff v1.0.0
"""
Core package for Bundlediff.
Contains the header clause parser, the comparison engine and main-section parsing.
"""
from core.comparison import (
    compare_manifests,
    compare_header,
    DiffKind,
    HeaderDiff,
    DiffReport
)
from core.exceptions import (
    ManifestError,
    MalformedHeaderError,
    ManifestSyntaxError,
    DescriptorNotFoundError,
    DescriptorLoadError
)
from core.header_parser import (
    parse_header,
    format_token,
    Clause,
    ParsedHeaderValue
)
from core.manifest_parser import (
    parse_manifest_text,
    parse_manifest_bytes
)

__all__ = [
    "compare_manifests",
    "compare_header",
    "DiffKind",
    "HeaderDiff",
    "DiffReport",
    "ManifestError",
    "MalformedHeaderError",
    "ManifestSyntaxError",
    "DescriptorNotFoundError",
    "DescriptorLoadError",
    "parse_header",
    "format_token",
    "Clause",
    "ParsedHeaderValue",
    "parse_manifest_text",
    "parse_manifest_bytes"
]
