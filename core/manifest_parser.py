"""
Main-section reader for manifest descriptors.

Only the main section is read: it ends at the first blank line, and any
per-entry sections after it are ignored.
"""
from core.exceptions import ManifestSyntaxError

HEADER_SEPARATOR = ":"
CONTINUATION = " "
BOM = "\ufeff"


def parse_manifest_text(text: str, source: str = "<manifest>") -> dict[str, str]:
    """
    Parse manifest text into an ordered header map.

    A line starting with a single space continues the previous value.
    Header names are case-sensitive and must be unique.

    Args:
        text: Decoded manifest content
        source: Description of where the text came from, used in errors

    Returns:
        Dict of header name to trimmed value, in file order
    """
    headers: dict[str, str] = {}
    current_name = None
    current_value: list[str] = []

    def flush():
        if current_name is not None:
            headers[current_name] = "".join(current_value).strip()

    if text.startswith(BOM):
        text = text[1:]

    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    for line_number, line in enumerate(lines, 1):
        if not line:
            break

        if line.startswith(CONTINUATION):
            if current_name is None:
                raise ManifestSyntaxError(source, "continuation line without a header", line_number)
            current_value.append(line[1:])
            continue

        name, separator, value = line.partition(HEADER_SEPARATOR)
        if not separator:
            raise ManifestSyntaxError(source, f"missing '{HEADER_SEPARATOR}' in '{line}'", line_number)
        if not name or any(c.isspace() for c in name):
            raise ManifestSyntaxError(source, f"invalid header name '{name}'", line_number)

        flush()
        if name in headers:
            raise ManifestSyntaxError(source, f"duplicate header '{name}'", line_number)
        current_name = name
        current_value = [value]

    flush()
    return headers


def parse_manifest_bytes(data: bytes, source: str = "<manifest>") -> dict[str, str]:
    """Decode UTF-8 manifest bytes and parse the main section."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ManifestSyntaxError(source, f"not valid UTF-8 ({e.reason})")
    return parse_manifest_text(text, source)
