"""
Text rendering of comparison reports.

Produces the classic console layout: common headers whose values differ,
followed by headers missing on either side.
"""
from core.comparison import DiffReport, HeaderDiff

VALUE_INDENT = " " * 14


def _format_values(values: tuple[str, ...]) -> str:
    return ("\n" + VALUE_INDENT).join(values)


def _missing_section(entries: list[HeaderDiff], other_label: str) -> list[str]:
    if not entries:
        return []
    lines = [f"Entries missing in {other_label} jar"]
    lines.extend(f"  {entry.header}: {entry.raw_value}" for entry in entries)
    return lines


def render_report(report: DiffReport, local_label: str = "local", baseline_label: str = "baseline") -> str:
    """
    Render a report as deterministic text.

    Side A is shown as the local descriptor, side B as the baseline.
    """
    if not report.has_differences:
        return "No differences found"

    lines = []
    differences = report.value_differences
    if differences:
        lines.append("Common Headers with different values")
        for entry in differences:
            lines.append(f"  {entry.header}")
            lines.append(f"    Local   : {_format_values(entry.only_in_a)}")
            lines.append(f"    Baseline: {_format_values(entry.only_in_b)}")

    lines.extend(_missing_section(report.missing_in_b, baseline_label))
    lines.extend(_missing_section(report.missing_in_a, local_label))
    return "\n".join(lines)


def summarize(report: DiffReport, local_label: str = "local", baseline_label: str = "baseline") -> str:
    """One-line count summary of a report."""
    return (
        f"{len(report.value_differences)} header(s) differ, "
        f"{len(report.missing_in_b)} only in {local_label}, "
        f"{len(report.missing_in_a)} only in {baseline_label}"
    )
