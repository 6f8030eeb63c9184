"""Output formatters for NACP reports."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path

from nacptool.reporting.report import NacpReport


def to_json(report: NacpReport, indent: int = 2) -> str:
    """Format report as JSON string."""
    return json.dumps(report.to_dict(), indent=indent, default=str, ensure_ascii=False)


def _md_cell(text: str) -> str:
    return text.replace("|", "\\|")


def to_markdown(report: NacpReport) -> str:
    """Format report as Markdown."""
    lines = [
        "# NACP Report",
        "",
        "| Field | Value |",
        "|-------|-------|",
        f"| Source | `{report.source_file}` |",
        f"| Title format | {report.title_format} |",
        f"| Display version | {_md_cell(report.display_version)} |",
        f"| Presence group ID | `{report.presence_group_id}` |",
        f"| Add-on content base ID | `{report.add_on_content_base_id}` |",
        f"| Save data owner ID | `{report.save_data_owner_id}` |",
    ]
    if report.application_error_code_category:
        lines.append(
            f"| Error code category | {_md_cell(report.application_error_code_category)} |"
        )
    if report.isbn:
        lines.append(f"| ISBN | {_md_cell(report.isbn)} |")

    if report.supported_languages:
        lines.extend([
            "",
            "## Supported languages",
            "",
            ", ".join(report.supported_languages),
        ])

    lines.extend([
        "",
        "## Titles",
        "",
        "| Language | Name | Publisher |",
        "|----------|------|-----------|",
    ])
    for row in report.title_rows():
        lang = row["language"] + (" *" if row["extended"] else "")
        lines.append(f"| {lang} | {_md_cell(row['name'])} | {_md_cell(row['publisher'])} |")

    if report.extended_title_count:
        lines.extend(["", "\\* extended language (compressed title block only)"])

    if report.decompression_error:
        lines.extend([
            "",
            "## Errors",
            "",
            f"- Title block decompression failed: {report.decompression_error}",
        ])

    return "\n".join(lines) + "\n"


def to_csv(report: NacpReport) -> str:
    """Format report titles as CSV, one row per language."""
    output = io.StringIO()
    fieldnames = ["language", "language_id", "extended", "name", "publisher"]
    writer = csv.DictWriter(output, fieldnames=fieldnames)
    writer.writeheader()
    for row in report.title_rows():
        writer.writerow(row)
    return output.getvalue()


def save_report(report: NacpReport, path: str | Path) -> None:
    """Save report to file, auto-detecting format from extension."""
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        content = to_json(report)
    elif suffix in (".md", ".markdown"):
        content = to_markdown(report)
    elif suffix == ".csv":
        content = to_csv(report)
    else:
        content = to_json(report)

    path.write_text(content, encoding="utf-8")
