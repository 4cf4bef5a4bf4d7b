"""Report export - markdown report, plain text and Word-compatible output"""

import html
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional, Sequence

from zenreview.models.issue import CATEGORY_LABELS, Disposition, Issue

EXPORT_FORMATS = ("md", "txt", "doc")

NO_ISSUES_LINE = "未发现明显问题或所有问题已处理。"


def export_report(
    current: str,
    issues: Sequence[Issue],
    disposition: Mapping[int, Disposition],
    summary: str,
    score: float,
    generated_at: Optional[datetime] = None,
) -> str:
    """Generate the markdown proofreading report.

    Lists unresolved issues in their original order, numbered from 1.
    """
    generated_at = generated_at or datetime.now()
    lines = []

    lines.append("# GrammarZen 校对报告")
    lines.append("")
    lines.append(f"**生成时间**: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append(f"**评分**: {score:g}/100")
    lines.append(f"**总结**: {summary}")
    lines.append("")
    lines.append("## 校对后文本")
    lines.append("")
    lines.append(current)
    lines.append("")
    lines.append("## 问题列表")
    lines.append("")

    active = [
        issue for i, issue in enumerate(issues)
        if disposition.get(i, Disposition.PENDING) == Disposition.PENDING
    ]

    if not active:
        lines.append(NO_ISSUES_LINE)
    else:
        for number, issue in enumerate(active, 1):
            label = CATEGORY_LABELS.get(issue.category, issue.category.value)
            lines.append(f"### {number}. {issue.original} -> {issue.suggestion}")
            lines.append(f"- **类型**: {label}")
            lines.append(f"- **原因**: {issue.reason}")
            lines.append("")

    return "\n".join(lines) + "\n"


def export_text(current: str) -> str:
    """Plain corrected text"""
    return current


def export_word(current: str) -> str:
    """HTML document that Word opens as a .doc, one paragraph per non-blank line"""
    header = (
        "<html xmlns:o='urn:schemas-microsoft-com:office:office' "
        "xmlns:w='urn:schemas-microsoft-com:office:word' "
        "xmlns='http://www.w3.org/TR/REC-html40'>"
        "<head><meta charset='utf-8'>"
        "<style>body { font-family: 'Microsoft YaHei', 'PingFang SC', sans-serif; } "
        "p { margin-bottom: 1em; line-height: 1.6; }</style>"
        "</head><body>"
    )
    body = "".join(
        f"<p>{html.escape(line)}</p>"
        for line in current.split("\n")
        if line.strip()
    )
    return header + body + "</body></html>"


def save_export(content: str, source_file: Path, fmt: str = "md", output_path: Optional[Path] = None) -> Path:
    """Write an export next to the source file unless a path is given"""
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unknown export format: {fmt}")
    if output_path is None:
        suffix = ".report.md" if fmt == "md" else f".corrected.{fmt}"
        output_path = source_file.with_suffix(suffix)

    output_path.write_text(content, encoding="utf-8")
    return output_path
