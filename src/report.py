"""Console report rendering for synchronization results."""
from typing import Dict, List, Optional

from src.locale_sync import AuditResult, LocaleReport


class Painter:
    """Wraps text in ANSI color codes from a palette, or leaves it plain."""

    def __init__(self, palette: Dict[str, str], enabled: bool = True):
        self.palette = palette
        self.enabled = enabled

    def __call__(self, color: str, text: str) -> str:
        if not self.enabled:
            return text
        return f"{self.palette.get(color, '')}{text}{self.palette.get('reset', '')}"


def _section(paint: Painter, title: str, keys: List[str], color: str) -> List[str]:
    lines = ['', paint(color, title)]
    lines.extend(f"  - {key}" for key in keys)
    return lines


def render_single_locale_report(
        report: LocaleReport,
        reference_file_name: str,
        paint: Painter,
        fix: bool = False,
        dry_run: bool = False
) -> str:
    """Render the report for a single-locale run."""
    flags = ' (with --fix)' if fix else ''
    lines = [
        paint('cyan', f"=== Missing keys for {report.locale_file}{flags} ==="),
        f"Reference: {reference_file_name} ({report.reference_key_count} keys)",
        f"Target: {report.locale_file} ({report.target_key_count} keys)",
    ]

    if not report.missing_keys:
        lines.extend(['', paint('green', 'No missing keys!')])
    elif report.added_keys:
        verb = 'Would add' if dry_run else 'Added'
        lines.extend(_section(
            paint, f"{verb} {len(report.added_keys)} missing key(s) with EN placeholder:",
            report.added_keys, 'green'
        ))
    still_missing = report.still_missing_keys
    if still_missing:
        lines.extend(_section(paint, f"Missing {len(still_missing)} key(s):", still_missing, 'yellow'))

    if report.extraneous_keys:
        lines.extend(_section(
            paint,
            f"Extraneous {len(report.extraneous_keys)} key(s) (kept; run without a locale to remove them):",
            report.extraneous_keys, 'magenta'
        ))

    lines.append('')
    return '\n'.join(lines)


def render_locale_section(
        report: LocaleReport,
        reference_file_name: str,
        paint: Painter,
        dry_run: bool = False
) -> Optional[str]:
    """Render one locale's block of an all-locales report, or None if it had no findings."""
    if not report.has_findings:
        return None

    lines = ['', paint('cyan', f"--- {report.locale_file} ---")]
    if report.added_keys:
        title = 'WOULD ADD MISSING KEYS' if dry_run else 'ADDED MISSING KEYS'
        lines.extend(_section(paint, f"{title} (with EN placeholder)", report.added_keys, 'green'))
    if report.still_missing_keys:
        lines.extend(_section(
            paint, f"MISSING KEYS (in {reference_file_name} but not in this locale)",
            report.still_missing_keys, 'yellow'
        ))

    if report.removed_keys:
        title = 'WOULD REMOVE EXTRANEOUS KEYS' if dry_run else 'REMOVED EXTRANEOUS KEYS'
        lines.extend(_section(
            paint, f"{title} (were in this locale but not in {reference_file_name})",
            report.removed_keys, 'magenta'
        ))
    return '\n'.join(lines)


def render_audit_report(
        result: AuditResult,
        reference_file_name: str,
        paint: Painter,
        fix: bool = False,
        dry_run: bool = False
) -> str:
    """Render the report for an all-locales run, ending with the summary totals."""
    flags = ' (with --fix)' if fix else ''
    if dry_run:
        flags += ' (dry run)'
    lines = [
        paint('cyan', f"=== Translation Audit{flags} ==="),
        f"Reference: {reference_file_name} ({result.reference_key_count} keys)",
        f"Checking {result.locale_count} locale(s)...",
    ]

    for report in result.reports:
        section = render_locale_section(report, reference_file_name, paint, dry_run=dry_run)
        if section:
            lines.append(section)

    lines.extend(['', paint('cyan', '=== Summary ===')])
    added_label = 'Would add' if dry_run else 'Added'
    removed_label = 'Would remove' if dry_run else 'Removed'
    if result.total_added > 0:
        lines.append(paint('green', f"  {added_label} missing keys (EN placeholder): {result.total_added}"))
    if result.total_missing > 0:
        lines.append(paint('yellow', f"  Missing keys across all locales: {result.total_missing}"))
    if result.total_removed > 0:
        lines.append(paint('magenta', f"  {removed_label} extraneous keys: {result.total_removed}"))
    if result.in_sync:
        lines.append(paint('green', '  All locales are in sync!'))
    lines.append('')
    return '\n'.join(lines)
