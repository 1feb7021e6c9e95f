"""
Per-locale synchronization against the reference document.

Two entry points share the same engine but follow different policies:

* ``run_single_locale`` inspects one named locale. It never removes keys and
  only writes when ``fix`` is set and keys are missing.
* ``run_all_locales`` walks every locale document. Extraneous keys are always
  removed; missing keys are filled with placeholders only when ``fix`` is set.

A document is written only if it was modified.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from tqdm import tqdm

from src.app_config import SyncConfig
from src.document_store import (
    MissingLocaleDocumentError,
    MissingReferenceDocumentError,
    list_locale_files,
    load_document,
    resolve_locale_file,
    write_document
)
from src.logging_config import LOGGER_NAME
from src.tree_sync import (
    DEFAULT_PLACEHOLDER_TEMPLATE,
    DiffResult,
    diff_keys,
    flatten,
    insert_missing_keys,
    remove_extraneous_keys
)

logger = logging.getLogger(LOGGER_NAME)


@dataclass
class LocaleReport:
    """Outcome of synchronizing one locale document."""
    locale_file: str
    reference_key_count: int
    target_key_count: int
    missing_keys: List[str] = field(default_factory=list)
    extraneous_keys: List[str] = field(default_factory=list)
    removed_keys: List[str] = field(default_factory=list)
    added_keys: List[str] = field(default_factory=list)
    modified: bool = False
    persisted: bool = False

    @property
    def has_findings(self) -> bool:
        return bool(self.missing_keys or self.extraneous_keys)

    @property
    def still_missing_keys(self) -> List[str]:
        added = set(self.added_keys)
        return [key for key in self.missing_keys if key not in added]


@dataclass
class AuditResult:
    """Aggregated outcome of an all-locales run."""
    reference_key_count: int
    locale_count: int = 0
    reports: List[LocaleReport] = field(default_factory=list)
    total_added: int = 0
    total_missing: int = 0
    total_removed: int = 0

    @property
    def in_sync(self) -> bool:
        return not (self.total_added or self.total_missing or self.total_removed)

    def record(self, report: LocaleReport) -> None:
        self.reports.append(report)
        self.total_added += len(report.added_keys)
        self.total_missing += len(report.still_missing_keys)
        self.total_removed += len(report.removed_keys)


@dataclass
class SyncOutcome:
    """Result of applying the transforms to one document."""
    document: Dict[str, Any]
    diff: DiffResult
    removed_keys: List[str] = field(default_factory=list)
    added_keys: List[str] = field(default_factory=list)

    @property
    def modified(self) -> bool:
        return bool(self.removed_keys or self.added_keys)


def synchronize_document(
        document: Dict[str, Any],
        reference_flat: Dict[str, Any],
        fix: bool,
        prune: bool,
        placeholder_template: str = DEFAULT_PLACEHOLDER_TEMPLATE
) -> SyncOutcome:
    """
    Diff a locale document against the reference and apply the requested transforms.

    Args:
        document: The parsed locale document.
        reference_flat: The flattened reference document.
        fix: Insert placeholders for missing keys.
        prune: Remove extraneous keys.
        placeholder_template: Format string for placeholder values.

    Returns:
        SyncOutcome: The (possibly new) document, the diff computed before any
        transform, and the keys actually removed and inserted.
    """
    diff = diff_keys(reference_flat, flatten(document))
    outcome = SyncOutcome(document=document, diff=diff)

    if prune and diff.extraneous_keys:
        outcome.document = remove_extraneous_keys(outcome.document, diff.extraneous_keys)
        outcome.removed_keys = diff.extraneous_keys

    if fix and diff.missing_keys:
        outcome.document, outcome.added_keys = insert_missing_keys(
            outcome.document, diff.missing_keys, reference_flat, placeholder_template
        )

    return outcome


def load_reference(config: SyncConfig) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Load the reference document once for the whole run.

    Returns:
        The reference tree and its flattened form.

    Raises:
        MissingReferenceDocumentError: If the reference file does not exist.
    """
    reference_path = config.reference_file_path
    if not os.path.isfile(reference_path):
        raise MissingReferenceDocumentError(reference_path)

    reference_tree = load_document(reference_path)
    reference_flat = flatten(reference_tree)
    logger.info("Loaded reference '%s' with %d keys.", reference_path, len(reference_flat))
    return reference_tree, reference_flat


def _build_report(locale_file: str, reference_flat: Dict[str, Any], outcome: SyncOutcome) -> LocaleReport:
    diff = outcome.diff
    return LocaleReport(
        locale_file=locale_file,
        reference_key_count=len(reference_flat),
        # shared keys plus extraneous keys
        target_key_count=len(diff.extraneous_keys) + len(reference_flat) - len(diff.missing_keys),
        missing_keys=diff.missing_keys,
        extraneous_keys=diff.extraneous_keys,
        removed_keys=outcome.removed_keys,
        added_keys=outcome.added_keys,
        modified=outcome.modified
    )


def _persist(file_path: str, document: Dict[str, Any], config: SyncConfig, dry_run: bool) -> bool:
    if dry_run:
        logger.info("[Dry Run] Would write updated locale file '%s'.", file_path)
        return False
    write_document(file_path, document, indent=config.indent, ensure_ascii=config.ensure_ascii)
    logger.info("Wrote updated locale file '%s'.", file_path)
    return True


def process_locale(
        locale_file: str,
        reference_flat: Dict[str, Any],
        config: SyncConfig,
        fix: bool = False,
        dry_run: bool = False
) -> LocaleReport:
    """
    Synchronize one locale document in all-locales mode.

    Extraneous keys are always removed; missing keys are added only with ``fix``.
    """
    file_path = os.path.join(config.locales_directory, locale_file)
    document = load_document(file_path)

    outcome = synchronize_document(
        document, reference_flat, fix=fix, prune=True, placeholder_template=config.placeholder_template
    )
    logger.debug(
        "%s: %d missing, %d extraneous key(s).",
        locale_file, len(outcome.diff.missing_keys), len(outcome.diff.extraneous_keys)
    )

    report = _build_report(locale_file, reference_flat, outcome)
    if outcome.modified:
        report.persisted = _persist(file_path, outcome.document, config, dry_run)

    return report


def run_single_locale(
        locale: str,
        reference_flat: Dict[str, Any],
        config: SyncConfig,
        fix: bool = False,
        dry_run: bool = False
) -> LocaleReport:
    """
    Check one named locale against the reference.

    Extraneous keys are reported but never removed in this mode.

    Raises:
        MissingLocaleDocumentError: If the named locale file does not exist.
    """
    locale_file = resolve_locale_file(locale, config.document_suffix)
    file_path = os.path.join(config.locales_directory, locale_file)

    if not os.path.isfile(file_path):
        raise MissingLocaleDocumentError(file_path)

    document = load_document(file_path)
    outcome = synchronize_document(
        document, reference_flat, fix=fix, prune=False, placeholder_template=config.placeholder_template
    )

    report = _build_report(locale_file, reference_flat, outcome)
    if outcome.modified:
        report.persisted = _persist(file_path, outcome.document, config, dry_run)

    if report.still_missing_keys:
        logger.info("%s is still missing %d key(s).", locale_file, len(report.still_missing_keys))

    return report


def run_all_locales(
        reference_flat: Dict[str, Any],
        config: SyncConfig,
        fix: bool = False,
        dry_run: bool = False
) -> AuditResult:
    """
    Synchronize every locale document in the locales directory.

    Locales are processed in file-name order. An error in one locale aborts
    the run; locales already written stay written.
    """
    locale_files = list_locale_files(config.locales_directory, config.reference_file_name, config.document_suffix)
    logger.info("Checking %d locale(s) in '%s'.", len(locale_files), config.locales_directory)

    result = AuditResult(reference_key_count=len(reference_flat), locale_count=len(locale_files))
    for locale_file in tqdm(
            locale_files, desc="Synchronizing locales", unit="locale", disable=None if config.show_progress else True
    ):
        result.record(process_locale(locale_file, reference_flat, config, fix=fix, dry_run=dry_run))

    logger.info(
        "Done: %d added, %d missing, %d removed across %d locale(s).",
        result.total_added, result.total_missing, result.total_removed, result.locale_count
    )
    return result
