"""Reconciliation of the docs folder with the documents table.

Each run is a full, stateless pass:
- Scan the source directory for eligible files
- Upsert one row per file (insert if the key is new, update otherwise)
- Prune managed rows whose key no longer exists on disk

Only rows in the managed category with a matching extension are ever deleted.
Any error aborts the run; nothing is skipped, so a partial source listing can
never be mistaken for deleted files.
"""

import concurrent.futures
import logging
from datetime import datetime, timezone
from typing import Callable, List, Sequence

from docsync.models import DocumentFields, RunPhase, RunReport
from docsync.services import DocumentGateway, RunReporter
from docsync.sync.metadata import (
    DEFAULT_CATEGORY,
    DEFAULT_CATEGORY_RULES,
    DEFAULT_EXTENSION,
    CategoryRule,
    derive_metadata,
)
from docsync.sync.source_files import has_extension, list_source_files, read_source_file

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Reconciler:
    """Converges the managed partition of the documents table to a directory."""

    def __init__(
        self,
        gateway: DocumentGateway,
        docs_dir: str,
        extension: str = DEFAULT_EXTENSION,
        managed_category: str = DEFAULT_CATEGORY,
        rules: Sequence[CategoryRule] = DEFAULT_CATEGORY_RULES,
        read_workers: int = 1,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize the reconciler.

        Args:
            gateway: Destination gateway over an open database handle.
            docs_dir: Source directory to mirror.
            extension: Managed file suffix, e.g. ".md".
            managed_category: Category label of the partition this run owns.
            rules: Ordered category rules; unmatched files get managed_category.
            read_workers: Threads used to read files; 1 reads sequentially.
            clock: Source of timestamps for created_at / updated_at.
        """
        self._gateway = gateway
        self._docs_dir = docs_dir
        self._extension = extension
        self._managed_category = managed_category
        self._rules = tuple(rules)
        self._read_workers = max(1, read_workers)
        self._clock = clock
        # Categories this reconciler writes; lookups never touch other rows.
        self._written_categories = [managed_category] + [
            rule.label for rule in self._rules if rule.label != managed_category
        ]

    def run(self) -> RunReport:
        """
        Execute one full reconciliation pass.

        Returns:
            Success RunReport with files seen, upserts and deletes.

        Raises:
            EnumerationError: If the source directory cannot be listed.
            ReadError: If a listed file cannot be read.
            StoreError: If any database operation fails.
        """
        reporter = RunReporter()
        logger.info(f"Starting docs sync: {self._docs_dir}")

        names = list_source_files(self._docs_dir, self._extension)
        source_keys = set(names)
        reporter.record_files_seen(len(source_keys))

        reporter.enter(RunPhase.UPSERTING)
        for fields in self._load_sources(names):
            self._upsert(fields)
            reporter.record_upsert()

        # Pruning starts only after every upsert has been attempted.
        reporter.enter(RunPhase.PRUNING)
        for row in self._gateway.list_by_partition(self._managed_category):
            if not row.key or row.key in source_keys:
                continue
            if not has_extension(row.key, self._extension):
                logger.debug(f"Keeping foreign-named row {row.key} (id {row.id})")
                continue
            if self._gateway.delete(row.id):
                logger.debug(f"Deleted document {row.key} (id {row.id})")
                reporter.record_delete()
            else:
                logger.warning(f"Document {row.key} (id {row.id}) was already gone")

        report = reporter.success()
        logger.info(
            f"Docs sync complete: {report.files_seen} files, "
            f"{report.upserts} upserts, {report.deletes} deletes"
        )
        return report

    def _load_source(self, name: str) -> DocumentFields:
        """Read one file and derive its row fields."""
        content = read_source_file(self._docs_dir, name)
        metadata = derive_metadata(
            content,
            name,
            rules=self._rules,
            default_category=self._managed_category,
            extension=self._extension,
        )
        logger.debug(f"Read {name}: {metadata.size} bytes, category {metadata.category}")
        return DocumentFields(
            key=name,
            title=metadata.title,
            content=content,
            category=metadata.category,
            size=metadata.size,
        )

    def _load_sources(self, names: List[str]) -> List[DocumentFields]:
        """Read every file; the first failure aborts the whole batch."""
        if self._read_workers == 1 or len(names) < 2:
            return [self._load_source(name) for name in names]

        with concurrent.futures.ThreadPoolExecutor(max_workers=self._read_workers) as executor:
            return list(executor.map(self._load_source, names))

    def _upsert(self, fields: DocumentFields) -> None:
        existing = self._gateway.find_by_key(fields.key, categories=self._written_categories)
        now = self._clock()
        if existing is None:
            self._gateway.insert(fields, now)
        else:
            self._gateway.update(existing.id, fields, now)
