"""Entry point: mirror the configured docs folder into the documents table."""

import logging
import sqlite3
import sys
from typing import Optional

from docsync.clients import SqliteClient
from docsync.config import AppConfig, ConfigurationError, get_config
from docsync.errors import StoreError, SyncError
from docsync.models import RunReport
from docsync.services import DocumentGateway, RunReporter, emit_report
from docsync.sync import DEFAULT_CATEGORY_RULES, Reconciler, rules_from_config

logger = logging.getLogger(__name__)


def sync_docs(config: AppConfig) -> RunReport:
    """
    Run one reconciliation with the given configuration.

    The database handle is opened here and closed on every exit path.

    Raises:
        SyncError: If enumeration, reading or any store operation fails.
    """
    sync_config = config.sync
    rules = (
        rules_from_config(sync_config.category_rules)
        if sync_config.category_rules is not None
        else DEFAULT_CATEGORY_RULES
    )

    try:
        sqlite_client = SqliteClient(config.database.path)
    except (sqlite3.Error, OSError) as e:
        raise StoreError(f"Cannot open database {config.database.path}: {e}") from e

    with sqlite_client:
        gateway = DocumentGateway(sqlite_client)
        gateway.ensure_schema()
        reconciler = Reconciler(
            gateway=gateway,
            docs_dir=sync_config.docs_dir,
            extension=sync_config.extension,
            managed_category=sync_config.managed_category,
            rules=rules,
            read_workers=sync_config.read_workers,
        )
        return reconciler.run()


def run(config: Optional[AppConfig] = None) -> RunReport:
    """Load configuration if needed and run, turning failures into a report."""
    try:
        if config is None:
            config = get_config()
        return sync_docs(config)
    except (SyncError, ConfigurationError) as e:
        logger.error(f"Docs sync failed: {e}")
        return RunReporter.failure(e)


def main() -> int:
    try:
        config = get_config()
    except ConfigurationError as e:
        logging.basicConfig(level=logging.INFO)
        return emit_report(RunReporter.failure(e))

    # Logs go to stderr; stdout carries only the JSON report
    logging.basicConfig(
        level=config.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return emit_report(run(config))


if __name__ == "__main__":
    sys.exit(main())
