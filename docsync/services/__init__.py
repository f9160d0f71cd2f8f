"""Service modules."""

from docsync.services.document_gateway import DocumentGateway
from docsync.services.run_reporter import RunReporter, emit_report

__all__ = ["DocumentGateway", "RunReporter", "emit_report"]
