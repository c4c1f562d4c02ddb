"""Document ingestion LangGraph workflow."""

from app.graphs.document_ingestion.graph import build_document_ingestion_graph
from app.graphs.document_ingestion.nodes import DocumentIngestionNodes, backfill_abnormal_flags

__all__ = ["build_document_ingestion_graph", "DocumentIngestionNodes", "backfill_abnormal_flags"]
