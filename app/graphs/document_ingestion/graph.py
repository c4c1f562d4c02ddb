"""LangGraph workflow definition for document ingestion."""

from langgraph.graph import StateGraph, START, END

from app.graphs.document_ingestion.state import DocumentIngestionState
from app.graphs.document_ingestion.nodes import DocumentIngestionNodes, route_after_extract


def build_document_ingestion_graph(nodes: DocumentIngestionNodes):
    """Build and compile the ingestion workflow around ``nodes``."""

    graph = StateGraph(DocumentIngestionState)

    graph.add_node("receive_upload", nodes.receive_upload)
    graph.add_node("read_document", nodes.read_document)
    graph.add_node("extract_with_ai", nodes.extract_with_ai)
    graph.add_node("flag_abnormal_values", nodes.flag_abnormal_values)
    graph.add_node("build_record", nodes.build_record)
    graph.add_node("commit_record", nodes.commit_record)

    # Start -> Receive Upload -> Read Document -> AI Extraction
    graph.add_edge(START, "receive_upload")
    graph.add_edge("receive_upload", "read_document")
    graph.add_edge("read_document", "extract_with_ai")

    # AI Extraction -> (Abnormality Back-fill | Build Record)
    graph.add_conditional_edges(
        "extract_with_ai",
        route_after_extract,
        {
            "flag_abnormal_values": "flag_abnormal_values",
            "build_record": "build_record",
        }
    )
    graph.add_edge("flag_abnormal_values", "build_record")

    # Build Record -> Commit -> End. Nothing is written before this edge.
    graph.add_edge("build_record", "commit_record")
    graph.add_edge("commit_record", END)

    return graph.compile()
