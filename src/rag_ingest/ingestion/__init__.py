"""
Ingestion — decode uploaded documents, chunk them and hand LangChain
``Document`` objects to an embedding / indexing step.
"""

from rag_ingest.ingestion.pipeline import ingest_directory, ingest_document, ingest_file

__all__ = ["ingest_directory", "ingest_document", "ingest_file"]
