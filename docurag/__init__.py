"""DocuRAG: upload Markdown into a namespaced RAG knowledge base and ask questions about it."""

__version__ = "0.1.0"
