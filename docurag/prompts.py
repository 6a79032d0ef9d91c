"""Prompt templates for answer generation."""

RAG_ANSWER_PROMPT = """You are a helpful assistant answering questions about documents the user uploaded.

Use the context below when it is relevant. If the context does not contain the answer,
answer from your own knowledge and say that the uploaded documents did not cover it.

Context:
{context}

Question:
{question}

Answer:"""

NO_CONTEXT = "(no matching passages were found in the knowledge base)"
