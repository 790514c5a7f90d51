"""Document ingestion front end: chunking of tabular and free-text documents."""
