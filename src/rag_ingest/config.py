"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Chunking defaults, populated from env vars or .env file."""

    # Tabular — row strategy
    csv_rows_per_chunk: int = Field(default=10, description="Rows per chunk for the row strategy")
    csv_overlap_rows: int = Field(
        default=2,
        description="Rows repeated from the end of one chunk at the start of the next",
    )
    csv_include_headers: bool = Field(
        default=True, description="Prefix row chunks with a 'Data columns:' line"
    )

    # Tabular — column / hybrid strategies
    csv_columns_per_chunk: int = Field(default=5, description="Columns per chunk for the column strategy")
    hybrid_rows_per_chunk: int = 10
    hybrid_columns_per_chunk: int = 10

    csv_strategy: str = Field(
        default="row",
        description="Default tabular strategy: 'row', 'column' or 'hybrid'",
    )
    csv_delimiter: str = ","

    # Free text
    text_chunk_size: int = Field(default=800, description="Character budget per text chunk")
    text_chunk_overlap: int = Field(
        default=200,
        description="Approximate overlap in characters (converted to overlap // 5 words)",
    )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton — import `settings` wherever needed.
settings = Settings()
