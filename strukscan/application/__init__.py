"""Application workflows that orchestrate runtime services."""
