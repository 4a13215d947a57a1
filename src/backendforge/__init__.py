"""backendforge: LLM-backed backend scaffolding with response reconciliation."""

__version__ = "0.1.0"
