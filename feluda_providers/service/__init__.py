"""HTTP service, CLI and request-building helpers for FeludaAI."""
