"""Top-level section-audit commands (auto-discovered by the dispatcher)."""
