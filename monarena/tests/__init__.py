"""MonArena test suite."""
