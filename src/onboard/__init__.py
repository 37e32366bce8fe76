"""macOS environment bootstrap: idempotent setup, teardown and test of developer tooling."""

__version__ = "2.0.0"
