"""Multi-tenant notes backend."""
