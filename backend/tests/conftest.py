"""Root conftest — shared test configuration."""

import os

# Tests never touch a file database unless a fixture asks for one
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")
