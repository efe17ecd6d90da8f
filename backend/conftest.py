# backend/conftest.py
"""Root pytest configuration.

Test settings must be in the environment before ``app.core.config`` is
imported, so they are set here rather than in ``tests/conftest.py``.
"""

import os

os.environ.setdefault("IS_TESTING", "true")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-scheduling-suite-0001")
os.environ.setdefault("SCHEDULING_LOCK_BACKEND", "local")
