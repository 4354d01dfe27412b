"""Root pytest configuration.

Test Structure:
    tests/
    ├── userhub_auth/          # Credential primitives (hashing, policy, tokens)
    │   └── unit/
    ├── userhub_identity/      # Account domain and application services
    │   ├── unit/              # Fast, isolated tests with mocked collaborators
    │   └── integration/       # SQLAlchemy store against in-memory SQLite
    └── userhub/               # HTTP API
        └── integration/api/

Environment:
    config/.env.test is loaded if present. Tests that need settings build
    them explicitly, so no environment is required.
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from userhub_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

TEST_ENV_FILE = PROJECT_ROOT / "config" / ".env.test"
if TEST_ENV_FILE.exists():
    load_dotenv(TEST_ENV_FILE)


@pytest.fixture(autouse=True)
def fresh_settings_cache():
    """Make sure no test sees settings cached by another test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
