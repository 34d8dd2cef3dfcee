"""Root conftest — shared test configuration."""

import os

# Ensure tests never pick up a real geocoding key or production mode
os.environ.setdefault("OPENCAGE_API_KEY", "test-fake-key")
os.environ.setdefault("ENVIRONMENT", "development")
