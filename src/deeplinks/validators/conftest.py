"""
Shared fixtures for deep link validators.

Fixtures live in shared_fixtures.py so other suites can reuse them.
"""
from deeplinks.validators.shared_fixtures import *  # noqa: F401,F403
