"""Test utilities for warren applications::

    from warren.testing import TestClient
"""

from warren.testing.client import TestClient

__all__ = ["TestClient"]
