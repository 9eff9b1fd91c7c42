"""Test utilities for roost routers::

    from roost.testing import TestClient
"""

from roost.testing.client import TestClient

__all__ = ["TestClient"]
