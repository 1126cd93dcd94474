"""Testing utilities for schemarpc servers and clients."""

from schemarpc.testing.client import TestClient

__all__ = ["TestClient"]
