"""newsboard: ranking and paginated retrieval for a community news board."""

__version__ = "0.1.0"
