"""Build shareable app deep links and resolve inbound links to route intents."""

__version__ = "0.1.0"
