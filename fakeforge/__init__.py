"""FakeForge: schema-driven fake data generation."""

__version__ = "1.1.0"
