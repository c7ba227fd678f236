"""Sample i2 Connect style connectors: an NYPD open-data connector and an
in-memory example connector, served over a small FastAPI gateway."""

__version__ = "0.1.0"
