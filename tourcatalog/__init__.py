"""tourcatalog: a read-mostly concert tour catalog mirrored from an upstream API."""

__version__ = "0.1.0"
