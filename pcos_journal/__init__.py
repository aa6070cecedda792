"""PCOS Journal: cycle analysis engine and its stateless API."""
