"""Database access for the Run List API."""
