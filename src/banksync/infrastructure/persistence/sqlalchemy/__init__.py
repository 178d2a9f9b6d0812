"""SQLAlchemy-backed document store."""
