"""Infrastructure layer — JSON documents, SQLite storage, and the workspace."""
