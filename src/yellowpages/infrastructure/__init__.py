"""Infrastructure layer — file store, search index, discovery sources."""
