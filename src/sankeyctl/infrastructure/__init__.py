"""Infrastructure layer — document loading and the geometry solver."""
