"""Quote generation and catalog service for an education-travel agency."""
