"""Query endpoint surface: request parsing, execution and serialization."""
