"""Chain of dimensions: tolerance stack-up editor."""
