"""Generation and persistence agents."""
