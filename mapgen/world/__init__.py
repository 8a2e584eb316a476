"""Grid model and the generation stages that operate on it."""
