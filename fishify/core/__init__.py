"""Application factory, lifespan and middleware setup."""
