"""Request-level operations over the store and external collaborators."""
