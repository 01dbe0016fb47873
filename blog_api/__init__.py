"""Blog API: posts, nested comments and user accounts."""
