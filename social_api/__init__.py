"""Social media REST backend: users, posts, likes, follows, hashtags and activity."""

__version__ = "1.0.0"
