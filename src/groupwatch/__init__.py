"""GroupWatch - Pipeline status dashboard for nested GitLab groups."""

__version__ = "0.1.0"
