"""Static site generator for a personal homepage and blog, with live post preview."""

__version__ = "0.1.0"
