"""Share Claude Code sessions as sanitized gists and import them back."""

__version__ = "0.1.0"
