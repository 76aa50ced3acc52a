"""PaperBank: moderated sharing of institutional exam papers."""

__version__ = "0.1.0"
