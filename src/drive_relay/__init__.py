"""HTTP relay that forwards local files to Google Drive."""

__version__ = "1.0.0"
