"""notecal - create Google Calendar events from Markdown note lines"""

__version__ = "0.1.0"
