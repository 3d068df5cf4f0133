"""locreconcile: reconcile and edit localization key sets against a base language."""

__version__ = "0.3.0"
APP_ID = "se.danielnylander.locreconcile"
