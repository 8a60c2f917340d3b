"""File conversion gateway: image, PDF and audio format conversion over HTTP."""

__version__ = "0.1.0"
