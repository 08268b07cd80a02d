"""cs-chatlog: browse and search Counter-Strike chat logs."""

__version__ = "0.1.0"
