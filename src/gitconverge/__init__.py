"""gitconverge — converge git checkouts onto a desired ref."""

__version__ = "0.1.0"
