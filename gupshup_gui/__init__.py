"""HTTP gateway for the Gupshup partner API: login, apps, app tokens and message templates."""

__version__ = "0.1.0"