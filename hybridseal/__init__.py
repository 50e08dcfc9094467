"""Hybrid RSA/AES-GCM sealing of short messages with RSA signatures."""

__version__ = "0.1.0"

__all__ = ["aes", "context", "rsa", "serialization", "sign"]