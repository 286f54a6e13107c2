# --------------------------------------------------------------
# File: __init__.py
# Description: Exposición pública de utilidades criptográficas del paquete.
# --------------------------------------------------------------
"""Inicializa el paquete `cryptonotes` y documenta sus módulos principales."""

__all__ = [
    "bootstrap",
    "codec",
    "config",
    "converters",
    "crypto_sym",
    "errors",
    "keystore",
    "models",
    "notes",
    "storage",
]
