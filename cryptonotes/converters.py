# --------------------------------------------------------------
# File: converters.py
# Description: Conversores transparentes entre texto sensible y columna cifrada.
# --------------------------------------------------------------
"""Frontera que la capa de persistencia invoca al escribir y leer campos."""

from __future__ import annotations

from typing import Optional

from cryptonotes import codec
from cryptonotes.crypto_sym import CipherEngine
from cryptonotes.errors import CipherFailure
from cryptonotes.models import EncryptedString

__all__ = ["FieldConverter"]


class FieldConverter:
    """Traduce `EncryptedString` a `Base64(IV):Base64(CT)` y viceversa.

    `None` se conserva en ambos sentidos para campos opcionales. Los errores
    de las capas inferiores se propagan sin cambios.
    """

    def __init__(self, engine: CipherEngine) -> None:
        self._engine = engine

    def to_stored(self, value: Optional[EncryptedString]) -> Optional[str]:
        """Cifra el texto envuelto justo antes de persistirlo."""

        if value is None:
            return None
        box = self._engine.seal(value.plaintext.encode("utf-8"))
        return codec.encode(box)

    def from_stored(self, stored: Optional[str]) -> Optional[EncryptedString]:
        """Descifra el valor de la columna y lo vuelve a envolver en memoria."""

        if stored is None:
            return None
        plaintext = self._engine.open(codec.decode(stored))
        try:
            return EncryptedString.from_plain(plaintext.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise CipherFailure("El valor descifrado no es texto UTF-8.") from exc
