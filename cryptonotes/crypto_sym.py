# --------------------------------------------------------------
# File: crypto_sym.py
# Description: Primitivas AES-GCM para sellar y abrir campos sensibles.
# --------------------------------------------------------------
"""Motor de cifrado simétrico que opera con claves del almacén seguro."""

from __future__ import annotations

import os

from cryptography.exceptions import InternalError, InvalidTag

from cryptonotes.errors import AuthenticationFailure, CipherFailure, MalformedCiphertext
from cryptonotes.keystore import FileKeyProvider
from cryptonotes.models import SealedBox

__all__ = ["IV_SIZE", "TAG_SIZE", "CipherEngine"]

IV_SIZE = 12  # 96 bits, estándar GCM
TAG_SIZE = 16  # 128 bits

_ENGINE_ERRORS = (ValueError, TypeError, OverflowError, InternalError)


class CipherEngine:
    """Sella y abre datos con AES-GCM sin manipular bytes de clave.

    Cada operación resuelve el manejador de clave a través del proveedor y
    no guarda estado mutable propio, por lo que es reentrante entre hilos.

    Example:
        >>> engine = CipherEngine(FileKeyProvider("./_data/keys", "notes"))
        >>> box = engine.seal(b"hola")
        >>> engine.open(box)
        b'hola'

    """

    def __init__(self, key_provider: FileKeyProvider) -> None:
        self._key_provider = key_provider

    def seal(self, plaintext: bytes) -> SealedBox:
        """Cifra y autentica datos con un IV aleatorio nuevo.

        Args:
            plaintext (bytes): Datos en claro que se cifrarán.

        Returns:
            SealedBox: Par `(iv, ciphertext‖tag)` listo para codificar.

        Raises:
            KeyUnavailable: Si la clave no puede resolverse.
            CipherFailure: Ante cualquier error del motor AES-GCM.

        """
        if not isinstance(plaintext, (bytes, bytearray, memoryview)):
            raise CipherFailure("El texto en claro debe ser bytes.")

        handle = self._key_provider.resolve_key()
        iv = os.urandom(IV_SIZE)
        try:
            ct_full = handle.encrypt(iv, bytes(plaintext))
        except _ENGINE_ERRORS as exc:
            raise CipherFailure("Error interno al cifrar.") from exc
        return SealedBox(iv=iv, ciphertext=ct_full)

    def open(self, box: SealedBox) -> bytes:
        """Descifra y verifica la etiqueta en una única operación.

        Args:
            box (SealedBox): Caja sellada obtenida al decodificar el valor
                almacenado.

        Returns:
            bytes: Mensaje original en claro; nunca se devuelve parcialmente.

        Raises:
            KeyUnavailable: Si la clave no puede resolverse.
            MalformedCiphertext: Si el IV o el ciphertext no tienen la longitud
                que exige AES-GCM.
            AuthenticationFailure: Si la etiqueta no verifica.
            CipherFailure: Ante cualquier otro error del motor AES-GCM.

        """
        if len(box.iv) != IV_SIZE:
            raise MalformedCiphertext(f"El IV debe tener {IV_SIZE} bytes.")
        if len(box.ciphertext) < TAG_SIZE:
            raise MalformedCiphertext("El CT es más corto que la etiqueta.")
        handle = self._key_provider.resolve_key()
        try:
            return handle.decrypt(box.iv, box.ciphertext)
        except InvalidTag:
            raise AuthenticationFailure("No se ha podido descifrar el valor.") from None
        except _ENGINE_ERRORS as exc:
            raise CipherFailure("Error interno al descifrar.") from exc
