# --------------------------------------------------------------
# File: keystore.py
# Description: Almacén local de la clave AES-256 y manejadores opacos de uso.
# --------------------------------------------------------------
"""Proveedor de claves que nunca entrega bytes de clave a los llamadores."""

from __future__ import annotations

import base64
import binascii
import logging
import os
import threading
from typing import Optional

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from cryptonotes.errors import KeyUnavailable

__all__ = ["KEY_SIZE", "KeyHandle", "FileKeyProvider"]

logger = logging.getLogger(__name__)

KEY_SIZE = 32  # AES-256


class KeyHandle:
    """Referencia opaca a una clave AES-GCM del almacén.

    Solo expone las operaciones de cifrado; la clave queda dentro de la
    primitiva `AESGCM` y no existe forma de extraerla desde este objeto.
    """

    __slots__ = ("_alias", "_aead")

    def __init__(self, alias: str, aead: AESGCM) -> None:
        self._alias = alias
        self._aead = aead

    @property
    def alias(self) -> str:
        """Identificador de la clave en el almacén."""

        return self._alias

    def encrypt(self, iv: bytes, data: bytes) -> bytes:
        """Cifra `data` con el IV dado y devuelve ciphertext‖tag."""

        return self._aead.encrypt(iv, data, None)

    def decrypt(self, iv: bytes, data: bytes) -> bytes:
        """Descifra y verifica ciphertext‖tag; lanza `InvalidTag` si no cuadra."""

        return self._aead.decrypt(iv, data, None)

    def __repr__(self) -> str:
        return f"KeyHandle(alias={self._alias!r})"

    def __reduce__(self):
        raise TypeError("KeyHandle no puede serializarse.")


class FileKeyProvider:
    """Gestiona una única clave simétrica persistida en un directorio privado.

    La clave se guarda en `<key_dir>/<alias>.key` codificada en Base64 con
    permisos 0600. Si no existe en el primer uso se genera dentro del almacén;
    las llamadas posteriores devuelven un manejador sobre la misma clave.

    Example:
        >>> provider = FileKeyProvider("./_data/keys", "notes_field_key")
        >>> handle = provider.resolve_key()

    """

    def __init__(self, key_dir: str, alias: str) -> None:
        if not alias or os.sep in alias or alias in {".", ".."}:
            raise ValueError(f"Alias de clave no válido: {alias!r}")
        self._key_dir = key_dir
        self._alias = alias
        self._lock = threading.Lock()
        self._handle: Optional[KeyHandle] = None

    @property
    def alias(self) -> str:
        """Identificador configurado de la clave."""

        return self._alias

    @property
    def key_path(self) -> str:
        return os.path.join(self._key_dir, f"{self._alias}.key")

    def resolve_key(self) -> KeyHandle:
        """Devuelve el manejador de la clave, creándola en el primer uso.

        Returns:
            KeyHandle: Manejador opaco sobre la clave AES-256 configurada.

        Raises:
            KeyUnavailable: Si el almacén no puede leer ni generar la clave.

        """
        handle = self._handle
        if handle is not None:
            return handle
        with self._lock:
            if self._handle is None:
                self._handle = KeyHandle(self._alias, AESGCM(self._load_or_create()))
            return self._handle

    def _load_or_create(self) -> bytes:
        try:
            os.makedirs(self._key_dir, mode=0o700, exist_ok=True)
        except OSError as exc:
            raise KeyUnavailable("No se puede preparar el almacén de claves.") from exc

        if os.path.exists(self.key_path):
            logger.debug("Reutilizando la clave existente '%s'", self._alias)
            return self._read_key()
        return self._create_key()

    def _read_key(self) -> bytes:
        try:
            with open(self.key_path, "rb") as handler:
                raw = handler.read()
        except OSError as exc:
            raise KeyUnavailable("No se puede leer la clave del almacén.") from exc

        try:
            key = base64.b64decode(raw.strip(), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise KeyUnavailable("La clave almacenada está corrupta.") from exc
        if len(key) != KEY_SIZE:
            raise KeyUnavailable(
                f"La clave almacenada debe tener {KEY_SIZE} bytes, tiene {len(key)}."
            )
        return key

    def _create_key(self) -> bytes:
        # Publicación atómica: el enlace falla si otro proceso ya creó la clave.
        key = os.urandom(KEY_SIZE)
        tmp_path = f"{self.key_path}.{os.getpid()}.{threading.get_ident()}.tmp"
        try:
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            with os.fdopen(fd, "wb") as handler:
                handler.write(base64.b64encode(key) + b"\n")
                handler.flush()
                os.fsync(handler.fileno())
            try:
                os.link(tmp_path, self.key_path)
            except FileExistsError:
                logger.debug("Otra instancia creó la clave '%s' primero", self._alias)
                return self._read_key()
        except OSError as exc:
            raise KeyUnavailable("No se puede generar la clave.") from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

        logger.info("Generada nueva clave AES-256 '%s' en el almacén", self._alias)
        return key
