# --------------------------------------------------------------
# File: models.py
# Description: Modelos de datos comunes utilizados por la capa criptográfica.
# --------------------------------------------------------------
"""Modelos que encapsulan cajas selladas, texto sensible y notas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class SealedBox(BaseModel):
    """Representa el resultado de una operación de sellado AES-GCM.

    Attributes:
        iv (bytes): Vector de inicialización de 96 bits usado al cifrar.
        ciphertext (bytes): Datos cifrados seguidos de la etiqueta de 128 bits.

    """

    model_config = ConfigDict(frozen=True)

    iv: bytes
    ciphertext: bytes


class EncryptedString:
    """Envoltorio inmutable que marca texto sensible dentro de una entidad.

    El texto en claro solo vive en memoria; la persistencia lo convierte en
    `Base64(IV):Base64(CT)` a través de `FieldConverter`. Su representación
    nunca muestra el contenido y no admite serialización con pickle.
    """

    __slots__ = ("_plaintext",)

    def __init__(self, plaintext: str) -> None:
        if not isinstance(plaintext, str):
            raise TypeError("EncryptedString solo admite texto (str).")
        object.__setattr__(self, "_plaintext", plaintext)

    @classmethod
    def from_plain(cls, plaintext: str) -> "EncryptedString":
        """Envuelve un texto en claro aportado por el llamador."""

        return cls(plaintext)

    @property
    def plaintext(self) -> str:
        """Devuelve el valor en claro; manejar con cuidado."""

        return self._plaintext

    def __setattr__(self, name, value):
        raise AttributeError("EncryptedString es inmutable.")

    def __delattr__(self, name):
        raise AttributeError("EncryptedString es inmutable.")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EncryptedString):
            return NotImplemented
        return self._plaintext == other._plaintext

    def __hash__(self) -> int:
        return hash((EncryptedString, self._plaintext))

    def __repr__(self) -> str:
        return "EncryptedString(<redacted>)"

    __str__ = __repr__

    def __copy__(self) -> "EncryptedString":
        return self

    def __deepcopy__(self, memo) -> "EncryptedString":
        return self

    def __reduce__(self):
        raise TypeError("EncryptedString no puede serializarse.")


class Note(BaseModel):
    """Nota con un título público y un secreto cifrado en reposo.

    Attributes:
        id (Optional[int]): Identificador asignado por el almacén al insertar.
        title (str): Título almacenado en claro.
        secret (Optional[EncryptedString]): Secreto guardado en `secret_text`.

    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: Optional[int] = None
    title: str
    secret: Optional[EncryptedString] = None
