# --------------------------------------------------------------
# File: codec.py
# Description: Codificación textual "Base64(IV):Base64(CT)" de cajas selladas.
# --------------------------------------------------------------
"""Conversión pura entre `SealedBox` y la cadena que se guarda en la base."""

from __future__ import annotations

import base64
import binascii

from cryptonotes.crypto_sym import IV_SIZE, TAG_SIZE
from cryptonotes.errors import MalformedCiphertext
from cryptonotes.models import SealedBox

__all__ = ["DELIMITER", "encode", "decode"]

DELIMITER = ":"


def _b64(data: bytes) -> str:
    """Codifica en Base64 estándar con relleno."""

    return base64.b64encode(data).decode("ascii")


def _unb64(value: str, part: str) -> bytes:
    """Decodifica Base64 estricta y exige que la entrada sea canónica."""

    try:
        data = base64.b64decode(value.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise MalformedCiphertext(f"La parte {part} no es Base64 válida.") from exc
    if _b64(data) != value:
        raise MalformedCiphertext(f"La parte {part} no es Base64 canónica.")
    return data


def encode(box: SealedBox) -> str:
    """Serializa una caja sellada como `Base64(IV):Base64(CT‖tag)`.

    Args:
        box (SealedBox): Resultado de `CipherEngine.seal`.

    Returns:
        str: Cadena opaca para la columna de almacenamiento.

    """

    return f"{_b64(box.iv)}{DELIMITER}{_b64(box.ciphertext)}"


def decode(text: str) -> SealedBox:
    """Analiza la cadena almacenada y reconstruye la caja sellada.

    Los espacios en blanco se eliminan antes de analizar; Base64 no los usa,
    así que el contenido no cambia.

    Args:
        text (str): Valor leído tal cual de la columna cifrada.

    Returns:
        SealedBox: IV y ciphertext‖tag decodificados.

    Raises:
        MalformedCiphertext: Si falta el delimitador, alguna mitad está vacía
            o no es Base64, o las longitudes no cuadran con AES-GCM.

    """

    if not isinstance(text, str):
        raise MalformedCiphertext("El valor cifrado debe ser texto.")
    compact = "".join(text.split())
    if not compact:
        raise MalformedCiphertext("El valor cifrado está vacío.")

    index = compact.find(DELIMITER)
    if index == -1:
        raise MalformedCiphertext("Falta el delimitador ':' entre IV y CT.")
    if index == 0:
        raise MalformedCiphertext("La parte IV está vacía.")
    if index == len(compact) - 1:
        raise MalformedCiphertext("La parte CT está vacía.")

    iv = _unb64(compact[:index], "IV")
    ciphertext = _unb64(compact[index + 1 :], "CT")
    if len(iv) != IV_SIZE:
        raise MalformedCiphertext(f"El IV debe tener {IV_SIZE} bytes, tiene {len(iv)}.")
    if len(ciphertext) < TAG_SIZE:
        raise MalformedCiphertext("El CT es más corto que la etiqueta GCM.")
    return SealedBox(iv=iv, ciphertext=ciphertext)
