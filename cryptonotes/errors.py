# --------------------------------------------------------------
# File: errors.py
# Description: Jerarquía de excepciones de la capa de cifrado de campos.
# --------------------------------------------------------------
"""Errores que la capa criptográfica propaga hacia la persistencia."""


class CryptoError(Exception):
    """Error base de todas las operaciones criptográficas del paquete."""


class KeyUnavailable(CryptoError):
    """El almacén de claves no puede generar ni recuperar la clave."""


class MalformedCiphertext(CryptoError):
    """La cadena almacenada no respeta el formato `Base64(IV):Base64(CT)`."""


class AuthenticationFailure(CryptoError):
    """La etiqueta GCM no verifica: datos alterados, clave o IV incorrectos."""


class CipherFailure(CryptoError):
    """Fallo inesperado del motor de cifrado subyacente."""
