# --------------------------------------------------------------
# File: conftest.py
# Description: Fixtures que aíslan el almacén de claves y el archivo de notas.
# --------------------------------------------------------------

import importlib
from typing import Iterator

import pytest

from cryptonotes.converters import FieldConverter
from cryptonotes.crypto_sym import CipherEngine
from cryptonotes.keystore import FileKeyProvider
from cryptonotes.notes import NoteStore


@pytest.fixture(autouse=True)
def _isolate_storage(tmp_path, monkeypatch) -> Iterator[None]:
    """Dirige STORAGE_PATH a una carpeta temporal y recarga la configuración.

    Args:
        tmp_path (Path): Carpeta temporal de la prueba.
        monkeypatch (pytest.MonkeyPatch): Permite fijar y borrar variables de entorno.

    Returns:
        Iterator[None]: Cede el control a la prueba con el entorno aislado.
    """
    data_dir = tmp_path / "_data"
    monkeypatch.setenv("STORAGE_PATH", str(data_dir))
    for name in ("KEY_STORE_DIR", "KEY_ALIAS", "NOTES_PATH"):
        monkeypatch.delenv(name, raising=False)

    import cryptonotes.config as config_module

    importlib.reload(config_module)

    yield


@pytest.fixture
def key_dir(tmp_path):
    """Ruta del directorio de claves dentro de la carpeta temporal.

    Returns:
        str: Directorio aún no creado; el proveedor lo crea en el primer uso.
    """
    return str(tmp_path / "_data" / "keys")


@pytest.fixture
def provider(key_dir):
    """Proveedor de claves con el alias `test_key`.

    Returns:
        FileKeyProvider: Proveedor sin clave generada todavía.
    """
    return FileKeyProvider(key_dir, "test_key")


@pytest.fixture
def engine(provider):
    """Motor AES-GCM ligado al proveedor de la prueba.

    Returns:
        CipherEngine: Motor listo para sellar y abrir.
    """
    return CipherEngine(provider)


@pytest.fixture
def converter(engine):
    """Conversor de campos que usa el motor de la prueba.

    Returns:
        FieldConverter: Conversor entre `EncryptedString` y columna cifrada.
    """
    return FieldConverter(engine)


@pytest.fixture
def notes_path(tmp_path):
    """Ruta del archivo JSON de notas de la prueba.

    Returns:
        str: Archivo aún inexistente dentro de `_data`.
    """
    return str(tmp_path / "_data" / "notes.json")


@pytest.fixture
def note_store(notes_path, converter):
    """Almacén de notas sobre el archivo temporal.

    Returns:
        NoteStore: Almacén vacío con el conversor de la prueba.
    """
    return NoteStore(notes_path, converter)
