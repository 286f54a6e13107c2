# --------------------------------------------------------------
# File: bootstrap.py
# Description: Construcción única de dependencias al arrancar el proceso.
# --------------------------------------------------------------
"""Ensambla proveedor de claves, motor, conversor y almacén de notas."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from cryptonotes import config
from cryptonotes.converters import FieldConverter
from cryptonotes.crypto_sym import CipherEngine
from cryptonotes.keystore import FileKeyProvider
from cryptonotes.notes import NoteStore

__all__ = ["AppContext", "build_context", "configure_logging"]


@dataclass(frozen=True)
class AppContext:
    key_provider: FileKeyProvider
    engine: CipherEngine
    converter: FieldConverter
    notes: NoteStore


def configure_logging(level: Optional[str] = None) -> None:
    """Configura el registro raíz con el nivel indicado o `LOG_LEVEL`.

    Args:
        level (Optional[str]): Nivel de registro, p. ej. "DEBUG".

    """
    logging.basicConfig(
        level=level or config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_context(
    storage_path: Optional[str] = None, key_alias: Optional[str] = None
) -> AppContext:
    """Crea las dependencias una sola vez para inyectarlas donde se necesiten.

    Args:
        storage_path (Optional[str]): Directorio de datos; si se indica, las
            claves y las notas se ubican dentro de él.
        key_alias (Optional[str]): Identificador de la clave en el almacén.

    Returns:
        AppContext: Dependencias listas para la capa de persistencia.

    """
    if storage_path is None:
        key_dir, notes_path = config.KEY_STORE_DIR, config.NOTES_PATH
    else:
        key_dir = os.path.join(storage_path, "keys")
        notes_path = os.path.join(storage_path, "notes.json")

    key_provider = FileKeyProvider(key_dir, key_alias or config.KEY_ALIAS)
    engine = CipherEngine(key_provider)
    converter = FieldConverter(engine)
    return AppContext(
        key_provider=key_provider,
        engine=engine,
        converter=converter,
        notes=NoteStore(notes_path, converter),
    )
