# --------------------------------------------------------------
# File: storage.py
# Description: Utilidades de persistencia para el archivo JSON de notas.
# --------------------------------------------------------------
"""Lectura, escritura atómica y bloqueo por ruta del archivo de notas."""

from __future__ import annotations

import copy
import json
import os
import tempfile
import threading
from typing import Any, Dict

__all__ = ["load_db", "save_db", "path_lock"]

_DEFAULT_DB: Dict[str, Any] = {"next_id": 1, "notes": []}

_PATH_LOCKS: Dict[str, threading.Lock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def path_lock(path: str) -> threading.Lock:
    """Devuelve el cerrojo compartido por todos los almacenes de una ruta.

    Args:
        path (str): Ruta del archivo JSON; se normaliza a ruta absoluta.

    Returns:
        threading.Lock: Cerrojo único del proceso para esa ruta.

    """

    key = os.path.abspath(path)
    with _PATH_LOCKS_GUARD:
        return _PATH_LOCKS.setdefault(key, threading.Lock())


def load_db(path: str) -> Dict[str, Any]:
    """Carga el archivo JSON de notas y devuelve un diccionario para uso interno.

    Args:
        path (str): Ruta del archivo JSON de notas.

    Returns:
        Dict[str, Any]: Estructura cargada o la base vacía si el archivo no existe.

    Raises:
        json.JSONDecodeError: Si el archivo existe pero está corrupto.

    """

    try:
        with open(path, "r", encoding="utf-8") as handler:
            return json.load(handler)
    except FileNotFoundError:
        return copy.deepcopy(_DEFAULT_DB)


def save_db(db: Dict[str, Any], path: str) -> None:
    """Sustituye el archivo de notas mediante un temporal único y `os.replace`.

    El temporal se crea en el mismo directorio para que el reemplazo sea
    atómico; dos escritores nunca comparten el mismo temporal.

    Args:
        db (Dict[str, Any]): Contenido completo del archivo de notas.
        path (str): Ruta de destino.

    """

    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(
        prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handler:
            json.dump(db, handler, indent=2, ensure_ascii=False)
            handler.flush()
            os.fsync(handler.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
