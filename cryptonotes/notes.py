# --------------------------------------------------------------
# File: notes.py
# Description: Acceso a datos de notas con el secreto cifrado en reposo.
# --------------------------------------------------------------
"""Almacén de notas que delega el cifrado del campo `secret` en el conversor."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from cryptonotes.converters import FieldConverter
from cryptonotes.models import Note
from cryptonotes.storage import load_db, path_lock, save_db

__all__ = ["NoteStore"]

logger = logging.getLogger(__name__)


class NoteStore:
    """Persiste notas en un archivo JSON con la columna `secret_text` cifrada.

    El título se guarda en claro; el secreto pasa por `FieldConverter` al
    escribir y al leer, de modo que el archivo solo contiene `IV:CT`.
    """

    def __init__(self, path: str, converter: FieldConverter) -> None:
        self._path = path
        self._converter = converter
        self._lock = path_lock(path)

    def _to_row(self, note_id: int, note: Note) -> Dict[str, Any]:
        return {
            "id": note_id,
            "title": note.title,
            "secret_text": self._converter.to_stored(note.secret),
        }

    def _from_row(self, row: Dict[str, Any]) -> Note:
        return Note(
            id=row["id"],
            title=row["title"],
            secret=self._converter.from_stored(row.get("secret_text")),
        )

    def insert(self, note: Note) -> int:
        """Inserta la nota cifrando su secreto y devuelve el id asignado.

        Args:
            note (Note): Nota a guardar; su `id` se ignora.

        Returns:
            int: Identificador autoincremental de la fila creada.

        """
        with self._lock:
            db = load_db(self._path)
            note_id = db["next_id"]
            # Se cifra antes de tocar el archivo: un fallo no deja filas a medias.
            row = self._to_row(note_id, note)
            db["notes"].append(row)
            db["next_id"] = note_id + 1
            save_db(db, self._path)
        logger.info("Nota %d guardada con secreto cifrado", note_id)
        return note_id

    def get_last(self) -> Optional[Note]:
        """Devuelve la nota más reciente ya descifrada, o `None` si no hay."""

        rows = load_db(self._path)["notes"]
        if not rows:
            return None
        return self._from_row(max(rows, key=lambda row: row["id"]))

    def get_ciphertext_by_id(self, note_id: int) -> Optional[str]:
        """Devuelve el valor crudo de `secret_text` tal como está en disco."""

        for row in load_db(self._path)["notes"]:
            if row["id"] == note_id:
                return row.get("secret_text")
        return None

    def get_all(self) -> List[Note]:
        """Lista todas las notas en orden de inserción con secretos descifrados."""

        return [self._from_row(row) for row in load_db(self._path)["notes"]]
