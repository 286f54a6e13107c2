# --------------------------------------------------------------
# File: test_notes.py
# Description: Pruebas de integración del almacén de notas cifradas.
# --------------------------------------------------------------

import json
import threading

import pytest

from cryptonotes import bootstrap, codec
from cryptonotes.errors import AuthenticationFailure
from cryptonotes.models import EncryptedString, Note
from cryptonotes.notes import NoteStore


def _note(title, secret=None):
    """Crea una nota envolviendo el secreto cuando se indica."""
    wrapped = EncryptedString.from_plain(secret) if secret is not None else None
    return Note(title=title, secret=wrapped)


def test_insert_and_get_last_happy_path(note_store):
    """Valida el flujo de guardar una nota y recuperarla descifrada.

    Returns:
        None: Las aserciones internas verifican el comportamiento esperado.
    """
    note_id = note_store.insert(_note("Mi nota", "1234"))
    last = note_store.get_last()
    assert last.id == note_id == 1
    assert last.title == "Mi nota"
    assert last.secret.plaintext == "1234"


def test_secret_is_encrypted_at_rest(note_store, notes_path):
    """Comprueba que el archivo solo contenga `IV:CT` para el secreto.

    Returns:
        None: El texto en claro no debe aparecer en disco.
    """
    note_id = note_store.insert(_note("visible", "muy secreto"))
    with open(notes_path, encoding="utf-8") as handler:
        raw = handler.read()
    assert "muy secreto" not in raw
    assert "visible" in raw

    stored = note_store.get_ciphertext_by_id(note_id)
    assert stored in raw
    assert codec.encode(codec.decode(stored)) == stored


def test_get_all_and_ids(note_store):
    """Los ids son autoincrementales y get_all respeta el orden de inserción.

    Returns:
        None: Se comparan ids, títulos y secretos descifrados.
    """
    ids = [note_store.insert(_note(f"n{i}", f"s{i}")) for i in range(3)]
    assert ids == [1, 2, 3]
    notes = note_store.get_all()
    assert [n.title for n in notes] == ["n0", "n1", "n2"]
    assert [n.secret.plaintext for n in notes] == ["s0", "s1", "s2"]
    assert note_store.get_last().title == "n2"


def test_empty_store(note_store):
    """Un almacén sin archivo responde vacío en todas las consultas.

    Returns:
        None: Se esperan None y listas vacías.
    """
    assert note_store.get_last() is None
    assert note_store.get_all() == []
    assert note_store.get_ciphertext_by_id(1) is None


def test_optional_secret_stays_none(note_store):
    """Una nota sin secreto se guarda con `secret_text` nulo.

    Returns:
        None: Las aserciones verifican la propagación de None.
    """
    note_id = note_store.insert(_note("sin secreto"))
    assert note_store.get_ciphertext_by_id(note_id) is None
    assert note_store.get_last().secret is None


def test_tampered_row_propagates_authentication_failure(note_store, notes_path):
    """Garantiza que una fila manipulada en disco no se lea en silencio.

    Returns:
        None: Se espera AuthenticationFailure al leer.
    """
    note_store.insert(_note("t", "hola"))
    with open(notes_path, encoding="utf-8") as handler:
        db = json.load(handler)
    box = codec.decode(db["notes"][0]["secret_text"])
    flipped = bytes([box.ciphertext[0] ^ 1]) + box.ciphertext[1:]
    tampered = box.model_copy(update={"ciphertext": flipped})
    db["notes"][0]["secret_text"] = codec.encode(tampered)
    with open(notes_path, "w", encoding="utf-8") as handler:
        json.dump(db, handler)
    with pytest.raises(AuthenticationFailure):
        note_store.get_last()


def test_concurrent_stores_on_same_file_keep_every_row(tmp_path):
    """Varios contextos sobre el mismo archivo insertan en paralelo sin perder filas.

    Args:
        tmp_path (Path): Carpeta temporal de la prueba.

    Returns:
        None: Todas las notas se conservan con ids únicos y secretos legibles.
    """
    storage = str(tmp_path / "shared")
    stores = [bootstrap.build_context(storage_path=storage).notes for _ in range(4)]
    per_thread = 25
    barrier = threading.Barrier(len(stores))
    errors = []

    def worker(index, store):
        try:
            barrier.wait()
            for i in range(per_thread):
                store.insert(_note(f"t{index}-{i}", f"s{index}-{i}"))
        except Exception as exc:  # pragma: no cover - se reporta abajo
            errors.append(exc)

    threads = [
        threading.Thread(target=worker, args=(i, s)) for i, s in enumerate(stores)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert not errors
    notes = bootstrap.build_context(storage_path=storage).notes.get_all()
    assert len(notes) == len(stores) * per_thread
    assert sorted(n.id for n in notes) == list(range(1, len(notes) + 1))
    assert {n.title: n.secret.plaintext for n in notes} == {
        f"t{i}-{j}": f"s{i}-{j}" for i in range(len(stores)) for j in range(per_thread)
    }


def test_stores_built_separately_share_the_write_lock(notes_path, converter):
    """Dos almacenes sobre la misma ruta serializan sus escrituras.

    Returns:
        None: Ambos comparten el mismo cerrojo de ruta.
    """
    first = NoteStore(notes_path, converter)
    second = NoteStore(notes_path, converter)
    assert first._lock is second._lock


def test_context_survives_restart(tmp_path):
    """Simula dos ejecuciones del proceso sobre el mismo almacén.

    Returns:
        None: La segunda ejecución descifra lo guardado por la primera.
    """
    storage = str(tmp_path / "app")
    first = bootstrap.build_context(storage_path=storage)
    note_id = first.notes.insert(_note("t", "persistente"))

    second = bootstrap.build_context(storage_path=storage)
    assert second.key_provider is not first.key_provider
    assert second.notes.get_last().secret.plaintext == "persistente"
    stored = first.notes.get_ciphertext_by_id(note_id)
    assert second.notes.get_ciphertext_by_id(note_id) == stored


def test_context_defaults_follow_environment(tmp_path):
    """Sin argumentos, el contexto usa STORAGE_PATH y el alias por defecto.

    Returns:
        None: Se revisan el alias y la ubicación de la clave.
    """
    context = bootstrap.build_context()
    assert context.key_provider.alias == "notes_field_key"
    assert context.key_provider.key_path.startswith(str(tmp_path / "_data"))


def test_insert_logs_without_plaintext(note_store, caplog):
    """El registro anuncia la inserción sin mostrar el secreto.

    Returns:
        None: El texto capturado no contiene el valor en claro.
    """
    bootstrap.configure_logging("DEBUG")
    with caplog.at_level("DEBUG", logger="cryptonotes"):
        note_store.insert(_note("t", "no-log"))
    assert "Nota 1 guardada" in caplog.text
    assert "no-log" not in caplog.text
