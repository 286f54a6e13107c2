# --------------------------------------------------------------
# File: config.py
# Description: Parámetros de entorno para el almacén de claves y las notas.
# --------------------------------------------------------------
import os

from dotenv import load_dotenv

load_dotenv()

STORAGE_PATH = os.getenv("STORAGE_PATH", "./_data")
KEY_STORE_DIR = os.getenv("KEY_STORE_DIR", os.path.join(STORAGE_PATH, "keys"))
KEY_ALIAS = os.getenv("KEY_ALIAS", "notes_field_key")
NOTES_PATH = os.getenv("NOTES_PATH", os.path.join(STORAGE_PATH, "notes.json"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
