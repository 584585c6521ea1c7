"""
DocumentStore: durable storage of the single application document.

Two files, double-buffered:

    data.json   : primary, the latest saved document
    backup.json : the previous primary, one generation behind

save():
  1. If the primary exists, copy it over the backup (always BEFORE step 2)
  2. Write the new document to the primary
  Any I/O failure → logged, returns False. Never raises.

load():
  1. No primary → first run: persist and return the default document
  2. Parse + validate the primary → return it
  3. Primary unreadable/invalid → validate the backup; if good, promote it
     to primary and return it
  4. Both bad → persist and return the default document (data loss is
     preferred over a crash loop at startup)
"""
import logging
from typing import Callable

from pydantic import ValidationError

from drively.errors import DocumentValidationError
from drively.models.document import Document, default_document
from drively.storage.export import export_drives_csv, export_json
from drively.storage.files import FileStorage

logger = logging.getLogger(__name__)

MAIN_FILE_NAME = "data.json"
BACKUP_FILE_NAME = "backup.json"


class DocumentStore:
    """Load/save/clear the document through a FileStorage provider."""

    def __init__(
        self,
        files: FileStorage,
        *,
        main_name: str = MAIN_FILE_NAME,
        backup_name: str = BACKUP_FILE_NAME,
        default_factory: Callable[[], Document] = default_document,
    ):
        """
        Args:
            files: FileStorage provider (LocalFileStorage, or a mock in tests).
            main_name: Primary file name within the provider.
            backup_name: Backup file name within the provider.
            default_factory: Builds the document used on first run and as
                the last-resort fallback.
        """
        self.files = files
        self.main_name = main_name
        self.backup_name = backup_name
        self._default_factory = default_factory

    # ─── Load ─────────────────────────────────────────────────────────────────

    def load(self) -> Document:
        """Return the stored document, recovering from corruption as needed."""
        try:
            has_primary = self.files.exists(self.main_name)
        except OSError as exc:
            logger.warning("Could not stat %s: %s", self.main_name, exc)
            has_primary = True  # fall through to the read, which will fail over

        if not has_primary:
            logger.info("No data file found; creating default document")
            document = self._default_factory()
            self.save(document)
            return document

        try:
            return self._read_validated(self.main_name)
        except (OSError, DocumentValidationError) as exc:
            logger.warning("Primary data file unusable, trying backup: %s", exc)

        try:
            backup = self._read_validated(self.backup_name)
        except (OSError, DocumentValidationError) as exc:
            logger.warning("Backup data file also unusable: %s", exc)
        else:
            logger.info("Restoring document from backup (%d drives)", len(backup.drives))
            self._write_primary(backup)
            return backup

        logger.error("No usable data file; falling back to default document")
        document = self._default_factory()
        self._write_primary(document)
        return document

    def _read_validated(self, name: str) -> Document:
        """
        Read and parse one file.

        Raises:
            StorageIOError: if the file cannot be read.
            DocumentValidationError: if it is missing, not JSON, or fails
                the schema.
        """
        raw = self.files.read_file(name)
        if raw is None:
            raise DocumentValidationError(f"{name} does not exist")
        try:
            return Document.model_validate_json(raw)
        except ValidationError as exc:
            raise DocumentValidationError(f"{name} failed validation: {exc}") from exc

    # ─── Save ─────────────────────────────────────────────────────────────────

    def save(self, document: Document) -> bool:
        """
        Rotate the current primary into the backup slot, then write document.

        Returns:
            True on success, False on any I/O failure (already logged).
        """
        try:
            if self.files.exists(self.main_name):
                self.files.copy_file(self.main_name, self.backup_name)
            self.files.write_file(self.main_name, serialize(document))
        except OSError as exc:
            logger.error("Failed to save data: %s", exc)
            return False
        return True

    def _write_primary(self, document: Document) -> bool:
        """
        Write document as primary without rotating the current primary into
        the backup slot. Used by recovery, where the current primary is the
        corrupt copy that must not displace a good backup.
        """
        try:
            self.files.write_file(self.main_name, serialize(document))
        except OSError as exc:
            logger.error("Failed to write recovered data: %s", exc)
            return False
        return True

    # ─── Clear ────────────────────────────────────────────────────────────────

    def clear(self) -> bool:
        """Delete primary and backup. Only for an explicit full reset."""
        try:
            for name in (self.main_name, self.backup_name):
                if self.files.exists(name):
                    self.files.delete_file(name)
        except OSError as exc:
            logger.error("Failed to clear data: %s", exc)
            return False
        logger.info("Cleared data and backup files")
        return True

    # ─── Export ───────────────────────────────────────────────────────────────

    def export_json(self, document: Document) -> str:
        return export_json(document)

    def export_csv(self, document: Document) -> str:
        return export_drives_csv(document)


def serialize(document: Document) -> bytes:
    return document.to_json().encode("utf-8")
