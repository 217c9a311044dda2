import logging
import threading
from typing import Optional

from github_client import GitHubDocumentClient, RemoteReadError, RevisionConflictError
from record_store import RecordStore

LOADING = 'loading'
READY = 'ready'
READY_WITH_ERROR = 'ready_with_error'


class SaveInProgressError(RuntimeError):
    """Another save has not finished yet."""


class SaveUnavailableError(RuntimeError):
    """Nothing was loaded, so there is no sha to save against."""


class EditorSession:
    """
    Owns the record store and the sha of the last successful read or save.
    """

    def __init__(self, client: GitHubDocumentClient, store: Optional[RecordStore] = None):
        self.logger = logging.getLogger(__name__)
        self.client = client
        self.store = store or RecordStore()
        self.sha: Optional[str] = None
        self.state = LOADING
        self.conflict = False
        self.last_error: Optional[str] = None
        self._loaded = False
        self._load_lock = threading.Lock()
        self._save_lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def saving(self) -> bool:
        return self._save_lock.locked()

    @property
    def can_save(self) -> bool:
        return self.sha is not None and not self.saving

    def load(self):
        """
        Fetch the document. On failure the store is left empty, no sha is
        held, and the failure is raised as a RemoteReadError for display.
        """
        with self._load_lock:
            self.state = LOADING
            try:
                records, sha = self.client.fetch_document()
            except Exception as e:
                self.logger.error(f"Initial load failed: {str(e)}")
                self.store.clear()
                self.sha = None
                self.last_error = str(e)
                self.state = READY_WITH_ERROR
                if isinstance(e, RemoteReadError):
                    raise
                raise RemoteReadError(f"Failed to load data: {str(e)}") from e
            finally:
                self._loaded = True

            self.store.load(records)
            self.sha = sha
            self.conflict = False
            self.last_error = None
            self.state = READY

    def ensure_loaded(self):
        if not self._loaded:
            self.load()

    def reload(self):
        # Holding the save lock keeps a pending save's sha from landing on reloaded rows
        if not self._save_lock.acquire(blocking=False):
            raise SaveInProgressError('A save is in progress; reload once it finishes')
        try:
            self.logger.info('Reloading document, local edits are discarded')
            self.load()
        finally:
            self._save_lock.release()

    def save(self, message: Optional[str] = None) -> str:
        """
        Push the current rows with the held sha and hold the new one.
        The store is never modified here, so a failed save can simply be retried.
        """
        if not self._save_lock.acquire(blocking=False):
            raise SaveInProgressError('A save is already in progress')
        try:
            if self.sha is None:
                raise SaveUnavailableError('Nothing was loaded from the repository; reload before saving')
            try:
                new_sha = self.client.save_document(self.store.records, self.sha, message=message)
            except RevisionConflictError as e:
                self.conflict = True
                self.last_error = str(e)
                raise
            self.sha = new_sha
            self.conflict = False
            self.last_error = None
            return new_sha
        finally:
            self._save_lock.release()
