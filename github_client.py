import base64
import binascii
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from config import RepoConfig

Record = Dict[str, Any]


class DocumentFormatError(ValueError):
    """Raised when file content is not a JSON array of objects."""


class RemoteDocumentError(Exception):
    """Base class for failures talking to the hosting API."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class RemoteReadError(RemoteDocumentError):
    pass


class RemoteWriteError(RemoteDocumentError):
    pass


class RevisionConflictError(RemoteWriteError):
    """The file changed remotely since the held sha was read."""


def encode_document(records: List[Record]) -> str:
    """
    Serialize records the way they are stored in the repository
    (2-space indented JSON) and base64 encode the UTF-8 bytes.
    """
    text = json.dumps(records, indent=2, ensure_ascii=False)
    return base64.b64encode(text.encode('utf-8')).decode('ascii')


def decode_document(encoded: str) -> List[Record]:
    """
    Decode base64 file content into a list of records.
    Line breaks inside the base64 payload are ignored.
    """
    if not isinstance(encoded, str):
        raise DocumentFormatError('Content is not a base64 string')
    try:
        raw = base64.b64decode(''.join(encoded.split()), validate=True)
        data = json.loads(raw.decode('utf-8'))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
        # b64decode raises a bare ValueError for non-ASCII input
        raise DocumentFormatError(f"Content is not valid base64 JSON: {str(e)}") from e

    if not isinstance(data, list):
        raise DocumentFormatError(f"Expected a JSON array, got {type(data).__name__}")
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise DocumentFormatError(f"Item {index} is {type(item).__name__}, expected an object")
    return data


def _describe(payload: Any) -> str:
    if isinstance(payload, dict) and payload.get('message'):
        return str(payload['message'])
    return json.dumps(payload) if payload is not None else 'empty response'


class GitHubDocumentClient:
    """
    Reads and writes one JSON file through the GitHub contents API.
    Each call issues exactly one HTTP request, without retries.
    """

    def __init__(self, config: RepoConfig, session: Optional[requests.Session] = None):
        self.logger = logging.getLogger(__name__)
        self.config = config
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            'Authorization': f"token {self.config.token}",
            'Accept': 'application/vnd.github+json',
            'Content-Type': 'application/json',
        }

    def fetch_document(self) -> Tuple[List[Record], str]:
        """
        Fetch the file and return (records, sha).
        """
        params = {'ref': self.config.branch} if self.config.branch else None
        try:
            resp = self.session.get(
                self.config.contents_url,
                headers=self._headers(),
                params=params,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            self.logger.error(f"Error fetching {self.config.file_path}: {str(e)}")
            raise RemoteReadError(f"Failed to load data: {str(e)}") from e

        try:
            payload = resp.json()
        except ValueError:
            raise RemoteReadError(
                f"Failed to load data: HTTP {resp.status_code} returned a non-JSON body",
                status_code=resp.status_code,
            )

        if not resp.ok:
            raise RemoteReadError(
                f"Failed to load data: HTTP {resp.status_code}: {_describe(payload)}",
                status_code=resp.status_code,
                response=payload,
            )
        if not isinstance(payload, dict) or not payload.get('sha'):
            raise RemoteReadError(
                f"Failed to load data: response has no sha: {_describe(payload)}",
                status_code=resp.status_code,
                response=payload,
            )
        if 'content' not in payload:
            raise RemoteReadError(
                'Failed to load data: response has no content',
                status_code=resp.status_code,
                response=payload,
            )

        try:
            records = decode_document(payload['content'])
        except DocumentFormatError as e:
            raise RemoteReadError(f"Failed to load data: {str(e)}", status_code=resp.status_code) from e

        sha = payload['sha']
        self.logger.info(f"Loaded {len(records)} records from {self.config.file_path} at {sha}")
        return records, sha

    def save_document(self, records: List[Record], sha: str, message: Optional[str] = None) -> str:
        """
        Replace the file content, conditional on sha still being current.
        Returns the new sha.
        """
        body = {
            'message': message or self.config.commit_message,
            'content': encode_document(records),
            'sha': sha,
        }
        if self.config.branch:
            body['branch'] = self.config.branch

        try:
            resp = self.session.put(
                self.config.contents_url,
                headers=self._headers(),
                json=body,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            self.logger.error(f"Error saving {self.config.file_path}: {str(e)}")
            raise RemoteWriteError(f"Error saving: {str(e)}") from e

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if resp.status_code == 409:
            self.logger.warning(f"Stale sha {sha} rejected for {self.config.file_path}")
            raise RevisionConflictError(
                f"Conflict: the file was changed in the repository since it was loaded ({_describe(payload)})",
                status_code=resp.status_code,
                response=payload,
            )

        content = payload.get('content') if isinstance(payload, dict) else None
        if not isinstance(content, dict) or not content.get('sha'):
            raise RemoteWriteError(
                f"Failed: {json.dumps(payload) if payload is not None else resp.text}",
                status_code=resp.status_code,
                response=payload,
            )

        new_sha = content['sha']
        self.logger.info(f"Saved {len(records)} records to {self.config.file_path}, {sha} -> {new_sha}")
        return new_sha
