import pytest
from unittest.mock import Mock

from config import RepoConfig
from github_client import RemoteReadError, RevisionConflictError


@pytest.fixture
def repo_config() -> RepoConfig:
    return RepoConfig(token="t0ken", owner="school", repo="records", file_path="data/students.json")


def make_response(status_code=200, payload=None, json_error=False):
    """Mock of a requests.Response carrying a JSON payload."""
    resp = Mock(status_code=status_code, ok=200 <= status_code < 400, text="")
    if json_error:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


class FakeClient:
    """
    Stand-in for GitHubDocumentClient that keeps the file in memory and
    rejects writes carrying a stale sha.
    """

    def __init__(self, records=None, sha="abc", fail_fetch=False):
        self.records = records if records is not None else []
        self.sha = sha
        self.fail_fetch = fail_fetch
        self.fetch_calls = 0
        self.save_calls = []
        self._counter = 0

    def fetch_document(self):
        self.fetch_calls += 1
        if self.fail_fetch:
            raise RemoteReadError("Failed to load data: connection refused")
        return [dict(r) for r in self.records], self.sha

    def save_document(self, records, sha, message=None):
        self.save_calls.append((records, sha))
        if sha != self.sha:
            raise RevisionConflictError("Conflict: the file was changed in the repository since it was loaded", status_code=409)
        self._counter += 1
        self.records = records
        self.sha = f"sha{self._counter}"
        return self.sha


@pytest.fixture
def fake_client():
    return FakeClient(records=[{"id": 1, "Name": "A"}], sha="abc")
