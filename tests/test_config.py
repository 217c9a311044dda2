import pytest

from config import RepoConfig, ConfigError, DEFAULT_API_URL, DEFAULT_COMMIT_MESSAGE


def test_from_env_reads_required_values():
    cfg = RepoConfig.from_env({
        "GITHUB_TOKEN": "abc",
        "OWNER": "school",
        "REPO": "records",
        "FILE_PATH": "students.json",
    })
    assert cfg.token == "abc"
    assert cfg.branch is None
    assert cfg.api_url == DEFAULT_API_URL
    assert cfg.commit_message == DEFAULT_COMMIT_MESSAGE
    assert cfg.contents_url == "https://api.github.com/repos/school/records/contents/students.json"


def test_from_env_accepts_vite_prefixed_names():
    cfg = RepoConfig.from_env({
        "VITE_GITHUB_TOKEN": "abc",
        "VITE_OWNER": "school",
        "VITE_REPO": "records",
        "VITE_FILE_PATH": "/data/students.json",
        "GITHUB_BRANCH": "main",
        "REQUEST_TIMEOUT": "5",
    })
    assert cfg.branch == "main"
    assert cfg.timeout == 5.0
    assert cfg.contents_url.endswith("/contents/data/students.json")


def test_from_env_reports_every_missing_setting():
    with pytest.raises(ConfigError) as exc:
        RepoConfig.from_env({"OWNER": "school"})
    msg = str(exc.value)
    assert "token" in msg and "repo" in msg and "file_path" in msg
    assert "owner" not in msg


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_from_env_rejects_bad_timeout(raw):
    env = {"GITHUB_TOKEN": "a", "OWNER": "b", "REPO": "c", "FILE_PATH": "d", "REQUEST_TIMEOUT": raw}
    with pytest.raises(ConfigError):
        RepoConfig.from_env(env)
