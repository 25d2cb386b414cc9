"""Tests for the GitHub REST client (network mocked)."""

from unittest.mock import Mock

import pytest
import requests

from day0_guard.github import GitHubClient, GitHubError


def _response(status_code=200, payload=None, content=b""):
    response = Mock(status_code=status_code, content=content)
    response.json.return_value = payload
    return response


@pytest.fixture
def session():
    session = Mock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def client(session):
    return GitHubClient("t0ken", "acme/app", api_url="https://api.github.test/", session=session)


class TestTransport:
    def test_auth_headers_are_installed(self, client, session):
        assert session.headers["Authorization"] == "token t0ken"
        assert session.headers["Accept"] == "application/vnd.github+json"

    def test_repository_must_be_owner_slash_name(self, session):
        with pytest.raises(ValueError):
            GitHubClient("t", "app", session=session)


class TestContent:
    def test_get_content_passes_ref(self, client, session):
        session.get.return_value = _response(payload={"type": "file", "content": ""})

        document = client.get_content("apps/web/yarn.lock", "abc123")

        assert document == {"type": "file", "content": ""}
        session.get.assert_called_once_with(
            "https://api.github.test/repos/acme/app/contents/apps/web/yarn.lock",
            params={"ref": "abc123"},
            timeout=10.0,
        )

    def test_get_content_encodes_path_segments(self, client, session):
        session.get.return_value = _response(payload={"type": "file", "content": ""})

        client.get_content("/apps/c#%?/package-lock.json", "abc123")

        assert session.get.call_args.args[0] == (
            "https://api.github.test/repos/acme/app/contents/apps/c%23%25%3F/package-lock.json"
        )

    def test_missing_content_is_none(self, client, session):
        session.get.return_value = _response(status_code=404)

        assert client.get_content("yarn.lock", "abc123") is None

    def test_server_error_raises(self, client, session):
        session.get.return_value = _response(status_code=502)

        with pytest.raises(GitHubError) as excinfo:
            client.get_content("yarn.lock", "abc123")
        assert excinfo.value.status_code == 502

    def test_request_exception_is_wrapped(self, client, session):
        session.get.side_effect = requests.exceptions.InvalidURL("bad")

        with pytest.raises(GitHubError):
            client.get_content("yarn.lock", "abc123")

    def test_commit_tree_sha(self, client, session):
        session.get.return_value = _response(payload={"commit": {"tree": {"sha": "tree123"}}})

        assert client.get_commit_tree_sha("abc123") == "tree123"

    def test_commit_without_tree_raises(self, client, session):
        session.get.return_value = _response(payload={"commit": {}})

        with pytest.raises(GitHubError):
            client.get_commit_tree_sha("abc123")

    def test_list_tree_is_recursive(self, client, session):
        session.get.return_value = _response(
            payload={
                "sha": "tree123",
                "truncated": False,
                "tree": [{"path": "yarn.lock", "type": "blob"}, "junk"],
            }
        )

        entries = client.list_tree("tree123")

        assert entries == [{"path": "yarn.lock", "type": "blob"}]
        assert session.get.call_args.kwargs["params"] == {"recursive": "1"}

    def test_download_returns_bytes(self, client, session):
        session.get.return_value = _response(content=b"raw bytes")

        assert client.download("https://raw.githubusercontent.com/x") == b"raw bytes"


class TestChecksAndComments:
    def test_create_check_run(self, client, session):
        session.request.return_value = _response(status_code=201, payload={"id": 42})

        assert client.create_check_run("Day-0 Dependency Guard", "abc123") == 42
        method, url = session.request.call_args.args
        assert (method, url) == ("POST", "https://api.github.test/repos/acme/app/check-runs")
        assert session.request.call_args.kwargs["json"] == {
            "name": "Day-0 Dependency Guard",
            "head_sha": "abc123",
            "status": "in_progress",
        }

    def test_complete_check_run(self, client, session):
        session.request.return_value = _response(payload={"id": 42})

        client.complete_check_run(
            42, conclusion="neutral", title="Day-0 Dependency Guard", summary="No lockfile parsed"
        )

        method, url = session.request.call_args.args
        assert (method, url) == ("PATCH", "https://api.github.test/repos/acme/app/check-runs/42")
        assert session.request.call_args.kwargs["json"] == {
            "status": "completed",
            "conclusion": "neutral",
            "output": {"title": "Day-0 Dependency Guard", "summary": "No lockfile parsed"},
        }

    def test_create_comment(self, client, session):
        session.request.return_value = _response(
            status_code=201, payload={"html_url": "https://github.com/acme/app/pull/7#c1"}
        )

        assert client.create_comment(7, "hello") == "https://github.com/acme/app/pull/7#c1"
        assert session.request.call_args.args[1].endswith("/issues/7/comments")

    def test_failed_post_raises(self, client, session):
        session.request.return_value = _response(status_code=403)

        with pytest.raises(GitHubError):
            client.create_comment(7, "hello")
