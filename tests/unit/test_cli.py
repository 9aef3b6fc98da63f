"""
Tests for the token commands of the CLI.
"""

import json

import pytest

from cli import main as cli
from configs.settings import settings
from core.security.signature import SessionSigner
from core.security.token_codec import TokenCodec
from runtime.store.session_store import SESSION_TTL_MS, now_millis


def _configured_codec() -> TokenCodec:
    return TokenCodec(SessionSigner(settings.session_secret))


def test_issue_token_prints_verifiable_token(capsys):
    assert cli.main(["issue-token", "s1", "g1", "--created-at", "1234"]) == 0

    token = capsys.readouterr().out.strip()
    data = _configured_codec().decode(token)
    assert (data.session_id, data.group_jid, data.created_at) == ("s1", "g1", 1234)


def test_issue_token_rejects_delimiter_in_session_id(capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["issue-token", "a:b", "g1"])

    assert exc_info.value.code == 2


def test_inspect_fresh_token(capsys):
    token = _configured_codec().issue("s1", "g1", now_millis())

    assert cli.main(["inspect-token", token]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["valid"] is True
    assert report["sessionId"] == "s1"
    assert report["groupJid"] == "g1"
    assert report["expired"] is False


def test_inspect_expired_token(capsys):
    token = _configured_codec().issue("s1", "g1", now_millis() - SESSION_TTL_MS - 60_000)

    assert cli.main(["inspect-token", token]) == 1

    report = json.loads(capsys.readouterr().out)
    assert report["valid"] is False
    assert report["expired"] is True


def test_inspect_garbage_token(capsys):
    assert cli.main(["inspect-token", "garbage"]) == 1

    assert json.loads(capsys.readouterr().out)["valid"] is False
