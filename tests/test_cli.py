import json
from urllib.parse import parse_qs

import pytest
import responses

from neocities.cli import (
    VERSION,
    build_runner,
    list_current_files,
    list_local_files,
    main,
    print_usage,
)
from neocities.credentials import Credentials

API = "https://neocities.org/api/"


@pytest.fixture
def env(monkeypatch):
    for name in ("NEOCITIES_API_KEY", "NEOCITIES_VERBOSE", "NEOCITIES_USER", "NEOCITIES_PASS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NEOCITIES_USER", "foo")
    monkeypatch.setenv("NEOCITIES_PASS", "password")
    return monkeypatch


def _as_text(body):
    return body.decode("utf-8") if isinstance(body, bytes) else body


def test_usage_without_args(env, capsys):
    assert main([]) == 0
    assert "neocities <command> [<args>]" in capsys.readouterr().out


def test_print_usage_lists_commands(capsys):
    print_usage()
    out = capsys.readouterr().out
    assert out.startswith("usage: neocities <command> [<args>]")
    assert "upload-root  Upload local files to webroot" in out


def test_help_for_command(env, capsys):
    assert main(["help", "version"]) == 0
    assert "Show the version number of the neocities client" in capsys.readouterr().out


def test_help_without_command(env, capsys):
    assert main(["help"]) == 0
    assert "Help for a specific command:" in capsys.readouterr().out


def test_missing_user(env, capsys):
    env.setenv("NEOCITIES_USER", "")
    assert main(["upload", "LICENSE"]) == 0
    assert (
        "Error: Missing environment variable NEOCITIES_USER or NEOCITIES_API_KEY"
        in capsys.readouterr().out
    )


def test_missing_password(env, capsys):
    env.setenv("NEOCITIES_USER", "foo")
    env.setenv("NEOCITIES_PASS", "")
    assert main(["upload", "LICENSE"]) == 0
    assert "Error: Missing environment variable NEOCITIES_PASS" in capsys.readouterr().out


@pytest.mark.parametrize(
    "name, usage, short, long",
    [
        (
            "delete",
            "delete <filename> [<another filename>]",
            "Delete files from Neocities",
            "Delete files from your Neocities website",
        ),
        ("help", "help [command]", "Show help", "Show usage instructions for a command"),
        (
            "info",
            "info [sitename]",
            "Info about Neocities websites",
            "Info about your Neocities website, or somebody elses",
        ),
        (
            "upload",
            "upload <filename> [<another filename>]",
            "Upload files to Neocities",
            "Upload files to your Neocities website",
        ),
        (
            "version",
            "version",
            "Show neocities version",
            "Show the version number of the neocities client",
        ),
    ],
)
def test_command_descriptions(name, usage, short, long):
    command = build_runner().lookup(name)
    assert command.usage == usage
    assert command.short == short
    assert command.long == long


def test_version(env, capsys):
    assert VERSION == "0.0.4"
    assert main(["version"]) == 0
    assert capsys.readouterr().out == "neocities version 0.0.4\n"


def test_runner_has_all_commands():
    names = set(build_runner().all())
    assert names == {
        "delete",
        "delete-all",
        "help",
        "info",
        "key",
        "list",
        "upload",
        "upload-root",
        "version",
    }


def test_delete_without_params_prints_usage(env, capsys):
    assert main(["delete"]) == 0
    assert "usage: neocities delete <filename> [<another filename>]" in capsys.readouterr().out


def test_delete_sends_filenames(env, capsys):
    env.setenv("NEOCITIES_VERBOSE", "true")
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, API + "delete", json={"result": "success", "message": "ok"})
        assert main(["delete", "a.html", "b.html"]) == 0
        body = _as_text(rsps.calls[0].request.body)
    assert parse_qs(body) == {"filenames[]": ["a.html", "b.html"]}
    assert "Message:   ok" in capsys.readouterr().out


def test_delete_error_status(env, capsys):
    payload = {"result": "error", "error_type": "missing_files", "message": "nothing"}
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, API + "delete", json=payload, status=400)
        assert main(["delete", "a.html"]) == 1
    out = capsys.readouterr().out
    assert "ErrorType: missing_files" in out
    assert "Message:   nothing" in out


def test_list_current_files_skips_index_and_children(env):
    listing = {
        "result": "success",
        "files": [
            {"path": "index.html", "is_directory": False},
            {"path": "images", "is_directory": True},
            {"path": "images/a.png", "is_directory": False},
            {"path": "b.html", "is_directory": False},
        ],
    }
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, API + "list", json=listing)
        files = list_current_files(Credentials(key="placeholder"))
    assert files == ["images", "b.html"]


def test_delete_all(env):
    listing = {
        "result": "success",
        "files": [
            {"path": "index.html", "is_directory": False},
            {"path": "c.css", "is_directory": False},
        ],
    }
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, API + "list", json=listing)
        rsps.add(responses.POST, API + "delete", json={"result": "success"})
        assert main(["delete-all"]) == 0
        body = _as_text(rsps.calls[1].request.body)
    assert parse_qs(body) == {"filenames[]": ["c.css"]}


def test_list_local_files(tmp_path):
    (tmp_path / "b.html").write_text("b")
    (tmp_path / "a.html").write_text("a")
    (tmp_path / ".DS_Store").write_text("x")
    (tmp_path / "css").mkdir()
    assert list_local_files(str(tmp_path)) == ["a.html", "b.html", "css"]


def test_list_local_files_missing_directory(tmp_path):
    assert list_local_files(str(tmp_path / "absent")) == []


def test_upload_root(env, tmp_path):
    (tmp_path / "a.html").write_text("hello")
    (tmp_path / ".DS_Store").write_text("x")
    env.chdir(tmp_path)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, API + "upload", json={"result": "success"})
        assert main(["upload-root"]) == 0
        body = rsps.calls[0].request.body
    assert b'filename="a.html"' in body
    assert b"hello" in body
    assert b".DS_Store" not in body


def test_upload(env, tmp_path):
    target = tmp_path / "page.html"
    target.write_text("content")
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, API + "upload", json={"result": "success"})
        assert main(["upload", str(target)]) == 0
        body = rsps.calls[0].request.body
    assert b"content" in body


def test_info_for_named_site(env, capsys):
    text = '{"result":"success","info":{"sitename":"foo","hits":5}}'
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, API + "info?sitename=foo", body=text, status=200)
        assert main(["info", "foo"]) == 0
    assert capsys.readouterr().out == text


def test_key_prints_api_key(env, capsys):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, API + "key", json={"result": "success", "api_key": "placeholder"})
        assert main(["key"]) == 0
    assert capsys.readouterr().out == "placeholder\n"


def test_list_dumps_listing(env, capsys):
    listing = {
        "result": "success",
        "files": [{"path": "a.html", "is_directory": False, "size": 10, "updated_at": "today"}],
    }
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, API + "list", json=listing)
        assert main(["list"]) == 0
    assert json.loads(capsys.readouterr().out) == listing


def test_unknown_command_is_ignored(env, capsys):
    assert main(["nothing"]) == 0
    assert capsys.readouterr().out == ""