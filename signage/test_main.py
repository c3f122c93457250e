"""Tests for the command line interface."""

import json

import httpx
import pytest

import signage.llm
from signage.__main__ import main
from signage.llm import ProxyBackend


@pytest.fixture
def sign_file(tmp_path, hello_document):
    """Write the hello document to a temporary file."""
    path = tmp_path / "sign.json"
    path.write_text(json.dumps(hello_document), encoding="utf-8")
    return path


class TestImportCommand:
    """Tests for `signage import`."""

    @pytest.mark.unit
    def test_import_prints_composition(self, sign_file, capsys):
        """A valid document prints the composition and exits 0."""
        assert main(["import", str(sign_file), "--width", "1920", "--height", "1080"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["success"] is True
        box = data["frames"][0]["positionedElements"][0]
        assert (box["x"], box["y"], box["w"], box["h"]) == (60, 487, 1800, 106)

    @pytest.mark.unit
    def test_import_to_file(self, sign_file, tmp_path):
        """--output writes the composition to a file."""
        target = tmp_path / "out.json"
        assert main(["import", str(sign_file), "-o", str(target)]) == 0
        assert json.loads(target.read_text(encoding="utf-8"))["success"] is True

    @pytest.mark.unit
    def test_import_invalid_document(self, tmp_path):
        """An unimportable document exits 1."""
        path = tmp_path / "bad.json"
        path.write_text("[]", encoding="utf-8")
        assert main(["import", str(path)]) == 1

    @pytest.mark.unit
    def test_import_missing_file(self, tmp_path):
        """A missing file exits 1."""
        assert main(["import", str(tmp_path / "missing.json")]) == 1


class TestOtherCommands:
    """Tests for env, schema and dispatch."""

    @pytest.mark.unit
    def test_schema(self, capsys):
        """schema prints the model-facing schema reference."""
        assert main(["schema"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert "allow_lists" in data
        assert "limits" in data

    @pytest.mark.unit
    def test_env_category(self, capsys):
        """env --category lists only that category."""
        assert main(["env", "--category", "canvas"]) == 0
        out = capsys.readouterr().out
        assert "SIGNAGE_CANVAS_WIDTH" in out
        assert "SIGNAGE_PROXY_URL" not in out

    @pytest.mark.unit
    def test_no_command(self, capsys):
        """No command shows help and exits 1."""
        assert main([]) == 1
        assert "Usage:" in capsys.readouterr().out

    @pytest.mark.unit
    def test_help(self):
        """--help exits 0."""
        assert main(["--help"]) == 0

    @pytest.mark.unit
    def test_unknown_command(self):
        """Unknown commands exit 1."""
        assert main(["render"]) == 1


class TestGenerateCommand:
    """Tests for `signage generate`."""

    @pytest.mark.unit
    def test_missing_proxy(self, monkeypatch):
        """Without a proxy URL generation exits 1."""
        monkeypatch.delenv("SIGNAGE_PROXY_URL", raising=False)
        assert main(["generate", "a sign"]) == 1

    @pytest.mark.unit
    def test_generate_through_proxy(self, monkeypatch, capsys, hello_document):
        """A proxy answer is imported and printed."""
        content = json.dumps(hello_document)

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})

        def make_backend(url=None, timeout=None):
            client = httpx.Client(transport=httpx.MockTransport(handler))
            return ProxyBackend(url=url, timeout=timeout, client=client)

        monkeypatch.setattr(signage.llm, "ProxyBackend", make_backend)
        code = main(
            ["generate", "a sign", "--proxy-url", "https://proxy.test/chat", "--style", "0"]
        )
        assert code == 0
        assert json.loads(capsys.readouterr().out)["success"] is True
