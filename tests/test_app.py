"""CLI tests for openapi2proto.app using Typer's CliRunner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from openapi2proto import __version__
from openapi2proto.app import app
from openapi2proto.exit_codes import EXIT_REFERENCE_ERROR, EXIT_SPEC_PARSE_ERROR


class TestVersion:
    def test_version_flag(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"openapi2proto {__version__}" in result.output

    def test_no_args_shows_help(self, cli_runner) -> None:
        result = cli_runner.invoke(app, [])
        assert "resolve" in result.output
        assert "inspect" in result.output


class TestResolveCommand:
    """``openapi2proto resolve``."""

    def test_json_output(self, cli_runner, petstore_dir: Path, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["--quiet", "resolve", str(petstore_dir / "openapi.yaml")]
        )
        assert result.exit_code == 0, result.output
        tree = json.loads(result.stdout)
        limit = tree["paths"]["/pets"]["get"]["parameters"][0]
        assert limit["name"] == "limit"
        envelope = tree["components"]["schemas"]["PetEnvelope"]["properties"]
        assert envelope["created"] == {"$ref": "google/protobuf/timestamp.proto#Timestamp"}

    def test_yaml_output(self, cli_runner, petstore_dir: Path, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["--quiet", "resolve", "--yaml", str(petstore_dir / "openapi.yaml")]
        )
        assert result.exit_code == 0, result.output
        tree = yaml.safe_load(result.stdout)
        assert tree["info"]["title"] == "Petstore API"
        assert "200" in tree["paths"]["/pets"]["get"]["responses"]

    def test_dir_option(
        self, cli_runner, petstore_dir: Path, isolated_config: Path
    ) -> None:
        spec = isolated_config / "openapi.yaml"
        spec.write_text((petstore_dir / "openapi.yaml").read_text())
        result = cli_runner.invoke(
            app, ["--quiet", "resolve", str(spec), "--dir", str(petstore_dir)]
        )
        assert result.exit_code == 0, result.output

    def test_dir_from_environment(
        self,
        cli_runner,
        petstore_dir: Path,
        isolated_config: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        spec = isolated_config / "openapi.yaml"
        spec.write_text((petstore_dir / "openapi.yaml").read_text())
        monkeypatch.setenv("OPENAPI2PROTO_DIR", str(petstore_dir))
        result = cli_runner.invoke(app, ["--quiet", "resolve", str(spec)])
        assert result.exit_code == 0, result.output

    def test_yaml_dates_serialize(self, cli_runner, isolated_config: Path) -> None:
        (isolated_config / "schemas.yaml").write_text(
            "Event:\n  type: string\n  format: date\n  example: 2024-01-01\n"
        )
        spec = isolated_config / "api.yaml"
        spec.write_text(
            "openapi: 3.0\n"
            "info:\n  title: Events\n  version: 2024-01-01\n"
            "components:\n  schemas:\n    Event:\n      $ref: 'schemas.yaml#/Event'\n"
        )
        result = cli_runner.invoke(app, ["--quiet", "resolve", str(spec)])
        assert result.exit_code == 0, result.output
        tree = json.loads(result.stdout)
        assert tree["info"]["version"] == "2024-01-01"
        assert tree["components"]["schemas"]["Event"]["example"] == "2024-01-01"

    def test_broken_ref_exit_code(self, cli_runner, isolated_config: Path) -> None:
        spec = isolated_config / "api.yaml"
        spec.write_text("components:\n  schemas:\n    Pet:\n      $ref: 'gone.yaml#/Pet'\n")
        result = cli_runner.invoke(app, ["--quiet", "--no-color", "resolve", str(spec)])
        assert result.exit_code == EXIT_REFERENCE_ERROR
        assert "failed to resolve /components/schemas/Pet" in result.output

    def test_missing_spec_exit_code(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--quiet", "resolve", "nope.yaml"])
        assert result.exit_code == EXIT_SPEC_PARSE_ERROR


class TestInspectCommand:
    """``openapi2proto inspect``."""

    def test_lists_endpoints(self, cli_runner, petstore_dir: Path, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["--quiet", "--no-color", "inspect", str(petstore_dir / "openapi.yaml")]
        )
        assert result.exit_code == 0, result.output
        assert "GET\t/pets\tlistPets" in result.stdout
        assert "POST\t/pets\tcreatePet" in result.stdout
        assert "GET\t/pets/{petId}\tgetPet" in result.stdout

    def test_no_endpoints(self, cli_runner, isolated_config: Path) -> None:
        spec = isolated_config / "empty.yaml"
        spec.write_text("openapi: '3.0.3'\ninfo:\n  title: Empty\n")
        result = cli_runner.invoke(app, ["--no-color", "inspect", str(spec)])
        assert result.exit_code == 0
        assert "No endpoints defined in this spec." in result.output

    def test_float_openapi_version(self, cli_runner, isolated_config: Path) -> None:
        spec = isolated_config / "api.yaml"
        spec.write_text(
            "openapi: 3.0\ninfo:\n  title: Pets\npaths:\n  /pets:\n    get:\n      operationId: listPets\n"
        )
        result = cli_runner.invoke(app, ["--quiet", "--no-color", "inspect", str(spec)])
        assert result.exit_code == 0, result.output
        assert "GET\t/pets\tlistPets" in result.stdout

    def test_invalid_document_exit_code(self, cli_runner, isolated_config: Path) -> None:
        spec = isolated_config / "bad.json"
        spec.write_text('{"paths": {"/x": {"get": {"tags": "nope"}}}}')
        result = cli_runner.invoke(app, ["--quiet", "inspect", str(spec)])
        assert result.exit_code == EXIT_SPEC_PARSE_ERROR
