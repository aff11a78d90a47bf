# ==============================================
# Tests for the Command Line Entry Point
# ==============================================

import argparse
import json

import pytest

from reverse_mapper import cli
from reverse_mapper.config import AppConfig, MappingConfig, MySQLConfig
from reverse_mapper.persistence.mapping_store import read_schema_file
from reverse_mapper.schema.source import StaticSchemaSource


@pytest.fixture
def schema_file(mapping_store, blog_tables):
    mapping_store.save_schema(blog_tables)
    return str(mapping_store.schema_file)


@pytest.fixture(autouse=True)
def fixed_config(monkeypatch, tmp_path):
    config = AppConfig(mysql=MySQLConfig(), mapping=MappingConfig(), output_dir=str(tmp_path / "out"))
    monkeypatch.setattr(cli, "get_config", lambda: config)
    return config


class TestCli:
    def test_entities(self, schema_file, capsys):
        capsys.readouterr()
        assert cli.main(["--schema-file", schema_file, "entities"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[:4] == ["User", "Group", "Article", "Profile"]

    def test_show(self, schema_file, capsys):
        capsys.readouterr()
        assert cli.main(["--schema-file", schema_file, "show", "Article"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["table"] == "article"
        assert data["associations"][0]["fieldName"] == "author"

    def test_show_unknown_class(self, schema_file, capsys):
        assert cli.main(["--schema-file", schema_file, "show", "Nope"]) == 1
        assert "Unknown class Nope" in capsys.readouterr().err

    def test_export(self, schema_file, tmp_path):
        output = tmp_path / "exported"
        assert cli.main(["--schema-file", schema_file, "export", "--output", str(output)]) == 0

        assert (output / "entities" / "User.json").exists()
        assert (output / "diagnostics.json").exists()
        assert (output / "schema.json").exists()

    def test_export_default_directory(self, schema_file, fixed_config, tmp_path):
        assert cli.main(["--schema-file", schema_file, "export"]) == 0
        assert (tmp_path / "out" / "entities" / "Group.json").exists()

    def test_export_reads_source_once(self, blog_tables, fixed_config, tmp_path):
        calls = []

        class CountingSource(StaticSchemaSource):
            def list_tables(self):
                calls.append(1)
                return super().list_tables()

        args = argparse.Namespace(command="export", output=str(tmp_path / "once"))
        assert cli.dispatch(args, CountingSource(blog_tables), fixed_config) == 0

        assert len(calls) == 1
        saved = read_schema_file(str(tmp_path / "once" / "schema.json"))
        assert saved.list_tables() == [table.name for table in blog_tables]

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.main([])
