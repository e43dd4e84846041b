"""Tests for the export command."""

import yaml

from podforge.cli.main import cli


class TestExportCommand:
    """Test cases for `podforge export`."""

    def test_export(self, cli_runner, in_project, tmp_path):
        """Test exporting a target."""
        export_dir = tmp_path / 'exported'
        result = cli_runner.invoke(cli, ['-t', 'production', 'export', str(export_dir)])

        assert result.exit_code == 0, result.output
        assert f"Exported {export_dir / 'frontend.yml'}" in result.output
        assert (export_dir / 'tasks' / 'migrate.yml').exists()
        assert not (export_dir / 'db.yml').exists()

    def test_export_existing_directory(self, cli_runner, in_project, tmp_path):
        """Test that exports refuse to overwrite."""
        result = cli_runner.invoke(cli, ['export', str(tmp_path)])

        assert result.exit_code == 1
        assert 'already exists' in result.output

    def test_export_with_default_tags(self, cli_runner, in_project, tmp_path):
        """Test pinning untagged images from a tags file."""
        tags_file = tmp_path / 'tags.txt'
        tags_file.write_text('postgres:9.6\nexample/web:1.0\n')
        export_dir = tmp_path / 'exported'

        result = cli_runner.invoke(
            cli, ['--default-tags', str(tags_file), 'export', str(export_dir)]
        )

        assert result.exit_code == 0, result.output
        data = yaml.safe_load((export_dir / 'db.yml').read_text())
        assert data['services']['db']['image'] == 'postgres:9.6'

    def test_export_with_bad_default_tags(self, cli_runner, in_project, tmp_path):
        """Test that untagged lines in the tags file are rejected."""
        tags_file = tmp_path / 'tags.txt'
        tags_file.write_text('postgres\n')

        result = cli_runner.invoke(
            cli, ['--default-tags', str(tags_file), 'export', str(tmp_path / 'exported')]
        )

        assert result.exit_code == 1
        assert 'Default image must have tag: postgres' in result.output
