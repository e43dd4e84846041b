import textwrap
from pathlib import Path
from typing import Dict
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner


def write_files(root: Path, files: Dict[str, str]) -> Path:
    """Write `files` (relative path -> contents) under `root`.

    A path ending in `/` creates an empty directory.
    """
    for rel_path, contents in files.items():
        path = root / rel_path
        if rel_path.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(contents).lstrip())
    return root


EXAMPLE_PROJECT = {
    "pods/common.env": """
        SHARED=base
        """,
    "pods/frontend.yml": """
        services:
          web:
            image: "example/web:1.0"
            build:
              context: "https://github.com/example/web.git"
            ports:
              - "80"
            environment:
              MODE: development
            volumes:
              - "./data:/data"
            labels:
              io.podforge.lib.utils: /usr/src/utils
        """,
    "pods/db.yml": """
        services:
          db:
            image: postgres
        """,
    "pods/db.metadata.yml": """
        enable_in_targets:
          - development
        """,
    "pods/migrate.yml": """
        services:
          migrate:
            image: "example/web:1.0"
            command: "rake db:migrate"
        """,
    "pods/migrate.metadata.yml": """
        pod_type: task
        """,
    "pods/targets/development/": "",
    "pods/targets/test/": "",
    "pods/targets/production/frontend.yml": """
        services:
          web:
            image: "example/web:2.0"
            environment:
              MODE: production
        """,
    "config/sources.yml": """
        utils:
          context: "https://github.com/example/utils.git"
        """,
    "config/secrets.yml": """
        common:
          GLOBAL_PASSWORD: magic
        targets:
          production:
            common:
              GLOBAL_PASSWORD: prod-magic
        pods:
          frontend:
            web:
              DB_PASSWORD: secret
        """,
}


@pytest.fixture
def cli_runner():
    """Provides a Click CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def mock_docker_client():
    """Provides a mocked Docker client."""
    mock_client = MagicMock()
    mock_client.ping.return_value = True
    mock_client.containers.list.return_value = []
    return mock_client


@pytest.fixture
def project_dir(tmp_path):
    """Creates a project with frontend, db and migrate pods."""
    root = tmp_path / "myapp"
    return write_files(root, EXAMPLE_PROJECT)


@pytest.fixture
def make_project(tmp_path):
    """Returns a function which writes a project from a dict of files."""
    def make(files: Dict[str, str], name: str = "proj") -> Path:
        return write_files(tmp_path / name, files)
    return make


@pytest.fixture(autouse=True)
def not_linux(monkeypatch):
    """Keep the host DNS plugin from shelling out to `ip` during tests."""
    monkeypatch.setattr("podforge.plugins.host_dns.platform.system", lambda: "Darwin")


@pytest.fixture(autouse=True)
def no_vault_env(monkeypatch):
    """Tests must not talk to a real Vault server."""
    monkeypatch.delenv("VAULT_ADDR", raising=False)
    monkeypatch.delenv("VAULT_MASTER_TOKEN", raising=False)


@pytest.fixture
def isolated_cli_runner(cli_runner):
    """Provides a CLI runner with isolated filesystem."""
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def in_project(project_dir, monkeypatch):
    """Runs the test from inside the example project."""
    monkeypatch.chdir(project_dir)
    return project_dir
