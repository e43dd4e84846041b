"""Tests for the source tree registry."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from podforge.core.mount_state import MountState
from podforge.core.pod import Pod
from podforge.core.sources import SourcePaths, Sources
from podforge.exceptions import (
    AliasCollisionError,
    CouldNotParseError,
    LibHasRepoSubdirectoryError,
    UnknownSourceError,
)
from podforge.models.context import BuildContext
from podforge.models.target import Target
from podforge.services.exceptions import GitServiceError


def load_sources(root: Path, pod_names, mount_state=None) -> Sources:
    pods = [Pod(root / "pods", name, []) for name in pod_names]
    return Sources.load(pods, root / "config" / "sources.yml", mount_state)


class TestSourcesLoad:
    """Test cases for Sources.load."""

    def test_from_pods_and_libraries(self, project_dir):
        """Build contexts and libraries are both sources."""
        sources = load_sources(project_dir, ["frontend", "db", "migrate"])
        assert [s.alias for s in sources] == ["utils", "web"]
        web = sources.find_by_alias("web")
        assert web.context == BuildContext("https://github.com/example/web.git")
        assert not web.mounted
        assert sources.find_by_lib_key("utils").alias == "utils"
        assert sources.find_by_lib_key("nope") is None
        assert sources.lib_keys() == ["utils"]

    def test_subdirectories_share_one_source(self, make_project):
        """Two subdirectories of one repository are one source."""
        root = make_project({
            "pods/app.yml": """
                services:
                  one:
                    build: "https://example.com/repo.git/sub1"
                  two:
                    build: "https://example.com/repo.git/sub2"
                """,
        })
        sources = load_sources(root, ["app"])
        assert len(sources) == 1
        one = sources.find_by_origin("https://example.com/repo.git/sub1")
        two = sources.find_by_origin("https://example.com/repo.git/sub2")
        assert one is two
        paths = SourcePaths(src_dir=root / "src", pods_dir=root / "pods")
        assert one.path(paths) == root / "src" / "repo"

    def test_alias_collision(self, make_project):
        """Two repositories called foo can't both be checked out."""
        root = make_project({
            "pods/app.yml": """
                services:
                  one:
                    build: "https://example.com/a/foo.git"
                  two:
                    build: "https://example.com/b/foo.git"
                """,
        })
        with pytest.raises(AliasCollisionError) as exc_info:
            load_sources(root, ["app"])
        assert exc_info.value.alias == "foo"
        message = str(exc_info.value)
        assert "https://example.com/a/foo.git" in message
        assert "https://example.com/b/foo.git" in message

    def test_same_repository_in_override(self, make_project):
        """Repeating a repository in an override is not a collision."""
        root = make_project({
            "pods/app.yml": "services:\n  one:\n    build: 'https://example.com/foo.git'\n",
            "pods/targets/production/app.yml":
                "services:\n  one:\n    build: 'https://example.com/foo.git#main:sub'\n",
        })
        pods = [Pod(root / "pods", "app", [Target("production")])]
        sources = Sources.load(pods)
        assert [s.alias for s in sources] == ["foo", "foo_main"]

    def test_library_with_subdirectory(self, make_project):
        """Libraries must name a whole repository."""
        root = make_project({
            "pods/app.yml": "services:\n  one:\n    image: a\n",
            "config/sources.yml": "utils: 'https://example.com/utils.git#main:lib'\n",
        })
        with pytest.raises(LibHasRepoSubdirectoryError) as exc_info:
            load_sources(root, ["app"])
        assert exc_info.value.lib_key == "utils"

    def test_library_config_shapes(self, make_project):
        """Libraries may be a bare string or a `context` mapping."""
        root = make_project({
            "pods/app.yml": "services:\n  one:\n    image: a\n",
            "config/sources.yml": """
                plain: "https://example.com/plain.git"
                nested:
                  context: "https://example.com/nested.git"
                """,
        })
        sources = load_sources(root, ["app"])
        assert sources.find_by_lib_key("plain").alias == "plain"
        assert sources.find_by_lib_key("nested").alias == "nested"

    def test_bad_library_config(self, make_project):
        """Library entries must have a context."""
        root = make_project({
            "pods/app.yml": "services:\n  one:\n    image: a\n",
            "config/sources.yml": "utils:\n  url: 'https://example.com/utils.git'\n",
        })
        with pytest.raises(CouldNotParseError):
            load_sources(root, ["app"])

    def test_dir_sources(self, make_project):
        """Directory contexts are resolved relative to the pods directory."""
        root = make_project({
            "pods/app.yml": "services:\n  one:\n    build: ../src/node_hello\n",
            "src/node_hello/": "",
        })
        sources = load_sources(root, ["app"])
        source = sources.find_by_alias("node_hello")
        paths = SourcePaths(src_dir=root / "src", pods_dir=root / "pods")
        assert not source.is_git
        assert source.path(paths) == root / "pods" / "../src/node_hello"
        assert source.is_available_locally(paths)

    def test_mount_state_applied(self, project_dir):
        """Mount flags are read from the mount state."""
        state = MountState(project_dir / ".podforge" / "sources.json")
        state.set_mounted("web", True)
        sources = load_sources(project_dir, ["frontend"], state)
        assert sources.find_by_alias("web").mounted
        assert not sources.find_by_alias("utils").mounted


class TestSourcesLookup:
    """Test cases for finding sources."""

    def test_find_by_origin_ignores_other_repositories(self, project_dir):
        """A different repository with the same alias isn't a match."""
        sources = load_sources(project_dir, ["frontend"])
        assert sources.find_by_origin("https://github.com/example/web.git") is not None
        assert sources.find_by_origin("https://gitlab.com/other/web.git") is None
        assert sources.find_by_origin("/abs/path/web") is None

    def test_find_by_alias_or_err(self, project_dir):
        """Unknown aliases are errors."""
        sources = load_sources(project_dir, ["frontend"])
        with pytest.raises(UnknownSourceError):
            sources.find_by_alias_or_err("nope")


class TestSourcesClone:
    """Test cases for cloning sources."""

    def test_clone_mounts(self, project_dir):
        """A successful clone marks the source as mounted and saves it."""
        state_file = project_dir / ".podforge" / "sources.json"
        sources = load_sources(project_dir, ["frontend"], MountState(state_file))
        paths = SourcePaths(src_dir=project_dir / "src", pods_dir=project_dir / "pods")
        git = Mock()

        source = sources.clone("web", git, paths)

        git.clone.assert_called_once_with(source.context.git_url, project_dir / "src" / "web")
        assert source.mounted
        assert MountState(state_file).is_mounted("web")

    def test_clone_failure_leaves_flag(self, project_dir):
        """A failed clone raises and doesn't touch the mount flag."""
        state_file = project_dir / ".podforge" / "sources.json"
        sources = load_sources(project_dir, ["frontend"], MountState(state_file))
        paths = SourcePaths(src_dir=project_dir / "src", pods_dir=project_dir / "pods")
        git = Mock()
        git.clone.side_effect = GitServiceError(
            "Error cloning https://github.com/example/web.git to src/web", ["git", "clone"]
        )

        with pytest.raises(GitServiceError, match="example/web.git"):
            sources.clone("web", git, paths)

        assert not sources.find_by_alias("web").mounted
        assert not state_file.exists()

    def test_dir_sources_cannot_be_cloned(self, make_project):
        """Only git sources can be cloned."""
        root = make_project({"pods/app.yml": "services:\n  one:\n    build: ../src/app\n"})
        sources = load_sources(root, ["app"])
        paths = SourcePaths(src_dir=root / "src", pods_dir=root / "pods")
        with pytest.raises(CouldNotParseError):
            sources.clone("app", Mock(), paths)

    def test_set_mounted(self, project_dir):
        """Mounting and unmounting are persisted."""
        state_file = project_dir / ".podforge" / "sources.json"
        sources = load_sources(project_dir, ["frontend"], MountState(state_file))
        sources.set_mounted("utils", True)
        assert MountState(state_file).is_mounted("utils")
        sources.set_mounted("utils", False)
        assert not MountState(state_file).is_mounted("utils")
