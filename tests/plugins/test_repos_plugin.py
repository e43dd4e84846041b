"""Tests for the repos plugin."""

from podforge.core.project import Project
from podforge.plugins import Operation, PluginContext
from podforge.plugins.repos import ReposPlugin


def transform(project, op=Operation.OUTPUT):
    pod = project.pod("frontend")
    file = pod.merged_file(project.target)
    ReposPlugin(project).transform(op, PluginContext(project, pod), file)
    return file.services["web"]


class TestReposPlugin:
    """Test cases for ReposPlugin."""

    def test_configured_by_project(self, project_dir):
        """Only projects using the repos registry run the plugin."""
        assert not ReposPlugin.is_configured_for(Project(project_dir))
        (project_dir / "config" / "project.yml").write_text("source_registry: repos\n")
        assert ReposPlugin.is_configured_for(Project(project_dir))

    def test_not_cloned(self, project_dir):
        """Repositories that aren't checked out are left alone."""
        web = transform(Project(project_dir))
        assert web.build.context == "https://github.com/example/web.git"

    def test_cloned(self, project_dir):
        """Any cloned repository is mounted, no mount flag needed."""
        web_dir = project_dir / "src" / "web"
        web_dir.mkdir(parents=True)
        web = transform(Project(project_dir))
        assert web.build.context == str(web_dir)
        assert f"{web_dir}:/app" in web.volumes

    def test_export(self, project_dir):
        """Exports are left alone."""
        (project_dir / "src" / "web").mkdir(parents=True)
        web = transform(Project(project_dir), op=Operation.EXPORT)
        assert web.build.context == "https://github.com/example/web.git"
