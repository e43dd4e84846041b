"""Build contexts and git-format "URLs".

Git repositories may be given as ordinary `http(s)://`, `git://` or `ssh://`
URLs, or as `scp`-style `git@host:path` specifiers, just like in the `build`
section of a `docker-compose.yml` file.  A fragment of the form
`#branch:subdir` selects a branch and/or a subdirectory of the repository.
We also accept `repo.git/subdir`, which names a subdirectory directly in
the path.
"""

import os
import re
from typing import List, Optional, Tuple

from ..exceptions import CouldNotParseError

_URL_VALIDATE = re.compile(r"^(?:https?://|git://|ssh://|github\.com/|git@)")
_SCP_LIKE = re.compile(r"^git@([^:]+):(.*)$")
_HOST_PREFIX = re.compile(r"^(?:[a-z+]+://[^/]*|github\.com|git@[^:]*:)")
_PATH_SUBDIR = re.compile(r"^(.*?\.git)/(.+?)/?$")
_UNSAFE_ALIAS_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def looks_like_git_url(value: str) -> bool:
    """Would docker-compose treat this build context as a git repository?"""
    return bool(_URL_VALIDATE.match(value))


class GitUrl:
    """URL of a git repository, with optional branch and subdirectory."""

    def __init__(self, url: str):
        if not looks_like_git_url(url):
            raise CouldNotParseError("git URL", url)
        self.url = url
        self._base, self.branch, self.subdirectory = self._split(url)

    @staticmethod
    def _split(url: str) -> Tuple[str, Optional[str], Optional[str]]:
        base, _, fragment = url.partition("#")
        branch, _, fragment_subdir = fragment.partition(":")

        path_subdir = None
        # Only the path may name a subdirectory; hosts can end in `.git` too.
        host = _HOST_PREFIX.match(base)
        prefix = host.group(0) if host else ""
        match = _PATH_SUBDIR.match(base[len(prefix):])
        if match:
            base, path_subdir = prefix + match.group(1), match.group(2)
        if path_subdir and fragment_subdir:
            raise CouldNotParseError("git URL with a single subdirectory", url)

        subdir = (path_subdir or fragment_subdir).strip("/") or None
        return base, branch or None, subdir

    @property
    def base_url(self) -> str:
        """The repository URL with no branch and no subdirectory."""
        return self._base

    def repository_url(self) -> str:
        """The URL of the whole repository, keeping the branch.

        Two `GitUrl` values naming different subdirectories of the same
        repository and branch have the same `repository_url`.
        """
        if self.branch:
            return f"{self._base}#{self.branch}"
        return self._base

    def without_subdirectory(self) -> "GitUrl":
        return GitUrl(self.repository_url())

    def alias(self) -> str:
        """A short local name for this repository.

        The last non-empty path segment without its `.git` suffix, plus
        `_<branch>` when a branch is given.
        """
        segments = [s for s in re.split(r"[/:]", self._base) if s]
        if not segments:
            raise CouldNotParseError("git URL with a repository name", self.url)
        name = segments[-1]
        if name.endswith(".git"):
            name = name[: -len(".git")]
        if self.branch:
            name = f"{name}_{self.branch}"
        return _UNSAFE_ALIAS_CHARS.sub("_", name)

    def clone_args(self) -> List[str]:
        """Arguments to pass to `git clone` before the destination."""
        if self.branch:
            return ["-b", self.branch, self._base]
        return [self._base]

    def to_url(self) -> str:
        """Convert scp-style and `github.com/` specifiers to real URLs."""
        match = _SCP_LIKE.match(self.url)
        if match:
            return f"git://git@{match.group(1)}/{match.group(2)}"
        if self.url.startswith("github.com/"):
            return f"https://{self.url}"
        return self.url

    def __eq__(self, other):
        return isinstance(other, GitUrl) and self.url == other.url

    def __hash__(self):
        return hash(self.url)

    def __str__(self):
        return self.url

    def __repr__(self):
        return f"GitUrl({self.url!r})"


class BuildContext:
    """The `context` of a service's `build` section: a git URL or a directory."""

    def __init__(self, value: str):
        self.value = value
        self.git_url: Optional[GitUrl] = GitUrl(value) if looks_like_git_url(value) else None

    @property
    def is_git(self) -> bool:
        return self.git_url is not None

    @property
    def subdirectory(self) -> Optional[str]:
        return self.git_url.subdirectory if self.git_url else None

    def origin(self) -> str:
        """The tree this context lives in, with any subdirectory removed."""
        if self.git_url:
            return self.git_url.repository_url()
        return os.path.normpath(self.value)

    def without_subdirectory(self) -> "BuildContext":
        if self.git_url and self.git_url.subdirectory:
            return BuildContext(self.git_url.repository_url())
        return self

    def alias(self) -> str:
        if self.git_url:
            return self.git_url.alias()
        name = os.path.basename(os.path.normpath(self.value))
        if not name or name in (".", ".."):
            raise CouldNotParseError("build context directory with a name", self.value)
        return name

    def __eq__(self, other):
        return isinstance(other, BuildContext) and self.origin() == other.origin() \
            and self.subdirectory == other.subdirectory

    def __hash__(self):
        return hash((self.origin(), self.subdirectory))

    def __str__(self):
        return self.value

    def __repr__(self):
        return f"BuildContext({self.value!r})"
