"""Default image tags, used to pin untagged images when exporting."""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from ..exceptions import ConfigurationError, CouldNotParseError, CouldNotReadFileError

logger = logging.getLogger(__name__)


def split_image(image: str) -> Tuple[str, Optional[str]]:
    """Split an image name into its repository and its `:tag` or `@digest`.

    >>> split_image("example.com:5000/app:30")
    ('example.com:5000/app', ':30')
    """
    if not image or any(c.isspace() for c in image):
        raise CouldNotParseError("image name", image)
    if "@" in image:
        repo, _, digest = image.partition("@")
        return repo, f"@{digest}"
    repo, sep, tag = image.rpartition(":")
    if sep and "/" not in tag:
        return repo, f":{tag}"
    return image, None


class DefaultTags:
    """Tags to use for images which don't specify one.

    Read from a file with one fully tagged image per line, such as the
    output of `docker images --format '{{.Repository}}:{{.Tag}}'`.
    """

    def __init__(self, tags: Optional[Dict[str, str]] = None):
        self.tags: Dict[str, str] = dict(tags or {})

    @classmethod
    def parse(cls, lines: Iterable[str]) -> "DefaultTags":
        """Build from lines of tagged images.

        Raises:
            ConfigurationError: If a line has no tag, or if two lines give
                the same image different tags
        """
        tags: Dict[str, str] = {}
        for line in lines:
            line = line.strip()
            if not line:
                continue
            repo, version = split_image(line)
            if version is None:
                raise ConfigurationError(f"Default image must have tag: {line}")
            existing = tags.setdefault(repo, line)
            if existing != line:
                raise ConfigurationError(f"Conflicting versions for {repo}")
        return cls(tags)

    @classmethod
    def read(cls, path: Path) -> "DefaultTags":
        try:
            text = Path(path).read_text()
        except OSError as e:
            raise CouldNotReadFileError(Path(path)) from e
        return cls.parse(text.splitlines())

    def default_for(self, image: str) -> str:
        """Return `image` with its default tag, if it has no tag of its own."""
        repo, version = split_image(image)
        if version is not None:
            return image
        default = self.tags.get(repo)
        if default is None:
            logger.warning(f"Could not find default tag for {image}")
            return image
        logger.debug(f"Defaulting {image} to {default}")
        return default

    def __len__(self):
        return len(self.tags)
