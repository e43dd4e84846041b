"""Pod metadata models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class PodType(Enum):
    """Is a pod a long-running service or a one-shot task?"""
    PLACEHOLDER = "placeholder"  # externally managed, mostly development-only
    SERVICE = "service"
    TASK = "task"


class PodConfig(BaseModel):
    """Contents of `pods/<name>.metadata.yml`."""

    model_config = ConfigDict(extra="forbid")

    enable_in_targets: Optional[List[str]] = None
    pod_type: Optional[PodType] = None
