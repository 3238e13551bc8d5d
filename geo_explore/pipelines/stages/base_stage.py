# geo_explore/pipelines/stages/base_stage.py
"""Base class for pipeline stages."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class StageStatus(Enum):
    """Stage execution status."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class StageResult:
    """Result from stage execution."""
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    metrics: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    execution_time: float = 0.0


class PipelineStage(ABC):
    """
    Abstract base class for pipeline stages.

    A stage reads the artifacts of earlier stages from the context,
    produces its own artifact and stores it back under ``output_key``.
    """

    #: Context key this stage writes its artifact to
    output_key: Optional[str] = None

    def __init__(self):
        self.status = StageStatus.PENDING
        self.error: Optional[str] = None
        self.result: Optional[StageResult] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this stage."""
        pass

    @property
    def requires(self) -> List[str]:
        """Context keys that must be set before this stage runs."""
        return []

    def validate(self, context) -> Tuple[bool, List[str]]:
        """
        Check that required artifacts are present.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        missing = [key for key in self.requires if context.get(key) is None]
        return not missing, [f"{self.name}: missing input '{key}'" for key in missing]

    @abstractmethod
    def execute(self, context) -> StageResult:
        """
        Execute the stage.

        Args:
            context: PipelineContext with shared data and configuration

        Returns:
            StageResult with outputs and metrics
        """
        pass
