"""Base class for all pipeline steps.

Every step declares typed Input, Output, Config via Pydantic models and works
on a shared ``PointCloud`` handle. Steps report fractional progress through an
optional callback; a callback returning False cancels the running step.
"""

from __future__ import annotations

import time
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar, ClassVar

from pydantic import BaseModel

from .contracts import StepMeta
from .errors import CancelledByUserError, InvalidInputError
from .point_cloud import PointCloud

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)
ConfigT = TypeVar("ConfigT", bound=BaseModel)

ProgressCallback = Callable[[float], bool]

logger = logging.getLogger(__name__)


class BaseStep(ABC, Generic[InputT, OutputT, ConfigT]):
    """Abstract base for pipeline steps.

    Subclasses must:
    1. Define concrete Pydantic models for InputT, OutputT, ConfigT
    2. Set class variables: name, input_type, output_type, config_type
    3. Implement run() and validate_inputs()

    Example:
        class SmoothCloudStep(BaseStep[SmoothCloudInput, SmoothCloudOutput, SmoothCloudConfig]):
            input_type = SmoothCloudInput
            output_type = SmoothCloudOutput
            config_type = SmoothCloudConfig

            def run(self, inputs: SmoothCloudInput) -> SmoothCloudOutput: ...
            def validate_inputs(self, inputs: SmoothCloudInput) -> bool: ...
    """

    name: ClassVar[str] = ""
    input_type: ClassVar[type[BaseModel]]
    output_type: ClassVar[type[BaseModel]]
    config_type: ClassVar[type[BaseModel]]

    def __init__(self, config: ConfigT, cloud: PointCloud, progress: ProgressCallback | None = None):
        self.config = config
        self.cloud = cloud
        self.progress = progress
        self.meta: StepMeta | None = None

    @property
    def step_name(self) -> str:
        return self.name or self.__class__.__name__

    @abstractmethod
    def run(self, inputs: InputT) -> OutputT:
        """Execute this pipeline step. Returns output model."""
        ...

    @abstractmethod
    def validate_inputs(self, inputs: InputT) -> bool:
        """Check that the point cloud carries what this step reads."""
        ...

    def execute(self, inputs: InputT) -> OutputT:
        """Run with logging, timing, and validation."""
        step_name = self.step_name
        logger.info(f"[{step_name}] Validating inputs...")

        if not self.validate_inputs(inputs):
            raise InvalidInputError(f"[{step_name}] Input validation failed")

        logger.info(f"[{step_name}] Starting...")
        t0 = time.time()
        result = self.run(inputs)
        elapsed = time.time() - t0
        logger.info(f"[{step_name}] Done in {elapsed:.1f}s")
        self.meta = StepMeta(
            step_name=step_name, elapsed_seconds=elapsed, params=self.config.model_dump()
        )
        return result

    def report_progress(self, fraction: float) -> None:
        """Forward progress to the callback; raise if it asks to stop."""
        if self.progress is None:
            return
        if not self.progress(float(fraction)):
            logger.warning(f"[{self.step_name}] Cancelled at {fraction:.0%}")
            raise CancelledByUserError(self.step_name, fraction)

    def iter_chunks(self, num_points: int, chunk_size: int) -> Iterator[slice]:
        """Yield consecutive index slices, reporting progress after each one."""
        for start in range(0, num_points, chunk_size):
            stop = min(start + chunk_size, num_points)
            yield slice(start, stop)
            self.report_progress(stop / num_points)

    def _check_cloud(self) -> bool:
        if not isinstance(self.cloud, PointCloud):
            logger.error(f"[{self.step_name}] Expected a PointCloud, got {type(self.cloud).__name__}")
            return False
        if self.cloud.num_points == 0:
            logger.error(f"[{self.step_name}] Point cloud is empty")
            return False
        return True

    @classmethod
    def get_input_schema(cls) -> dict:
        """Return JSON schema for inputs."""
        return cls.input_type.model_json_schema()

    @classmethod
    def get_output_schema(cls) -> dict:
        """Return JSON schema for outputs."""
        return cls.output_type.model_json_schema()

    @classmethod
    def get_config_schema(cls) -> dict:
        """Return JSON schema for config."""
        return cls.config_type.model_json_schema()
