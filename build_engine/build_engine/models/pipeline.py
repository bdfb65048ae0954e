"""Pipeline template models handed to the execution engine.

A :class:`TaskSpec` is an ordered list of :class:`Step` definitions plus
the params, results and volumes the steps reference.  Step order is
significant: the execution engine runs steps sequentially in list order.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from build_engine.models.build import EnvVar


class VolumeMount(BaseModel):
    name: str = Field(..., min_length=1)
    mount_path: str = Field(..., min_length=1)
    read_only: bool = False


class Volume(BaseModel):
    """A pod volume; either backed by a secret or an empty directory."""

    name: str = Field(..., min_length=1)
    secret_name: str | None = None
    empty_dir: bool = False


class Step(BaseModel):
    """One unit of execution within a pipeline."""

    name: str = Field(..., min_length=1, description="Unique within the task spec.")
    image: str = Field(..., min_length=1)
    command: list[str] = Field(default_factory=list)
    args: list[str] = Field(default_factory=list)
    env: list[EnvVar] = Field(default_factory=list)
    volume_mounts: list[VolumeMount] = Field(default_factory=list)
    working_dir: str | None = None


class TaskParam(BaseModel):
    name: str = Field(..., min_length=1)
    type: str = Field(default="string", description="string or array")
    description: str = ""
    default: str | list[str] | None = None


class TaskResult(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""


class TaskSpec(BaseModel):
    params: list[TaskParam] = Field(default_factory=list)
    results: list[TaskResult] = Field(default_factory=list)
    steps: list[Step] = Field(default_factory=list)
    volumes: list[Volume] = Field(default_factory=list)

    def step_names(self) -> list[str]:
        return [step.name for step in self.steps]

    def add_result(self, name: str, description: str = "") -> None:
        """Declare a result once; repeated declarations are ignored."""
        if any(r.name == name for r in self.results):
            return
        self.results.append(TaskResult(name=name, description=description))

    def add_volume(self, volume: Volume) -> None:
        """Declare a volume once; repeated declarations are ignored."""
        if any(v.name == volume.name for v in self.volumes):
            return
        self.volumes.append(volume)
