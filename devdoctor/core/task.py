# devdoctor/core/task.py
from dataclasses import dataclass, field

from devdoctor.core.types import Severity


@dataclass
class TaskResult:
    name: str
    success: bool
    changed: bool = False
    messages: list[tuple[Severity, str]] = field(default_factory=list)
