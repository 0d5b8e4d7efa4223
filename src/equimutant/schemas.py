from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from equimutant.exceptions import BugReportError


class BugReport(BaseModel):
    """
    Caller-supplied bug locations consumed by guided selection.

    Immutable once constructed: the model is frozen and `lines` is a tuple.
    `has_bugs=True` requires at least one line and every line must be a
    positive integer.
    """
    model_config = ConfigDict(frozen=True)

    has_bugs: bool = False
    lines: Tuple[int, ...] = ()

    @field_validator("lines")
    @classmethod
    def _lines_positive(cls, lines: Tuple[int, ...]) -> Tuple[int, ...]:
        for line in lines:
            if line <= 0:
                raise ValueError(f"Bug line numbers must be positive integers, found: {line}")
        return lines

    @model_validator(mode="after")
    def _bugs_need_lines(self) -> "BugReport":
        if self.has_bugs and not self.lines:
            raise ValueError("When has_bugs is true, lines cannot be empty")
        return self

    @classmethod
    def create(cls, has_bugs: bool, lines: Optional[List[int]] = None) -> "BugReport":
        """Build a report, turning pydantic validation failures into BugReportError."""
        try:
            return cls(has_bugs=has_bugs, lines=list(lines or []))
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise BugReportError.invalid_lines(messages) from e

    @classmethod
    def at_lines(cls, *lines: int) -> "BugReport":
        return cls.create(True, list(lines))


class NodeDescriptor(BaseModel):
    """
    Printable identity of a syntax node: kind, position and a text snippet.
    """
    model_config = ConfigDict(frozen=True)

    kind: str
    line: int
    column: int
    span_length: int
    path: List[int] = Field(default_factory=list)
    snippet: str = ""

    @classmethod
    def from_node(cls, node) -> "NodeDescriptor":
        return cls(
            kind=node.kind.value,
            line=node.line,
            column=node.column,
            span_length=node.span_length,
            path=list(node.path),
            snippet=" ".join(node.text.split())[:80],
        )

    def label(self) -> str:
        return f"{self.kind}@{self.line}:{self.column}"


class Mutant(BaseModel):
    """
    One successful (candidate, transform) application.
    """
    model_config = ConfigDict(frozen=True)

    plugin_name: str
    target: NodeDescriptor
    generated_text: str
    output_path: Optional[str] = None


class AttemptRecord(BaseModel):
    """
    A failed mutation attempt, kept so a zero-mutant result can be diagnosed.
    """
    plugin_name: str
    candidate: NodeDescriptor
    status: Literal["correlation_failed", "apply_failed", "write_failed"]
    message: str


class MutationOutcome(str, Enum):
    SUCCESS = "success"
    NOTHING_REQUESTED = "nothing_requested"
    NO_CANDIDATES = "no_candidates"
    NO_APPLICABLE_TRANSFORM = "no_applicable_transform"
    ALL_ATTEMPTS_FAILED = "all_attempts_failed"
    NO_TRANSFORMS = "no_transforms"


class MutationResult(BaseModel):
    """
    Aggregate result of one mutation request.
    """
    success: bool
    outcome: MutationOutcome
    mutants: List[Mutant] = Field(default_factory=list)
    error_messages: List[str] = Field(default_factory=list)
    attempts: List[AttemptRecord] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def mutant_count(self) -> int:
        return len(self.mutants)

    @property
    def output_paths(self) -> List[str]:
        return [m.output_path for m in self.mutants if m.output_path]


class SelectionResult(BaseModel):
    """
    Candidates chosen by a strategy, without any mutation (dry run).
    """
    strategy: str
    input_path: str
    candidates: List[NodeDescriptor] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def candidate_count(self) -> int:
        return len(self.candidates)
