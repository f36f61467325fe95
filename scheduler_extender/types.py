"""
Wire Types for the Scheduler Extender Protocol

Pods and nodes are owned by the scheduler core. The client only reads a node's
name and otherwise passes both through unmodified: every object here keeps
unknown keys (``extra="allow"``) and sends them back to the extender unchanged.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, TypeAdapter, field_validator


class PlacementRequest(BaseModel):
    """The pod being placed."""

    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "allow"}

    @property
    def name(self) -> str:
        return self.metadata.get("name", "")


class Candidate(BaseModel):
    """A node under consideration for placement."""

    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "allow"}

    @property
    def name(self) -> str:
        return self.metadata.get("name", "")

    @classmethod
    def named(cls, name: str, **fields: Any) -> "Candidate":
        return cls(metadata={"name": name}, **fields)


class CandidateList(BaseModel):
    """Ordered list of candidate nodes."""

    items: List[Candidate] = Field(default_factory=list)

    model_config = {"extra": "allow"}

    @field_validator("items", mode="before")
    @classmethod
    def null_items_to_empty(cls, v):
        return [] if v is None else v

    def __len__(self) -> int:
        return len(self.items)

    def names(self) -> List[str]:
        return [node.name for node in self.items]

    @classmethod
    def from_names(cls, *names: str) -> "CandidateList":
        return cls(items=[Candidate.named(name) for name in names])


class ExtenderArgs(BaseModel):
    """Request body sent for both the filter and prioritize verbs."""

    pod: PlacementRequest
    nodes: CandidateList


class FilterResult(BaseModel):
    """Response body of the filter verb.

    A non-empty ``error`` means the extender rejected the request and ``nodes``
    must not be used.
    """

    nodes: CandidateList = Field(default_factory=CandidateList)
    error: str = ""

    model_config = {"extra": "ignore"}

    @field_validator("nodes", mode="before")
    @classmethod
    def null_nodes_to_empty(cls, v):
        return {} if v is None else v

    @field_validator("error", mode="before")
    @classmethod
    def null_error_to_empty(cls, v):
        return "" if v is None else v


class HostPriority(BaseModel):
    """Score an extender assigned to one node."""

    host: str
    score: int

    model_config = {"extra": "ignore"}


HostPriorityList = List[HostPriority]

# A JSON null response body decodes to None; callers treat it as empty.
filter_result_adapter = TypeAdapter(Optional[FilterResult])
host_priority_list_adapter = TypeAdapter(Optional[HostPriorityList])
