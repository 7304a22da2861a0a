"""Pydantic models for node model and topology API payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

EventType = Literal["NONE", "ADDED", "UPDATED", "REMOVED"]


class Node(BaseModel):
    """A simulated E2 node."""

    model_config = ConfigDict(populate_by_name=True)

    enbid: int = Field(ge=0)
    status: str = ""
    service_models: list[str] = Field(default_factory=list, alias="serviceModels")
    controllers: list[str] = Field(default_factory=list)
    cell_ecgis: list[int] = Field(default_factory=list, alias="cellECGIs")

    def to_api(self) -> dict:
        """Serialize with the API's field names."""
        return self.model_dump(by_alias=True)


class NodeEvent(BaseModel):
    """One message of a node list or watch stream."""

    type: EventType = "NONE"
    node: Node


class TopoObject(BaseModel):
    """An entity, relation or kind held by the topology store."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: Literal["ENTITY", "RELATION", "KIND"] = "ENTITY"
    labels: dict[str, str] = Field(default_factory=dict)
    kind_id: str = Field(default="", alias="kindId")
    src_entity_id: str = Field(default="", alias="srcEntityId")
    tgt_entity_id: str = Field(default="", alias="tgtEntityId")
    name: str = ""


class ObjectEvent(BaseModel):
    """One message of a topology watch stream."""

    type: EventType = "NONE"
    object: TopoObject
