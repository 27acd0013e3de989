"""
Pydantic models for the data flowing through the annotation pipeline.

Entity and type identifiers are opaque URIs and are always compared by exact
string equality.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class KnowledgeBase(str, Enum):
    """The two knowledge bases the annotator resolves against."""
    WIKIDATA = "Wikidata"
    DBPEDIA = "DBpedia"

    @property
    def other(self) -> "KnowledgeBase":
        return KnowledgeBase.DBPEDIA if self is KnowledgeBase.WIKIDATA else KnowledgeBase.WIKIDATA


def clamp_score(value: float) -> float:
    """Clamp a score or confidence to [0, 1]."""
    return max(0.0, min(1.0, value))


class Cell(BaseModel):
    """
    A cleaned cell value with its position in the table.
    Identity is (row_index, column_index).
    """
    model_config = ConfigDict(frozen=True)

    value: str
    row_index: int
    column_index: int


class Entity(BaseModel):
    """A knowledge base resource matched to a cell value."""
    uri: str
    label: str
    description: Optional[str] = None
    source: KnowledgeBase
    confidence: float = Field(ge=0.0, le=1.0)


class SemanticType(BaseModel):
    """
    A class or category from one knowledge base.

    parent_types stays None until the hierarchy has been fetched; once fetched the
    parent URIs are cached on the object.
    """
    uri: str
    label: str
    source: KnowledgeBase
    parent_types: Optional[List[str]] = None


class EntityCandidate(BaseModel):
    """One entity hypothesis for a cell. score only moves upward and is capped at 1.0."""
    cell: Cell
    entity: Entity
    types: List[SemanticType] = Field(default_factory=list)
    score: float

    def clone(self) -> "EntityCandidate":
        """Copy with its own types list so boosts never leak into the source candidate."""
        return self.model_copy(update={"types": list(self.types)})

    def boost(self, amount: float) -> None:
        if amount > 0:
            self.score = clamp_score(self.score + amount)


class TypeMapping(BaseModel):
    """Static equivalence between a DBpedia type and a Wikidata type."""
    dbpedia_type: str
    wikidata_type: str
    confidence: float = Field(ge=0.0, le=1.0)
    description: Optional[str] = None

    def uri_for(self, source: KnowledgeBase) -> str:
        return self.wikidata_type if source is KnowledgeBase.WIKIDATA else self.dbpedia_type


class TypeRelationship(BaseModel):
    """Static, directed semantic relation between two types."""
    source_type: str
    target_type: str
    relation_name: str
    confidence: float = Field(ge=0.0, le=1.0)


class ColumnRelation(BaseModel):
    """Relation inferred between two columns at analysis time."""
    source_column_index: int
    target_column_index: int
    relation_type: Optional[str] = None
    confidence: float


class TypeCandidate(BaseModel):
    """Aggregate evidence for one type within a column."""
    type: SemanticType
    score: float
    entity_matches: int
    confidence: float


class ColumnTypeAnnotation(BaseModel):
    """Final CTA result for one column."""
    column_index: int
    column_header: str
    assigned_type: SemanticType
    confidence: float
    alternative_types: List[TypeCandidate] = Field(default_factory=list)


class CellEntityAnnotation(BaseModel):
    """Final CEA result for one cell."""
    row: int
    column: int
    uri: str
    confidence: float
