"""Tagged wire records.

Each message is one JSON object with a ``kind`` discriminator, so field
boundaries never depend on the content of the analyzed text.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter

from pipeline.models import SentimentLabel


class TaskRecord(BaseModel):
    """A section to analyze."""

    kind: Literal["task"] = "task"
    section_id: int = Field(..., ge=0)
    text: str


class TotalRecord(BaseModel):
    """Announcement of the number of sections the producer published."""

    kind: Literal["total"] = "total"
    total_sections: int = Field(..., ge=0)


class ResultRecord(BaseModel):
    """Analysis output for one section."""

    kind: Literal["result"] = "result"
    section_id: int = Field(..., ge=0)
    word_count: int = Field(..., ge=0)
    top_words: list[tuple[str, int]] = Field(default_factory=list)
    sentiment_label: SentimentLabel
    sentiment_score: float = Field(..., ge=-1.0, le=1.0)
    names_replaced: int = 0
    processed_text: str = ""
    sorted_sentences: list[str] = Field(default_factory=list)


WireRecord = Annotated[TaskRecord | TotalRecord | ResultRecord, Field(discriminator="kind")]

wire_record_adapter: TypeAdapter[TaskRecord | TotalRecord | ResultRecord] = TypeAdapter(WireRecord)
