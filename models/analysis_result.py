"""Typed view of a structured CCTV analysis returned by the model."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

Intensity = Literal["low", "medium", "high"]


class ActionEvent(BaseModel):
    """A single timestamped behaviour observed in the footage."""

    model_config = ConfigDict(strict=True, frozen=True)

    timestamp: str
    description: str
    intensity: Intensity


class AnalysisResult(BaseModel):
    """Validated analysis output.

    Field names follow Python conventions; the wire names used by the model
    schema and the HTTP responses are the camelCase aliases. Every field is
    required, ``actions`` keeps the order the model returned, and the
    descriptor lists are kept as-is (duplicates included).
    """

    model_config = ConfigDict(strict=True, frozen=True, populate_by_name=True)

    crowd_count: int = Field(alias="crowdCount", ge=0)
    actions: List[ActionEvent]
    attributes: List[str]
    objects: List[str]
    audio_transcription: str = Field(alias="audioTranscription")

    def to_wire(self) -> dict:
        """Return the camelCase mapping sent to the presentation layer."""
        return self.model_dump(by_alias=True)

    def filter_actions(self, query: str) -> List[ActionEvent]:
        """Return actions whose description contains ``query`` (case-insensitive)."""
        needle = (query or "").lower()
        return [action for action in self.actions if needle in action.description.lower()]

    def summary_counts(self) -> dict:
        """Return the headline counts shown next to the analysis."""
        return {
            "people": self.crowd_count,
            "objects": len(self.objects),
            "events": len(self.actions),
            "attributes": len(self.attributes),
        }
