"""Converter for concept profile matching (CPM) text-mining output."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Dict

from .ingest_base import BaseNanopubConverter
from .models import ConversionError, RunState, SkipReason, TransformResult
from .transformer import RecordTransformer

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..config import ConverterConfig


class CPMNanopubConverter(BaseNanopubConverter):
    """Turn CPM association rows into gene-disease or protein-protein nanopubs."""

    name = "cpm"

    def __init__(
        self,
        config: "ConverterConfig",
        *,
        state: RunState | None = None,
        clock: Callable[[], datetime] | None = None,
        has_header: bool = True,
        skip_malformed: bool = False,
    ) -> None:
        super().__init__(has_header=has_header, skip_malformed=skip_malformed)
        self.config = config
        self.transformer = RecordTransformer(config, state=state, clock=clock)

    @property
    def state(self) -> RunState:
        return self.transformer.state

    def convert_row(self, row: str, line_number: int) -> TransformResult:
        return self.transformer.process(row, line_number)

    def on_malformed(self, error: ConversionError) -> None:
        self.state.malformed += 1

    def summary(self, top: int = 10) -> Dict[str, Any]:
        """Tallies for the end-of-run report."""

        state = self.state
        return {
            "subtype": self.config.subtype.value,
            "nanopubs": state.accepted,
            "distinct_concept1": len(state.concept1_counts),
            "distinct_concept2": len(state.concept2_counts),
            "top_concept1": state.concept1_counts.most_common(top),
            "top_concept2": state.concept2_counts.most_common(top),
            "skipped": {reason.value: state.skipped[reason] for reason in SkipReason},
            "malformed": state.malformed,
        }


__all__ = ["CPMNanopubConverter"]
