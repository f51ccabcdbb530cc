from __future__ import annotations

from pydantic import BaseModel

from dental_chart.schemas.chart import ChartState, ToothRecord
from dental_chart.services.odontogram.conditions import SurfaceCondition, WholeToothCondition

_FILLINGS = frozenset(
    {
        SurfaceCondition.composite,
        SurfaceCondition.amalgam,
        SurfaceCondition.gold,
        SurfaceCondition.ceramic,
        SurfaceCondition.sealant,
    }
)


class ChartSummary(BaseModel):
    total: int
    healthy: int = 0
    cavities: int = 0
    filled: int = 0
    crowns: int = 0
    missing: int = 0
    implants: int = 0
    root_canals: int = 0

    @property
    def health_score(self) -> int:
        if not self.total:
            return 0
        return round(self.healthy / self.total * 100)


def _bucket(record: ToothRecord) -> str:
    whole = record.whole_condition
    if whole == WholeToothCondition.missing:
        return "missing"
    if whole == WholeToothCondition.implant:
        return "implants"
    if whole in (WholeToothCondition.crown, WholeToothCondition.veneer, WholeToothCondition.pontic):
        return "crowns"
    conditions = {condition for _, condition in record.surfaces.items()}
    if SurfaceCondition.root_canal in conditions:
        return "root_canals"
    if SurfaceCondition.caries in conditions:
        return "cavities"
    if conditions & _FILLINGS:
        return "filled"
    if whole is not None:
        return "other"
    return "healthy"


def summarize_chart(state: ChartState) -> ChartSummary:
    counts: dict[str, int] = {}
    for record in state.teeth.values():
        bucket = _bucket(record)
        counts[bucket] = counts.get(bucket, 0) + 1
    counts.pop("other", None)
    return ChartSummary(total=len(state.teeth), **counts)
