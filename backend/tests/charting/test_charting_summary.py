from dental_chart.schemas.chart import ChartState, SurfaceMap
from dental_chart.services.charting_summary import summarize_chart
from dental_chart.services.odontogram.conditions import SurfaceCondition, WholeToothCondition


def _with(state, tooth, **update):
    return state.with_tooth(tooth, state.tooth(tooth).model_copy(update=update))


def test_empty_chart_is_fully_healthy():
    summary = summarize_chart(ChartState.empty())
    assert summary.total == 32
    assert summary.healthy == 32
    assert summary.health_score == 100


def test_each_tooth_lands_in_one_bucket():
    state = ChartState.empty()
    state = _with(state, 1, whole_condition=WholeToothCondition.missing)
    state = _with(state, 2, surfaces=SurfaceMap(occlusal=SurfaceCondition.caries))
    state = _with(state, 3, surfaces=SurfaceMap(occlusal=SurfaceCondition.caries, distal=SurfaceCondition.root_canal))
    state = _with(state, 4, surfaces=SurfaceMap(mesial=SurfaceCondition.composite))
    state = _with(state, 5, whole_condition=WholeToothCondition.crown, surfaces=SurfaceMap(occlusal=SurfaceCondition.caries))
    state = _with(state, 6, whole_condition=WholeToothCondition.implant)
    state = _with(state, 7, whole_condition=WholeToothCondition.fracture)

    summary = summarize_chart(state)
    assert summary.missing == 1
    assert summary.cavities == 1
    assert summary.root_canals == 1
    assert summary.filled == 1
    assert summary.crowns == 1
    assert summary.implants == 1
    assert summary.healthy == 25
    assert summary.health_score == 78
