from __future__ import annotations

from dataclasses import dataclass, field
from html import escape
from typing import Any, Iterator

from dental_chart.core.settings import Settings
from dental_chart.schemas.chart import ChartState, HistoryEntry, ToothRecord
from dental_chart.services.odontogram.classification import (
    QUADRANT_NAMES,
    classify,
    describe_tooth,
    tooth_type_label,
)
from dental_chart.services.odontogram.conditions import (
    SURFACE_LETTERS,
    SURFACE_ORDER,
    SurfaceCondition,
    SurfaceName,
    WholeToothCondition,
    condition_info,
    conditions_for,
)
from dental_chart.services.odontogram.geometry import (
    shapes_for,
    surface_diagram_paths,
    surface_label_anchors,
)
from dental_chart.services.odontogram.interaction import (
    ClearWholeTarget,
    ConditionTarget,
    CrownTarget,
    HitTarget,
    MobilityTarget,
    ModeTarget,
    ResetToothTarget,
    SurfaceRowTarget,
    SurfaceTarget,
    ViewState,
)
from dental_chart.services.odontogram.numbering import LOWER_ROW, UPPER_ROW, NumberingMapper
from dental_chart.services.odontogram.surfaces import POSITIONS, resolve

BACKGROUND = "#09090b"
GUIDE = "#3F3F46"
LABEL = "#71717A"
NUMBER = "#A1A1AA"
SIDE_LABEL = "#52525B"
SELECTED = "#818CF8"
SURFACE_STROKE = "#52525B"
MUTED_FILL = "#27272A"
MISSING_MARK = "#EF4444"
IMPLANT_MARK = "#2DD4BF"
IMPLANT_THREAD = "#0D9488"
RCT_ROOT_FILL = "#FDBA74"
RCT_MARK = "#FB923C"
MONO_FONT = "'Consolas','Monaco',monospace"

# (crown fill, root fill, crown stroke, opacity) per whole-tooth condition.
_ANATOMY_PALETTE: dict[WholeToothCondition | None, tuple[str, str, str, float]] = {
    None: ("#D4D4D8", "#A1A1AA", "#71717A", 1.0),
    WholeToothCondition.missing: (MUTED_FILL, MUTED_FILL, GUIDE, 0.3),
    WholeToothCondition.crown: ("#C4B5FD", "#A1A1AA", "#A78BFA", 1.0),
    WholeToothCondition.implant: ("#99F6E4", "#5EEAD4", IMPLANT_MARK, 1.0),
    WholeToothCondition.pontic: ("#C7D2FE", "transparent", SELECTED, 1.0),
    WholeToothCondition.veneer: ("#A5F3FC", "#A1A1AA", "#22D3EE", 1.0),
    WholeToothCondition.impacted: ("#D4D4D8", "#A1A1AA", "#78716C", 0.5),
    WholeToothCondition.fracture: ("#D4D4D8", "#A1A1AA", "#71717A", 1.0),
}


@dataclass
class Element:
    tag: str
    attrs: dict[str, Any] = field(default_factory=dict)
    text: str | None = None
    children: list[Element] = field(default_factory=list)
    target: HitTarget | None = None

    def walk(self) -> Iterator[Element]:
        yield self
        for child in self.children:
            yield from child.walk()

    def to_svg(self) -> str:
        attrs = "".join(
            f' {key}="{escape(_fmt(value), quote=True)}"'
            for key, value in self.attrs.items()
            if value is not None
        )
        inner = escape(self.text) if self.text is not None else ""
        inner += "".join(child.to_svg() for child in self.children)
        if not inner:
            return f"<{self.tag}{attrs}/>"
        return f"<{self.tag}{attrs}>{inner}</{self.tag}>"


def _fmt(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.2f}".rstrip("0").rstrip(".")
    return str(value)


def _text(content: str, x: float, y: float, **attrs: Any) -> Element:
    return Element("text", {"x": x, "y": y, **attrs}, text=content)


def _cross(size_w: float, size_h: float, inset: float, **attrs: Any) -> list[Element]:
    return [
        Element("line", {"x1": inset, "y1": inset, "x2": size_w - inset, "y2": size_h - inset, **attrs}),
        Element("line", {"x1": size_w - inset, "y1": inset, "x2": inset, "y2": size_h - inset, **attrs}),
    ]


@dataclass(frozen=True)
class ToolbarButton:
    label: str
    target: HitTarget
    active: bool
    color: str | None = None


@dataclass(frozen=True)
class Toolbar:
    mode_buttons: tuple[ToolbarButton, ...]
    condition_buttons: tuple[ToolbarButton, ...]


@dataclass(frozen=True)
class SurfaceRow:
    surface: SurfaceName
    label: str
    color: str
    active: bool
    target: SurfaceRowTarget


@dataclass(frozen=True)
class DetailPanel:
    tooth: int | None = None
    display_id: str | None = None
    title: str | None = None
    tooth_name: str | None = None
    quadrant_name: str | None = None
    whole_label: str | None = None
    whole_color: str | None = None
    surface_rows: tuple[SurfaceRow, ...] = ()
    mobility: int = 0
    mobility_buttons: tuple[ToolbarButton, ...] = ()
    note: str = ""
    reset_target: ResetToothTarget | None = None
    clear_whole_target: ClearWholeTarget | None = None

    @property
    def empty(self) -> bool:
        return self.tooth is None


@dataclass(frozen=True)
class HistoryPanel:
    total: int
    entries: tuple[HistoryEntry, ...]


@dataclass
class Scene:
    toolbar: Toolbar
    chart: Element
    detail: DetailPanel
    history: HistoryPanel

    def to_svg(self) -> str:
        return self.chart.to_svg()

    def targets(self) -> list[HitTarget]:
        return [element.target for element in self.chart.walk() if element.target is not None]

    def elements_for(self, tooth: int) -> list[Element]:
        return [
            element
            for element in self.chart.walk()
            if element.attrs.get("data-tooth") == tooth
        ]


def render_toolbar(view: ViewState) -> Toolbar:
    mode = view.mode
    mode_buttons = (
        ToolbarButton("Surface", ModeTarget("surface"), mode.mode == "surface"),
        ToolbarButton("Whole Tooth", ModeTarget("whole"), mode.mode == "whole"),
    )
    condition_buttons = tuple(
        ToolbarButton(
            condition_info(condition).label,
            ConditionTarget(condition),
            condition == mode.active_condition,
            color=condition_info(condition).color,
        )
        for condition in conditions_for(mode.mode)
    )
    return Toolbar(mode_buttons=mode_buttons, condition_buttons=condition_buttons)


def render_surface_diagram(
    tooth: int, record: ToothRecord, view: ViewState, x: float, y: float, size: float
) -> Element:
    info = classify(tooth)
    layout = resolve(info.arch, info.quadrant)
    selected = view.selected_tooth == tooth
    missing = record.is_missing
    paths = surface_diagram_paths(size)
    anchors = surface_label_anchors(size)

    group = Element(
        "g",
        {
            "transform": f"translate({_fmt(float(x))},{_fmt(float(y))})",
            "class": "dc-tooth-group selected" if selected else "dc-tooth-group",
            "data-tooth": tooth,
        },
    )
    group.children.append(
        Element(
            "rect",
            {
                "x": -1, "y": -1, "width": size + 2, "height": size + 2,
                "fill": "none", "stroke": SELECTED if selected else "transparent",
                "stroke-width": 2, "rx": 3,
            },
        )
    )

    for position in POSITIONS:
        surface = layout.surface_at(position)
        condition = record.surfaces.get(surface)
        fill = condition_info(condition).color
        stroke, stroke_width, opacity = SURFACE_STROKE, 1, 1.0
        if missing:
            fill, stroke, opacity = MUTED_FILL, GUIDE, 0.4
        if record.whole_condition == WholeToothCondition.crown:
            stroke, stroke_width = condition_info(WholeToothCondition.crown).color, 2
        elif record.whole_condition == WholeToothCondition.veneer and position == "top":
            fill = condition_info(WholeToothCondition.veneer).color
        if view.selected_tooth == tooth and view.selected_surface == surface:
            stroke, stroke_width = SELECTED, 2

        group.children.append(
            Element(
                "path",
                {
                    "d": paths[position],
                    "fill": fill,
                    "stroke": stroke,
                    "stroke-width": stroke_width,
                    "opacity": opacity,
                    "class": "dc-surface",
                    "data-tooth": tooth,
                    "data-surface": surface.value,
                    "cursor": "default" if missing else "pointer",
                },
                target=SurfaceTarget(tooth, position),
            )
        )
        cx, cy = anchors[position]
        group.children.append(
            _text(
                SURFACE_LETTERS[surface], cx, cy + 3,
                **{
                    "text-anchor": "middle",
                    "fill": GUIDE if missing else "#18181B",
                    "font-size": 8,
                    "font-weight": 600,
                    "pointer-events": "none",
                },
            )
        )

    if missing:
        group.children.extend(
            _cross(size, size, 2, stroke=MISSING_MARK, **{"stroke-width": 2, "opacity": 0.7, "pointer-events": "none"})
        )
    if record.whole_condition == WholeToothCondition.fracture:
        group.children.append(
            Element(
                "line",
                {
                    "x1": size * 0.2, "y1": size * 0.15, "x2": size * 0.8, "y2": size * 0.85,
                    "stroke": condition_info(WholeToothCondition.fracture).color,
                    "stroke-width": 2.5, "stroke-dasharray": "3,2", "pointer-events": "none",
                },
            )
        )
    if record.whole_condition == WholeToothCondition.implant:
        mark = {"stroke": IMPLANT_MARK, "stroke-width": 2, "pointer-events": "none"}
        group.children.extend(
            [
                Element("circle", {"cx": size / 2, "cy": size / 2, "r": size * 0.2, "fill": "none", **mark}),
                Element("line", {"x1": size / 2, "y1": size * 0.3, "x2": size / 2, "y2": size * 0.7, **mark}),
                Element("line", {"x1": size * 0.3, "y1": size / 2, "x2": size * 0.7, "y2": size / 2, **mark}),
            ]
        )
    return group


def render_anatomy(
    tooth: int, record: ToothRecord, x: float, y: float, width: float, height: float
) -> Element:
    info = classify(tooth)
    shape = shapes_for(info.tooth_type, info.arch, width, height)
    crown_fill, root_fill, stroke, opacity = _ANATOMY_PALETTE[record.whole_condition]
    missing = record.is_missing
    has_rct = any(condition == SurfaceCondition.root_canal for _, condition in record.surfaces.items())
    if has_rct:
        root_fill = RCT_ROOT_FILL

    group = Element(
        "g",
        {
            "transform": f"translate({_fmt(float(x))},{_fmt(float(y))})",
            "class": "dc-anatomy-group",
            "data-tooth": tooth,
        },
    )
    for root_path in shape.root_paths:
        group.children.append(
            Element("path", {"d": root_path, "fill": root_fill, "stroke": stroke, "stroke-width": 1, "opacity": opacity})
        )
        if has_rct and not missing:
            group.children.append(
                Element(
                    "path",
                    {
                        "d": root_path, "fill": "none", "stroke": RCT_MARK, "stroke-width": 1.5,
                        "stroke-dasharray": "2,2", "opacity": 0.8, "pointer-events": "none",
                    },
                )
            )

    group.children.append(
        Element(
            "path",
            {
                "d": shape.crown_path, "fill": crown_fill, "stroke": stroke,
                "stroke-width": 1.2, "opacity": opacity, "cursor": "pointer",
                "class": "dc-crown", "data-tooth": tooth,
            },
            target=CrownTarget(tooth),
        )
    )

    if record.whole_condition == WholeToothCondition.implant:
        center = width / 2
        # Threads run along the root side of the tooth.
        top, bottom = (2, height * 0.45) if info.is_upper else (height * 0.55, height - 2)
        thread_y = top + 5
        while thread_y < bottom - 3:
            group.children.append(
                Element(
                    "line",
                    {
                        "x1": center - 5, "y1": thread_y, "x2": center + 5, "y2": thread_y,
                        "stroke": IMPLANT_THREAD, "stroke-width": 1, "opacity": 0.7, "pointer-events": "none",
                    },
                )
            )
            thread_y += 6

    if missing:
        group.children.extend(
            _cross(width, height, 4, stroke=MISSING_MARK, **{"stroke-width": 1.5, "opacity": 0.5, "pointer-events": "none"})
        )
    return group


def render_chart(state: ChartState, view: ViewState, settings: Settings, mapper: NumberingMapper) -> Element:
    size = settings.tooth_size
    gap = settings.tooth_gap
    col = settings.col_width
    pad = settings.chart_padding
    anatomy_h = settings.anatomy_height
    total_w = pad * 2 + col * 16
    total_h = pad * 2 + (20 + size + 8 + anatomy_h) * 2 + 30
    center_y = total_h / 2
    mid_x = pad + col * 8
    number_style = {
        "text-anchor": "middle", "fill": NUMBER, "font-size": 11,
        "font-weight": 500, "font-family": MONO_FONT,
    }
    arch_style = {
        "text-anchor": "middle", "fill": LABEL, "font-size": 11,
        "font-weight": 600, "letter-spacing": "1px",
    }
    side_style = {"text-anchor": "middle", "fill": SIDE_LABEL, "font-size": 13, "font-weight": 700}

    svg = Element(
        "svg",
        {
            "xmlns": "http://www.w3.org/2000/svg",
            "viewBox": f"0 0 {total_w} {total_h}",
            "width": "100%",
            "class": "dc-chart-svg",
        },
    )
    svg.children.extend(
        [
            Element("rect", {"x": 0, "y": 0, "width": total_w, "height": total_h, "fill": BACKGROUND, "rx": 12}),
            Element(
                "line",
                {
                    "x1": mid_x, "y1": pad, "x2": mid_x, "y2": total_h - pad,
                    "stroke": GUIDE, "stroke-width": 1, "stroke-dasharray": "4,4",
                },
            ),
            Element("line", {"x1": pad, "y1": center_y, "x2": total_w - pad, "y2": center_y, "stroke": GUIDE, "stroke-width": 2}),
            _text("UPPER ARCH (Maxillary)", total_w / 2, pad - 6, **arch_style),
            _text("LOWER ARCH (Mandibular)", total_w / 2, total_h - pad + 14, **arch_style),
        ]
    )

    for index, tooth in enumerate(UPPER_ROW):
        record = state.tooth(tooth)
        x = pad + index * col + gap / 2
        base_y = pad + 4
        diagram_y = base_y + 18
        svg.children.append(_text(mapper.to_display(tooth), x + size / 2, base_y + 10, **number_style))
        svg.children.append(render_surface_diagram(tooth, record, view, x, diagram_y, size))
        svg.children.append(render_anatomy(tooth, record, x, diagram_y + size + 6, size, anatomy_h))

    for index, tooth in enumerate(LOWER_ROW):
        record = state.tooth(tooth)
        x = pad + index * col + gap / 2
        base_y = center_y + 6
        diagram_y = base_y + anatomy_h + 6
        svg.children.append(render_anatomy(tooth, record, x, base_y, size, anatomy_h))
        svg.children.append(render_surface_diagram(tooth, record, view, x, diagram_y, size))
        svg.children.append(_text(mapper.to_display(tooth), x + size / 2, diagram_y + size + 16, **number_style))

    svg.children.append(_text("R", pad - 16, center_y + 4, **side_style))
    svg.children.append(_text("L", total_w - pad + 16, center_y + 4, **side_style))
    return svg


def render_detail_panel(state: ChartState, view: ViewState, mapper: NumberingMapper) -> DetailPanel:
    tooth = view.selected_tooth
    if tooth is None:
        return DetailPanel()
    record = state.tooth(tooth)
    info = classify(tooth)
    display_id = mapper.to_display(tooth)

    rows = []
    for surface in SURFACE_ORDER:
        condition_meta = condition_info(record.surfaces.get(surface))
        rows.append(
            SurfaceRow(
                surface=surface,
                label=condition_meta.label,
                color=condition_meta.color,
                active=view.selected_surface == surface,
                target=SurfaceRowTarget(tooth, surface),
            )
        )

    whole = condition_info(record.whole_condition) if record.whole_condition else None
    return DetailPanel(
        tooth=tooth,
        display_id=display_id,
        title=f"Tooth #{display_id} - {tooth_type_label(info.tooth_type)}",
        tooth_name=describe_tooth(tooth),
        quadrant_name=f"{QUADRANT_NAMES[info.quadrant]} Quadrant",
        whole_label=whole.label if whole else None,
        whole_color=whole.color if whole else None,
        surface_rows=tuple(rows),
        mobility=record.mobility,
        mobility_buttons=tuple(
            ToolbarButton(str(value), MobilityTarget(tooth, value), record.mobility == value)
            for value in range(4)
        ),
        note=record.note,
        reset_target=ResetToothTarget(tooth),
        clear_whole_target=ClearWholeTarget(tooth) if whole else None,
    )


def render_history_panel(state: ChartState, limit: int) -> HistoryPanel:
    recent = state.history[-limit:] if limit > 0 else ()
    return HistoryPanel(total=len(state.history), entries=tuple(reversed(recent)))


def render_scene(
    state: ChartState,
    view: ViewState,
    settings: Settings,
    mapper: NumberingMapper,
) -> Scene:
    return Scene(
        toolbar=render_toolbar(view),
        chart=render_chart(state, view, settings, mapper),
        detail=render_detail_panel(state, view, mapper),
        history=render_history_panel(state, settings.history_display_limit),
    )
