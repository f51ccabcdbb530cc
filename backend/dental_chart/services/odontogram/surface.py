from __future__ import annotations

from html import escape
from typing import Protocol

from dental_chart.services.odontogram.render import DetailPanel, HistoryPanel, Scene, Toolbar, ToolbarButton


class RenderSurface(Protocol):
    def acquire(self, owner: object) -> None:
        raise NotImplementedError

    def release(self, owner: object) -> None:
        raise NotImplementedError

    def draw(self, scene: Scene) -> None:
        raise NotImplementedError


def _button(button: ToolbarButton, css: str) -> str:
    classes = f"{css} active" if button.active else css
    dot = (
        f'<span class="dc-cond-dot" style="background:{escape(button.color)}"></span>'
        if button.color
        else ""
    )
    return f'<button class="{classes}">{dot}{escape(button.label)}</button>'


def toolbar_html(toolbar: Toolbar) -> str:
    modes = "".join(_button(button, "dc-mode-btn") for button in toolbar.mode_buttons)
    conditions = "".join(_button(button, "dc-cond-btn") for button in toolbar.condition_buttons)
    return (
        '<div class="dc-toolbar">'
        f'<div class="dc-mode-toggle">{modes}</div>'
        '<div class="dc-toolbar-sep"></div>'
        f'<div class="dc-condition-buttons">{conditions}</div>'
        "</div>"
    )


def detail_html(panel: DetailPanel) -> str:
    if panel.empty:
        return (
            '<div class="dc-detail-panel"><div class="dc-detail-empty">'
            "<p>Click on any tooth to view and edit its details</p>"
            '<p class="dc-detail-hint"><strong>Surface mode:</strong> Click a surface to set condition'
            " | <strong>Whole tooth mode:</strong> Click to set tooth status</p>"
            "</div></div>"
        )
    if panel.whole_label:
        whole = (
            f'<span class="dc-cond-dot-sm" style="background:{escape(panel.whole_color or "")}"></span> '
            f"{escape(panel.whole_label)}"
            '<button class="dc-btn-clear" title="Clear whole tooth condition">&#10005;</button>'
        )
    else:
        whole = '<span class="dc-muted">Normal (no whole-tooth condition)</span>'
    rows = "".join(
        f'<div class="dc-surf-row{" active" if row.active else ""}" data-surface="{row.surface.value}">'
        f'<span class="dc-surf-label">{row.surface.value.capitalize()}</span>'
        f'<span class="dc-surf-cond" style="color:{escape(row.color)}">{escape(row.label)}</span>'
        "</div>"
        for row in panel.surface_rows
    )
    mobility = "".join(_button(button, "dc-mob-btn") for button in panel.mobility_buttons)
    return (
        '<div class="dc-detail-panel">'
        '<div class="dc-detail-header">'
        f'<div class="dc-detail-tooth-num">{escape(panel.display_id or "")}</div>'
        f'<div class="dc-detail-tooth-info"><h4>{escape(panel.title or "")}</h4>'
        f'<span class="dc-detail-name">{escape(panel.tooth_name or "")}</span>'
        f'<span class="dc-detail-quad">{escape(panel.quadrant_name or "")}</span></div>'
        '<button class="dc-btn dc-btn-outline dc-btn-sm" title="Reset tooth to healthy">Reset</button>'
        "</div>"
        '<div class="dc-detail-body">'
        f'<div class="dc-detail-section"><h5>Whole Tooth Status</h5><div class="dc-whole-status">{whole}</div></div>'
        f'<div class="dc-detail-section"><h5>Surface Conditions</h5><div class="dc-surf-list">{rows}</div></div>'
        f'<div class="dc-detail-section"><h5>Mobility</h5><div class="dc-mobility">{mobility}</div></div>'
        '<div class="dc-detail-section"><h5>Notes</h5>'
        f'<textarea class="dc-tooth-note" placeholder="Add clinical notes...">{escape(panel.note)}</textarea></div>'
        "</div></div>"
    )


def history_html(panel: HistoryPanel) -> str:
    if not panel.entries:
        entries = '<div class="dc-history-empty">No changes recorded this session</div>'
    else:
        entries = "".join(
            '<div class="dc-history-entry">'
            f'<span class="dc-history-tooth">#{escape(entry.tooth_id)}</span>'
            f'<span class="dc-history-action">{escape(entry.description)}</span>'
            f'<span class="dc-history-time">{entry.timestamp.strftime("%H:%M:%S")}</span>'
            "</div>"
            for entry in panel.entries
        )
    return (
        '<div class="dc-history-panel">'
        f'<div class="dc-history-header"><h5>Session History</h5><span class="dc-history-count">{panel.total} entries</span></div>'
        f'<div class="dc-history-list">{entries}</div>'
        "</div>"
    )


def scene_html(scene: Scene) -> str:
    return (
        '<div class="dc-root">'
        f"{toolbar_html(scene.toolbar)}"
        f'<div class="dc-chart-wrap">{scene.to_svg()}</div>'
        f'<div class="dc-bottom-grid">{detail_html(scene.detail)}{history_html(scene.history)}</div>'
        "</div>"
    )


class MarkupSurface:
    """Keeps the latest scene and its HTML/SVG markup; hosts one engine at a time."""

    def __init__(self) -> None:
        self.owner: object | None = None
        self.scene: Scene | None = None
        self.markup = ""
        self.draw_count = 0

    def acquire(self, owner: object) -> None:
        if self.owner is not None and self.owner is not owner:
            raise RuntimeError("Surface already hosts a live dental chart; destroy it first")
        self.owner = owner

    def release(self, owner: object) -> None:
        if self.owner is not owner:
            return
        self.owner = None
        self.scene = None
        self.markup = ""

    def draw(self, scene: Scene) -> None:
        self.scene = scene
        self.markup = scene_html(scene)
        self.draw_count += 1
