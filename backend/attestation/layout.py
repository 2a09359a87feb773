"""
Field layout table for the movement certificate template.

Every coordinate is expressed in PDF points with the origin at the bottom-left
corner of the page. The values are calibrated against the bundled
`assets/certificate.pdf`; any change to the template invalidates them, which is
why they live in a single declarative structure that can also be loaded from
JSON for re-calibration.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple

from .errors import LayoutError
from .models import Motive

logger = logging.getLogger(__name__)

SAFE_MARGIN = 50.0
TEXT_Y_NUDGE = -8.0
TEXT_BOX_HEIGHT = 20.0
DEFAULT_FONT_SIZE = 11.0
FALLBACK_PAGE_WIDTH = 600.0
FALLBACK_PAGE_HEIGHT = 842.0

TEXT_FIELDS = (
    "display_name",
    "birthdate",
    "birthplace",
    "full_address",
    "city",
    "date",
    "hour",
    "minute",
)


class WidthMode(str, Enum):
    FIT_PAGE = "fit_page"
    FIXED = "fixed"


@dataclass(frozen=True)
class WidthPolicy:
    """Horizontal extent of a text annotation."""

    mode: WidthMode
    value: Optional[float] = None

    @classmethod
    def fit_page(cls) -> "WidthPolicy":
        return cls(WidthMode.FIT_PAGE)

    @classmethod
    def fixed(cls, value: float) -> "WidthPolicy":
        return cls(WidthMode.FIXED, float(value))

    def resolve(self, x: float, page_width: float) -> float:
        if self.mode == WidthMode.FIT_PAGE:
            width = page_width - x - SAFE_MARGIN
        else:
            width = float(self.value)
        if width <= 0:
            raise LayoutError(
                f"Field at x={x} has no room on a {page_width}pt wide page (resolved width {width}); "
                "the layout is calibrated for a different template"
            )
        return width


@dataclass(frozen=True)
class FieldPosition:
    x: float
    y: float
    width: WidthPolicy = field(default_factory=WidthPolicy.fit_page)
    font_size: float = DEFAULT_FONT_SIZE


@dataclass(frozen=True)
class ImagePlacement:
    """
    Placement of a QR image. `x_from_right` / `y_from_top` measure the
    corresponding edge offset from the right / top of the page instead of the
    origin, since both QR placements depend on the page size.
    """

    x: float
    y: float
    width: float
    height: float
    x_from_right: bool = False
    y_from_top: bool = False

    def resolve(self, page_width: float, page_height: float) -> Tuple[float, float, float, float]:
        x = page_width - self.x if self.x_from_right else self.x
        y = page_height - self.y if self.y_from_top else self.y
        return x, y, self.width, self.height


@dataclass(frozen=True)
class CertificateLayout:
    fields: Dict[str, FieldPosition]
    motives: Dict[Motive, Tuple[float, float]]
    qr_inset: ImagePlacement
    qr_page: ImagePlacement
    footer_label: FieldPosition
    footer_value: FieldPosition

    def position(self, name: str) -> FieldPosition:
        try:
            return self.fields[name]
        except KeyError as exc:
            raise LayoutError(f"Layout has no position for field '{name}'") from exc

    # ------------------------------------------------------------------
    # (De)serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict:
        def _position(pos: FieldPosition) -> Dict:
            data = {"x": pos.x, "y": pos.y, "font_size": pos.font_size}
            if pos.width.mode == WidthMode.FIXED:
                data["width"] = pos.width.value
            else:
                data["width"] = WidthMode.FIT_PAGE.value
            return data

        return {
            "fields": {name: _position(pos) for name, pos in self.fields.items()},
            "motives": {motive.value: {"x": x, "y": y} for motive, (x, y) in self.motives.items()},
            "qr_inset": asdict(self.qr_inset),
            "qr_page": asdict(self.qr_page),
            "footer_label": _position(self.footer_label),
            "footer_value": _position(self.footer_value),
        }

    @classmethod
    def from_dict(cls, data: Dict, base: Optional["CertificateLayout"] = None) -> "CertificateLayout":
        """
        Build a layout from a JSON-like dict. Missing sections fall back to
        `base` (the default layout when omitted), so a calibration file only
        needs to list the positions it moves.
        """
        base = base or DEFAULT_LAYOUT

        fields = dict(base.fields)
        for name, raw in (data.get("fields") or {}).items():
            if name not in TEXT_FIELDS:
                raise LayoutError(f"Unknown layout field '{name}'")
            fields[name] = _parse_position(name, raw)

        motives = dict(base.motives)
        for code, raw in (data.get("motives") or {}).items():
            try:
                motive = Motive(code)
            except ValueError as exc:
                raise LayoutError(f"Unknown motive '{code}' in layout") from exc
            try:
                motives[motive] = (float(raw["x"]), float(raw["y"]))
            except (KeyError, TypeError, ValueError) as exc:
                raise LayoutError(f"Invalid position for motive '{code}': {raw!r}") from exc
        # checkmarks are always emitted in Motive declaration order
        motives = {motive: motives[motive] for motive in Motive if motive in motives}

        return cls(
            fields=fields,
            motives=motives,
            qr_inset=_parse_image(data.get("qr_inset"), base.qr_inset),
            qr_page=_parse_image(data.get("qr_page"), base.qr_page),
            footer_label=_parse_position("footer_label", data["footer_label"]) if "footer_label" in data else base.footer_label,
            footer_value=_parse_position("footer_value", data["footer_value"]) if "footer_value" in data else base.footer_value,
        )

    @classmethod
    def from_json(cls, path: Path) -> "CertificateLayout":
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise LayoutError(f"Unable to read layout file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise LayoutError(f"Layout file {path} must contain a JSON object")
        logger.info("Loaded certificate layout from %s", path)
        return cls.from_dict(data)


def _parse_position(name: str, raw) -> FieldPosition:
    if not isinstance(raw, dict):
        raise LayoutError(f"Invalid position for '{name}': {raw!r}")
    try:
        x = float(raw["x"])
        y = float(raw["y"])
        font_size = float(raw.get("font_size", DEFAULT_FONT_SIZE))
        width_raw = raw.get("width", WidthMode.FIT_PAGE.value)
        if width_raw == WidthMode.FIT_PAGE.value:
            width = WidthPolicy.fit_page()
        else:
            width = WidthPolicy.fixed(float(width_raw))
    except (KeyError, TypeError, ValueError) as exc:
        raise LayoutError(f"Invalid position for '{name}': {raw!r}") from exc
    return FieldPosition(x=x, y=y, width=width, font_size=font_size)


def _parse_image(raw, default: ImagePlacement) -> ImagePlacement:
    if raw is None:
        return default
    if not isinstance(raw, dict):
        raise LayoutError(f"Invalid image placement: {raw!r}")
    try:
        return ImagePlacement(
            x=float(raw.get("x", default.x)),
            y=float(raw.get("y", default.y)),
            width=float(raw.get("width", default.width)),
            height=float(raw.get("height", default.height)),
            x_from_right=bool(raw.get("x_from_right", default.x_from_right)),
            y_from_top=bool(raw.get("y_from_top", default.y_from_top)),
        )
    except (TypeError, ValueError) as exc:
        raise LayoutError(f"Invalid image placement: {raw!r}") from exc


DEFAULT_LAYOUT = CertificateLayout(
    fields={
        "display_name": FieldPosition(123, 686),
        "birthdate": FieldPosition(123, 661),
        "birthplace": FieldPosition(92, 638),
        "full_address": FieldPosition(134, 613),
        "city": FieldPosition(111, 226),
        "date": FieldPosition(92, 200, WidthPolicy.fixed(80)),
        "hour": FieldPosition(198, 201, WidthPolicy.fixed(20)),
        "minute": FieldPosition(218, 201, WidthPolicy.fixed(20)),
    },
    motives={
        Motive.PRO: (74, 527),
        Motive.SHOP: (74, 478),
        Motive.HEALTH: (74, 436),
        Motive.FAMILY: (74, 400),
        Motive.BRIEF: (74, 345),
        Motive.ADMINISTRATIVE: (74, 298),
        Motive.TIG: (74, 260),
    },
    qr_inset=ImagePlacement(x=170, y=157, width=100, height=100, x_from_right=True),
    qr_page=ImagePlacement(x=50, y=350, width=300, height=300, y_from_top=True),
    footer_label=FieldPosition(464, 150, WidthPolicy.fixed(80), font_size=7),
    footer_value=FieldPosition(455, 144, WidthPolicy.fixed(80), font_size=7),
)
