"""Vector artwork extraction with PyMuPDF.

The drawings of each page are grouped into clusters of nearby paths, and every
cluster is written out as a standalone SVG. Clusters that cover nearly the whole
page are page backgrounds or full-page artwork, and they are skipped along with
tiny rules and bullets.
"""

import asyncio
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pymupdf

from docvision.logging.logger import Log
from docvision.pdf.base import BaseExtractionTool
from docvision.pdf.exceptions import VectorExtractionError

CLUSTER_GAP = 2.0
MIN_CLUSTER_SIDE = 16.0
MAX_PAGE_COVERAGE = 0.9


def vector_file_name(page_index: int, cluster_index: int) -> str:
    return f"vector-{page_index + 1:03d}-{cluster_index + 1:03d}.svg"


@dataclass
class DrawingCluster:
    x0: float
    y0: float
    x1: float
    y1: float
    drawings: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def of(cls, drawing: dict[str, Any]) -> "DrawingCluster":
        rect = drawing["rect"]
        return cls(rect.x0, rect.y0, rect.x1, rect.y1, [drawing])

    def is_near(self, other: "DrawingCluster", gap: float) -> bool:
        return (
            self.x0 - gap <= other.x1
            and other.x0 - gap <= self.x1
            and self.y0 - gap <= other.y1
            and other.y0 - gap <= self.y1
        )

    def absorb(self, other: "DrawingCluster") -> None:
        self.x0 = min(self.x0, other.x0)
        self.y0 = min(self.y0, other.y0)
        self.x1 = max(self.x1, other.x1)
        self.y1 = max(self.y1, other.y1)
        self.drawings.extend(other.drawings)

    def clipped(self, width: float, height: float) -> tuple[float, float, float, float]:
        return (max(self.x0, 0.0), max(self.y0, 0.0), min(self.x1, width), min(self.y1, height))


def cluster_drawings(drawings: list[dict[str, Any]], gap: float) -> list[DrawingCluster]:
    """Merge drawings whose bounding boxes lie within `gap` points of each other."""
    clusters: list[DrawingCluster] = []
    for drawing in drawings:
        current = DrawingCluster.of(drawing)
        merged = True
        while merged:
            merged = False
            for other in clusters:
                if current.is_near(other, gap):
                    clusters.remove(other)
                    current.absorb(other)
                    merged = True
                    break
        clusters.append(current)
    return clusters


def _color(value: Any) -> str:
    if not value:
        return "none"
    channels = [value[0]] * 3 if len(value) == 1 else list(value[:3])
    r, g, b = (round(min(max(c, 0.0), 1.0) * 255) for c in channels)
    return f"#{r:02x}{g:02x}{b:02x}"


def _pt(point: Any) -> str:
    return f"{point.x:.2f} {point.y:.2f}"


def _path_data(items: list[tuple[Any, ...]]) -> str:
    parts: list[str] = []
    last: tuple[float, float] | None = None
    for item in items:
        op = item[0]
        if op in ("l", "c"):
            start, end = item[1], item[-1]
            if last != (start.x, start.y):
                parts.append(f"M{_pt(start)}")
            if op == "l":
                parts.append(f"L{_pt(end)}")
            else:
                parts.append(f"C{_pt(item[2])} {_pt(item[3])} {_pt(end)}")
            last = (end.x, end.y)
        elif op == "re":
            rect = item[1]
            parts.append(
                f"M{rect.x0:.2f} {rect.y0:.2f}H{rect.x1:.2f}V{rect.y1:.2f}H{rect.x0:.2f}Z"
            )
            last = None
        elif op == "qu":
            quad = item[1]
            parts.append(
                f"M{_pt(quad.ul)}L{_pt(quad.ur)}L{_pt(quad.lr)}L{_pt(quad.ll)}Z"
            )
            last = None
    return "".join(parts)


def _path_element(drawing: dict[str, Any]) -> str | None:
    data = _path_data(drawing.get("items", []))
    if not data:
        return None
    if drawing.get("closePath") and not data.endswith("Z"):
        data += "Z"
    stroke = _color(drawing.get("color"))
    attrs = [f'd="{data}"', f'fill="{_color(drawing.get("fill"))}"', f'stroke="{stroke}"']
    if stroke != "none":
        attrs.append(f'stroke-width="{drawing.get("width") or 1.0:.2f}"')
    if drawing.get("even_odd"):
        attrs.append('fill-rule="evenodd"')
    for key, attr in (("fill_opacity", "fill-opacity"), ("stroke_opacity", "stroke-opacity")):
        opacity = drawing.get(key)
        if opacity is not None and opacity < 1:
            attrs.append(f'{attr}="{opacity:.2f}"')
    return f"  <path {' '.join(attrs)}/>"


def cluster_svg(cluster: DrawingCluster) -> str:
    """Render the drawings of a cluster as an SVG document in page coordinates."""
    width = max(cluster.x1 - cluster.x0, 1.0)
    height = max(cluster.y1 - cluster.y0, 1.0)
    lines = [
        '<svg xmlns="http://www.w3.org/2000/svg" '
        f'viewBox="{cluster.x0:.2f} {cluster.y0:.2f} {width:.2f} {height:.2f}" '
        f'width="{width:.2f}" height="{height:.2f}">'
    ]
    for drawing in sorted(cluster.drawings, key=lambda d: d.get("seqno", 0)):
        element = _path_element(drawing)
        if element is not None:
            lines.append(element)
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


class DrawingVectorTool(BaseExtractionTool):
    """Vector extractor; writes one vector-PPP-NNN.svg per drawing cluster."""

    name = "pymupdf-drawings"

    def __init__(
        self,
        gap: float = CLUSTER_GAP,
        min_side: float = MIN_CLUSTER_SIDE,
        max_page_coverage: float = MAX_PAGE_COVERAGE,
    ) -> None:
        self._gap = gap
        self._min_side = min_side
        self._max_page_coverage = max_page_coverage

    def is_available(self) -> bool:
        return True

    async def run(self, pdf_path: Path, output_dir: Path) -> None:
        """Extract in a worker thread; stop at the next page if cancelled.

        Raises:
            VectorExtractionError: if the document cannot be read.
        """
        stop = threading.Event()
        try:
            written = await asyncio.to_thread(self.extract, pdf_path, output_dir, stop)
        except asyncio.CancelledError:
            stop.set()
            Log.warning(f"{self.name} was stopped before finishing")
            raise
        Log.debug(f"{self.name} wrote {written} vector files for {pdf_path.name}")

    def extract(
        self, pdf_path: Path, output_dir: Path, stop: threading.Event | None = None
    ) -> int:
        try:
            written = 0
            with pymupdf.open(pdf_path) as doc:  # type: ignore[no-untyped-call]
                for page_index, page in enumerate(doc):
                    if stop is not None and stop.is_set():
                        break
                    for cluster_index, cluster in enumerate(self.page_clusters(page)):
                        target = output_dir / vector_file_name(page_index, cluster_index)
                        target.write_text(cluster_svg(cluster), encoding="utf-8")
                        written += 1
            return written
        except Exception as exc:
            raise VectorExtractionError(f"pymupdf drawing extraction failed: {exc}") from exc

    def page_clusters(self, page: Any) -> list[DrawingCluster]:
        """Clusters of the page that look like embedded artwork."""
        page_width, page_height = page.rect.width, page.rect.height
        page_area = page_width * page_height
        kept: list[DrawingCluster] = []
        for cluster in cluster_drawings(page.get_drawings(), self._gap):
            x0, y0, x1, y1 = cluster.clipped(page_width, page_height)
            width, height = x1 - x0, y1 - y0
            if width < self._min_side or height < self._min_side:
                continue
            if page_area and width * height / page_area >= self._max_page_coverage:
                continue
            kept.append(cluster)
        return kept
