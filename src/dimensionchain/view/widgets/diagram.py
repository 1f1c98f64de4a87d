"""
Diagram Canvas
Draws the background drawing and one draggable callout per dimension.
"""
import logging
from typing import Callable, Optional

from PySide6.QtWidgets import (
    QGraphicsView, QGraphicsScene, QGraphicsItemGroup, QGraphicsItem,
    QGraphicsLineItem, QGraphicsSimpleTextItem, QGraphicsPixmapItem
)
from PySide6.QtCore import Signal, Qt, QPointF
from PySide6.QtGui import QPixmap, QPen, QBrush, QColor, QFont, QPainter

from dimensionchain.config import (
    CANVAS_WIDTH, CANVAS_HEIGHT, CALLOUT_LINE_LENGTH, CALLOUT_LABEL_OFFSET, CALLOUT_FONT_SIZE
)
from dimensionchain.model.dimensions import DimensionEntry
from dimensionchain.model.io import IOManager
from dimensionchain.model.state import ProjectState

logger = logging.getLogger(__name__)


class CalloutItem(QGraphicsItemGroup):
    """Red dimension line with its blue label, movable as one piece."""

    def __init__(self, index: int, entry: DimensionEntry, on_moved: Callable[[int, float, float], None]) -> None:
        super().__init__()
        self.index = index
        self._on_moved = on_moved
        self._press_pos: Optional[QPointF] = None

        line = QGraphicsLineItem(0.0, 0.0, CALLOUT_LINE_LENGTH, 0.0)
        line.setPen(QPen(QColor("red"), 2))
        self.addToGroup(line)

        label = QGraphicsSimpleTextItem(entry.label)
        font = QFont()
        font.setPixelSize(CALLOUT_FONT_SIZE)
        label.setFont(font)
        label.setBrush(QBrush(QColor("blue")))
        label.setPos(*CALLOUT_LABEL_OFFSET)
        self.addToGroup(label)

        self.setPos(entry.anchor.x, entry.anchor.y)
        self.setFlag(QGraphicsItem.ItemIsMovable, True)
        self.setCursor(Qt.OpenHandCursor)

    def mousePressEvent(self, event) -> None:
        self._press_pos = self.pos()
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event) -> None:
        super().mouseReleaseEvent(event)
        # Report only completed drags, not plain clicks
        if self._press_pos is not None and self.pos() != self._press_pos:
            self._on_moved(self.index, self.pos().x(), self.pos().y())
        self._press_pos = None


class DiagramWidget(QGraphicsView):
    # index, x, y of a callout the user finished dragging
    anchor_moved = Signal(int, float, float)

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._scene = QGraphicsScene(0, 0, CANVAS_WIDTH, CANVAS_HEIGHT, self)
        self.setScene(self._scene)
        self.setRenderHint(QPainter.Antialiasing)
        self.setBackgroundBrush(QBrush(QColor("white")))
        self.setMinimumSize(CANVAS_WIDTH // 2, CANVAS_HEIGHT // 2)

    def update_scene(self, project_state: ProjectState) -> None:
        """Redraw everything from the project state."""
        self._scene.clear()

        pixmap = self._load_background(project_state.background_image)
        if pixmap is not None:
            scaled = pixmap.scaled(CANVAS_WIDTH, CANVAS_HEIGHT, Qt.IgnoreAspectRatio, Qt.SmoothTransformation)
            self._scene.addItem(QGraphicsPixmapItem(scaled))

        for index, entry in enumerate(project_state.entries):
            self._scene.addItem(CalloutItem(index, entry, self.anchor_moved.emit))

        logger.debug(f"Diagram redrawn with {len(project_state.entries)} callout(s).")

    @staticmethod
    def _load_background(reference: Optional[str]) -> Optional[QPixmap]:
        data = IOManager.resolve_image_bytes(reference)
        if data is None:
            return None

        pixmap = QPixmap()
        if not pixmap.loadFromData(data):
            logger.warning("Background image could not be decoded.")
            return None
        return pixmap
