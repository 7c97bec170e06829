# Curves adjustment widget
import sys
from PyQt6.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QLabel, QComboBox,
                             QPushButton, QSizePolicy, QApplication, QMainWindow)
from PyQt6.QtCore import pyqtSignal, QPointF, QRectF, Qt
from PyQt6.QtGui import QPainter, QPen, QBrush, QColor, QPainterPath

from ..processing.curve_editor import CurveEditorController, Dragging
from ..processing.curves import CHANNELS, LEVEL_MAX
from ..utils.errors import EditResult, format_user_error
from ..utils.logger import get_logger

logger = get_logger(__name__)

CHANNEL_LABELS = {'rgb': 'RGB', 'r': 'Red', 'g': 'Green', 'b': 'Blue'}
CURVE_COLORS = {
    'rgb': QColor(30, 30, 30),
    'r': QColor(200, 40, 40),
    'g': QColor(40, 160, 40),
    'b': QColor(40, 80, 200),
}


class CurveGraphWidget(QWidget):
    """Draws the current channel's curve and forwards pointer input to the controller."""
    curve_changed = pyqtSignal(str)         # channel
    edit_rejected = pyqtSignal(object)      # EditResult

    def __init__(self, controller: CurveEditorController, parent=None):
        super().__init__(parent)
        self.setMinimumSize(150, 150)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self._controller = controller
        self._padding = 10
        self._point_radius = 4
        self._samples = 64
        self.setAutoFillBackground(True)

    def get_graph_rect(self):
        """Calculate the rectangle where the graph is drawn."""
        return QRectF(
            self._padding,
            self._padding,
            self.width() - 2 * self._padding,
            self.height() - 2 * self._padding
        )

    def world_to_widget(self, x, y):
        """Convert curve coordinates (0-255) to widget coordinates."""
        rect = self.get_graph_rect()
        return QPointF(rect.left() + (x / LEVEL_MAX) * rect.width(),
                       rect.bottom() - (y / LEVEL_MAX) * rect.height())  # Y is inverted

    def widget_to_world(self, pos):
        """Convert widget coordinates to curve coordinates, clamped to 0-255."""
        rect = self.get_graph_rect()
        if rect.width() <= 0 or rect.height() <= 0:
            return 0.0, 0.0
        x = ((pos.x() - rect.left()) / rect.width()) * LEVEL_MAX
        y = ((rect.bottom() - pos.y()) / rect.height()) * LEVEL_MAX
        return max(0.0, min(x, LEVEL_MAX)), max(0.0, min(y, LEVEL_MAX))

    def _report(self, result, channel=None):
        if result is EditResult.OK:
            self.curve_changed.emit(channel or self._controller.channel)
        else:
            logger.debug("Curve edit not applied: %s", result.value)
            self.edit_rejected.emit(result)
        self.update()

    def paintEvent(self, event):
        """Draw grid, curve and control points."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        graph_rect = self.get_graph_rect()

        painter.setPen(QColor(200, 200, 200))
        for i in range(1, 4):
            x = graph_rect.left() + i * graph_rect.width() / 4
            painter.drawLine(QPointF(x, graph_rect.top()), QPointF(x, graph_rect.bottom()))
            y = graph_rect.top() + i * graph_rect.height() / 4
            painter.drawLine(QPointF(graph_rect.left(), y), QPointF(graph_rect.right(), y))
        painter.setPen(QColor(100, 100, 100))
        painter.drawRect(graph_rect)

        curves = self._controller.curves
        if curves is None:
            return
        channel = self._controller.channel

        xs = [LEVEL_MAX * i / self._samples for i in range(self._samples + 1)]
        ys = curves.sample(channel, xs)
        path = QPainterPath()
        path.moveTo(self.world_to_widget(xs[0], ys[0]))
        for x, y in zip(xs[1:], ys[1:]):
            path.lineTo(self.world_to_widget(x, max(0.0, min(LEVEL_MAX, y))))
        painter.setPen(QPen(CURVE_COLORS[channel], 1.5))
        painter.drawPath(path)

        state = self._controller.state
        selected = state.index if isinstance(state, Dragging) and state.channel == channel else -1
        for i, (px, py) in enumerate(curves.points(channel)):
            if i == selected:
                painter.setBrush(QBrush(QColor(255, 0, 0)))
                painter.setPen(QPen(QColor(100, 0, 0), 1))
            else:
                painter.setBrush(QBrush(QColor(50, 50, 200)))
                painter.setPen(QPen(QColor(0, 0, 100), 1))
            painter.drawEllipse(self.world_to_widget(px, py), self._point_radius, self._point_radius)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._report(self._controller.pointer_down(*self.widget_to_world(event.position())))

    def mouseMoveEvent(self, event):
        if self._controller.is_dragging:
            self._report(self._controller.pointer_move(*self.widget_to_world(event.position())))

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._controller.pointer_up()
            self.curve_changed.emit(self._controller.channel)
            self.update()

    def mouseDoubleClickEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._report(self._controller.double_click(*self.widget_to_world(event.position())))


class CurvesWidget(QWidget):
    """Channel selector, curve graph and reset button."""
    curve_changed = pyqtSignal(str)  # channel

    def __init__(self, controller: CurveEditorController, parent=None):
        super().__init__(parent)
        self._controller = controller
        self.setup_ui()

    def setup_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(5)

        channel_layout = QHBoxLayout()
        channel_layout.addWidget(QLabel("Channel:"))
        self.channel_combo = QComboBox()
        for channel in CHANNELS:
            self.channel_combo.addItem(CHANNEL_LABELS[channel], channel)
        self.channel_combo.currentIndexChanged.connect(self._channel_index_changed)
        channel_layout.addWidget(self.channel_combo)
        channel_layout.addStretch(1)
        main_layout.addLayout(channel_layout)

        self.graph_widget = CurveGraphWidget(self._controller, self)
        self.graph_widget.curve_changed.connect(self.curve_changed.emit)
        main_layout.addWidget(self.graph_widget)

        button_layout = QHBoxLayout()
        reset_button = QPushButton("Reset Curve")
        reset_button.clicked.connect(self.reset_current_curve)
        button_layout.addWidget(reset_button)
        button_layout.addStretch(1)
        self.status_label = QLabel("")
        button_layout.addWidget(self.status_label)
        self.graph_widget.edit_rejected.connect(self._show_rejection)
        self.curve_changed.connect(lambda channel: self.status_label.clear())
        main_layout.addLayout(button_layout)

        self.setLayout(main_layout)

    def _show_rejection(self, result):
        self.status_label.setText(format_user_error(result))

    def _channel_index_changed(self, index):
        self.select_channel(self.channel_combo.itemData(index))

    def select_channel(self, channel):
        """Show another channel; selecting is not an edit."""
        self._controller.select_channel(channel)
        combo_index = CHANNELS.index(channel)
        if self.channel_combo.currentIndex() != combo_index:
            self.channel_combo.setCurrentIndex(combo_index)
        self.graph_widget.update()

    def reset_current_curve(self):
        result = self._controller.reset_channel()
        if result is EditResult.OK:
            self.curve_changed.emit(self._controller.channel)
        self.graph_widget.update()


# Example usage (for testing standalone)
if __name__ == '__main__':
    from ..processing.curves import CurveModel

    app = QApplication(sys.argv)
    model = CurveModel()
    controller = CurveEditorController(lambda: model, checkpoint=lambda description: None)
    mainWin = QMainWindow()
    mainWin.setWindowTitle("Curves Widget Test")
    curves_widget = CurvesWidget(controller)
    mainWin.setCentralWidget(curves_widget)
    curves_widget.curve_changed.connect(lambda channel: print(f"Curve changed for {channel}: {model.points(channel)}"))
    mainWin.setGeometry(300, 300, 300, 350)
    mainWin.show()
    sys.exit(app.exec())
