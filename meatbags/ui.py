"""The small button panel for adding and removing sensors, filters and senders."""

from __future__ import annotations

import enum
import math
from collections.abc import Callable
from dataclasses import dataclass, field


class ButtonKind(enum.Enum):
    ADD = "add"
    REMOVE = "remove"
    SAVE = "save"


@dataclass
class UIButton:
    """A square button centred on ``(x, y)``."""

    kind: ButtonKind = ButtonKind.ADD
    x: float = 0.0
    y: float = 0.0
    size: float = 0.0
    half_size: float = 0.0
    is_mouse_over: bool = False
    is_mouse_clicked: bool = False
    click_latch: bool = True
    floppy_outline: list[tuple[float, float]] = field(default_factory=list)

    def set_size(self, size: float) -> None:
        self.size = size
        self.half_size = size * 0.5

    def set_position(self, x: float, y: float) -> None:
        self.x = x
        self.y = y
        s = self.size
        self.floppy_outline = [
            (x + s * 0.5, y - s * 0.4),
            (x + s * 0.5, y + s * 0.5),
            (x - s * 0.5, y + s * 0.5),
            (x - s * 0.5, y - s * 0.5),
            (x + s * 0.4, y - s * 0.5),
        ]

    @property
    def rectangle(self) -> tuple[float, float, float, float]:
        """Corner and size of the button square."""
        return (self.x - self.half_size, self.y - self.half_size, self.size, self.size)

    def contains(self, x: float, y: float) -> bool:
        """Whether ``(x, y)`` is within half the size of the button's centre."""
        return math.hypot(x - self.x, y - self.y) <= self.half_size


@dataclass
class BoundedCount:
    """An integer kept between a minimum and a maximum."""

    value: int = 0
    minimum: int = 0
    maximum: int = 0

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise ValueError("minimum exceeds maximum")
        if not self.minimum <= self.value <= self.maximum:
            raise ValueError("value lies outside its bounds")

    def increment(self) -> int:
        if self.value < self.maximum:
            self.value += 1
        return self.value

    def decrement(self) -> int:
        if self.value > self.minimum:
            self.value -= 1
        return self.value


class UI:
    """Buttons that change the number of sensors, filters and OSC senders."""

    SIZE = 16.0
    OFFSET = 5.0

    def __init__(
        self,
        sensors: BoundedCount,
        filters: BoundedCount,
        osc_senders: BoundedCount,
        on_save: Callable[[], None] | None = None,
    ) -> None:
        self.number_sensors = sensors
        self.number_filters = filters
        self.number_osc_senders = osc_senders
        self.on_save = on_save
        self.position: tuple[float, float] = (0.0, 0.0)

        spacing = self.SIZE + self.OFFSET
        self.save_button = self._button(ButtonKind.SAVE, 0, spacing * 4.25)
        self.add_sensor_button = self._button(ButtonKind.ADD, 0, spacing)
        self.remove_sensor_button = self._button(ButtonKind.REMOVE, spacing, spacing)
        self.add_filter_button = self._button(ButtonKind.ADD, 0, spacing * 2)
        self.remove_filter_button = self._button(
            ButtonKind.REMOVE, spacing, spacing * 2
        )
        self.add_osc_sender_button = self._button(ButtonKind.ADD, 0, spacing * 3)
        self.remove_osc_sender_button = self._button(
            ButtonKind.REMOVE, spacing, spacing * 3
        )

        self._actions: list[tuple[UIButton, Callable[[], object]]] = [
            (self.save_button, self._save),
            (self.add_sensor_button, self.add_sensor),
            (self.remove_sensor_button, self.remove_sensor),
            (self.add_filter_button, self.add_filter),
            (self.remove_filter_button, self.remove_filter),
            (self.add_osc_sender_button, self.add_osc_sender),
            (self.remove_osc_sender_button, self.remove_osc_sender),
        ]

    def _button(self, kind: ButtonKind, x: float, y: float) -> UIButton:
        button = UIButton(kind=kind)
        button.set_size(self.SIZE)
        button.set_position(x, y)
        return button

    @property
    def buttons(self) -> list[UIButton]:
        return [button for button, _ in self._actions]

    def _save(self) -> None:
        if self.on_save is not None:
            self.on_save()

    def add_sensor(self) -> None:
        self.number_sensors.increment()

    def remove_sensor(self) -> None:
        self.number_sensors.decrement()

    def add_filter(self) -> None:
        self.number_filters.increment()

    def remove_filter(self) -> None:
        self.number_filters.decrement()

    def add_osc_sender(self) -> None:
        self.number_osc_senders.increment()

    def remove_osc_sender(self) -> None:
        self.number_osc_senders.decrement()

    def _local(self, x: float, y: float) -> tuple[float, float]:
        return x - self.position[0], y - self.position[1]

    def on_mouse_moved(self, x: float, y: float) -> None:
        lx, ly = self._local(x, y)
        for button in self.buttons:
            button.is_mouse_over = button.contains(lx, ly)

    def on_mouse_pressed(self, x: float, y: float) -> None:
        lx, ly = self._local(x, y)
        for button in self.buttons:
            button.is_mouse_clicked = button.contains(lx, ly)
        for button, action in self._actions:
            if button.is_mouse_clicked and button.click_latch:
                action()
                button.click_latch = False

    def on_mouse_released(self) -> None:
        for button in self.buttons:
            if button.is_mouse_clicked:
                button.is_mouse_clicked = False
                button.click_latch = True