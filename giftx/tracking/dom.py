"""Minimal document model for click capture: elements, bounding boxes, viewport."""
from collections.abc import Callable
from dataclasses import dataclass, field

from giftx.utils import round_half_up

INTERACTIVE_TAGS = ("button", "a", "input", "select", "textarea")


@dataclass(frozen=True)
class Rect:
    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def midpoint(self) -> tuple[int, int]:
        return (
            round_half_up(self.left + self.width / 2),
            round_half_up(self.top + self.height / 2),
        )


@dataclass(eq=False)
class Element:
    tag_name: str
    id: str = ""
    class_name: str = ""
    text: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    rect: Rect = field(default_factory=Rect)
    parent: "Element | None" = None
    children: list["Element"] = field(default_factory=list)

    def append(self, child: "Element") -> "Element":
        child.parent = self
        self.children.append(child)
        return child

    @property
    def tag(self) -> str:
        return self.tag_name.lower()

    @property
    def text_content(self) -> str:
        return self.text + "".join(c.text_content for c in self.children)

    def closest(self, predicate: Callable[["Element"], bool]) -> "Element | None":
        node: Element | None = self
        while node is not None:
            if predicate(node):
                return node
            node = node.parent
        return None


def is_interactive(el: Element) -> bool:
    return (
        el.tag in INTERACTIVE_TAGS
        or el.attributes.get("role") == "button"
        or "data-track" in el.attributes
    )


def resolve_click_target(target: Element) -> Element | None:
    """Nearest interactive element at or above the clicked node; None for plain content."""
    if target.tag in INTERACTIVE_TAGS:
        return target
    return target.closest(is_interactive)


@dataclass
class Viewport:
    width: int = 1280
    height: int = 720
    scroll_y: float = 0.0
    document_height: float = 720.0

    def scroll_depth(self) -> int:
        """Percentage of scrollable distance reached; 0 when the page does not scroll."""
        scrollable = self.document_height - self.height
        if scrollable <= 0:
            return 0
        return round_half_up(self.scroll_y / scrollable * 100)
