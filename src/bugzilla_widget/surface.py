"""Render surfaces for bug lists.

Bug lists never touch concrete UI primitives. They look up named regions
on a ``Surface`` and drive them through a handful of operations: set text,
clear and append children, toggle visibility, and register click handlers.

``TreeSurface`` is an in-memory element tree implementing that interface.
It is used by the command line front end and by the tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from .exceptions import RegionNotFoundError, SurfaceError

# Class markers of a category box
CATEGORY_HEAD = "category-head"
CATEGORY_TITLE = "category-title"
CATEGORY_COUNT = "category-count"
CATEGORY_NEW_COUNT = "category-new-count"
BUG_LIST = "bug-list"

ClickHandler = Callable[[], None]


class Surface(ABC):
    """Abstract render target used by bug lists."""

    @abstractmethod
    def region(self, key: str, marker: str | None = None) -> Any:
        """Look up a region.

        Args:
            key: Identifier of the enclosing region.
            marker: Optional class marker of a child of that region.

        Returns:
            Opaque region handle.

        Raises:
            RegionNotFoundError: If no such region exists.
        """
        pass

    @abstractmethod
    def get_text(self, region: Any) -> str:
        pass

    @abstractmethod
    def set_text(self, region: Any, value: str) -> None:
        pass

    @abstractmethod
    def create_node(self, text: str, classes: tuple[str, ...] = ()) -> Any:
        """Create a detached render node."""
        pass

    @abstractmethod
    def clear_children(self, region: Any) -> None:
        pass

    @abstractmethod
    def append_child(self, region: Any, node: Any) -> None:
        pass

    @abstractmethod
    def set_visible(self, region: Any, visible: bool) -> None:
        pass

    @abstractmethod
    def on_click(self, region: Any, handler: ClickHandler) -> None:
        """Register a handler called when the region is clicked."""
        pass


@dataclass(eq=False)
class Element:
    """Node of a TreeSurface."""

    id: str | None = None
    classes: tuple[str, ...] = ()
    text: str = ""
    visible: bool = True
    children: list[Element] = field(default_factory=list)
    click_handlers: list[ClickHandler] = field(default_factory=list)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def iter_descendants(self) -> Iterator[Element]:
        for child in self.children:
            yield child
            yield from child.iter_descendants()


class TreeSurface(Surface):
    """In-memory element tree."""

    def __init__(self) -> None:
        self.root = Element(id="bugzilla-widget")

    def add_category(self, category_name: str, title: str | None = None) -> Element:
        """Add the standard box for a category.

        The box contains a head (title, count, new count) and a bug list
        that starts out hidden.

        Args:
            category_name: Identifier of the box.
            title: Heading shown in the head. Defaults to the category name.

        Returns:
            The category box element.

        Raises:
            SurfaceError: If a box with this identifier already exists.
        """
        if self.find(category_name) is not None:
            raise SurfaceError(f"Duplicate region: {category_name}")

        head = Element(
            classes=(CATEGORY_HEAD,),
            children=[
                Element(classes=(CATEGORY_TITLE,), text=title or category_name),
                Element(classes=(CATEGORY_COUNT,), text="0"),
                Element(classes=(CATEGORY_NEW_COUNT,), text="(0)"),
            ],
        )
        bug_list = Element(classes=(BUG_LIST,), visible=False)
        box = Element(id=category_name, classes=("category",), children=[head, bug_list])
        self.root.children.append(box)
        return box

    def find(self, element_id: str) -> Element | None:
        """Return the element with the given identifier, if any."""
        for element in self.root.iter_descendants():
            if element.id == element_id:
                return element
        return None

    def region(self, key: str, marker: str | None = None) -> Element:
        box = self.find(key)
        if box is None:
            raise RegionNotFoundError(key)
        if marker is None:
            return box

        for element in box.iter_descendants():
            if element.has_class(marker):
                return element
        raise RegionNotFoundError(key, marker)

    def get_text(self, region: Element) -> str:
        return region.text

    def set_text(self, region: Element, value: str) -> None:
        region.text = str(value)

    def create_node(self, text: str, classes: tuple[str, ...] = ()) -> Element:
        return Element(classes=tuple(classes), text=text)

    def clear_children(self, region: Element) -> None:
        region.children.clear()

    def append_child(self, region: Element, node: Element) -> None:
        region.children.append(node)

    def set_visible(self, region: Element, visible: bool) -> None:
        region.visible = visible

    def on_click(self, region: Element, handler: ClickHandler) -> None:
        region.click_handlers.append(handler)

    def click(self, region: Element) -> None:
        """Dispatch a click to every handler registered on region."""
        for handler in list(region.click_handlers):
            handler()

    def render_text(self) -> str:
        """Render category heads and expanded bug lists as text lines."""
        lines: list[str] = []

        for box in self.root.children:
            for element in box.children:
                if not element.visible:
                    continue
                if element.has_class(CATEGORY_HEAD):
                    lines.append(" ".join(child.text for child in element.children))
                elif element.has_class(BUG_LIST):
                    lines.extend(f"  {node.text}" for node in element.children)

        return "\n".join(lines)
