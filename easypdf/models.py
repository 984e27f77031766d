from dataclasses import dataclass, field
from typing import Iterator, List, Tuple


@dataclass(frozen=True)
class Paragraph:
    """A block of plain text.

    Newlines inside ``text`` become line breaks in the rendered output.
    Empty text is allowed and renders as an empty paragraph.
    """

    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise TypeError(f"paragraph text must be str, not {type(self.text).__name__}")


# Paragraph is currently the only kind of content block.
ContentBlock = Paragraph


@dataclass
class Document:
    """Ordered sequence of content blocks.

    Blocks are rendered in the order they were appended.
    """

    _blocks: List[ContentBlock] = field(default_factory=list, init=False)

    @property
    def blocks(self) -> Tuple[ContentBlock, ...]:
        return tuple(self._blocks)

    def add(self, block: ContentBlock) -> None:
        if not isinstance(block, Paragraph):
            raise TypeError(f"expected a content block, got {type(block).__name__}")
        self._blocks.append(block)

    def texts(self) -> List[str]:
        return [block.text for block in self._blocks]

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[ContentBlock]:
        return iter(self._blocks)
