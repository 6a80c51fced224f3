"""
Content block model for blog post bodies.

A document is an ordered list of blocks. Each block is one variant of a
closed tagged union discriminated by ``type``. Python attributes are
snake_case; the stored JSON keeps the camelCase wire names through aliases.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

BlockType = Literal[
    "paragraph",
    "heading",
    "code",
    "image",
    "quote",
    "list",
    "divider",
    "callout",
    "embed",
    "table",
    "quiz",
    "flowchart",
    "math",
    "diff",
    "terminal",
    "api",
    "filetree",
    "banner",
    "stats",
    "comparison",
]

BLOCK_TYPES: tuple[str, ...] = get_args(BlockType)

# Types the visual editor can represent as HTML
EDITOR_BLOCK_TYPES: frozenset[str] = frozenset(
    ["paragraph", "heading", "code", "image", "quote", "list", "divider", "callout"]
)

Variant = Literal["info", "warning", "error", "success"]


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class BaseBlock(_Model):
    id: str


# --- Editor blocks ---


class ParagraphBlock(BaseBlock):
    type: Literal["paragraph"] = "paragraph"
    content: str


class HeadingBlock(BaseBlock):
    type: Literal["heading"] = "heading"
    level: Literal[1, 2, 3, 4]
    content: str


class CodeBlock(BaseBlock):
    type: Literal["code"] = "code"
    language: str
    code: str
    filename: str | None = None


class ImageBlock(BaseBlock):
    type: Literal["image"] = "image"
    src: str
    alt: str
    caption: str | None = None


class QuoteBlock(BaseBlock):
    type: Literal["quote"] = "quote"
    content: str
    author: str | None = None


class ListBlock(BaseBlock):
    type: Literal["list"] = "list"
    style: Literal["ordered", "unordered"]
    items: list[str]


class DividerBlock(BaseBlock):
    type: Literal["divider"] = "divider"


class CalloutBlock(BaseBlock):
    type: Literal["callout"] = "callout"
    variant: Variant
    content: str
    title: str | None = None


# --- Advanced blocks ---


class EmbedBlock(BaseBlock):
    type: Literal["embed"] = "embed"
    url: str
    provider: Literal["youtube", "twitter", "codepen", "other"] | None = None


class TableColumn(_Model):
    key: str
    header: str
    color: str | None = None


class TableBlock(BaseBlock):
    type: Literal["table"] = "table"
    columns: list[TableColumn]
    rows: list[dict[str, str]]
    striped: bool | None = None
    caption: str | None = None


class QuizQuestion(_Model):
    question: str
    options: list[str]
    correct_index: int = Field(alias="correctIndex")
    explanation: str | None = None


class QuizBlock(BaseBlock):
    type: Literal["quiz"] = "quiz"
    title: str
    questions: list[QuizQuestion]


class FlowchartNode(_Model):
    id: str
    label: str
    type: Literal["start", "end", "process", "decision", "data"] | None = None
    color: str | None = None


class FlowchartEdge(_Model):
    from_: str = Field(alias="from")
    to: str
    label: str | None = None


class FlowchartBlock(BaseBlock):
    type: Literal["flowchart"] = "flowchart"
    nodes: list[FlowchartNode]
    edges: list[FlowchartEdge]
    direction: Literal["TB", "LR"] | None = None
    title: str | None = None


class MathBlock(BaseBlock):
    type: Literal["math"] = "math"
    formula: str
    inline: bool | None = None
    caption: str | None = None


class DiffBlock(BaseBlock):
    type: Literal["diff"] = "diff"
    before: str
    after: str
    language: str | None = None
    filename: str | None = None


class TerminalCommand(_Model):
    command: str
    output: str | None = None


class TerminalBlock(BaseBlock):
    type: Literal["terminal"] = "terminal"
    commands: list[TerminalCommand]
    title: str | None = None


class ApiParam(_Model):
    name: str
    type: str
    required: bool | None = None
    description: str | None = None


class ApiBlock(BaseBlock):
    type: Literal["api"] = "api"
    method: Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
    endpoint: str
    description: str | None = None
    params: list[ApiParam] | None = None
    body: str | None = None
    response: str | None = None


class FileTreeItem(_Model):
    name: str
    type: Literal["file", "folder"]
    children: list[FileTreeItem] | None = None
    highlight: bool | None = None


class FileTreeBlock(BaseBlock):
    type: Literal["filetree"] = "filetree"
    items: list[FileTreeItem]
    title: str | None = None


class BannerBlock(BaseBlock):
    type: Literal["banner"] = "banner"
    variant: Literal["info", "warning", "error", "success", "update"]
    title: str
    content: str | None = None
    icon: str | None = None


class StatItem(_Model):
    # int before float so 10000 stays an int after a round trip
    value: int | float | str
    label: str
    prefix: str | None = None
    suffix: str | None = None
    color: str | None = None


class StatsBlock(BaseBlock):
    type: Literal["stats"] = "stats"
    items: list[StatItem]
    columns: Literal[2, 3, 4] | None = None


class ComparisonBlock(BaseBlock):
    type: Literal["comparison"] = "comparison"
    left_title: str = Field(alias="leftTitle")
    right_title: str = Field(alias="rightTitle")
    left_items: list[str] = Field(alias="leftItems")
    right_items: list[str] = Field(alias="rightItems")
    left_color: str | None = Field(default=None, alias="leftColor")
    right_color: str | None = Field(default=None, alias="rightColor")


ContentBlock = Annotated[
    Union[
        ParagraphBlock,
        HeadingBlock,
        CodeBlock,
        ImageBlock,
        QuoteBlock,
        ListBlock,
        DividerBlock,
        CalloutBlock,
        EmbedBlock,
        TableBlock,
        QuizBlock,
        FlowchartBlock,
        MathBlock,
        DiffBlock,
        TerminalBlock,
        ApiBlock,
        FileTreeBlock,
        BannerBlock,
        StatsBlock,
        ComparisonBlock,
    ],
    Field(discriminator="type"),
]

Document = list[ContentBlock]

BLOCK_ADAPTER: TypeAdapter[Any] = TypeAdapter(ContentBlock)
DOCUMENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(Document)

# type tag -> model class
BLOCK_MODELS: dict[str, type[BaseBlock]] = {
    model.model_fields["type"].default: model
    for model in get_args(get_args(ContentBlock)[0])
}


def parse_block(data: Any) -> BaseBlock:
    """
    Validate one block from its wire dict.

    Raises:
        ValueError: If the data is not a valid block of a known type.
    """
    try:
        block: BaseBlock = BLOCK_ADAPTER.validate_python(data)
    except ValidationError as e:
        block_type = data.get("type") if isinstance(data, dict) else None
        raise ValueError(f"Invalid block (type={block_type!r}): {e}") from e
    return block


def parse_document(data: Any) -> list[BaseBlock]:
    """Validate a whole document strictly. Raises ValueError on the first bad block."""
    if not isinstance(data, list):
        raise ValueError("Document must be a list of blocks.")
    return [parse_block(item) for item in data]


def block_to_dict(block: BaseBlock) -> dict[str, Any]:
    """Wire representation of a block (camelCase names, unset optionals omitted)."""
    return block.model_dump(by_alias=True, exclude_none=True, mode="json")
