import re

from pydantic import BaseModel, Field, field_validator, model_validator

LOCALE_PATTERN = re.compile(r"^[a-z]{2,3}(-[A-Za-z0-9]+)*$")


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class LocaleRules(BaseModel):
    supported: list[str] = Field(min_length=1)
    default: str

    @field_validator("supported")
    @classmethod
    def codes_are_well_formed(cls, value: list[str]) -> list[str]:
        # Row ids are "{post_id}_{locale}", so a locale may not contain "_"
        for code in value:
            if not LOCALE_PATTERN.match(code):
                raise ValueError(f"Invalid locale code '{code}'")
        return value

    @model_validator(mode="after")
    def default_is_supported(self) -> "LocaleRules":
        if self.default not in self.supported:
            raise ValueError(f"Default locale '{self.default}' is not in supported locales")
        return self


class SlugRules(BaseModel):
    pattern: str = r"^[a-z0-9-]+$"
    max: int = 100


class RelatedPostsRules(BaseModel):
    category_match_weight: int = 3
    featured_weight: int = 2
    recency_weight: int = 1
    recency_window_days: int = 30
    candidate_pool_factor: int = Field(default=4, ge=1)
    default_limit: int = Field(default=6, ge=1)


class ListingRules(BaseModel):
    posts_per_page: int = 12
    admin_page_size: int = 20
    most_viewed_limit: int = 10


class CategoryRules(BaseModel):
    default_color: str = "#6366f1"
    derived_colors: list[str]


class TransferRules(BaseModel):
    export_version: str = "1.0.0"


class LinkRelRules(BaseModel):
    noopener: bool = True
    noreferrer: bool = True
    ugc: bool = False


class RichTextRules(BaseModel):
    allow_tags: list[str] = Field(
        default_factory=lambda: [
            "a", "b", "br", "code", "del", "em", "i", "mark", "s", "small",
            "span", "strong", "sub", "sup", "u",
        ]
    )
    allow_attrs: dict[str, list[str]] = Field(
        default_factory=lambda: {"a": ["href", "title", "target"], "span": ["class"]}
    )
    forbid_protocols: list[str] = Field(
        default_factory=lambda: ["javascript:", "data:", "vbscript:"]
    )
    link_rel: LinkRelRules = Field(default_factory=LinkRelRules)


class Rules(BaseModel):
    project: ProjectRules
    locales: LocaleRules
    slugs: SlugRules = Field(default_factory=SlugRules)
    related_posts: RelatedPostsRules = Field(default_factory=RelatedPostsRules)
    listing: ListingRules = Field(default_factory=ListingRules)
    categories: CategoryRules
    transfer: TransferRules = Field(default_factory=TransferRules)
    richtext: RichTextRules = Field(default_factory=RichTextRules)
