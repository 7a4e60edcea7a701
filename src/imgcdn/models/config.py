"""Pydantic models for rewrite configuration."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CDN_DOMAIN = "5gcdn.net"
DEFAULT_IGNORE_CLASS = "fj-ignore"
DEFAULT_FILL_CLASS = "fj-fill"
DEFAULT_INITIALIZED_CLASS = "fj-initialized"
DEFAULT_LAZY_ATTRIBUTES = ("data-lazy-src", "data-lazy-srcset")


def _split_names(value: object) -> object:
    """Accept comma-separated strings wherever a collection of names is expected."""
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    return value


class RewriteConfig(BaseModel):
    """Immutable settings for a single rewrite pass."""

    model_config = ConfigDict(frozen=True)

    storage_id: str
    base_path: str = ""
    secret: str | None = None
    ignored_classes: frozenset[str] = Field(default_factory=frozenset)
    class_mutations: dict[str, str] = Field(default_factory=dict)  # class -> mutation token
    lazy_attributes: tuple[str, ...] = DEFAULT_LAZY_ATTRIBUTES

    cdn_domain: str = DEFAULT_CDN_DOMAIN
    ignore_class: str = DEFAULT_IGNORE_CLASS
    fill_class: str = DEFAULT_FILL_CLASS
    initialized_class: str = DEFAULT_INITIALIZED_CLASS
    loading: str = "lazy"  # Value for the loading hint attribute
    preserve_srcset_ratio: bool = False

    @field_validator("ignored_classes", "lazy_attributes", mode="before")
    @classmethod
    def _split_comma_separated(cls, value: object) -> object:
        return _split_names(value)

    @field_validator("secret", mode="before")
    @classmethod
    def _empty_secret_is_none(cls, value: object) -> object:
        if value == "":
            return None
        return value

    @property
    def is_enabled(self) -> bool:
        """Rewriting needs a storage id to address the CDN."""
        return bool(self.storage_id)

    @property
    def skip_classes(self) -> frozenset[str]:
        """Classes that exclude an element (or its children) from rewriting."""
        return self.ignored_classes | {self.ignore_class, self.initialized_class}

    @property
    def url_template(self) -> str:
        """CDN URL shape with ``{mutation}`` and ``{source}`` slots."""
        return f"https://{self.storage_id}.{self.cdn_domain}/ext/{{mutation}}?src={{source}}"

    def custom_tokens(self, classes: list[str]) -> list[str]:
        """Return configured mutation tokens for the given classes, in configuration order."""
        present = set(classes)
        return [token for name, token in self.class_mutations.items() if name in present]
