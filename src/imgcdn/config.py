"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from imgcdn.models.config import DEFAULT_CDN_DOMAIN, DEFAULT_LAZY_ATTRIBUTES, RewriteConfig


class Settings(BaseSettings):
    """Settings loaded from ``IMGCDN_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="IMGCDN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # CDN account
    storage_id: str = ""
    cdn_domain: str = DEFAULT_CDN_DOMAIN
    secret: str | None = None

    # Origin prefix for relative image sources, e.g. "https://example.com"
    base_path: str = ""

    ignored_classes: str = ""  # Comma-separated class names
    class_mutations: dict[str, str] = {}  # JSON object: class -> mutation token
    lazy_attributes: str = ",".join(DEFAULT_LAZY_ATTRIBUTES)  # Comma-separated attribute names
    preserve_srcset_ratio: bool = False

    @property
    def ignored_classes_list(self) -> list[str]:
        """Return ignored classes as a list."""
        if not self.ignored_classes:
            return []
        return [c.strip() for c in self.ignored_classes.split(",") if c.strip()]

    @property
    def lazy_attributes_list(self) -> list[str]:
        """Return lazy-load source attributes as a list."""
        return [a.strip() for a in self.lazy_attributes.split(",") if a.strip()]

    def to_rewrite_config(self) -> RewriteConfig:
        """Freeze the current settings into a rewrite configuration."""
        return RewriteConfig(
            storage_id=self.storage_id,
            cdn_domain=self.cdn_domain,
            secret=self.secret,
            base_path=self.base_path,
            ignored_classes=frozenset(self.ignored_classes_list),
            class_mutations=dict(self.class_mutations),
            lazy_attributes=tuple(self.lazy_attributes_list),
            preserve_srcset_ratio=self.preserve_srcset_ratio,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@lru_cache
def get_rewrite_config() -> RewriteConfig:
    """Get the cached rewrite configuration built from settings."""
    return get_settings().to_rewrite_config()
