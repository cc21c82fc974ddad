"""Daemon layout configuration and the store that loads and persists it."""

from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class Layout(BaseModel):
    """A named tiling layout. Interpreted by the tiler only."""

    model_config = ConfigDict(frozen=True, extra="allow")

    mode: str = Field(default="auto", description="Arrangement mode understood by the tiler")


class LayoutConfig(BaseModel):
    """Layouts by name plus the default layout.

    Instances are immutable: updates produce a new instance that replaces the
    old one, so readers holding a reference always see a consistent snapshot.
    """

    model_config = ConfigDict(frozen=True)

    layouts: dict[str, Layout] = Field(default_factory=dict, description="Layout definitions by name")
    default_layout: str = Field(default="", description="Layout used when none is requested")

    def has_layout(self, name: str) -> bool:
        """Check whether a layout with this name is defined."""
        return name in self.layouts

    def layout_names(self) -> list[str]:
        """Return layout names sorted lexicographically."""
        return sorted(self.layouts)

    def with_default(self, name: str) -> "LayoutConfig":
        """Return a copy with ``default_layout`` set to ``name``."""
        return self.model_copy(update={"default_layout": name})


class ConfigStore(Protocol):
    """Loads and persists the layout configuration."""

    def load(self) -> LayoutConfig:
        """Read the current configuration from its source."""
        ...

    def save(self, cfg: LayoutConfig) -> None:
        """Persist the configuration."""
        ...
