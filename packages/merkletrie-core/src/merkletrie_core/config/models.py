from pydantic import BaseModel, Field, field_validator
from typing import Literal


class BuilderConfig(BaseModel):
    ignore_patterns: list[str] = Field(default_factory=lambda: [
        ".git", "node_modules", "__pycache__", ".venv", "build", "dist", ".tox"
    ])
    extra_ignore_patterns: list[str] = Field(default_factory=list)
    follow_symlinks: bool = False

    @field_validator("ignore_patterns", "extra_ignore_patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        # patterns match a single path component, never a path
        for pattern in v:
            if not pattern or "/" in pattern:
                raise ValueError(f"ignore pattern must be a plain name, got {pattern!r}")
        return v

    def effective_ignore_patterns(self, extra: list[str] | None = None) -> list[str]:
        """Configured patterns plus *extra*, first occurrence kept."""
        merged = [*self.ignore_patterns, *self.extra_ignore_patterns, *(extra or [])]
        return list(dict.fromkeys(merged))


class MerkletrieConfig(BaseModel):
    builder: BuilderConfig = Field(default_factory=BuilderConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip().lower()
            if v == "warning":
                return "warn"
        return v
