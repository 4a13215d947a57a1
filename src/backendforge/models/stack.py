"""Technology stack choices embedded into generation prompts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_STACK_PRESET = "node-lite"


class TechStack(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    language: str
    framework: str
    database: str
    orm: str

    @field_validator("language", "framework", "database", "orm")
    @classmethod
    def validate_non_empty(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("value cannot be empty.")
        return normalized

    @property
    def label(self) -> str:
        return self.name or f"{self.language} + {self.framework}"


STACK_PRESETS: dict[str, TechStack] = {
    "node-lite": TechStack(
        name="Node.js lightweight",
        language="JavaScript",
        framework="Express",
        database="SQLite",
        orm="TypeORM",
    ),
    "typescript-enterprise": TechStack(
        name="TypeScript enterprise",
        language="TypeScript",
        framework="NestJS",
        database="PostgreSQL",
        orm="Prisma",
    ),
    "python-data": TechStack(
        name="Python data stack",
        language="Python",
        framework="FastAPI",
        database="PostgreSQL",
        orm="SQLAlchemy",
    ),
    "java-spring": TechStack(
        name="Java Spring Boot",
        language="Java",
        framework="Spring Boot",
        database="MySQL",
        orm="Hibernate",
    ),
}


def get_stack_preset(key: str) -> TechStack:
    """Return a preset stack by key, raising KeyError with the known keys."""
    try:
        return STACK_PRESETS[key]
    except KeyError:
        known = ", ".join(sorted(STACK_PRESETS))
        raise KeyError(f"Unknown stack preset {key!r}. Known presets: {known}.") from None
