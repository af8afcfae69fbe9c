"""Models for the response cache."""

from pydantic import BaseModel, ConfigDict, Field


class CacheKey(BaseModel):
    """
    Namespaced identifier for a cached response.

    The logical type name keeps unrelated cached value types from colliding
    when they share a caller-supplied key (a post and a page both keyed "42").
    """

    model_config = ConfigDict(frozen=True)

    type_name: str = Field(description="Logical type of the cached value (e.g. 'Post')")
    key: str = Field(description="Caller-supplied key within that type")

    @classmethod
    def for_model(cls, model_cls: type[BaseModel], key: str) -> "CacheKey":
        """Key namespaced by a model class name."""
        return cls(type_name=model_cls.__name__, key=key)

    def __str__(self) -> str:
        return f"{self.type_name}_{self.key}"
