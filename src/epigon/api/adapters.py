"""Resource adapters — turn request bodies into the objects the store holds."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from pydantic import BaseModel
from starlette.requests import Request

from epigon.exceptions import InvalidResourceError

NewResourceFunc = Callable[[], type[BaseModel]]
ConvertResourceFunc = Callable[[Request, BaseModel], tuple[str, BaseModel]]


@runtime_checkable
class ResourceAdapter(Protocol):
    """Protocol for per-resource body handling."""

    def new(self) -> type[BaseModel]:
        """Return the model class the request body is validated into."""
        ...

    def convert(self, request: Request, source: BaseModel) -> tuple[str, BaseModel]:
        """Return the resource id and the model to store under it."""
        ...


class FunctionAdapter:
    """Adapter assembled from a ``new`` and a ``convert`` callable."""

    def __init__(self, new: NewResourceFunc, convert: ConvertResourceFunc) -> None:
        self._new = new
        self._convert = convert

    def new(self) -> type[BaseModel]:
        return self._new()

    def convert(self, request: Request, source: BaseModel) -> tuple[str, BaseModel]:
        return self._convert(request, source)


class ModelAdapter:
    """Stores the validated body as-is, keyed by one of its fields.

    Example::

        class Named(BaseModel):
            name: str | None = None

        adapter = ModelAdapter(Named, id_field="name")
    """

    def __init__(self, model: type[BaseModel], id_field: str) -> None:
        if id_field not in model.model_fields:
            raise ValueError(f"{model.__name__} has no field {id_field!r}")
        self._model = model
        self._id_field = id_field

    def new(self) -> type[BaseModel]:
        return self._model

    def convert(self, request: Request, source: BaseModel) -> tuple[str, BaseModel]:
        resource_id = getattr(source, self._id_field)
        if resource_id is None or resource_id == "":
            raise InvalidResourceError(f"{self._model.__name__}.{self._id_field}: missing resource id")
        return str(resource_id), source
