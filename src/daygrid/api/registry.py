from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Type

import pydantic
from pydantic import BaseModel, ConfigDict, create_model

from ..domain import ValidationError
from .state import api_state

JsonSchema = Dict[str, Any]


def format_validation_errors(exc: pydantic.ValidationError, subject: str = "event") -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or subject}: {error['msg']}" for error in exc.errors()
    )


def _arguments_model(name: str, signature: inspect.Signature) -> Type[BaseModel]:
    """Build a pydantic model mirroring the intent's keyword arguments."""

    fields: Dict[str, Any] = {}
    for param in signature.parameters.values():
        annotation = Any if param.annotation is inspect.Parameter.empty else param.annotation
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[param.name] = (annotation, default)
    model_name = "".join(part.title() for part in name.split("_")) + "Arguments"
    return create_model(model_name, __config__=ConfigDict(extra="forbid"), **fields)


@dataclass(frozen=True)
class ApiFunction:
    name: str
    func: Callable[..., Any]
    description: str
    category: str
    tags: tuple[str, ...]
    arguments: Type[BaseModel]

    @property
    def parameter_schema(self) -> JsonSchema:
        schema = self.arguments.model_json_schema()
        schema.pop("title", None)
        return schema

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "parameters": self.parameter_schema,
        }

    def invoke(self, arguments: Dict[str, Any]) -> Any:
        try:
            parsed = self.arguments.model_validate(arguments)
        except pydantic.ValidationError as exc:
            problems = format_validation_errors(exc, subject="arguments")
            raise ValidationError(f"Invalid arguments for {self.name}: {problems}") from exc
        return self.func(**{field: getattr(parsed, field) for field in self.arguments.model_fields})


REGISTRY: Dict[str, ApiFunction] = {}


def register_api(
    name: str,
    *,
    description: str,
    category: str,
    tags: Optional[Iterable[str]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if name in REGISTRY:
            raise ValueError(f"API function '{name}' is already registered.")
        REGISTRY[name] = ApiFunction(
            name=name,
            func=func,
            description=description,
            category=category,
            tags=tuple(tags or ()),
            arguments=_arguments_model(name, inspect.signature(func, eval_str=True)),
        )
        return func

    return decorator


def get_api_functions() -> List[ApiFunction]:
    return list(REGISTRY.values())


def call_api(name: str, /, **kwargs: Any) -> Any:
    """Run a registered intent as one schedule intent.

    Argument and parsing failures are reported through the schedule's notifier
    like any other rejected intent.
    """

    if name not in REGISTRY:
        raise KeyError(f"API function '{name}' is not registered.")
    with api_state.schedule.intent(name):
        return REGISTRY[name].invoke(kwargs)
