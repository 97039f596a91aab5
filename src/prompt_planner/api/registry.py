"""Registry of callable functions shared by the LLM tool catalogue, HTTP and MCP."""

from __future__ import annotations

import inspect
import types
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Literal, Mapping, Optional, Union, get_args, get_origin

JsonSchema = Dict[str, Any]

_SCALAR_TYPES: Dict[Any, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    dict: "object",
    list: "array",
}


def _json_type(annotation: Any) -> str:
    origin = get_origin(annotation)
    if origin is None:
        return _SCALAR_TYPES.get(annotation, "string")
    if origin is Literal:
        return _json_type(type(get_args(annotation)[0]))
    if origin in (Union, types.UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        return _json_type(members[0]) if members else "string"
    return _SCALAR_TYPES.get(origin, "string")


def _property_schema(param: inspect.Parameter, doc: Optional[str]) -> JsonSchema:
    schema: JsonSchema = {"type": _json_type(param.annotation)}
    if get_origin(param.annotation) is Literal:
        schema["enum"] = list(get_args(param.annotation))
    if doc:
        schema["description"] = doc
    if isinstance(param.default, (str, int, float, bool)):
        schema["default"] = param.default
    return schema


@dataclass(frozen=True)
class ApiFunction:
    name: str
    func: Callable[..., Any]
    description: str
    category: str
    tags: tuple[str, ...]
    signature: inspect.Signature
    parameter_docs: Mapping[str, str] = field(default_factory=dict)

    @property
    def parameter_schema(self) -> JsonSchema:
        params = list(self.signature.parameters.values())
        schema: JsonSchema = {
            "type": "object",
            "properties": {param.name: _property_schema(param, self.parameter_docs.get(param.name)) for param in params},
        }
        required = [param.name for param in params if param.default is inspect.Parameter.empty]
        if required:
            schema["required"] = required
        return schema

    def as_tool(self) -> Dict[str, Any]:
        """Describe the function in chat-completions tool format."""

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameter_schema,
            },
        }

    def bind(self, arguments: Mapping[str, Any]) -> inspect.BoundArguments:
        """Bind raw arguments, raising ``TypeError`` on unknown or missing names."""

        return self.signature.bind(**dict(arguments))


REGISTRY: Dict[str, ApiFunction] = {}


def register_api(
    name: str,
    *,
    description: str,
    category: str,
    tags: Optional[Iterable[str]] = None,
    parameters: Optional[Mapping[str, str]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Register ``func`` under ``name``; ``parameters`` documents each argument."""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if name in REGISTRY:
            raise ValueError(f"API function '{name}' is already registered.")
        REGISTRY[name] = ApiFunction(
            name=name,
            func=func,
            description=description,
            category=category,
            tags=tuple(tags or ()),
            signature=inspect.signature(func, eval_str=True),
            parameter_docs=dict(parameters or {}),
        )
        return func

    return decorator


def get_api_functions(category: Optional[str] = None) -> List[ApiFunction]:
    return [func for func in REGISTRY.values() if category is None or func.category == category]


def get_api_function(name: str) -> ApiFunction:
    try:
        return REGISTRY[name]
    except KeyError:
        raise KeyError(f"API function '{name}' is not registered.") from None


def call_api(name: str, **kwargs: Any) -> Any:
    api_function = get_api_function(name)
    bound = api_function.bind(kwargs)
    return api_function.func(*bound.args, **bound.kwargs)
