"""Handler dispatch with optional context injection.

Handlers come in two shapes and both keep working side by side:

```python
def lookup(args: dict[str, Any]) -> str:
    return args["key"]

async def lookup_logged(args: dict[str, Any], context: Context) -> str:
    await context.info(f"lookup {args['key']}")
    return args["key"]
```

Each handler's signature is inspected once and classified into a HandlerKind. A
Context is only built for handlers that take one, so context-free handlers never
allocate a request id.
"""

from __future__ import annotations

import inspect
import types
import weakref
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from mcp_context.context import Context
from mcp_context.exceptions import InvalidHandlerSignature
from mcp_context.factory import ContextFactory, RequestMetadata
from mcp_context.utilities.logging import get_logger

logger = get_logger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class HandlerKind(Enum):
    NULLARY = "nullary"  # handler()
    UNARY = "unary"  # handler(args)
    BINARY = "binary"  # handler(args, context)


@dataclass(frozen=True)
class ResolvedHandler:
    """A handler together with the calling convention detected for it.

    ``context_kwarg`` is set when the context has to be passed by keyword rather than
    as the second positional argument.
    """

    fn: Callable[..., Any]
    kind: HandlerKind
    context_kwarg: str | None = None

    @property
    def needs_context(self) -> bool:
        return self.kind is HandlerKind.BINARY


def _is_context_type(annotation: Any) -> bool:
    """
    Check if an annotation names the Context type.

    This handles direct matches and subclasses, Union types (e.g., Context | None),
    Annotated[Context, ...], and string annotations that could not be resolved.
    """
    if annotation is inspect.Parameter.empty or annotation is None:
        return False

    if isinstance(annotation, str):
        names = {part.strip() for part in annotation.replace("Optional[", "").rstrip("]").split("|")}
        return any(name == "Context" or name.endswith(".Context") for name in names)

    origin = get_origin(annotation)
    if origin is Annotated:
        return _is_context_type(get_args(annotation)[0])

    # Handle typing.Union and types.UnionType from Python 3.10+ | syntax
    if origin is Union or origin is types.UnionType:
        return any(_is_context_type(arg) for arg in get_args(annotation))

    if origin is None and inspect.isclass(annotation):
        return issubclass(annotation, Context)

    return False


def resolve_handler(fn: Callable[..., Any]) -> ResolvedHandler:
    """Classify ``fn`` by its declared parameters without calling it.

    The context is supplied when the handler declares two or more positional
    parameters, or when any parameter is annotated with Context. ``*args`` and
    ``**kwargs`` do not count as declared parameters.
    """
    try:
        sig = inspect.signature(fn)
    except (ValueError, TypeError):
        # Can't inspect signature (e.g. some builtins/wrappers)
        return ResolvedHandler(fn, HandlerKind.UNARY)

    try:
        type_hints = get_type_hints(fn, include_extras=True)
    except Exception:
        type_hints = {}

    params = list(sig.parameters.values())
    positional = [param for param in params if param.kind in _POSITIONAL]

    for param in params:
        if not _is_context_type(type_hints.get(param.name, param.annotation)):
            continue
        if param.kind is inspect.Parameter.KEYWORD_ONLY:
            return ResolvedHandler(fn, HandlerKind.BINARY, context_kwarg=param.name)
        if param.kind in _POSITIONAL:
            index = positional.index(param)
            if index == 1:
                return ResolvedHandler(fn, HandlerKind.BINARY)
            if index > 1 and param.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD:
                # Only args and the context are passed; everything in between needs a default.
                required = [p.name for p in positional[1:index] if p.default is inspect.Parameter.empty]
                if required:
                    raise InvalidHandlerSignature(
                        f"Handler {_describe(fn)} declares required parameters {required} before its Context "
                        f"parameter {param.name!r}; give them defaults or move the Context parameter second."
                    )
                return ResolvedHandler(fn, HandlerKind.BINARY, context_kwarg=param.name)
            raise InvalidHandlerSignature(
                f"Handler {_describe(fn)} declares its Context parameter {param.name!r} in a position "
                f"that cannot receive it; put it after the arguments parameter."
            )

    if len(positional) >= 2:
        return ResolvedHandler(fn, HandlerKind.BINARY)
    if positional or any(param.kind is inspect.Parameter.VAR_POSITIONAL for param in params):
        return ResolvedHandler(fn, HandlerKind.UNARY)
    return ResolvedHandler(fn, HandlerKind.NULLARY)


def _describe(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__qualname__", None) or repr(fn)


class HandlerDispatcher:
    """Invokes handlers with or without a Context, classifying each handler once.

    Classifications are cached weakly, so handlers created per request (closures,
    lambdas) are released together with everything they capture.
    """

    def __init__(self) -> None:
        self._resolved: weakref.WeakKeyDictionary[Callable[..., Any], tuple[HandlerKind, str | None]] = (
            weakref.WeakKeyDictionary()
        )

    def resolve(self, handler: Callable[..., Any] | ResolvedHandler) -> ResolvedHandler:
        if isinstance(handler, ResolvedHandler):
            return handler
        try:
            kind, context_kwarg = self._resolved[handler]
        except KeyError:
            pass
        except TypeError:
            # not weak-referenceable or unhashable: classified on every call
            return resolve_handler(handler)
        else:
            return ResolvedHandler(handler, kind, context_kwarg)

        resolved = resolve_handler(handler)
        try:
            self._resolved[handler] = (resolved.kind, resolved.context_kwarg)
        except TypeError:
            return resolved
        logger.debug("Resolved handler %s as %s", _describe(handler), resolved.kind.value)
        return resolved

    async def invoke(
        self,
        handler: Callable[..., Any] | ResolvedHandler,
        args: Any,
        context_factory: ContextFactory,
        request_metadata: RequestMetadata = None,
    ) -> Any:
        """Call ``handler`` and return its result unchanged.

        Errors raised by the handler propagate as they are.
        """
        resolved = self.resolve(handler)

        if resolved.kind is HandlerKind.NULLARY:
            result = resolved.fn()
        elif resolved.kind is HandlerKind.UNARY:
            result = resolved.fn(args)
        else:
            context = context_factory.build_context(request_metadata)
            if resolved.context_kwarg is not None:
                result = resolved.fn(args, **{resolved.context_kwarg: context})
            else:
                result = resolved.fn(args, context)

        if inspect.isawaitable(result):
            result = await result
        return result
