"""DEBUG-level call tracing for solver modules."""

from __future__ import annotations

import inspect
import logging
import reprlib
from functools import wraps
from typing import Any, Callable, Iterable, MutableMapping, Optional, Sequence, TypeVar, cast

import numpy as np

F = TypeVar("F", bound=Callable[..., Any])

_WRAPPED_FLAG = "_layout_debug_wrapped"

_repr = reprlib.Repr()
_repr.maxother = 120
_repr.maxlist = 8
_repr.maxtuple = 8
_repr.maxdict = 8


def _summarize_array(value: np.ndarray, max_items: int) -> str:
    head = f"ndarray(shape={tuple(value.shape)}, dtype={value.dtype}"
    if value.size == 0:
        return head + ")"
    if value.size <= max_items:
        return head + f", values={_repr.repr(value.tolist())})"
    if np.issubdtype(value.dtype, np.number):
        finite = value[np.isfinite(value)] if np.issubdtype(value.dtype, np.floating) else value
        if finite.size:
            return head + f", min={float(finite.min()):.6g}, max={float(finite.max()):.6g})"
        return head + ", all non-finite)"
    return head + ")"


def safe_repr(value: Any, *, max_items: int = 6, max_length: int = 300) -> str:
    """Short, exception-free representation for log lines."""

    if isinstance(value, np.ndarray):
        return _summarize_array(value, max_items)
    if isinstance(value, (list, tuple)) and len(value) > max_items:
        shown = ", ".join(safe_repr(item) for item in value[:max_items])
        return f"[{shown}, ... ({len(value)} items)]"
    try:
        rendered = _repr.repr(value)
    except Exception as exc:  # pragma: no cover - repr of user objects may fail
        rendered = f"<unrepresentable {type(value).__name__}: {exc!r}>"
    if len(rendered) > max_length:
        rendered = rendered[:max_length] + "...(truncated)"
    return rendered


def _format_call(args: Sequence[Any], kwargs: MutableMapping[str, Any]) -> str:
    parts = [safe_repr(arg) for arg in args]
    parts.extend(f"{key}={safe_repr(value)}" for key, value in kwargs.items())
    return ", ".join(parts) if parts else "no-args"


def debug_log_call(
    logger: logging.Logger, *, name: Optional[str] = None, log_result: bool = True
) -> Callable[[F], F]:
    """Decorate a callable so entering and leaving it is logged at DEBUG."""

    def decorator(func: F) -> F:
        if getattr(func, _WRAPPED_FLAG, False):
            return func
        label = name or getattr(func, "__qualname__", repr(func))

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            enabled = logger.isEnabledFor(logging.DEBUG)
            if enabled:
                logger.debug("-> %s(%s)", label, _format_call(args, kwargs))
            result = func(*args, **kwargs)
            if enabled:
                if log_result:
                    logger.debug("<- %s = %s", label, safe_repr(result))
                else:
                    logger.debug("<- %s", label)
            return result

        setattr(wrapper, _WRAPPED_FLAG, True)
        return cast(F, wrapper)

    return decorator


def apply_debug_logging(
    namespace: MutableMapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
    skip: Optional[Iterable[str]] = None,
) -> None:
    """Wrap every public and private function defined in ``namespace``."""

    module_name = namespace.get("__name__")
    logger = logger or logging.getLogger(str(module_name))
    skipped = set(skip or ())
    for attr, value in list(namespace.items()):
        if attr in skipped or not inspect.isfunction(value):
            continue
        if getattr(value, "__module__", None) != module_name:
            continue
        namespace[attr] = debug_log_call(logger, name=attr)(value)


__all__ = ["apply_debug_logging", "debug_log_call", "safe_repr"]
