# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Registry of user-supplied conversion functions.

Conversions are keyed by (source type, target type). The types are usually
read from the function annotations:

    registry = ConversionRegistry()

    @registry.register
    def v1_to_v2(v1: UserV1) -> UserV2:
        return UserV2(full_name=v1.name, email=None)

    @registry.register
    def parse_price(v1: ProductV1) -> Fallible[ProductV2]:
        ...

A ``Fallible[...]`` return annotation marks a conversion that may raise the
chain's declared error type.
"""

import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .errors import ConversionSignatureError, DuplicateConversionError, MissingConversionError, type_name

logger = logging.getLogger(__name__)


class _FallibleMarker:
    def __repr__(self) -> str:
        return "Fallible"


FALLIBLE = _FallibleMarker()


class Fallible:
    """Return annotation marking a conversion that may fail: ``-> Fallible[Target]``."""

    def __class_getitem__(cls, item):
        return typing.Annotated[item, FALLIBLE]


@dataclass(frozen=True)
class ConversionEdge:
    """A resolved conversion between two chain elements."""
    source: Any
    target: Any
    func: Callable[[Any], Any]
    fallible: bool = False

    @property
    def name(self) -> str:
        return getattr(self.func, '__qualname__', repr(self.func))

    def apply(self, value: Any) -> Any:
        """Run the conversion on a value of the source type."""
        return self.func(value)

    def describe(self) -> str:
        arrow = "-?->" if self.fallible else "-->"
        return f"{type_name(self.source)} {arrow} {type_name(self.target)} ({self.name})"


def _split_fallible(hint: Any) -> Tuple[Any, bool]:
    """Strip a Fallible[...] wrapper from a return annotation."""
    if typing.get_origin(hint) is typing.Annotated:
        base, *extras = typing.get_args(hint)
        if any(extra is FALLIBLE for extra in extras):
            return base, True
        return base, False
    return hint, False


def _read_signature(func: Callable[[Any], Any]) -> Tuple[Any, Any, bool]:
    """Read (source, target, fallible) from a conversion's annotations.

    Raises:
        NameError: If an annotation refers to a name that is not defined yet
        ConversionSignatureError: If the function is not annotated as a conversion
    """
    hints = typing.get_type_hints(func, include_extras=True)

    params = [
        p for p in inspect.signature(func).parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    if not params:
        raise ConversionSignatureError(
            f"Conversion {func.__qualname__} must take the source value as its first argument"
        )
    source = hints.get(params[0].name)
    if source is None:
        raise ConversionSignatureError(
            f"Conversion {func.__qualname__} has no type annotation on parameter {params[0].name!r}"
        )
    if 'return' not in hints:
        raise ConversionSignatureError(
            f"Conversion {func.__qualname__} has no return annotation"
        )
    source, _ = _split_fallible(source)
    target, fallible = _split_fallible(hints['return'])
    return source, target, fallible


def _read_fallible(func: Callable[[Any], Any]) -> bool:
    """Check for a Fallible[...] return annotation.

    Raises:
        NameError: If an annotation refers to a name that is not defined yet
    """
    if not getattr(func, '__annotations__', None):
        return False
    hints = typing.get_type_hints(func, include_extras=True)
    _, fallible = _split_fallible(hints.get('return'))
    return fallible


class ConversionRegistry:
    """Holds conversion functions keyed by (source, target).

    Registration may happen before every annotated type exists (for example a
    ``V2 -> Domain`` conversion written above the domain class). Such
    conversions are resolved on the next lookup, which at the latest is when a
    chain is defined.
    """

    def __init__(self):
        # Key: (source, target), Value: ConversionEdge
        self._edges: Dict[Tuple[Any, Any], ConversionEdge] = {}
        self._pending: List[Tuple[Callable[[Any], Any], Optional[bool], Any, Any]] = []

    def register(
        self,
        func: Optional[Callable[[Any], Any]] = None,
        *,
        source: Any = None,
        target: Any = None,
        fallible: Optional[bool] = None
    ):
        """Decorator to register a conversion function.

        Usable bare (``@registry.register``) or with explicit types
        (``@registry.register(source=V1, target=V2, fallible=True)``).
        """
        def decorator(f: Callable[[Any], Any]):
            self.add(f, source=source, target=target, fallible=fallible)
            return f

        if func is not None:
            return decorator(func)
        return decorator

    def add(
        self,
        func: Callable[[Any], Any],
        source: Any = None,
        target: Any = None,
        fallible: Optional[bool] = None
    ) -> Optional[ConversionEdge]:
        """Register a conversion.

        Args:
            func: Function taking a source value and returning a target value
            source: Source type (read from the first parameter annotation if omitted)
            target: Target type (read from the return annotation if omitted)
            fallible: Overrides fallibility read from a Fallible[...] annotation

        Returns:
            The registered edge, or None if resolution was deferred because an
            annotation refers to a type that is not defined yet
        """
        try:
            return self._store(self._build_edge(func, source, target, fallible))
        except NameError:
            logger.debug(f"Deferring conversion {func.__qualname__}: annotations not resolvable yet")
            self._pending.append((func, fallible, source, target))
            return None

    def _build_edge(
        self,
        func: Callable[[Any], Any],
        source: Any,
        target: Any,
        fallible: Optional[bool]
    ) -> ConversionEdge:
        # Explicit types still take fallibility from a Fallible[...] return annotation
        if source is not None and target is not None:
            if fallible is None:
                fallible = _read_fallible(func)
            return ConversionEdge(source, target, func, fallible)

        hinted_source, hinted_target, hinted_fallible = _read_signature(func)
        return ConversionEdge(
            source=source if source is not None else hinted_source,
            target=target if target is not None else hinted_target,
            func=func,
            fallible=hinted_fallible if fallible is None else fallible
        )

    def _store(self, edge: ConversionEdge) -> ConversionEdge:
        key = (edge.source, edge.target)
        if key in self._edges:
            raise DuplicateConversionError(edge.source, edge.target)
        self._edges[key] = edge
        logger.debug(f"Registered conversion: {edge.describe()}")
        return edge

    def _resolve_pending(self, strict: bool = False) -> None:
        """Try again to resolve deferred conversions.

        Conversions that still reference undefined names stay pending unless
        ``strict`` is set, in which case the first one raises.
        """
        pending, self._pending = self._pending, []
        for func, fallible, source, target in pending:
            try:
                edge = self._build_edge(func, source, target, fallible)
            except NameError as e:
                if strict:
                    raise ConversionSignatureError(
                        f"Cannot resolve annotations of conversion {func.__qualname__}: {e}"
                    ) from e
                self._pending.append((func, fallible, source, target))
                continue
            self._store(edge)

    def get(self, source: Any, target: Any) -> Optional[ConversionEdge]:
        """Return the edge for (source, target), or None."""
        self._resolve_pending()
        return self._edges.get((source, target))

    def resolve(self, source: Any, target: Any) -> ConversionEdge:
        """Return the edge for (source, target).

        Raises:
            MissingConversionError: If no conversion is registered for the pair
            ConversionSignatureError: If the pair is missing and some registered
                conversion still has unresolvable annotations
        """
        edge = self.get(source, target)
        if edge is None:
            self._resolve_pending(strict=True)
            raise MissingConversionError(source, target)
        return edge

    def __contains__(self, key: Tuple[Any, Any]) -> bool:
        self._resolve_pending()
        return key in self._edges

    def __iter__(self) -> Iterator[ConversionEdge]:
        self._resolve_pending()
        return iter(list(self._edges.values()))

    def __len__(self) -> int:
        self._resolve_pending()
        return len(self._edges)
