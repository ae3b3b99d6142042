"""Helper registry with a process-wide default and scoped instances."""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Protocol

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

Helper = Callable[..., object]


class HelperSink(Protocol):
    """Anything helpers can be bound to (a template engine)."""

    def register_helper(self, name: str, handler: Helper) -> None: ...


@dataclass(frozen=True, slots=True)
class HelperMetadata:
    """Optional descriptive metadata for a helper.

    Attributes:
        description: Human-readable summary.
        dependencies: Names of helpers this helper relies on.
        version: Free-form version string.
    """

    description: str | None = None
    dependencies: tuple[str, ...] = ()
    version: str | None = None


@dataclass(frozen=True, slots=True)
class HelperEntry:
    """A registered helper."""

    name: str
    handler: Helper
    metadata: HelperMetadata | None = field(default=None)


class HelperRegistry:
    """Mapping of helper names to handlers.

    Registering a name twice replaces the earlier entry without warning.
    Entries reach a template engine only through :meth:`bind`, which binds
    each name at most once per registry, so repeated binds have no side
    effects. Registries never share entries.
    """

    _global: ClassVar["HelperRegistry | None"] = None  # noqa: UP037

    def __init__(self, *, logger: "FilteringBoundLogger | None" = None) -> None:  # noqa: UP037
        self._entries: dict[str, HelperEntry] = {}
        self._bound: set[str] = set()
        self._logger: FilteringBoundLogger | None = logger

    @classmethod
    def get_global(cls) -> "HelperRegistry":  # noqa: UP037
        """Return the process-wide registry, creating it on first call."""
        if cls._global is None:
            cls._global = cls()
        return cls._global

    @classmethod
    def create_scoped(cls) -> "HelperRegistry":  # noqa: UP037
        """Return a new, empty registry isolated from the global one."""
        return cls()

    @property
    def is_global(self) -> bool:
        """True for the process-wide registry."""
        return self is HelperRegistry._global

    def register(
        self,
        name: str,
        handler: Helper,
        metadata: HelperMetadata | None = None,
    ) -> None:
        """Insert or replace the helper registered under ``name``.

        Args:
            name: Name templates use to call the helper.
            handler: The helper function.
            metadata: Optional descriptive metadata.
        """
        if not name:
            msg = "Helper name must not be empty"
            raise ValueError(msg)
        if not callable(handler):
            msg = f"Helper {name!r} must be callable"
            raise TypeError(msg)
        self._entries[name] = HelperEntry(name=name, handler=handler, metadata=metadata)

    def register_many(self, helpers: Mapping[str, Helper]) -> None:
        """Register every ``name -> handler`` pair in ``helpers``."""
        for name, handler in helpers.items():
            self.register(name, handler)

    def bind(self, engine: HelperSink) -> None:
        """Register every not-yet-bound entry with ``engine``."""
        for name, entry in self._entries.items():
            if name in self._bound:
                continue
            engine.register_helper(name, entry.handler)
            self._bound.add(name)
            if self._logger is not None:
                self._logger.debug("helper_bound", helper=name)

    def get(self, name: str) -> HelperEntry | None:
        """Return the entry for ``name``, or None."""
        return self._entries.get(name)

    def has(self, name: str) -> bool:
        """Return True if ``name`` is registered."""
        return name in self._entries

    def names(self) -> list[str]:
        """Return registered names in registration order."""
        return list(self._entries)

    def clear(self) -> None:
        """Remove every entry and forget which names were bound."""
        self._entries.clear()
        self._bound.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[HelperEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)


def get_global_registry() -> HelperRegistry:
    """Return the process-wide helper registry."""
    return HelperRegistry.get_global()


def register_helper(
    name: str,
    handler: Helper,
    metadata: HelperMetadata | None = None,
) -> None:
    """Register a helper globally and make it available to templates at once.

    The helper is added to the global registry and bound to the default
    engine. A helper registered again under the same name replaces the
    previous one, including in the default engine.

    Example:
        register_helper("shout", lambda value: f"{value}!")
        PromptWeaver("{{ shout(name) }}").format({"name": "hi"})  # "hi!"
    """
    from promptweaver.templating import get_default_engine  # noqa: PLC0415

    registry = get_global_registry()
    registry.register(name, handler, metadata)
    engine = get_default_engine()
    registry.bind(engine)
    # bind() skips names bound earlier, so replacements are pushed directly
    engine.register_helper(name, handler)
