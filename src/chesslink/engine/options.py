"""Engine-declared options and the registry that validates them."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum

OptionValue = str | int | bool | None

_TRUE_WORDS = frozenset({"true", "1", "on", "yes"})
_FALSE_WORDS = frozenset({"false", "0", "off", "no"})


class OptionError(Exception):
    """Base class for rejected option requests."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class UnknownOptionError(OptionError):
    """Raised when the engine never declared an option with that name."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"unknown option {name!r}")


class InvalidOptionValueError(OptionError):
    """Raised when a value falls outside the option's declared domain."""

    def __init__(self, name: str, value: OptionValue) -> None:
        super().__init__(name, f"invalid value {value!r} for option {name!r}")
        self.value = value


class OptionType(StrEnum):
    """Option kinds shared by the UCI and Xboard protocols."""

    CHECK = "check"
    SPIN = "spin"
    COMBO = "combo"
    BUTTON = "button"
    STRING = "string"


@dataclass(slots=True)
class EngineOption:
    """A named, typed setting declared by the engine."""

    name: str
    type: OptionType
    default: OptionValue = None
    minimum: int | None = None
    maximum: int | None = None
    choices: tuple[str, ...] = ()
    value: OptionValue = field(default=None)

    def __post_init__(self) -> None:
        if self.default is not None:
            try:
                self.default = self.normalize(self.default)
            except ValueError:
                # Engines do declare defaults outside their own range.
                pass
        if self.value is None:
            self.value = self.default

    def is_valid(self, value: OptionValue) -> bool:
        try:
            self.normalize(value)
        except ValueError:
            return False
        return True

    def normalize(self, value: OptionValue) -> OptionValue:
        """Convert *value* to this option's native type.

        Raises:
            ValueError: *value* is outside the declared domain.
        """
        if self.type == OptionType.BUTTON:
            return None
        if self.type == OptionType.CHECK:
            if isinstance(value, bool):
                return value
            word = str(value).strip().lower()
            if word in _TRUE_WORDS:
                return True
            if word in _FALSE_WORDS:
                return False
            raise ValueError(value)
        if value is None:
            raise ValueError(value)
        if self.type == OptionType.SPIN:
            if isinstance(value, bool):
                raise ValueError(value)
            number = int(str(value).strip())
            if self.minimum is not None and number < self.minimum:
                raise ValueError(value)
            if self.maximum is not None and number > self.maximum:
                raise ValueError(value)
            return number
        if self.type == OptionType.COMBO:
            text = str(value)
            for choice in self.choices:
                if choice.lower() == text.lower():
                    return choice
            raise ValueError(value)
        return str(value)

    def to_text(self, value: OptionValue | None = None) -> str:
        """Protocol text for *value* (defaults to the current value)."""
        value = self.value if value is None else value
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


@dataclass(frozen=True, slots=True)
class PendingOption:
    """A set request that arrived before the engine declared its options."""

    name: str
    value: OptionValue


class OptionRegistry:
    """Holds declared options and set requests waiting for them.

    Lookup is by exact name.  The registry never talks to the engine; the
    caller sends the protocol command for every option ``apply`` accepts.
    """

    __slots__ = ("_options", "_pending")

    def __init__(self) -> None:
        self._options: dict[str, EngineOption] = {}
        self._pending: list[PendingOption] = []

    def __contains__(self, name: object) -> bool:
        return name in self._options

    def __iter__(self) -> Iterator[EngineOption]:
        return iter(self._options.values())

    def __len__(self) -> int:
        return len(self._options)

    def declare(self, option: EngineOption) -> None:
        """Add *option*, replacing an earlier declaration of the same name."""
        self._options[option.name] = option

    def get(self, name: str) -> EngineOption | None:
        return self._options.get(name)

    def clear(self) -> None:
        self._options.clear()

    # ── Deferred requests ────────────────────────────────────────────────

    @property
    def pending(self) -> tuple[PendingOption, ...]:
        return tuple(self._pending)

    def defer(self, name: str, value: OptionValue) -> None:
        self._pending.append(PendingOption(name, value))

    def take_pending(self) -> list[PendingOption]:
        """Return the deferred requests in arrival order and forget them."""
        pending, self._pending = self._pending, []
        return pending

    # ── Validation ───────────────────────────────────────────────────────

    def apply(self, name: str, value: OptionValue) -> EngineOption:
        """Validate *value* and store it as the option's current value.

        Raises:
            UnknownOptionError: *name* was never declared.
            InvalidOptionValueError: *value* is outside the domain; the
                current value is left untouched.
        """
        option = self._options.get(name)
        if option is None:
            raise UnknownOptionError(name)
        try:
            normalized = option.normalize(value)
        except ValueError:
            raise InvalidOptionValueError(name, value) from None
        option.value = normalized
        return option
