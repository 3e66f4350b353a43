"""Engine configuration: per-engine settings and the JSON engine list."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from chesslink.engine.options import OptionValue
from chesslink.game.interfaces import TimeControl

SUPPORTED_PROTOCOLS = ("uci", "xboard")


class EngineConfigError(Exception):
    """Raised when an engine configuration cannot be used."""


@dataclass(frozen=True, slots=True)
class CustomSetting:
    """An option value requested by the user for an engine."""

    name: str
    value: OptionValue


@dataclass
class EngineSettings:
    """Settings applied to an engine before its first game."""

    # Raw protocol lines sent before any option
    init_strings: list[str] = field(default_factory=list)
    custom_settings: list[CustomSetting] = field(default_factory=list)
    time_control: TimeControl | None = None

    # Report evaluations from white's point of view
    white_eval_pov: bool = False

    def add_custom_setting(self, name: str, value: OptionValue) -> None:
        self.custom_settings.append(CustomSetting(name, value))


@dataclass
class EngineConfiguration:
    """How to launch and talk to one engine."""

    name: str
    command: str
    arguments: list[str] = field(default_factory=list)
    working_directory: str | None = None
    protocol: str = "uci"
    settings: EngineSettings = field(default_factory=EngineSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfiguration:
        """Build a configuration from one entry of an engines file.

        Raises:
            EngineConfigError: Required keys are missing or malformed.
        """
        if not isinstance(data, dict):
            raise EngineConfigError(f"engine entry must be an object, got {type(data).__name__}")
        try:
            name = str(data["name"])
            command = str(data["command"])
        except KeyError as exc:
            raise EngineConfigError(f"engine entry is missing {exc.args[0]!r}") from None

        protocol = str(data.get("protocol", "uci")).lower()
        if protocol not in SUPPORTED_PROTOCOLS:
            raise EngineConfigError(f"engine {name!r} uses unknown protocol {protocol!r}")

        settings = EngineSettings(
            init_strings=[str(line) for line in data.get("initStrings", [])],
            time_control=_time_control_from_dict(name, data.get("timeControl")),
            white_eval_pov=bool(data.get("whitepov", False)),
        )
        options = data.get("options", {})
        if not isinstance(options, dict):
            raise EngineConfigError(f"engine {name!r}: 'options' must be an object")
        for option_name, value in options.items():
            settings.add_custom_setting(str(option_name), value)

        return cls(
            name=name,
            command=command,
            arguments=[str(arg) for arg in data.get("args", [])],
            working_directory=data.get("workingDirectory"),
            protocol=protocol,
            settings=settings,
        )


def _time_control_from_dict(engine: str, data: Any) -> TimeControl | None:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise EngineConfigError(f"engine {engine!r}: 'timeControl' must be an object")
    try:
        if "perMove" in data:
            return TimeControl.fixed_per_move(float(data["perMove"]))
        return TimeControl(
            float(data["initial"]),
            float(data.get("increment", 0)),
            int(data.get("moves", 0)),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise EngineConfigError(f"engine {engine!r}: bad timeControl ({exc})") from None


def load_engine_configurations(path: str | Path) -> list[EngineConfiguration]:
    """Read every engine from a JSON engines file.

    Raises:
        EngineConfigError: The file is unreadable or an entry is invalid.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise EngineConfigError(f"cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise EngineConfigError(f"{path} is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise EngineConfigError(f"{path} must contain a list of engines")
    return [EngineConfiguration.from_dict(entry) for entry in data]


def find_engine_configuration(
    configurations: list[EngineConfiguration], name: str
) -> EngineConfiguration:
    for config in configurations:
        if config.name == name:
            return config
    raise EngineConfigError(f"no engine named {name!r}")
