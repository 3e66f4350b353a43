"""Engine adapters: lifecycle, liveness, buffering, options and drivers."""

from chesslink.engine.chess_engine import ChessEngine, DebugLine, next_engine_id
from chesslink.engine.dispatcher import EngineTransport, LineDispatcher
from chesslink.engine.driver import ProtocolDriver, SearchRequest
from chesslink.engine.liveness import PING_TIMEOUT_MS, LivenessMonitor, PendingPing
from chesslink.engine.options import (
    EngineOption,
    InvalidOptionValueError,
    OptionError,
    OptionRegistry,
    OptionType,
    UnknownOptionError,
)
from chesslink.engine.process import create_driver, launch_engine
from chesslink.engine.settings import (
    CustomSetting,
    EngineConfigError,
    EngineConfiguration,
    EngineSettings,
    load_engine_configurations,
)
from chesslink.engine.uci import UciDriver
from chesslink.engine.write_buffer import WriteBuffer
from chesslink.engine.xboard import XboardDriver

__all__ = [
    "PING_TIMEOUT_MS",
    "ChessEngine",
    "CustomSetting",
    "DebugLine",
    "EngineConfigError",
    "EngineConfiguration",
    "EngineOption",
    "EngineSettings",
    "EngineTransport",
    "InvalidOptionValueError",
    "LineDispatcher",
    "LivenessMonitor",
    "OptionError",
    "OptionRegistry",
    "OptionType",
    "PendingPing",
    "ProtocolDriver",
    "SearchRequest",
    "UciDriver",
    "UnknownOptionError",
    "WriteBuffer",
    "XboardDriver",
    "create_driver",
    "launch_engine",
    "load_engine_configurations",
    "next_engine_id",
]
