"""Player layer: base player, time control and clock.

Quick start::

    from chesslink.game import ChessPlayer, TimeControl

    player = ChessPlayer("Observer")
    player.set_time_control(TimeControl.blitz_5m3s())
"""

from chesslink.game.clock import ClockSnapshot, PlayerClock
from chesslink.game.interfaces import IPlayer, TimeControl
from chesslink.game.player import ChessPlayer

__all__ = [
    # Interfaces
    "IPlayer",
    "TimeControl",
    # Concrete
    "ChessPlayer",
    "ClockSnapshot",
    "PlayerClock",
]
