from tourneypairing.player.base_player import Player, ResultEntry

__all__ = [
    "Player",
    "ResultEntry",
]
