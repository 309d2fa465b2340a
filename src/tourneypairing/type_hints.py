"""Type hints used in Tourney Pairing."""

from typing import Callable, Dict, List, Literal, MutableSequence, Optional, Tuple

# Side type aliases (for type hints)
Side = Literal["one", "two"]

# Outcome literals stored on result entries
Outcome = Literal["win", "loss", "draw"]

# List of players
Players = List["Player"]
# Players keyed by id
PlayerMap = Dict[str, "Player"]
# Tuple of player ids, player two may be missing for a bye
PairingIDs = Tuple[str, Optional[str]]
# Computed tiebreak values keyed by player id
TiebreakTable = Dict[str, Dict[str, float]]

# Injected capabilities
IdGenerator = Callable[[int], str]
Shuffler = Callable[[MutableSequence], None]

#  LocalWords:  PairingIDs TiebreakTable
