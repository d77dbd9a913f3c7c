"""Type hints used in Matchday."""

from typing import Dict, FrozenSet, List, Literal, Optional

# Team generation method literals
Method = Literal["random", "seeded"]

# Rating phase literals
Phase = Literal["league", "cup"]

# Team name -> ordered player names
Teams = Dict[str, List[str]]
# Ordered team sizes, one per team
TeamSizes = List[int]
# An unordered pair of player names
PlayerPair = FrozenSet[str]
# Player name -> goals
Scorers = Dict[str, int]
# Team name, "BYE", or None while unresolved
MaybeTeam = Optional[str]

#  LocalWords:  PlayerPair MaybeTeam
