from nfl_ingest.db.models.core.game import Game
from nfl_ingest.db.models.core.player import Player
from nfl_ingest.db.models.core.player_game_stats import PlayerGameStats
from nfl_ingest.db.models.core.team import Team

__all__ = [
    "Game",
    "Player",
    "PlayerGameStats",
    "Team",
]
