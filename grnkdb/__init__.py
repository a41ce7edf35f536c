"""Game catalog built from the upload history of let's-play channels."""

from .models import ContentEntry, Game, VideoRecord, merge_games

__all__ = ["ContentEntry", "Game", "VideoRecord", "merge_games"]
__version__ = "0.1.0"
