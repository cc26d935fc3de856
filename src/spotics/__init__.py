"""spotics - fetch time-synced lyrics for local audio files and embed them."""

__version__ = "0.3.0"
