"""
Error types for the leaderboard API. Each carries the message rendered to clients as ``{"error": ...}``.
"""


class LeaderboardError(Exception):
    """Base exception for leaderboard errors."""
    status_code = 500

    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message


class ValidationError(LeaderboardError):
    """Raised when a game submission is missing or has invalid fields."""
    status_code = 400


class PlayerNotFoundError(LeaderboardError):
    """Raised when a named player has no aggregate record."""
    status_code = 404

    def __init__(self, name: str):
        super().__init__(
            f"Player '{name}' not found",
            "Player not found"
        )


class StoreError(LeaderboardError):
    """Raised when a database operation fails."""
    status_code = 500

    def __init__(self, operation: str, details: str = None):
        super().__init__(
            f"Database error during {operation}: {details}",
            f"Failed to {operation}"
        )
        self.operation = operation


class AggregationError(LeaderboardError):
    """Raised when the leaderboard snapshot cannot be rebuilt."""
    status_code = 500

    def __init__(self, details: str = None):
        super().__init__(
            f"Leaderboard rebuild failed: {details}",
            "Failed to update leaderboard"
        )
