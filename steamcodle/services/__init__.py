"""Service layer for game selection, round state and external integrations."""

from .catalog import CatalogCache, CatalogSource, FeaturedCatalogSource, FullCatalogSource
from .config import ConfigurationService, ValidationResult
from .errors import (
    AppError,
    ConfigurationError,
    DailyLimitError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    NetworkError,
    NoEligibleTitlesError,
    UpstreamError,
    UserFriendlyError,
    ValidationError,
    get_error_service,
    handle_error,
)
from .game_session import GameSession, GuessOutcome, parse_guess
from .http_client import HttpClientService
from .review import is_eligible, normalize_score
from .round_client import ApiTitleClient
from .selector import CandidateSelector, RecentHistory
from .steam_api import SteamStoreClient
from .storage import KeyValueStore, StatsRepository

__all__ = [
    "ApiTitleClient",
    "AppError",
    "CandidateSelector",
    "CatalogCache",
    "CatalogSource",
    "ConfigurationError",
    "ConfigurationService",
    "DailyLimitError",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "FeaturedCatalogSource",
    "FullCatalogSource",
    "GameSession",
    "GuessOutcome",
    "HttpClientService",
    "KeyValueStore",
    "NetworkError",
    "NoEligibleTitlesError",
    "RecentHistory",
    "StatsRepository",
    "SteamStoreClient",
    "UpstreamError",
    "UserFriendlyError",
    "ValidationError",
    "ValidationResult",
    "get_error_service",
    "handle_error",
    "is_eligible",
    "normalize_score",
    "parse_guess",
]
