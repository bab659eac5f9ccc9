"""
YouTube search front-end.

Fetches a search results page and hands it to the parser. The result
type is selected server-side through the 'sp' filter parameter, so the
page mostly carries renderers of the requested type.

Usage:
    from media_resolver.core.http import HttpClient
    from media_resolver.youtube.search import YouTubeSearch

    search = YouTubeSearch(HttpClient())
    videos = search.search("never gonna give you up", SearchOptions(limit=5))
"""

from media_resolver.core.config import DEFAULT_LANGUAGE
from media_resolver.core.exceptions import ConfigError, ValidationError
from media_resolver.core.http import HttpClient
from media_resolver.core.logger import get_logger
from media_resolver.youtube.models import SearchOptions
from media_resolver.youtube.parser import YouTubeEntity, parse_search_results

logger = get_logger(__name__)


SEARCH_URL = "https://www.youtube.com/results"

# 'sp' values of YouTube's "Type" search filter
SEARCH_FILTERS = {
    "video": "EgIQAQ==",
    "channel": "EgIQAg==",
    "playlist": "EgIQAw==",
}

CAPTCHA_NOTICE = "Our systems have detected unusual traffic from your computer network."


class YouTubeSearch:
    """
    Runs YouTube searches over HTTP.

    Attributes:
        http: HTTP client used to fetch result pages.
        default_language: Accept-Language used when options.language is unset.
    """

    def __init__(self, http: HttpClient, default_language: str = DEFAULT_LANGUAGE) -> None:
        self.http = http
        self.default_language = default_language

    def search(self, query: str, options: SearchOptions | None = None) -> list[YouTubeEntity]:
        """
        Search YouTube and parse the results page.

        Args:
            query: Free-text search query.
            options: Result type, limit and language hint.

        Returns:
            Entities of the requested type, in page order.

        Raises:
            ConfigError: If the query is empty or the type is unknown.
            ValidationError: If YouTube served its captcha page.
            NetworkError: If the page could not be fetched.
            ParseError: If the page layout is not recognised.
        """
        if not query or not query.strip():
            raise ConfigError("Search query must not be empty")

        options = options or SearchOptions()
        search_type = options.type or "video"
        if search_type not in SEARCH_FILTERS:
            raise ConfigError(
                f"Unknown search type: {search_type}",
                details={"type": search_type, "allowed": sorted(SEARCH_FILTERS)}
            )

        logger.debug(f"Searching YouTube for {search_type}s: {query!r}")
        html = self.http.get_text(
            SEARCH_URL,
            params={"search_query": query.strip(), "sp": SEARCH_FILTERS[search_type]},
            headers={"Accept-Language": options.language or self.default_language}
        )

        if CAPTCHA_NOTICE in html:
            raise ValidationError(
                "Captcha page: YouTube has detected that you are a bot",
                details={"query": query}
            )

        return parse_search_results(html, options)
