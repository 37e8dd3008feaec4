import asyncio
import logging
from typing import Any, Callable

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from models.api_response import ApiResponse
from models.article_ref import ArticleRef
from models.fetch_error import FetchError, FetchErrorCause
from models.http_requester import HTTPRequester
from models.revision_query import RevisionQuery
from models.revision_window import RevisionWindow

logger = logging.getLogger(__name__)


class RevisionFetcher(BaseModel):
    """Fetches bounded windows of an article's revision history.

    Holds nothing between calls besides the requester, so one instance can
    serve any number of concurrent fetches. Relative completion order of
    concurrent fetches is not guaranteed."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    requester: HTTPRequester

    async def fetch_revision_window(
        self, article: ArticleRef, result_limit: int, ending_revision_id: int = 0
    ) -> RevisionWindow:
        """
        Return the result_limit most recent revisions of article, newest first,
        starting at ending_revision_id (inclusive) when it is non-zero.

        Args:
            article: The article to read history for.
            result_limit: Page size, at least 1. Fewer revisions are returned
                when the article has a shorter history.
            ending_revision_id: Newest revision to include, 0 for the latest.

        Returns:
            RevisionWindow: validated, strictly descending by revision id.

        Raises:
            FetchError: network, http-status, api or decode failure. Exactly one
                of returning or raising happens per call.
            ValidationError: result_limit or ending_revision_id out of range.
        """
        query = RevisionQuery(
            article=article,
            result_limit=result_limit,
            ending_revision_id=ending_revision_id,
        )
        return await self._fetch(query)

    def fetch_latest_revisions(
        self,
        article: ArticleRef,
        result_limit: int,
        ending_revision_id: int,
        failure: Callable[[FetchError], None],
        success: Callable[[RevisionWindow], None],
    ) -> asyncio.Task:
        """Callback form of fetch_revision_window.

        Must be called with a running event loop. Exactly one of failure or
        success is invoked, once. The returned task is the cancellation handle:
        cancelling it before completion suppresses both callbacks, cancelling
        it afterwards does nothing. Out of range arguments raise ValidationError
        here, before anything is scheduled."""
        query = RevisionQuery(
            article=article,
            result_limit=result_limit,
            ending_revision_id=ending_revision_id,
        )

        async def deliver():
            try:
                window = await self._fetch(query)
            except FetchError as e:
                failure(e)
                return
            success(window)

        return asyncio.get_running_loop().create_task(deliver())

    async def _fetch(self, query: RevisionQuery) -> RevisionWindow:
        data = await self._request(query)
        window = self._decode(query, data)
        logger.info(
            "Fetched %d revisions of %s (limit %d, ending at %s)",
            len(window),
            query.article.title,
            query.result_limit,
            query.ending_revision_id or "latest",
        )
        return window

    async def _request(self, query: RevisionQuery) -> Any:
        url = query.article.api_url
        try:
            return await self.requester.request(url, query.to_params())
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("HTTP %d fetching revisions from %s", status, url)
            raise FetchError(
                FetchErrorCause.HTTP_STATUS, str(e), status_code=status
            ) from e
        except httpx.RequestError as e:
            logger.warning("Request error fetching revisions from %s: %s", url, e)
            raise FetchError(FetchErrorCause.NETWORK, str(e)) from e
        except httpx.InvalidURL as e:
            logger.warning("Invalid request URL %s: %s", url, e)
            raise FetchError(FetchErrorCause.API, str(e), code="invalidurl") from e
        except ValueError as e:
            logger.warning("Undecodable response from %s: %s", url, e)
            raise FetchError(FetchErrorCause.DECODE, str(e)) from e

    @staticmethod
    def _decode(query: RevisionQuery, data: Any) -> RevisionWindow:
        try:
            response = ApiResponse.model_validate(data)
        except ValidationError as e:
            logger.warning("Malformed revisions response: %s", e)
            raise FetchError(FetchErrorCause.DECODE, str(e)) from e

        if response.warnings:
            logger.warning("API warnings for %s: %s", query.article.title, response.warnings)

        if response.error is not None:
            # An ending revision that does not exist is an empty window
            if response.error.code == "nosuchrevid" and query.has_upper_bound:
                logger.info(
                    "Revision %d does not exist, returning empty window",
                    query.ending_revision_id,
                )
                return RevisionWindow(query=query)
            logger.warning(
                "API error %s for %s: %s",
                response.error.code,
                query.article.title,
                response.error.info,
            )
            raise FetchError(
                FetchErrorCause.API, response.error.info, code=response.error.code
            )

        page = response.page
        if page is None:
            raise FetchError(FetchErrorCause.DECODE, "Response has no query.pages")
        if page.missing:
            logger.warning("Article %s does not exist", query.article.title)
            raise FetchError(
                FetchErrorCause.API,
                f"{query.article.title} does not exist",
                code="missingtitle",
            )
        if page.invalid:
            raise FetchError(
                FetchErrorCause.API, page.invalidreason, code="invalidtitle"
            )

        try:
            return RevisionWindow(query=query, revisions=page.revisions)
        except ValidationError as e:
            logger.warning("Rejected revision window for %s: %s", query.article.title, e)
            raise FetchError(FetchErrorCause.DECODE, str(e)) from e
