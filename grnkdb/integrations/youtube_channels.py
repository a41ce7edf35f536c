"""YouTube channel ingestion utilities."""

from __future__ import annotations

import logging
from typing import Any

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..models import SOURCE_YOUTUBE, VideoRecord, parse_timestamp

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


class YouTubeError(RuntimeError):
    """Raised when the YouTube Data API cannot be queried."""


class ChannelNotFoundError(YouTubeError):
    """The channel ID does not exist."""

    def __init__(self, channel_id: str) -> None:
        super().__init__(f"channel not found {channel_id!r}")
        self.channel_id = channel_id


def _build_client(api_key: str):
    return build("youtube", "v3", developerKey=api_key, cache_discovery=False)


def playlist_item_to_video(item: dict[str, Any]) -> VideoRecord | None:
    """Convert an uploads playlist item, or return ``None`` if it is unusable."""
    snippet = item.get("snippet") or {}
    video_id = (snippet.get("resourceId") or {}).get("videoId")
    published_at = parse_timestamp(snippet.get("publishedAt"))
    if not video_id or published_at is None:
        logger.warning(
            "Skipping playlist item %s: missing video ID or unparseable publish date %r",
            video_id or item.get("id"),
            snippet.get("publishedAt"),
        )
        return None
    return VideoRecord(
        video_id=video_id,
        title=snippet.get("title") or "",
        description=snippet.get("description") or "",
        link=WATCH_URL.format(video_id=video_id),
        published_at=published_at,
        channel_id=snippet.get("channelId") or "",
        source=SOURCE_YOUTUBE,
    )


class YouTubeScraper:
    """Lists all uploads of a channel through its uploads playlist."""

    def __init__(
        self,
        api_key: str | None,
        *,
        page_results: int = 50,
        page_limit: int = 0,
        client: Any | None = None,
    ) -> None:
        if client is None:
            if not api_key:
                raise YouTubeError("YouTube API key not configured")
            client = _build_client(api_key)
        self.client = client
        self.page_results = page_results
        self.page_limit = page_limit

    def videos(self, channel_id: str) -> list[VideoRecord]:
        """Fetch every video of ``channel_id``; unusable items are skipped."""
        items = self._playlist_items(channel_id)
        logger.info("Converting %d playlist items of channel %s", len(items), channel_id)
        return [video for video in map(playlist_item_to_video, items) if video is not None]

    def _uploads_playlist(self, channel_id: str) -> str:
        try:
            response = self.client.channels().list(part="contentDetails", id=channel_id).execute()
        except HttpError as exc:
            raise YouTubeError(f"channel lookup failed for {channel_id}: {exc}") from exc

        items = response.get("items") or []
        if not items:
            raise ChannelNotFoundError(channel_id)
        uploads = items[0].get("contentDetails", {}).get("relatedPlaylists", {}).get("uploads")
        if not uploads:
            raise YouTubeError(f"uploads playlist missing for channel {channel_id}")
        return uploads

    def _playlist_items(self, channel_id: str) -> list[dict[str, Any]]:
        logger.info("Scraping channel %s", channel_id)
        uploads = self._uploads_playlist(channel_id)

        collected: list[dict[str, Any]] = []
        token: str | None = None
        page = 0
        while True:
            page += 1
            params: dict[str, Any] = {
                "part": "snippet",
                "playlistId": uploads,
                "maxResults": self.page_results,
            }
            if token:
                params["pageToken"] = token
            try:
                response = self.client.playlistItems().list(**params).execute()
            except HttpError as exc:
                raise YouTubeError(f"error fetching playlist items of {channel_id}: {exc}") from exc

            items = response.get("items") or []
            if not items:
                break
            logger.debug("Scraped page %d of channel %s with %d items", page, channel_id, len(items))
            collected.extend(items)

            token = response.get("nextPageToken")
            if not token or (self.page_limit and page >= self.page_limit):
                break

        logger.info("Scraping channel %s done: %d items", channel_id, len(collected))
        return collected
