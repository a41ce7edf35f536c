"""YouTube scraper tests with a mocked API client."""

from unittest.mock import MagicMock

import pytest

from conftest import utc
from grnkdb.integrations.youtube_channels import (
    ChannelNotFoundError,
    YouTubeError,
    YouTubeScraper,
    playlist_item_to_video,
)


def _item(video_id, title="Portal", published_at="2010-10-19T19:00:17Z"):
    return {
        "id": f"item-{video_id}",
        "snippet": {
            "title": title,
            "description": f"about {title}",
            "publishedAt": published_at,
            "channelId": "UC-test",
            "resourceId": {"videoId": video_id},
        },
    }


@pytest.fixture
def api_client():
    """Mock of the discovery client returned by googleapiclient.discovery.build."""
    client = MagicMock()
    client.channels.return_value.list.return_value.execute.return_value = {
        "items": [{"contentDetails": {"relatedPlaylists": {"uploads": "UU-test"}}}]
    }
    return client


class TestPlaylistItemToVideo:
    def test_converts_snippet(self):
        video = playlist_item_to_video(_item("abc"))

        assert video.video_id == "abc"
        assert video.link == "https://www.youtube.com/watch?v=abc"
        assert video.published_at == utc(2010, 10, 19, 19, 0, 17)
        assert video.channel_id == "UC-test"
        assert video.source == "youtube"

    def test_bad_date_is_skipped(self):
        assert playlist_item_to_video(_item("abc", published_at="not a date")) is None

    def test_missing_video_id_is_skipped(self):
        item = _item("abc")
        del item["snippet"]["resourceId"]
        assert playlist_item_to_video(item) is None


class TestYouTubeScraper:
    """YouTubeScraper.videos()"""

    def test_requires_api_key(self):
        with pytest.raises(YouTubeError):
            YouTubeScraper(None)

    def test_paginates_uploads_playlist(self, api_client):
        playlist = api_client.playlistItems.return_value.list
        playlist.return_value.execute.side_effect = [
            {"items": [_item("a"), _item("b")], "nextPageToken": "page-2"},
            {"items": [_item("c", published_at="broken")]},
        ]

        videos = YouTubeScraper(None, client=api_client).videos("UC-test")

        assert [video.video_id for video in videos] == ["a", "b"]
        api_client.channels.return_value.list.assert_called_once_with(part="contentDetails", id="UC-test")
        first, second = playlist.call_args_list
        assert first.kwargs == {"part": "snippet", "playlistId": "UU-test", "maxResults": 50}
        assert second.kwargs["pageToken"] == "page-2"

    def test_stops_on_empty_page(self, api_client):
        playlist = api_client.playlistItems.return_value.list
        playlist.return_value.execute.side_effect = [{"items": [], "nextPageToken": "more"}]

        assert YouTubeScraper(None, client=api_client).videos("UC-test") == []
        assert playlist.call_count == 1

    def test_page_limit(self, api_client):
        playlist = api_client.playlistItems.return_value.list
        playlist.return_value.execute.side_effect = [
            {"items": [_item("a")], "nextPageToken": "page-2"},
            {"items": [_item("b")], "nextPageToken": "page-3"},
        ]

        videos = YouTubeScraper(None, page_limit=1, page_results=10, client=api_client).videos("UC-test")

        assert [video.video_id for video in videos] == ["a"]
        assert playlist.call_args.kwargs["maxResults"] == 10

    def test_unknown_channel(self, api_client):
        api_client.channels.return_value.list.return_value.execute.return_value = {"items": []}

        with pytest.raises(ChannelNotFoundError, match="channel not found 'UC-missing'"):
            YouTubeScraper(None, client=api_client).videos("UC-missing")
