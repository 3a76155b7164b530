"""Unit tests for playback and queue dispatch."""

import pytest

from fishify.exceptions import (
    EmptySearchResultException,
    InvalidReferenceException,
    MalformedReferenceException,
    QueueExpansionPartialFailureException,
    QueueUnsupportedException,
    SpotifyAPIException,
)
from fishify.models.content import (
    ContentIdentifier,
    ContentKind,
    FullAlbum,
    Page,
    PlaylistItem,
    SimplifiedEpisode,
    SimplifiedTrack,
)
from fishify.services.dispatcher import (
    PlayIntent,
    enqueue,
    expand_context,
    play_by_query,
    play_now,
)
from fishify.services.fetcher import fetch_metadata

TRACK = ContentIdentifier(kind=ContentKind.TRACK, id="4u7EnebtmKWzUH433cf5Qv")
EPISODE = ContentIdentifier(kind=ContentKind.EPISODE, id="ep1")
ALBUM = ContentIdentifier(kind=ContentKind.ALBUM, id="1GbtB4zTqAsyfZEsm1RZfx")
ARTIST = ContentIdentifier(kind=ContentKind.ARTIST, id="1dfeR4HaWDbWqFHLkxsg1d")


class TestFetchMetadata:
    """Tests for fetch_metadata."""

    @pytest.mark.asyncio
    async def test_one_call_per_kind(self, spotify, album):
        spotify.get_album.return_value = album

        result = await fetch_metadata(spotify, ALBUM)

        assert result is album
        spotify.get_album.assert_awaited_once_with(ALBUM.id)
        spotify.get_track.assert_not_called()

    @pytest.mark.asyncio
    async def test_kind_mismatch_is_a_bug(self, spotify, album):
        spotify.get_track.return_value = album

        with pytest.raises(RuntimeError):
            await fetch_metadata(spotify, TRACK)

    @pytest.mark.asyncio
    async def test_errors_propagate(self, spotify):
        spotify.get_show.side_effect = SpotifyAPIException("Get show failed", upstream_status=404)

        with pytest.raises(SpotifyAPIException):
            await fetch_metadata(spotify, ContentIdentifier(kind=ContentKind.SHOW, id="s"))


class TestPlayNow:
    """Tests for play_now."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("identifier", [TRACK, EPISODE])
    async def test_playable_items_play_directly(self, spotify, identifier):
        await play_now(spotify, identifier)

        spotify.start_playback_with_items.assert_awaited_once_with([identifier])
        spotify.start_playback_with_context.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", [ContentKind.ALBUM, ContentKind.PLAYLIST, ContentKind.ARTIST, ContentKind.SHOW])
    async def test_collections_play_as_context(self, spotify, kind):
        identifier = ContentIdentifier(kind=kind, id="ctx")

        await play_now(spotify, identifier)

        spotify.start_playback_with_context.assert_awaited_once_with(identifier)
        spotify.start_playback_with_items.assert_not_called()


class TestEnqueue:
    """Tests for enqueue and expand_context."""

    @pytest.mark.asyncio
    async def test_track_enqueued_directly(self, spotify):
        assert await enqueue(spotify, TRACK) == 1

        spotify.enqueue.assert_awaited_once_with(TRACK)
        spotify.get_track.assert_not_called()

    @pytest.mark.asyncio
    async def test_album_expanded_in_order(self, spotify, album):
        spotify.get_album.return_value = album

        assert await enqueue(spotify, ALBUM) == 3

        enqueued = [call.args[0].id for call in spotify.enqueue.await_args_list]
        assert enqueued == ["t1", "t2", "t3"]

    @pytest.mark.asyncio
    async def test_given_metadata_is_not_refetched(self, spotify, playlist):
        identifier = ContentIdentifier(kind=ContentKind.PLAYLIST, id=playlist.id)

        assert await expand_context(spotify, identifier, playlist) == 2

        spotify.get_playlist.assert_not_called()
        assert [call.args[0].uri for call in spotify.enqueue.await_args_list] == [
            "spotify:track:p1",
            "spotify:episode:e1",
        ]

    @pytest.mark.asyncio
    async def test_artist_cannot_be_queued(self, spotify, artist):
        with pytest.raises(QueueUnsupportedException) as exc_info:
            await enqueue(spotify, ARTIST, artist)

        assert exc_info.value.kind == "artist"
        spotify.enqueue.assert_not_called()

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_earlier_items(self, spotify, album):
        error = SpotifyAPIException("Queue item failed", upstream_status=502)
        spotify.enqueue.side_effect = [None, error, None]

        with pytest.raises(QueueExpansionPartialFailureException) as exc_info:
            await expand_context(spotify, ALBUM, album)

        failure = exc_info.value
        assert failure.enqueued == 1
        assert failure.total == 3
        assert failure.error is error
        assert failure.__cause__ is error
        assert "item 2 of 3" in failure.message
        # Stops at the first failure
        assert spotify.enqueue.await_count == 2


class TestPlayByQuery:
    """Tests for play_by_query."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, ""])
    async def test_empty_query_resumes(self, spotify, text):
        result = await play_by_query(spotify, text)

        assert result.lines == ("Resumed playback",)
        assert result.verbose is False
        spotify.resume_playback.assert_awaited_once()
        spotify.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_query_cannot_be_queued(self, spotify):
        with pytest.raises(InvalidReferenceException):
            await play_by_query(spotify, None, intent=PlayIntent.ENQUEUE)

        spotify.resume_playback.assert_not_called()

    @pytest.mark.asyncio
    async def test_search_defaults_to_track(self, spotify, track):
        spotify.search.return_value = [SimplifiedTrack(id=track.id, name=track.name, duration_ms=1)]
        spotify.get_track.return_value = track

        result = await play_by_query(spotify, "bohemian rhapsody")

        spotify.search.assert_awaited_once_with("bohemian rhapsody", ContentKind.TRACK, 1)
        spotify.start_playback_with_items.assert_awaited_once_with([TRACK])
        assert result.lines == ("Now playing Bohemian Rhapsody by Queen",)
        assert result.verbose is True

    @pytest.mark.asyncio
    async def test_uri_skips_search(self, spotify, album):
        spotify.get_album.return_value = album

        result = await play_by_query(spotify, ALBUM.uri)

        spotify.search.assert_not_called()
        spotify.start_playback_with_context.assert_awaited_once_with(ALBUM)
        assert result.lines == ("Now playing A Night at the Opera by Queen",)

    @pytest.mark.asyncio
    async def test_url_queue_fetches_once(self, spotify, album):
        spotify.get_album.return_value = album

        result = await play_by_query(
            spotify,
            "https://open.spotify.com/album/1GbtB4zTqAsyfZEsm1RZfx?si=abc",
            is_url=True,
            intent=PlayIntent.ENQUEUE,
        )

        spotify.get_album.assert_awaited_once()
        assert spotify.enqueue.await_count == 3
        assert result.lines == ("Queued A Night at the Opera by Queen",)

    @pytest.mark.asyncio
    async def test_no_artist_omits_by(self, spotify, show):
        spotify.get_show.return_value = show

        result = await play_by_query(spotify, "spotify:show:5CfCWKI5pZ28U0uOzXkDHe")

        assert result.lines == ("Now playing Some Podcast",)

    @pytest.mark.asyncio
    async def test_bad_url_is_invalid_reference(self, spotify):
        with pytest.raises(InvalidReferenceException) as exc_info:
            await play_by_query(spotify, "https://example.com/track/abc", is_url=True)

        assert isinstance(exc_info.value.__cause__, MalformedReferenceException)
        spotify.start_playback_with_items.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_uri_without_url_flag(self, spotify):
        with pytest.raises(MalformedReferenceException):
            await play_by_query(spotify, "spotify:track:")

    @pytest.mark.asyncio
    async def test_empty_search(self, spotify):
        spotify.search.return_value = []

        with pytest.raises(EmptySearchResultException):
            await play_by_query(spotify, "nothing matches", kind=ContentKind.ALBUM)

        spotify.search.assert_awaited_once_with("nothing matches", ContentKind.ALBUM, 1)

    @pytest.mark.asyncio
    async def test_artist_plays_but_does_not_queue(self, spotify, artist):
        spotify.get_artist.return_value = artist

        played = await play_by_query(spotify, ARTIST.uri)
        assert played.lines == ("Now playing Queen by Queen",)

        with pytest.raises(QueueUnsupportedException):
            await play_by_query(spotify, ARTIST.uri, intent=PlayIntent.ENQUEUE)


def album_tracks(start: int, stop: int) -> list[dict]:
    return [{"type": "track", "id": f"t{n}", "name": f"Track {n}", "duration_ms": 1} for n in range(start, stop)]


class TestMultiPageCollections:
    """Collections longer than the page Spotify embeds."""

    @pytest.fixture
    def long_album(self) -> FullAlbum:
        return FullAlbum.model_validate(
            {
                "type": "album",
                "id": ALBUM.id,
                "name": "Long Album",
                "tracks": {
                    "items": album_tracks(0, 50),
                    "offset": 0,
                    "total": 60,
                    "next": f"https://api.spotify.com/v1/albums/{ALBUM.id}/tracks?offset=50&limit=50",
                },
            }
        )

    @pytest.mark.asyncio
    async def test_every_page_is_enqueued_in_order(self, spotify, long_album):
        spotify.get_album_tracks.return_value = Page[SimplifiedTrack].model_validate(
            {"items": album_tracks(50, 60), "offset": 50, "total": 60, "next": None}
        )

        assert await expand_context(spotify, ALBUM, long_album) == 60

        spotify.get_album_tracks.assert_awaited_once_with(ALBUM.id, 50)
        enqueued = [call.args[0].id for call in spotify.enqueue.await_args_list]
        assert enqueued == [f"t{n}" for n in range(60)]

    @pytest.mark.asyncio
    async def test_pages_are_fetched_before_the_first_enqueue(self, spotify, long_album):
        spotify.get_album_tracks.side_effect = SpotifyAPIException("Get album tracks failed", upstream_status=500)

        with pytest.raises(SpotifyAPIException):
            await expand_context(spotify, ALBUM, long_album)

        spotify.enqueue.assert_not_called()

    @pytest.mark.asyncio
    async def test_playlist_and_show_pages(self, spotify, playlist, show):
        playlist = playlist.model_copy(update={"tracks": playlist.tracks.model_copy(update={"next": "next-page"})})
        spotify.get_playlist_items.return_value = Page[PlaylistItem].model_validate(
            {"items": [{"track": {"type": "track", "id": "p9", "name": "Late", "duration_ms": 1}}], "offset": 4}
        )
        show = show.model_copy(update={"episodes": show.episodes.model_copy(update={"next": "next-page"})})
        spotify.get_show_episodes.return_value = Page[SimplifiedEpisode].model_validate(
            {"items": [{"type": "episode", "id": "ep3", "name": "Third", "duration_ms": 1}], "offset": 2}
        )

        playlist_id = ContentIdentifier(kind=ContentKind.PLAYLIST, id=playlist.id)
        show_id = ContentIdentifier(kind=ContentKind.SHOW, id=show.id)
        assert await expand_context(spotify, playlist_id, playlist) == 3
        assert await expand_context(spotify, show_id, show) == 3

        spotify.get_playlist_items.assert_awaited_once_with(playlist.id, 4)
        spotify.get_show_episodes.assert_awaited_once_with(show.id, 2)
        assert spotify.enqueue.await_args_list[2].args[0].uri == "spotify:track:p9"
        assert spotify.enqueue.await_args_list[-1].args[0].uri == "spotify:episode:ep3"

    @pytest.mark.asyncio
    async def test_empty_page_stops_the_walk(self, spotify, long_album):
        spotify.get_album_tracks.return_value = Page[SimplifiedTrack](items=[], offset=50, next="same-page")

        assert await expand_context(spotify, ALBUM, long_album) == 50

        spotify.get_album_tracks.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_queue_by_uri_reports_whole_album(self, spotify, long_album):
        spotify.get_album.return_value = long_album
        spotify.get_album_tracks.return_value = Page[SimplifiedTrack].model_validate(
            {"items": album_tracks(50, 60), "offset": 50}
        )

        result = await play_by_query(spotify, ALBUM.uri, intent=PlayIntent.ENQUEUE)

        assert result.lines == ("Queued Long Album",)
        assert spotify.enqueue.await_count == 60
