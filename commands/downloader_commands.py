"""
Downloader Commands
Search/download API commands and the numbered-reply resolutions they set up
"""

from typing import Any, Dict, List

from commands.command_registry import Category, CommandRegistry
from commands.context import CommandContext
from commands.selection_store import (
    BaiscopeSearchResults,
    MovieSearchResults,
    PendingSelection,
    SelectionKind,
    SubtitleSearchResults,
    TvSearchResults,
    VideoQualityChoice,
    VideoSearchResults,
)
from managers.download_manager import DownloadApiError
from utils.validation import ValidationUtils
from utils.whatsapp import WhatsAppUtils


MAX_RESULTS = 10

QUALITY_MIMETYPES = {
    "high": ("video/mp4", ".mp4"),
    "medium": ("video/mp4", ".mp4"),
    "audio": ("audio/mpeg", ".mp3"),
}

# Search listing kinds: (endpoint, heading, empty-result text, reply hint, line builder)
SEARCHES = {
    SelectionKind.VIDEO_SEARCH_RESULTS: (
        "/search/youtube",
        "🔍 *YouTube Search Results*",
        "No results found",
        "download",
        lambda v: [f"   👤 {v.get('channel', 'Unknown')}", f"   ⏱️ {v.get('duration', 'N/A')} | 👁️ {v.get('views', 'N/A')}"],
    ),
    SelectionKind.MOVIE_SEARCH_RESULTS: (
        "/search/cinemasearch",
        "🎬 *Movie Search Results*",
        "No movies found",
        "get download link",
        lambda m: [f"   📅 {m.get('year') or 'N/A'}", f"   ⭐ {m.get('rating') or 'N/A'}", f"   🎭 {m.get('type') or 'Movie'}"],
    ),
    SelectionKind.TV_SEARCH_RESULTS: (
        "/search/cinerutvseries",
        "📺 *TV Show Search Results*",
        "No TV shows found",
        "see episodes",
        lambda s: [f"   📅 {s.get('year') or 'N/A'}", f"   ⭐ {s.get('rating') or 'N/A'}", f"   🎬 {s.get('seasons') or 'N/A'} Seasons"],
    ),
    SelectionKind.BAISCOPE_SEARCH_RESULTS: (
        "/search/baiscopesearch",
        "🎬 *Baiscope Search Results*",
        "No results found",
        "download",
        lambda i: [f"   📅 {i.get('year') or 'N/A'}", f"   🎭 {i.get('type') or 'Movie'}"],
    ),
    SelectionKind.SUBTITLE_SEARCH_RESULTS: (
        "/search/sinhalasub",
        "🎬 *Sinhala Sub Search*",
        "No results found",
        "get details",
        lambda i: [f"   📅 {i.get('year') or 'N/A'}", f"   🎭 {i.get('type') or 'Movie'}"],
    ),
}

SEARCH_PAYLOADS = {
    SelectionKind.VIDEO_SEARCH_RESULTS: VideoSearchResults,
    SelectionKind.MOVIE_SEARCH_RESULTS: MovieSearchResults,
    SelectionKind.TV_SEARCH_RESULTS: TvSearchResults,
    SelectionKind.BAISCOPE_SEARCH_RESULTS: BaiscopeSearchResults,
    SelectionKind.SUBTITLE_SEARCH_RESULTS: SubtitleSearchResults,
}

# Command that downloads a picked listing item
FOLLOW_UP_COMMANDS = {
    SelectionKind.MOVIE_SEARCH_RESULTS: "cineru",
    SelectionKind.TV_SEARCH_RESULTS: "episode",
    SelectionKind.BAISCOPE_SEARCH_RESULTS: None,
}


def format_search_results(kind: SelectionKind, query: str, results: List[Dict[str, Any]]) -> str:
    """Render a numbered search listing."""
    _, heading, _, hint, details = SEARCHES[kind]
    lines = [heading, "", f'Query: "{query}"', ""]
    for index, item in enumerate(results, 1):
        lines.append(f"{index}. *{item.get('title', 'Untitled')}*")
        lines.extend(details(item))
        lines.append("")
    lines.append(f"📝 Reply with number (1-{len(results)}) to {hint}")
    return "\n".join(lines)


def format_video_menu(info: Dict[str, Any]) -> str:
    return "\n".join([
        f"🎥 *{info.get('title', 'Unknown')}*",
        "",
        f"📺 Channel: {info.get('channel') or 'Unknown'}",
        f"⏱️ Duration: {info.get('duration') or 'Unknown'}",
        f"👁️ Views: {info.get('views') or 'Unknown'}",
        "",
        "📥 Select quality:",
        "Reply with number to download",
        "",
        "1. Video - High Quality",
        "2. Video - Medium Quality",
        "3. Audio Only (MP3)",
    ])


async def show_video_menu(ctx: CommandContext, url: str) -> None:
    """
    Fetch video info, show the quality menu and wait for the pick.

    Args:
        ctx: Command context
        url: Video URL
    """
    info = await ctx.services.downloads.api_request("/dl/youtube", {"url": url})
    if not info:
        raise DownloadApiError("Failed to fetch video")

    content: Dict[str, Any] = {"text": format_video_menu(info)}
    if info.get("thumbnail"):
        content["contextInfo"] = {
            "externalAdReply": {
                "title": info.get("title", ""),
                "body": "YouTube Downloader",
                "thumbnailUrl": info["thumbnail"],
                "sourceUrl": url,
            }
        }
    await ctx.reply(content)
    await ctx.services.selections.put(
        ctx.user_id,
        SelectionKind.VIDEO_QUALITY_CHOICE,
        VideoQualityChoice(url=url, title=info.get("title", ""), info=info),
    )


async def yt_command(ctx: CommandContext, args: List[str]) -> None:
    if not args or not ValidationUtils.validate_url(args[0]):
        await ctx.reply("❌ Usage: .yt <youtube_url>\nExample: .yt https://youtube.com/watch?v=xxxxx")
        return

    await ctx.reply("⏳ Fetching video information...")
    try:
        await show_video_menu(ctx, args[0])
    except DownloadApiError as e:
        await ctx.reply(f"❌ Error: {e}")


def _make_search_handler(kind: SelectionKind, usage: str, progress: str):
    """Build a command that lists search results and waits for a numbered reply."""
    endpoint, _, empty, _, _ = SEARCHES[kind]

    async def handler(ctx: CommandContext, args: List[str]) -> None:
        if not args:
            await ctx.reply(usage)
            return

        query = " ".join(args)
        await ctx.reply(progress)
        try:
            data = await ctx.services.downloads.api_request(endpoint, {"query": query})
            if not data:
                raise DownloadApiError(empty)
        except DownloadApiError as e:
            await ctx.reply(f"❌ Error: {e}")
            return

        results = list(data)[:MAX_RESULTS]
        await ctx.reply(format_search_results(kind, query, results))
        await ctx.services.selections.put(ctx.user_id, kind, SEARCH_PAYLOADS[kind](query=query, results=results))

    handler.__name__ = f"{kind.name.lower()}_command"
    return handler


async def cineru_command(ctx: CommandContext, args: List[str]) -> None:
    if not args:
        await ctx.reply("❌ Usage: .cineru <movie_url>\nExample: .cineru https://cineru.lk/movie/xxx")
        return

    url = args[0]
    await ctx.reply("⏳ Fetching movie details...")
    try:
        movie = await ctx.services.downloads.api_request("/dl/cinerumovie", {"url": url})
        if not movie:
            raise DownloadApiError("Failed to fetch movie")
    except DownloadApiError as e:
        await ctx.reply(f"❌ Error: {e}")
        return

    lines = [f"🎬 *{movie.get('title', 'Unknown')}*", ""]
    if movie.get("description"):
        lines += [f"📝 {movie['description']}", ""]
    if movie.get("year"):
        lines.append(f"📅 Year: {movie['year']}")
    if movie.get("quality"):
        lines.append(f"📺 Quality: {movie['quality']}")
    if movie.get("size"):
        lines.append(f"💾 Size: {movie['size']}")

    links = movie.get("downloadLinks") or []
    if links:
        lines += ["", "📥 Download Links:", ""]
        for index, link in enumerate(links, 1):
            lines += [f"{index}. {link.get('quality') or 'Download'}", f"   {link.get('url')}", ""]

    content: Dict[str, Any] = {"text": "\n".join(lines).rstrip()}
    if movie.get("thumbnail"):
        content["contextInfo"] = {
            "externalAdReply": {
                "title": movie.get("title", ""),
                "body": "Cineru Movie",
                "thumbnailUrl": movie["thumbnail"],
                "sourceUrl": url,
            }
        }
    await ctx.reply(content)


async def episode_command(ctx: CommandContext, args: List[str]) -> None:
    if not args:
        await ctx.reply("❌ Usage: .episode <episode_url>\nExample: .episode https://cineru.lk/episode/xxx")
        return

    await ctx.reply("⏳ Fetching episode...")
    try:
        episode = await ctx.services.downloads.api_request("/dl/cineruepisode", {"url": args[0]})
        if not episode:
            raise DownloadApiError("Failed to fetch episode")
    except DownloadApiError as e:
        await ctx.reply(f"❌ Error: {e}")
        return

    lines = [f"📺 *{episode.get('title', 'Unknown')}*", ""]
    if episode.get("season"):
        lines.append(f"📅 Season {episode['season']}")
    if episode.get("episode"):
        lines.append(f"🎬 Episode {episode['episode']}")
    if episode.get("quality"):
        lines.append(f"📺 Quality: {episode['quality']}")
    if episode.get("downloadLink"):
        lines += ["", f"📥 Download:\n{episode['downloadLink']}"]
    await ctx.reply("\n".join(lines))


def _make_card_handler(endpoint: str, field: str, usage: str, caption, progress: str = ""):
    """Build a command that renders an image card through the API."""

    async def handler(ctx: CommandContext, args: List[str]) -> None:
        if not args:
            await ctx.reply(usage)
            return

        text = " ".join(args)
        if progress:
            await ctx.reply(progress)
        try:
            data = await ctx.services.downloads.api_request(endpoint, {field: text})
            if not data or not data.get("url"):
                raise DownloadApiError("Failed to create card")
        except DownloadApiError as e:
            await ctx.reply(f"❌ Error: {e}")
            return

        await ctx.reply({"image": {"url": data["url"]}, "caption": caption(text)})

    return handler


async def download_video(ctx: CommandContext, choice: VideoQualityChoice, quality: str) -> None:
    """
    Resolve a download link and deliver the file, or the link when too large.

    Args:
        ctx: Command context
        choice: Video the quality menu was shown for
        quality: high, medium or audio
    """
    downloads = ctx.services.downloads
    await ctx.reply("⏬ Starting download...\nThis may take a few minutes.")

    data = await downloads.api_request("/dl/youtube", {"url": choice.url, "quality": quality})
    download_url = (data or {}).get("downloadUrl")
    if not download_url:
        raise DownloadApiError("Download link not available")

    file_size = await downloads.get_file_size(download_url)
    if file_size > downloads.max_file_size:
        await ctx.reply(
            f"⚠️ File is too large ({WhatsAppUtils.format_size(file_size)})\n\n📥 Direct Link:\n{download_url}"
        )
        return

    mimetype, extension = QUALITY_MIMETYPES[quality]
    filepath = await downloads.download_file(download_url, downloads.temp_filename(extension))
    icon = "🎵" if quality == "audio" else "🎬"
    await downloads.send_file(ctx.transport, ctx.chat_id, filepath, f"{icon} {choice.title}", mimetype)


async def resolve_selection(ctx: CommandContext, pending: PendingSelection, option: Any) -> None:
    """
    Act on a valid numbered reply.

    Args:
        ctx: Context of the reply message
        pending: The consumed pending selection
        option: Picked item (a result dict, or the quality name)
    """
    kind = pending.kind
    try:
        if kind is SelectionKind.VIDEO_SEARCH_RESULTS:
            await ctx.reply(f"✅ Selected: *{option.get('title', 'Untitled')}*")
            await show_video_menu(ctx, option["url"])

        elif kind is SelectionKind.VIDEO_QUALITY_CHOICE:
            await download_video(ctx, pending.payload, option)

        elif kind in (
            SelectionKind.MOVIE_SEARCH_RESULTS,
            SelectionKind.TV_SEARCH_RESULTS,
            SelectionKind.BAISCOPE_SEARCH_RESULTS,
        ):
            title = option.get("title", "Untitled")
            url = option.get("url")
            await ctx.reply(f"✅ Selected: *{title}*\n\nFetching download links...")
            follow_up = FOLLOW_UP_COMMANDS[kind]
            prefix = ctx.services.config.PREFIX
            if url and follow_up:
                hint = f"Use: {prefix}{follow_up} {url}"
            elif url:
                hint = url
            else:
                hint = "Use the specific URL command with the item URL to download."
            await ctx.reply(f"🎬 *{title}*\n\n{hint}")

        elif kind is SelectionKind.SUBTITLE_SEARCH_RESULTS:
            await ctx.reply(
                f"✅ Selected: *{option.get('title', 'Untitled')}*\n\n{option.get('url') or 'URL not available'}"
            )

        else:
            raise ValueError(f"Unhandled selection kind: {kind}")
    except DownloadApiError as e:
        await ctx.reply(f"❌ Error: {e}")


def register_downloader_commands(registry: CommandRegistry) -> None:
    """Register search/download and media card commands."""
    download = Category.DOWNLOAD
    registry.register("yt", download, yt_command, {"description": "Download YouTube videos", "usage": "<url>"})
    registry.register("yts", download, _make_search_handler(
        SelectionKind.VIDEO_SEARCH_RESULTS,
        "❌ Usage: .yts <search query>\nExample: .yts despacito",
        "🔍 Searching YouTube...",
    ), {"aliases": ["ytsearch"], "description": "Search YouTube videos", "usage": "<query>"})
    registry.register("movie", download, _make_search_handler(
        SelectionKind.MOVIE_SEARCH_RESULTS,
        "❌ Usage: .movie <movie name>\nExample: .movie Inception",
        "🎬 Searching for movies...",
    ), {"aliases": ["movies"], "description": "Search and download movies", "usage": "<name>"})
    registry.register("cineru", download, cineru_command, {"description": "Download from Cineru", "usage": "<url>"})
    registry.register("tvsearch", download, _make_search_handler(
        SelectionKind.TV_SEARCH_RESULTS,
        "❌ Usage: .tvsearch <show name>\nExample: .tvsearch Breaking Bad",
        "📺 Searching TV shows...",
    ), {"aliases": ["tvshow"], "description": "Search TV shows", "usage": "<name>"})
    registry.register("episode", download, episode_command, {
        "aliases": ["ep"], "description": "Download TV episode", "usage": "<url>",
    })
    registry.register("baiscope", download, _make_search_handler(
        SelectionKind.BAISCOPE_SEARCH_RESULTS,
        "❌ Usage: .baiscope <search query>\nExample: .baiscope Inception",
        "🎬 Searching Baiscope...",
    ), {"description": "Search Baiscope content", "usage": "<query>"})
    registry.register("sisubsearch", download, _make_search_handler(
        SelectionKind.SUBTITLE_SEARCH_RESULTS,
        "❌ Usage: .sisubsearch <movie name>\nExample: .sisubsearch Inception",
        "🔍 Searching Sinhala subs...",
    ), {"aliases": ["sisub"], "description": "Search Sinhala subtitles", "usage": "<name>"})

    media = Category.MEDIA
    registry.register("greet", media, _make_card_handler(
        "/maker/greeting", "text",
        "❌ Usage: .greet <text>\nExample: .greet Happy Birthday!",
        lambda text: f"🎉 {text}",
        "🎨 Creating greeting card...",
    ), {"description": "Create greeting card", "usage": "<text>"})
    registry.register("birthday", media, _make_card_handler(
        "/maker/birthday", "name",
        "❌ Usage: .birthday <name>\nExample: .birthday John",
        lambda name: f"🎂 Happy Birthday {name}! 🎉",
    ), {"aliases": ["bday"], "description": "Create birthday card", "usage": "<name>"})
