"""
Pic-Tac-Toe CLI - Command-line interface for the engine.

Usage:
    pictac serve [--host H] [--port P]     Run the REST API
    pictac play [--p1 NAME] [--p2 NAME]    Play a match in the terminal
    pictac history list                    Show finished matches
    pictac history show ID                 Show one finished match
    pictac history delete ID               Delete one finished match
    pictac history clear                   Delete all finished matches
    pictac gifs QUERY                      Search reaction GIFs
"""

from datetime import datetime
from pathlib import Path
import argparse
import logging
import sys

from .config import get_settings


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Pic-Tac-Toe - photo tic-tac-toe",
        prog="pictac",
    )
    parser.add_argument("--database-url", help="Override PICTAC_DATABASE_URL")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a match in the terminal")
    play_parser.add_argument("--p1", help="Name for P1 (defaults to profile name)")
    play_parser.add_argument("--p2", help="Name for P2")

    # History commands
    history_parser = subparsers.add_parser("history", help="Browse match history")
    history_sub = history_parser.add_subparsers(dest="history_command")
    history_sub.add_parser("list", help="List finished matches")
    show_parser = history_sub.add_parser("show", help="Show one finished match")
    show_parser.add_argument("record_id", type=int)
    delete_parser = history_sub.add_parser("delete", help="Delete one finished match")
    delete_parser.add_argument("record_id", type=int)
    history_sub.add_parser("clear", help="Delete all finished matches")

    # GIF search
    gifs_parser = subparsers.add_parser("gifs", help="Search reaction GIFs")
    gifs_parser.add_argument("query", nargs="*", help="Mood to search for")

    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        return cmd_serve(args)
    elif args.command == "play":
        return cmd_play(args)
    elif args.command == "history":
        return cmd_history(args, history_parser)
    elif args.command == "gifs":
        return cmd_gifs(args)
    else:
        parser.print_help()
        sys.exit(1)


def _database_url(args) -> str:
    return args.database_url or get_settings().database_url


def _open_store(args):
    from .storage import MatchStore

    store = MatchStore.from_url(_database_url(args))
    store.initialize()
    return store


def render_board(board) -> str:
    """Text grid: empty cells show their index, filled cells their seat."""
    rows = []
    for start in range(0, 9, 3):
        cells = [
            board[i].player.value if board[i] else f" {i}"
            for i in range(start, start + 3)
        ]
        rows.append(" | ".join(cells))
    return "\n---+----+---\n".join(rows)


def _photo_ref(raw: str) -> str:
    """Local file paths become file:// URIs; anything else is passed through."""
    if not raw or "://" in raw:
        return raw
    path = Path(raw).expanduser()
    if path.is_file():
        return path.resolve().as_uri()
    return raw


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    if args.database_url:
        import os
        os.environ["PICTAC_DATABASE_URL"] = args.database_url
        get_settings.cache_clear()

    uvicorn.run("pictac.api.app:create_app", factory=True, host=args.host, port=args.port)


def cmd_play(args):
    """Play one match, two players sharing the terminal."""
    from .engine_core import PlayerNames
    from .session import SessionManager
    from .storage import MatchStore, MatchStoreError, PrefsStore

    try:
        store = MatchStore.from_url(_database_url(args))
    except MatchStoreError as e:
        print(f"Error: {e}")
        return 1
    try:
        store.initialize()
    except MatchStoreError as e:
        # Appends will fail too, and the result is reported after the match
        print(f"History unavailable, playing without saving: {e}")

    prefs = PrefsStore(get_settings().prefs_path).load()
    names = PlayerNames(
        p1=args.p1 or (prefs.name if prefs else "You"),
        p2=args.p2 or "Friend",
    )
    session = SessionManager(store).create_session(names)

    print("Enter moves as: <cell 0-8> <photo path or URI>. Ctrl-D to quit.")
    try:
        while not session.match.ended:
            print()
            print(render_board(session.match.board))
            print(session.status_text)
            try:
                line = input("> ").strip()
            except EOFError:
                print("\nMatch abandoned.")
                return 1

            index, _, raw_ref = line.partition(" ")
            try:
                index = int(index)
            except ValueError:
                print("Cell must be a number from 0 to 8.")
                continue

            result = session.place_photo(index, _photo_ref(raw_ref.strip()))
            if not result.accepted:
                print(f"Move ignored ({result.rejection.value}).")
    finally:
        store.close()

    print()
    print(render_board(session.match.board))
    print(session.status_text)
    if session.saved_record:
        print(f"Saved to history as #{session.saved_record.id}.")
    else:
        print(f"Could not save to history: {session.save_error}")
    return 0


def cmd_history(args, history_parser):
    """Browse or prune match history."""
    from .engine_core import PlayerNames, winner_label
    from .storage import MatchStoreError, PrefsStore

    if not args.history_command:
        history_parser.print_help()
        sys.exit(1)

    prefs = PrefsStore(get_settings().prefs_path).load()
    names = PlayerNames(p1=prefs.name if prefs else "You")

    store = None
    try:
        store = _open_store(args)
        if args.history_command == "list":
            records, corrupt = store.list_readable()
            if not records and not corrupt:
                print("No matches yet.")
            for error in corrupt:
                print(
                    f"#{error.record_id}  (unreadable, delete with: "
                    f"pictac history delete {error.record_id})"
                )
            for record in records:
                played = datetime.fromtimestamp(record.created_at / 1000)
                print(
                    f"#{record.id}  {played:%Y-%m-%d %H:%M}  "
                    f"Winner: {winner_label(record.winner, names)} · Moves: {record.moves_count}"
                )
        elif args.history_command == "show":
            record = store.get(args.record_id)
            if not record:
                print(f"Error: No match #{args.record_id}")
                return 1
            print(f"Winner: {winner_label(record.winner, names)} · Moves: {record.moves_count}")
            print(render_board(record.board))
            for index, cell in enumerate(record.board):
                if cell:
                    print(f"  {index}: {cell.player.value} {cell.photo_ref}")
        elif args.history_command == "delete":
            removed = store.remove_by_id(args.record_id)
            print("Deleted." if removed else f"No match #{args.record_id}.")
        elif args.history_command == "clear":
            print(f"Deleted {store.clear()} match(es).")
    except MatchStoreError as e:
        print(f"Error: {e}")
        return 1
    finally:
        if store is not None:
            store.close()
    return 0


def cmd_gifs(args):
    """Search reaction GIFs."""
    from .reactions import GifLookup

    settings = get_settings()
    urls = GifLookup(settings.giphy_api_key, timeout=settings.giphy_timeout).search(
        " ".join(args.query)
    )
    if not urls:
        print("No GIF found. Try a different word like 'happy', 'salty', or 'crying'.")
        return 1
    for url in urls:
        print(url)
    return 0


if __name__ == "__main__":
    sys.exit(main())
