# connects terminal input (place name, candidate number, "me") to the app and prints each new state

from __future__ import annotations
import argparse
from typing import Callable, List, Optional
from .config import Settings, setup_logging
from .render import render
from .service import WeatherApp

PROMPT = "Search city (e.g., Warangal, London), number to pick, 'me' for your location, 'q' to quit: "

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weathernow",
        description="Current weather and a 3-day forecast from Open-Meteo (no API key).",
    )
    parser.add_argument("query", nargs="?", help="place name to search for")
    parser.add_argument("--me", action="store_true", help="start with the weather at your location")
    parser.add_argument("--once", action="store_true", help="print the result and exit")
    parser.add_argument("--no-ip-location", action="store_true",
                        help="disable the IP-based location lookup")
    parser.add_argument("--log-level", help="override WEATHERNOW_LOG_LEVEL")
    return parser

def handle(app: WeatherApp, line: str) -> Optional[str]:
    # returns a message for input that did not map to an action
    command = line.strip()
    if command.lower() == "me":
        app.use_my_location()
        return None
    if command.isdigit():
        candidates = app.snapshot().candidates
        if candidates:
            idx = int(command) - 1
            if not 0 <= idx < len(candidates):
                return f"Pick a number between 1 and {len(candidates)}."
            app.select_location(candidates[idx])
            return None
    app.search(command)
    return None

def run(
    app: WeatherApp,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    while True:
        try:
            line = read(PROMPT)
        except EOFError:
            break
        if not line.strip() or line.strip().lower() in ("q", "quit"):
            break
        message = handle(app, line)
        write(message if message else render(app.snapshot()))

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    setup_logging(args.log_level or settings.log_level)

    # inline execution: the terminal waits for each answer anyway
    app = WeatherApp.from_settings(settings, use_ip_location=not args.no_ip_location)

    if args.me:
        app.use_my_location()
        print(render(app.snapshot()))
    elif args.query:
        app.search(args.query)
        print(render(app.snapshot()))

    if not args.once:
        run(app)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
