import argparse
import logging
import sys
from pathlib import Path

from src.agent.orchestrator import build_model_for_html, build_model_for_url_blocking
from src.agent.profiles import get_profile_registry
from src.config import settings


def main():
    parser = argparse.ArgumentParser(description="Catalogue the interactive elements of a page")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--url", help="Page to open in a headless browser")
    source.add_argument("--html-file", help="Static HTML file to parse instead of a live page")
    parser.add_argument("--selector", default=None, help=f"Root element selector (default: {settings.root_selector})")
    parser.add_argument("--profile", default=None, help=f"Locator profile (default: {settings.active_profile})")
    parser.add_argument("--list-profiles", action="store_true", help="Print the known profiles and exit")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s %(message)s")

    registry = get_profile_registry()
    if args.list_profiles:
        for name in registry.names():
            profile = registry.require(name)
            print(f"{name}: {', '.join(profile.locators)}")
        return 0

    if args.url:
        model = build_model_for_url_blocking(args.url, root_selector=args.selector, profile=args.profile, profiles=registry)
    elif args.html_file:
        html = Path(args.html_file).read_text(encoding="utf-8")
        model = build_model_for_html(html, root_selector=args.selector, profile=args.profile, profiles=registry)
    else:
        parser.error("one of --url or --html-file is required")

    if model is None:
        print("No interactive elements found")
        return 1

    for entity in model.entities:
        selected = entity.selected_locator
        print(f"{entity.name:<24} {entity.tag_name:<9} {entity.type:<12} {selected.name}={selected.locator}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
