"""Command line interface for building and checking stickers."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path

from .config import get_settings
from .converters import REGISTRY, load_converters_from_settings
from .errors import StickerError
from .exif import extract_metadata
from .limits import WHATSAPP_LIMITS
from .logging import configure_logging
from .models import StickerMetadata, StickerType
from .sticker import Sticker
from .validation import ComplianceValidator, generate_report


def _add_metadata_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--pack", default="", help="Sticker pack title")
    parser.add_argument("--author", default="", help="Sticker pack publisher")
    parser.add_argument("--id", dest="sticker_id", default=None, help="Sticker pack id")
    parser.add_argument(
        "--category",
        dest="categories",
        action="append",
        default=[],
        help="Emoji category; repeat for up to three",
    )


def handle_build(args: argparse.Namespace) -> int:
    settings = get_settings()
    sticker = Sticker(
        args.input,
        pack=args.pack,
        author=args.author,
        id=args.sticker_id,
        categories=args.categories,
        type=args.type,
        quality=args.quality,
        background=args.background or (0, 0, 0, 0),
        settings=settings,
    )
    try:
        output = sticker.to_file(args.output)
    except StickerError as exc:
        raise SystemExit(f"Failed to build sticker: {exc}")

    print(f"Saved sticker to {output} ({output.stat().st_size / 1024:.1f}KB)")
    result = sticker.last_result
    if result is not None and result.transcode is not None and not result.transcode.within_target:
        print("Warning: animated output is over the target size")

    if args.validate:
        report = ComplianceValidator().validate(output.read_bytes(), sticker.metadata)
        print(generate_report(report))
        return 0 if report.is_valid else 1
    return 0


def handle_validate(args: argparse.Namespace) -> int:
    path = Path(args.file)
    if not path.is_file():
        raise SystemExit(f"File not found: {path}")
    metadata = StickerMetadata(
        pack=args.pack, author=args.author, id=args.sticker_id or "", categories=tuple(args.categories)
    )
    report = ComplianceValidator().validate(path.read_bytes(), metadata)
    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(generate_report(report))
    return 0 if report.is_valid else 1


def handle_extract(args: argparse.Namespace) -> int:
    path = Path(args.file)
    if not path.is_file():
        raise SystemExit(f"File not found: {path}")
    print(json.dumps(extract_metadata(path.read_bytes()), ensure_ascii=False, indent=2))
    return 0


def handle_limits(args: argparse.Namespace) -> int:
    for name, value in asdict(WHATSAPP_LIMITS).items():
        print(f"{name}: {value}")
    return 0


def handle_converters(args: argparse.Namespace) -> int:
    settings = get_settings()
    load_converters_from_settings(settings)
    if not REGISTRY.kinds():
        print("No converters registered. Check converter_modules in the settings file.")
        return 0

    for converter in REGISTRY.list(settings=settings):
        info = converter.describe()
        print(f"{info['slug']}: {info['source']} -> {info['target']}")
    return 0


def handle_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("wa_sticker.app:create_app", factory=True, host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build and check WhatsApp stickers.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser_ = subparsers.add_parser("build", help="Convert an image, GIF or video into a sticker")
    build_parser_.add_argument("input", help="File path, http(s) URL or inline SVG")
    build_parser_.add_argument("-o", "--output", default=None, help="Output path (default: ./<pack>-<author>.webp)")
    _add_metadata_arguments(build_parser_)
    build_parser_.add_argument("--type", choices=[t.value for t in StickerType], default=None)
    build_parser_.add_argument("--quality", type=int, default=None, help="WebP quality for still images")
    build_parser_.add_argument("--background", default=None, help="Background colour for --type full")
    build_parser_.add_argument("--validate", action="store_true", help="Print a compliance report")
    build_parser_.set_defaults(func=handle_build)

    validate_parser = subparsers.add_parser("validate", help="Check a sticker against WhatsApp limits")
    validate_parser.add_argument("file", help="Path to a WebP sticker")
    _add_metadata_arguments(validate_parser)
    validate_parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    validate_parser.set_defaults(func=handle_validate)

    extract_parser = subparsers.add_parser("extract", help="Print the metadata embedded in a sticker")
    extract_parser.add_argument("file", help="Path to a WebP sticker")
    extract_parser.set_defaults(func=handle_extract)

    limits_parser = subparsers.add_parser("limits", help="List platform limits")
    limits_parser.set_defaults(func=handle_limits)

    converters_parser = subparsers.add_parser("converters", help="List the registered converters")
    converters_parser.set_defaults(func=handle_converters)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8080)
    serve_parser.add_argument("--reload", action="store_true")
    serve_parser.set_defaults(func=handle_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(get_settings().logging, to_file=False)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
