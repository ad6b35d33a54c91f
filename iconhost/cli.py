"""Command line helper for the icon repository.

Usage:
  iconhost init                                  # create default category folders
  iconhost list                                  # list icons with their URLs
  iconhost url social github.svg                 # print the URL of one icon
  iconhost validate path/to/icon.svg             # check format and size limits
  iconhost examples social github.svg            # HTML/CSS usage snippets
  iconhost upload logo.png --category custom --custom-folder tech
  iconhost delete social github.svg
"""
import argparse
import os
import sys

from .core import deps
from .core.config import settings
from .core.errors import IconError
from .core.logger import configure_logging
from .icons.naming import split_extension
from .icons.pipeline import UploadRequest, delete_icon


def usage_examples(category: str, file_name: str) -> str:
    url = deps.url_builder()(category, file_name)
    base, ext = split_extension(file_name)
    lines = [
        f"## Usage Examples for {file_name}",
        "",
        f"**CDN URL:** `{url}`",
        "",
        "### HTML",
        "```html",
        f'<img src="{url}" alt="{base}">',
        "```",
    ]
    if ext == ".svg":
        lines += [
            "",
            "### CSS",
            "```css",
            ".icon {",
            f"    background-image: url('{url}');",
            "    background-size: contain;",
            "    background-repeat: no-repeat;",
            "}",
            "```",
        ]
    return "\n".join(lines)


def validate_file(path: str) -> None:
    _, ext = split_extension(path)
    if ext not in settings.supported_formats:
        raise IconError(
            "unsupported_format",
            f"Unsupported format: {ext or '(none)'}. Supported: {', '.join(settings.supported_formats)}",
        )
    size = os.path.getsize(path)
    if size > settings.max_file_size:
        raise IconError(
            "file_too_large",
            f"File too large: {size / (1024 * 1024):.2f}MB. Max: {settings.max_file_size / (1024 * 1024):g}MB",
        )


def cmd_init(args) -> int:
    created = deps.category_store().init_structure(settings.default_categories)
    for category in created:
        print(f"Created folder: {os.path.join(settings.icons_dir, category)}")
    print("Repository structure initialized.")
    return 0


def cmd_list(args) -> int:
    structure = deps.category_store().get_structure()
    url_for = deps.url_builder()
    for category, files in structure.items():
        if not files:
            continue
        print(f"\n{category.upper()} ({len(files)} icons):")
        for name in files:
            print(f"  {name} -> {url_for(category, name)}")
    return 0


def cmd_url(args) -> int:
    print(deps.url_builder()(args.category, args.file_name))
    return 0


def cmd_validate(args) -> int:
    validate_file(args.path)
    print(f"{args.path} is valid")
    return 0


def cmd_examples(args) -> int:
    print(usage_examples(args.category, args.file_name))
    return 0


def cmd_upload(args) -> int:
    with open(args.path, "rb") as fh:
        data = fh.read()
    result = deps.upload_pipeline().upload(
        UploadRequest(
            file_bytes=data,
            original_filename=os.path.basename(args.path),
            category=args.category,
            custom_folder=args.custom_folder,
            description=args.description or "",
            compress=not args.no_compress,
            custom_name=args.name,
        )
    )
    print(f"Stored {result.category}/{result.file_name} ({result.original_size} -> {result.compressed_size} bytes)")
    print(result.url)
    deps.github_mirror().notify("upload", result.file_name, result.category)
    return 0


def cmd_delete(args) -> int:
    result = delete_icon(deps.category_store(), args.file_name, args.category)
    print(result.message)
    deps.github_mirror().notify("delete", args.file_name, args.category)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="iconhost", description="Manage the icon repository")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Initialize folder structure").set_defaults(func=cmd_init)
    sub.add_parser("list", help="List all current icons").set_defaults(func=cmd_list)

    p = sub.add_parser("url", help="Generate the URL for an icon")
    p.add_argument("category")
    p.add_argument("file_name")
    p.set_defaults(func=cmd_url)

    p = sub.add_parser("validate", help="Validate an icon file")
    p.add_argument("path")
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("examples", help="Generate usage examples")
    p.add_argument("category")
    p.add_argument("file_name")
    p.set_defaults(func=cmd_examples)

    p = sub.add_parser("upload", help="Add a local file to the repository")
    p.add_argument("path")
    p.add_argument("--category", required=True)
    p.add_argument("--custom-folder")
    p.add_argument("--name", help="File name to store under (extension is kept)")
    p.add_argument("--description")
    p.add_argument("--no-compress", action="store_true", help="Store raster files as-is")
    p.set_defaults(func=cmd_upload)

    p = sub.add_parser("delete", help="Remove an icon")
    p.add_argument("category")
    p.add_argument("file_name")
    p.set_defaults(func=cmd_delete)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings.log_level)
    try:
        return args.func(args)
    except (IconError, OSError) as e:
        message = getattr(e, "detail", None) or str(e)
        print(f"error: {message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
