"""Send a single request through Courier and print the decoded JSON.

Usage:
    courier https://api.example.com/ users/42
    courier https://api.example.com/ search -q "term=hello world" -q page=2
    courier https://api.example.com/ items -X POST -d '{"name": "x"}'
    courier https://api.example.com/ upload -X POST -F title=hello -F file=@photo.png
    courier https://api.example.com/ items/5 -X DELETE
    python -m courier ...   # same thing
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .client import Courier
from .errors import CourierConfigurationError, CourierError
from .form import CourierFormData

METHODS = ("GET", "POST", "PATCH", "DELETE")


def _split_pair(raw: str, sep: str, option: str) -> Tuple[str, str]:
    key, found, value = raw.partition(sep)
    if not found or not key:
        raise argparse.ArgumentTypeError(f"{option} expects NAME{sep}VALUE, got {raw!r}")
    return key.strip(), value.strip() if sep == ":" else value


def _build_form(fields: List[str]) -> CourierFormData:
    form = CourierFormData()
    for raw in fields:
        name, value = _split_pair(raw, "=", "-F")
        if value.startswith("@"):
            form.add_data_field(name, Path(value[1:]).read_bytes())
        else:
            form.add_text_field(name, value)
    return form


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="courier",
        description="Send one HTTP request and print the JSON response.",
    )
    parser.add_argument("base_url", help="Base URL, including scheme and trailing slash")
    parser.add_argument("path", help="Path appended to the base URL")
    parser.add_argument("-X", "--method", default="GET", type=str.upper, choices=METHODS)
    parser.add_argument("-H", "--header", action="append", default=[], metavar="NAME:VALUE")
    parser.add_argument("-q", "--query", action="append", default=[], metavar="KEY=VALUE",
                        help="Query parameter (GET only)")
    parser.add_argument("-d", "--data", help="Raw request body (POST/PATCH)")
    parser.add_argument("-F", "--form", action="append", default=[], metavar="NAME=VALUE",
                        help="Multipart field; NAME=@FILE attaches file contents (POST only)")
    return parser


def run(args: argparse.Namespace) -> Tuple[Optional[Any], Optional[BaseException]]:
    headers: Dict[str, str] = dict(_split_pair(h, ":", "-H") for h in args.header)
    queries: Dict[str, str] = dict(_split_pair(q, "=", "-q") for q in args.query)
    body = args.data.encode("utf-8") if args.data is not None else None

    with Courier(args.base_url) as client:
        if args.method == "GET":
            future = client.get(args.path, Any, headers=headers, queries=queries)
        elif args.method == "POST" and args.form:
            future = client.post_form(args.path, Any, _build_form(args.form), headers=headers)
        elif args.method == "POST":
            future = client.post(args.path, Any, headers=headers, body=body)
        elif args.method == "PATCH":
            future = client.patch(args.path, Any, body or b"", headers=headers)
        else:
            return None, client.delete(args.path, headers=headers).result()
        return future.result()


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.form and args.method != "POST":
        parser.error("-F/--form is only valid with -X POST")
    if args.form and args.data is not None:
        parser.error("-F/--form and -d/--data are mutually exclusive")

    try:
        result, error = run(args)
    except CourierConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(2)
    except (argparse.ArgumentTypeError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    if isinstance(error, CourierError):
        print(f"ERROR: {error.message} (status {error.status_code})", file=sys.stderr)
        if error.data:
            print(error.data.decode("utf-8", errors="replace")[:4000], file=sys.stderr)
        sys.exit(1)
    if error is not None:
        print(f"ERROR: {type(error).__name__}: {error}", file=sys.stderr)
        sys.exit(1)

    if result is not None:
        print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
