"""
Command line access to the central storage server.

Usage:
    python -m centralstorage upload photo.jpg --attribute context=profile
    python -m centralstorage delete <asset-key>
    python -m centralstorage url <asset-key> --property width=200
    python -m centralstorage public-url https://example.com/logo.png
    python -m centralstorage sign foo=wololo bar=awlololo

Settings come from CENTRALSTORAGE_* environment variables or .env.
"""
import argparse
import sys
from typing import Dict, List, Optional

from dotenv import load_dotenv

from centralstorage.client import CentralStorageClient, StorageServerException
from centralstorage.core.assets.models import Asset
from centralstorage.core.config import get_settings


def _parse_pairs(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Turn ["a=1", "b=2"] into {"a": "1", "b": "2"}."""
    result = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise argparse.ArgumentTypeError(f"Expected name=value, got '{pair}'")
        result[name] = value
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="centralstorage",
        description="Upload, delete and link assets on a central storage server",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    upload = subparsers.add_parser("upload", help="Upload a file")
    upload.add_argument("file", help="Path of the file to upload")
    upload.add_argument("--attribute", action="append", metavar="NAME=VALUE",
                        help="Attribute stored with the asset (repeatable)")

    delete = subparsers.add_parser("delete", help="Delete an asset")
    delete.add_argument("key", help="Asset key")

    url = subparsers.add_parser("url", help="Print the URL of an asset")
    url.add_argument("key", help="Asset key")
    url.add_argument("--property", action="append", metavar="NAME=VALUE",
                     help="Query property for the asset fetch (repeatable)")

    public_url = subparsers.add_parser("public-url", help="Print a signed proxy URL for a public resource")
    public_url.add_argument("url", help="Public URL to proxy")
    public_url.add_argument("--property", action="append", metavar="NAME=VALUE",
                            help="Query property for the proxied fetch (repeatable)")

    sign = subparsers.add_parser("sign", help="Print the signature token for parameters")
    sign.add_argument("parameters", nargs="*", metavar="NAME=VALUE")

    return parser


def main(argv: Optional[List[str]] = None, client: Optional[CentralStorageClient] = None) -> int:
    """Entry point; returns the process exit status."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    settings.configure_logging()

    try:
        attributes = _parse_pairs(getattr(args, "attribute", None))
        properties = _parse_pairs(getattr(args, "property", None))
        parameters = _parse_pairs(getattr(args, "parameters", None))
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    owns_client = client is None
    client = client or CentralStorageClient.from_settings(settings)

    try:
        if args.command == "upload":
            asset = client.store(args.file, attributes)
            if asset is None:
                print("Server stored nothing")
                return 1
            print(f"{asset.key}\t{asset.mimetype}\t{asset.size}")
            print(client.get_asset_url(asset))
        elif args.command == "delete":
            success = client.delete_asset(Asset(key=args.key))
            print("deleted" if success else "not deleted")
            return 0 if success else 1
        elif args.command == "url":
            print(client.get_asset_url(Asset(key=args.key), properties))
        elif args.command == "public-url":
            print(client.get_public_asset_url(args.url, properties))
        elif args.command == "sign":
            signature = client.sign_parameters(parameters)
            if signature is None:
                print(f"Unsupported algorithm: {settings.algorithm}")
                return 1
            print(signature)
    except StorageServerException as e:
        print(f"ERROR: {e}")
        if e.response:
            print(e.response)
        return 1
    finally:
        if owns_client:
            client.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
