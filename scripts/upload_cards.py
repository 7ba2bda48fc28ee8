import argparse
import asyncio
import os
import sys
from pathlib import Path

import httpx

from cardshop.client.api import CardsAdminClient, CardsApiError
from cardshop.client.uploader import (
    UPLOAD_BATCH_SIZE,
    CardUploadCoordinator,
    NoCardsFoundError,
    UploadProgress,
)


def print_progress(event: UploadProgress) -> None:
    print(
        f"\r{event.processed}/{event.total} ({event.percent}%) "
        f"batch {event.batch_index + 1}/{event.batch_count}",
        end="",
        flush=True,
    )


async def upload_file(base_url: str, token: str, product_id: str, path: Path, batch_size: int) -> int:
    async with CardsAdminClient(base_url, token) as client:
        coordinator = CardUploadCoordinator(client.add_cards_batch, batch_size=batch_size)
        coordinator.subscribe(print_progress)
        try:
            return await coordinator.upload_file(product_id, path)
        finally:
            print()


def main() -> int:
    parser = argparse.ArgumentParser(description="Upload a file of card keys (one per line) to a product.")
    parser.add_argument("product_id", help="Product that receives the keys.")
    parser.add_argument("file", type=Path, help="Text file with one key per line.")
    parser.add_argument("--base-url", default=os.getenv("CARDSHOP_API_URL", "http://localhost:8000"))
    parser.add_argument("--token", default=os.getenv("CARDSHOP_ADMIN_TOKEN"), help="Admin bearer token.")
    parser.add_argument("--batch-size", type=int, default=UPLOAD_BATCH_SIZE)
    args = parser.parse_args()

    if not args.token:
        print("Missing admin token (--token or CARDSHOP_ADMIN_TOKEN).", file=sys.stderr)
        return 2

    path = args.file.expanduser().resolve()
    try:
        count = asyncio.run(upload_file(args.base_url, args.token, args.product_id, path, args.batch_size))
    except NoCardsFoundError:
        print("No cards found in file.", file=sys.stderr)
        return 1
    except CardsApiError as exc:
        print(f"Upload failed: {exc.detail} (HTTP {exc.status_code})", file=sys.stderr)
        return 1
    except httpx.HTTPError as exc:
        print(f"Upload failed: could not reach {args.base_url} ({exc})", file=sys.stderr)
        return 1
    except UnicodeDecodeError:
        print("Key file must be UTF-8 text.", file=sys.stderr)
        return 1
    print(f"Uploaded {count} cards.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
