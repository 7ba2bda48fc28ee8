import argparse
import sys

from cardshop.db import settings
from cardshop.security import create_admin_token


def main() -> int:
    parser = argparse.ArgumentParser(description="Issue a bearer token for an admin handle.")
    parser.add_argument("username", help="Handle listed in ADMIN_USERS.")
    parser.add_argument("--minutes", type=int, default=None, help="Token lifetime in minutes.")
    args = parser.parse_args()

    if args.username.strip().lower() not in settings.ADMIN_HANDLES:
        print(f"Warning: {args.username} is not in ADMIN_USERS; the API will reject this token.", file=sys.stderr)
    print(create_admin_token(args.username.strip(), expires_minutes=args.minutes))
    return 0


if __name__ == "__main__":
    sys.exit(main())
