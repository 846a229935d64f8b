from __future__ import annotations

import os
import sys
import urllib.error
import urllib.request

EXPECTED_BODY = "Server is running"


def main() -> int:
    host = os.getenv("HEALTH_HOST", "127.0.0.1")
    port = os.getenv("PORT", "3000")
    url = f"http://{host}:{port}/api/health"
    try:
        with urllib.request.urlopen(url, timeout=2) as resp:  # nosec - local container
            body = resp.read().decode("utf-8", "replace").strip()
    except (urllib.error.URLError, OSError) as e:
        print(f"healthcheck: {url} unreachable: {e}", file=sys.stderr)
        return 1
    if body != EXPECTED_BODY:
        print(f"healthcheck: unexpected body {body[:80]!r}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
