"""Send one SMS through the Callr API.

    CALLR_API_KEY=yourapikey python samples/quickstart.py +15559820800

Credentials come from the environment (or a ``.env`` file in the
current directory): ``CALLR_API_KEY``, or ``CALLR_LOGIN`` and
``CALLR_PASSWORD``.  ``CALLR_PROXY`` is optional.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import anyio
from dotenv import load_dotenv

from callr_sdk import Api, CallrError, HTTPStatusError, RemoteError, TransportError

load_dotenv(os.path.join(Path.cwd(), ".env"))


def build_api(args: argparse.Namespace) -> Api | None:
    options = {}
    if args.proxy:
        options["proxy"] = args.proxy
    if args.url:
        options["urls"] = args.url

    api_key = os.getenv("CALLR_API_KEY")
    if api_key:
        return Api.with_api_key(api_key, **options)
    login, password = os.getenv("CALLR_LOGIN"), os.getenv("CALLR_PASSWORD")
    if login and password:
        return Api.with_basic_auth(login, password, **options)
    return None


async def main() -> int:
    parser = argparse.ArgumentParser(description="Callr SMS quickstart")
    parser.add_argument("destination", help="Destination phone number, e.g. +15559820800")
    parser.add_argument("--message", type=str, default="Hello, world", help="SMS body")
    parser.add_argument(
        "--url",
        action="append",
        default=None,
        help="API endpoint URL (repeat for failover)",
    )
    parser.add_argument("--proxy", type=str, default=os.getenv("CALLR_PROXY"), help="Proxy URL")
    parser.add_argument(
        "--login-as-ref",
        type=str,
        default=None,
        help="Act as the sub-account with this ref",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger("quickstart")

    try:
        api = build_api(args)
    except CallrError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    if api is None:
        logger.error("Please set CALLR_API_KEY, or CALLR_LOGIN and CALLR_PASSWORD!")
        return 1

    async with api:
        if args.login_as_ref:
            api.set_login_as_sub_account_ref(args.login_as_ref)
        try:
            sms_hash = await api.call("sms.send", "SMS", args.destination, args.message, None)
        except RemoteError as exc:
            logger.error("JSON-RPC error: code=%s message=%s data=%s", exc.code, exc.message, exc.data)
            return 1
        except HTTPStatusError as exc:
            logger.error("HTTP error: code=%s message=%s", exc.code, exc.message)
            return 1
        except TransportError as exc:
            logger.error("Transport error: %s", exc)
            return 1
        except CallrError as exc:
            logger.error("Other error: %s", exc)
            return 1

    logger.info("SMS sent, hash=%s", sms_hash)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(anyio.run(main))
    except KeyboardInterrupt:
        pass
