#!/usr/bin/env python3
"""
Encode, inspect and execute arbitrage requests.

Usage:
  # Encode the request section of a config file and print the hex payload
  arb-encoder encode --config configs/mainnet_fork.yaml

  # Decode a hex payload (from logs or a transaction input) for inspection
  arb-encoder decode 0x0000...c9dc --strict

  # Dry run: log every step without sending transactions
  arb-encoder execute --config configs/mainnet_fork.yaml --dry-run

  # Live execution (requires a funded signing key)
  export WALLET_PRIVATE_KEY="0x..."
  arb-encoder execute --config configs/mainnet_fork.yaml

Environment Variables:
  ETH_PROVIDER_URL: RPC endpoint (name configurable via rpc_url_env)
  WALLET_PRIVATE_KEY: Signing key (name configurable via private_key_env)
  ARBITRAGE_CONTRACT_ADDRESS, IWETH_CONTRACT_ADDRESS, IUSDC_CONTRACT_ADDRESS,
  OWNER_ADDRESS: Override the matching config entries
"""

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from . import logging_config
from .codec import decode, describe, encode_hex
from .config_loader import load_config, load_request
from .exceptions import CodecError, ConfigurationError, EncoderError
from .executor import ArbitrageExecutor
from .utils import get_logger

logger = get_logger(__name__, minimal=True)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="arb-encoder",
        description="Arbitrage request encoder and executor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    encode_parser = subparsers.add_parser("encode", help="Encode a configured request")
    encode_parser.add_argument("--config", "-c", required=True, help="Path to config YAML")
    encode_parser.add_argument(
        "--describe", action="store_true", help="Also print the decoded field summary"
    )

    decode_parser = subparsers.add_parser("decode", help="Decode a hex payload")
    decode_parser.add_argument("payload", help="0x-prefixed hex payload")
    decode_parser.add_argument(
        "--strict", action="store_true", help="Reject reserved hop header bits"
    )
    decode_parser.add_argument("--json", action="store_true", help="Output as JSON")

    execute_parser = subparsers.add_parser("execute", help="Approve tokens and execute")
    execute_parser.add_argument("--config", "-c", required=True, help="Path to config YAML")
    execute_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Paper mode: log each step without connecting or sending transactions",
    )

    return parser.parse_args(argv)


def cmd_encode(args) -> int:
    request = load_request(args.config)
    print(encode_hex(request))
    if args.describe:
        for line in describe(request):
            print(line)
    return 0


def cmd_decode(args) -> int:
    request = decode(args.payload, strict=args.strict)
    if args.json:
        data = {
            "input_amount": str(request.input_amount),
            "min_profit": str(request.min_profit),
            "hops": [
                {
                    "pool_kind": hop.pool_kind.label,
                    "sell_side": hop.sell_side.label,
                    "pool_address": hop.checksum_address,
                }
                for hop in request.hops
            ],
        }
        print(json.dumps(data, indent=2))
    else:
        for line in describe(request):
            print(line)
    return 0


def cmd_execute(args) -> int:
    config = load_config(args.config, paper_mode=args.dry_run)
    executor = ArbitrageExecutor(config, paper_mode=args.dry_run)
    result = executor.run()
    print(json.dumps(result, indent=2, default=str))
    return 0


COMMANDS = {"encode": cmd_encode, "decode": cmd_decode, "execute": cmd_execute}


def main(argv=None) -> int:
    """Main CLI entry point"""
    args = parse_args(argv)
    load_dotenv()
    if args.verbose:
        logging_config.setup_debug()
    else:
        logging_config.setup(logging.INFO)

    try:
        return COMMANDS[args.command](args)
    except (CodecError, ConfigurationError) as e:
        logger.error(f"❌ {type(e).__name__}: {e}")
        return 2
    except EncoderError as e:
        logger.error(f"❌ Execution failed: {type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
