#!/usr/bin/env python3
"""Request planning tool for modbatch.

Reads a JSON description of the values an application wants to read and
prints the Modbus read requests the splitter would issue for them. Useful
to check how a register map batches before pointing a poller at a device.

Input document (a single object or a list of them):

    {
        "uri": "tcp://192.168.1.100:502",
        "unit_id": 1,
        "kind": "holding",
        "addresses": [
            {"address": 0, "type": "uint16", "name": "status"},
            {"address": 1, "type": "int32", "name": "power"},
            {"address": 10, "type": "byte", "first_byte": false, "name": "mode"}
        ]
    }

Usage:
    modbatch-plan registers.json
    modbatch-plan registers.json --json --max-registers 60
    cat registers.json | modbatch-plan -
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from modbatch import __version__
from modbatch.composer.builder import builder_for_kind, row_int
from modbatch.composer.requests import ReadRequest, RequestKind
from modbatch.config import SplitterConfig
from modbatch.exceptions import ConfigurationError, ModbatchError

_LOGGER = logging.getLogger(__name__)

KIND_NAMES: dict[str, RequestKind] = {
    "coils": RequestKind.READ_COILS,
    "discrete_inputs": RequestKind.READ_DISCRETE_INPUTS,
    "holding": RequestKind.READ_HOLDING_REGISTERS,
    "input": RequestKind.READ_INPUT_REGISTERS,
}

EXIT_OK = 0
EXIT_INVALID_INPUT = 2


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="modbatch-plan",
        description="Show the Modbus read requests planned for a set of addresses.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  modbatch-plan registers.json
      Print planned requests as a table

  modbatch-plan registers.json --json
      Print planned requests as JSON

  modbatch-plan registers.json --max-registers 60 --max-gap 4
      Plan for a gateway limited to 60 registers, splitting on holes > 4
""",
    )
    parser.add_argument(
        "input",
        help="JSON file with address definitions ('-' for stdin)",
    )

    limits_group = parser.add_argument_group("Limit Options")
    limits_group.add_argument(
        "--max-registers",
        type=int,
        default=None,
        help="Registers per FC3/FC4 request (default: 124)",
    )
    limits_group.add_argument(
        "--max-coils",
        type=int,
        default=None,
        help="Coils per FC1/FC2 request (default: 2048)",
    )
    limits_group.add_argument(
        "--max-gap",
        type=int,
        default=None,
        help="Split requests on holes wider than this (default: never)",
    )

    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "--json",
        action="store_true",
        help="Print requests as JSON",
    )
    output_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> SplitterConfig:
    """Build SplitterConfig from command line limits."""
    data: dict[str, Any] = {"max_gap": args.max_gap}
    if args.max_registers is not None:
        data["max_registers_per_request"] = args.max_registers
    if args.max_coils is not None:
        data["max_coils_per_request"] = args.max_coils
    return SplitterConfig.from_dict(data)


def load_documents(source: str) -> list[dict[str, Any]]:
    """Load address documents from a file path or stdin.

    Raises:
        ConfigurationError: If the input is not valid JSON or has the wrong shape
    """
    try:
        text = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigurationError(f"Cannot read {source}: {err}") from err

    try:
        data = json.loads(text)
    except json.JSONDecodeError as err:
        raise ConfigurationError(f"Invalid JSON in {source}: {err}") from err

    documents = data if isinstance(data, list) else [data]
    for doc in documents:
        if not isinstance(doc, dict):
            raise ConfigurationError(f"Expected an object per endpoint, got {type(doc).__name__}")
    return documents


def plan_requests(
    documents: Sequence[dict[str, Any]],
    config: SplitterConfig,
) -> list[ReadRequest]:
    """Split every document into requests, in document order."""
    requests: list[ReadRequest] = []
    for doc in documents:
        kind_name = doc.get("kind", "holding")
        if kind_name not in KIND_NAMES:
            raise ConfigurationError(
                f"Unknown kind '{kind_name}', expected one of: {', '.join(sorted(KIND_NAMES))}"
            )
        if "uri" not in doc:
            raise ConfigurationError("Endpoint document has no 'uri'")

        builder = builder_for_kind(KIND_NAMES[kind_name], config)
        builder.endpoint(doc["uri"], row_int(doc, "unit_id", 1))
        builder.from_dicts(doc.get("addresses", []))
        planned = builder.build()
        _LOGGER.debug("Planned %d %s requests for %s", len(planned), kind_name, doc["uri"])
        requests.extend(planned)
    return requests


def request_to_dict(request: ReadRequest) -> dict[str, Any]:
    """Convert a request to a JSON-serializable dictionary."""
    return {
        "kind": request.kind.name.lower(),
        "function_code": int(request.kind),
        "uri": request.uri,
        "unit_id": request.unit_id,
        "start_address": request.start_address,
        "quantity": request.quantity,
        "addresses": [
            {
                "address": addr.address,
                "size": addr.size,
                "name": getattr(addr, "name", None),
            }
            for addr in request.addresses
        ],
    }


def format_table(requests: Sequence[ReadRequest]) -> str:
    """Format requests as a plain text table."""
    header = f"{'FC':>2}  {'URI':<32} {'UNIT':>4} {'START':>6} {'QTY':>5} {'VALUES':>6}"
    lines = [header, "-" * len(header)]
    for request in requests:
        lines.append(
            f"{int(request.kind):>2}  {request.uri:<32} {request.unit_id:>4} "
            f"{request.start_address:>6} {request.quantity:>5} {len(request.addresses):>6}"
        )
    lines.append(f"{len(requests)} requests")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for modbatch-plan."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
        requests = plan_requests(load_documents(args.input), config)
    except ModbatchError as err:
        _LOGGER.debug("Planning failed", exc_info=True)
        print(f"Error: {err}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    if args.json:
        print(json.dumps([request_to_dict(r) for r in requests], indent=2))
    else:
        print(format_table(requests))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
