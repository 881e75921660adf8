"""Command line demo: print a symbol (or a protected set) for a payload."""

import argparse
import logging
import sys
from typing import List, Optional

from qrshield.encoder import encode
from qrshield.exceptions import QRError
from qrshield.logging_config import setup_logging
from qrshield.protection import ProtectionLevel, ProtectionParams, ProtectionRotator
from qrshield.render import save_png, to_string


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qrshield", description=__doc__)
    parser.add_argument("payload", help="text to encode")
    parser.add_argument("--level", default="Q", choices=["L", "M", "Q", "H"],
                        help="error correction level (default: Q)")
    parser.add_argument("--mask", type=int, default=None,
                        help="mask pattern 0-7 (default: lowest penalty)")
    parser.add_argument("--protection", default=None,
                        choices=[level.name.lower() for level in ProtectionLevel
                                 if level != ProtectionLevel.CUSTOM],
                        help="build a protected variation set with this preset")
    parser.add_argument("--variations", type=int, default=None,
                        help="number of protected variations (1-8)")
    parser.add_argument("--seed", type=int, default=None, help="seed for module noise")
    parser.add_argument("--png", default=None,
                        help="save PNG here; with protection, one file per variation")
    parser.add_argument("--border", type=int, default=2, help="quiet zone in modules")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _png_name(path: str, index: int) -> str:
    stem, dot, ext = path.rpartition(".")
    if not dot:
        return f"{path}-{index}"
    return f"{stem}-{index}.{ext}"


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.protection is None:
            symbol = encode(args.payload, args.level, args.mask)
            print(f"Version {symbol.version}-{symbol.ec_level.name}, mask {symbol.mask_id}")
            print(to_string(symbol, border=args.border))
            if args.png:
                save_png(symbol, args.png)
            return 0

        params = ProtectionParams.for_level(ProtectionLevel[args.protection.upper()])
        rotator = ProtectionRotator(params, seed=args.seed)
        variations = rotator.generate_variations(args.payload, args.level, args.variations)
        for index, symbol in enumerate(variations):
            print(f"Variation {index}: version {symbol.version}-{symbol.ec_level.name}, "
                  f"mask {symbol.mask_id}")
            print(to_string(symbol, border=args.border))
            if args.png:
                save_png(symbol, _png_name(args.png, index))
        return 0
    except QRError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
