"""Mantle CLI - Command-line interface for manifest conversion.

This module provides the main CLI entrypoint for Mantle, allowing users
to initialize a config file and re-version kube manifests through the
shorthand form from the command line.
"""

import argparse
import logging
import sys
from pathlib import Path

from mantle.core.config import DEFAULT_CONFIG_PATH, get_config_value, load_config, write_default_config
from mantle.core.errors import ConversionError
from mantle.k8s.deployment import from_kube_deployment, to_kube_deployment
from mantle.k8s.namespace import from_kube_namespace, to_kube_namespace
from mantle.k8s.replicaset import from_kube_replica_set, to_kube_replica_set
from mantle.k8s.secret import from_kube_secret, to_kube_secret
from mantle.k8s.serializer import YamlSerializer

logger = logging.getLogger(__name__)

# kind -> (from_kube, to_kube)
CONVERTERS = {
    "Deployment": (from_kube_deployment, to_kube_deployment),
    "ReplicaSet": (from_kube_replica_set, to_kube_replica_set),
    "Namespace": (from_kube_namespace, to_kube_namespace),
    "Secret": (from_kube_secret, to_kube_secret),
}


def main(argv=None):
    """Main CLI entrypoint for Mantle."""
    parser = argparse.ArgumentParser(
        prog="mantle",
        description="Mantle - lossless Kubernetes manifest conversion",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Write a starter config.json
  mantle init

  # Re-version a Deployment through the shorthand form
  mantle convert deployment.yaml --out converted/ --to-version apps/v1beta2

  # Use the per-kind default version from config.json
  mantle convert namespace.yaml --out converted/ --config config.json
"""
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Init command
    init_parser = subparsers.add_parser(
        "init",
        help="Write a starter config.json"
    )
    init_parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to config file (default: config.json)"
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file"
    )

    # Convert command
    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a kube manifest through the shorthand form"
    )
    convert_parser.add_argument(
        "input",
        help="Path to input manifest (single YAML document)"
    )
    convert_parser.add_argument(
        "--out",
        required=True,
        help="Output directory for the converted manifest"
    )
    convert_parser.add_argument(
        "--to-version",
        default=None,
        help="Target apiVersion (default: from config.json, else the input's own)"
    )
    convert_parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to config file (default: config.json)"
    )
    convert_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args(argv)

    # Setup logging
    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s: %(message)s')
    else:
        logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')

    # Handle commands
    if args.command == "init":
        return cmd_init(args)
    elif args.command == "convert":
        return cmd_convert(args)
    else:
        parser.print_help()
        return 1


def cmd_init(args):
    """Handle init command."""
    if write_default_config(args.config, force=args.force):
        print(f"Wrote {args.config}")
        return 0
    print(f"Error: {args.config} already exists (use --force to overwrite)", file=sys.stderr)
    return 1


def cmd_convert(args):
    """Handle convert command."""
    input_path = Path(args.input)
    output_dir = Path(args.out)

    # Validate input
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    serializer = YamlSerializer()
    config = load_config(args.config)

    try:
        kube_obj = serializer.unmarshal(input_path.read_bytes(), "")
        kind = kube_obj.kind
        if kind not in CONVERTERS:
            print(f"Error: Unsupported kind: {kind}", file=sys.stderr)
            return 1
        from_kube, to_kube = CONVERTERS[kind]

        manifest = from_kube(kube_obj)

        # CLI flag, then config.json, then the input's own version
        version = args.to_version
        if version is None:
            version = get_config_value(["convert", "versions", kind], default=None, config=config)
        if version is not None:
            manifest.identity.version = version

        converted = to_kube(manifest, serializer=serializer)

        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / input_path.name
        output_path.write_bytes(serializer.marshal(converted))

        print(f"Converted {kind} {manifest.identity.name or '<unnamed>'}: "
              f"{kube_obj.api_version} -> {converted.api_version}")
        print(f"   Wrote: {output_path}")
        return 0

    except ConversionError as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.debug("Conversion failed", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
