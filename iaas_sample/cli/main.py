"""
Main CLI module with argument parsing and command execution.

This module provides the main CLI interface including:
- Command line argument parsing
- Command routing and execution
- Mapping of provider and domain errors to exit codes
"""
import argparse
import sys
import traceback
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from iaas_sample import __version__
from iaas_sample.application import ProvisioningClient
from iaas_sample.cli.formatters import format_output
from iaas_sample.config import AppConfig, ConfigurationManager, LogLevel
from iaas_sample.domain.compute import ProvisionRequest
from iaas_sample.domain.core.exceptions import (
    ConfigurationError,
    DomainException,
    HostnameConflictError,
    InstanceNotFoundError,
)
from iaas_sample.infrastructure.exceptions import ProviderConnectionError, ProviderError
from iaas_sample.infrastructure.logging import get_logger, setup_logging

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_HOSTNAME_CONFLICT = 3
EXIT_CONNECTION = 4
EXIT_INTERRUPTED = 130

FORMATS = ["table", "json", "yaml", "list"]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="iaas-sample",
        description="Sample IaaS client - list and manage compute resources through libcloud",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Credentials are read from PROVIDER_IDENTITY and PROVIDER_SECRET.

Examples:
  %(prog)s demo                                  # List everything
  %(prog)s --format json instances               # List instances as JSON
  %(prog)s create --hostname vm-1 --domain service.com --payload A=1,B=2
  %(prog)s terminate --name vm-1                 # Terminate by name
        """,
    )

    parser.add_argument("--config", help="Configuration file path (JSON or YAML)")
    parser.add_argument("--provider", help="libcloud compute provider name (default: ec2)")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Set logging level")
    parser.add_argument("--format", choices=FORMATS, default="table", help="Output format")
    parser.add_argument("--verbose", action="store_true", help="Print tracebacks on errors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("locations", help="List assignable locations")
    subparsers.add_parser("hardware", help="List hardware profiles")
    subparsers.add_parser("images", help="List images")
    subparsers.add_parser("instances", help="List instances")
    subparsers.add_parser("demo", help="List locations, hardware, images and instances")

    create = subparsers.add_parser("create", help="Create an instance")
    create.add_argument("--hostname", required=True, help="Host name of the new instance")
    create.add_argument("--image", help="Image ID")
    create.add_argument("--location", help="Location ID")
    create.add_argument("--hardware", help="Hardware profile ID")
    create.add_argument("--os-family", help="Operating system family (e.g. ubuntu)")
    create.add_argument("--os-version", help="Operating system version pattern")
    create.add_argument("--domain", help="Domain name")
    create.add_argument("--payload", help="Metadata payload attached to the instance")

    terminate = subparsers.add_parser("terminate", help="Terminate instances")
    target = terminate.add_mutually_exclusive_group(required=True)
    target.add_argument("--name", help="Terminate every instance with this name")
    target.add_argument("--id", dest="instance_id", help="Terminate the instance with this ID")

    return parser


def create_client(config: AppConfig) -> ProvisioningClient:
    """Construct a client from the provider configuration."""
    provider = config.provider
    missing = [
        env for env, value in (("PROVIDER_IDENTITY", provider.identity), ("PROVIDER_SECRET", provider.secret))
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"Missing provider credentials: set {', '.join(missing)}", missing_fields=missing
        )

    return ProvisioningClient(
        provider.identity,
        provider.secret,
        provider=provider.name,
        timeout=provider.timeout,
        overrides=provider.overrides,
        group=provider.group,
        inbound_ports=provider.inbound_ports,
    )


def _dump(items: List[Any]) -> List[Dict[str, Any]]:
    return [item.model_dump(mode="json") for item in items]


def build_provision_request(args: argparse.Namespace, config: AppConfig) -> ProvisionRequest:
    """Combine create flags with configured defaults."""
    defaults = config.defaults
    return ProvisionRequest(
        image_id=args.image or defaults.image_id,
        location_id=args.location or defaults.location_id,
        hardware_id=args.hardware or defaults.hardware_id,
        os_family=args.os_family or defaults.os_family,
        os_version=args.os_version or defaults.os_version,
        domain_name=args.domain or defaults.domain_name,
        host_name=args.hostname,
        metadata_payload=args.payload if args.payload is not None else defaults.metadata_payload,
    )


def _list_command(key: str, operation: Callable[[ProvisioningClient], List[Any]]):
    def handler(client: ProvisioningClient, args: argparse.Namespace, config: AppConfig) -> Dict[str, Any]:
        return {key: _dump(operation(client))}

    return handler


def handle_demo(client: ProvisioningClient, args: argparse.Namespace, config: AppConfig) -> Dict[str, Any]:
    return {
        "locations": _dump(client.list_locations()),
        "hardware": _dump(client.list_hardware_profiles()),
        "images": _dump(client.list_images()),
        "instances": _dump(client.list_instances()),
    }


def handle_create(client: ProvisioningClient, args: argparse.Namespace, config: AppConfig) -> Dict[str, Any]:
    request = build_provision_request(args, config)
    instance = client.create_instance(request)
    return {"instance": instance.model_dump(mode="json")}


def handle_terminate(client: ProvisioningClient, args: argparse.Namespace, config: AppConfig) -> Dict[str, Any]:
    if args.name is not None:
        count = client.terminate_instance_by_name(args.name)
        return {"name": args.name, "terminated": count}

    try:
        client.terminate_instance_by_id(args.instance_id)
    except InstanceNotFoundError as e:
        print(f"Warning: {e}", file=sys.stderr)
        return {"instance_id": args.instance_id, "terminated": False}
    return {"instance_id": args.instance_id, "terminated": True}


COMMAND_HANDLERS = {
    "locations": _list_command("locations", lambda c: c.list_locations()),
    "hardware": _list_command("hardware", lambda c: c.list_hardware_profiles()),
    "images": _list_command("images", lambda c: c.list_images()),
    "instances": _list_command("instances", lambda c: c.list_instances()),
    "demo": handle_demo,
    "create": handle_create,
    "terminate": handle_terminate,
}


def load_config(args: argparse.Namespace) -> AppConfig:
    """Load configuration and apply global command line overrides."""
    config = ConfigurationManager(args.config).get_config()
    updates = {}
    if args.provider:
        updates["provider"] = config.provider.model_copy(update={"name": args.provider.lower()})
    if args.log_level:
        updates["logging"] = config.logging.model_copy(update={"level": LogLevel(args.log_level)})
    return config.model_copy(update=updates) if updates else config


def _fail(message: str, code: int, verbose: bool) -> None:
    if verbose:
        traceback.print_exc()
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(code)


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help(sys.stderr)
        sys.exit(EXIT_USAGE)

    try:
        try:
            config = load_config(args)
        except ConfigurationError as e:
            _fail(str(e), EXIT_USAGE, args.verbose)

        setup_logging(config.logging)
        logger = get_logger(__name__)

        try:
            client = create_client(config)
            result = COMMAND_HANDLERS[args.command](client, args, config)
        except ConfigurationError as e:
            _fail(str(e), EXIT_USAGE, args.verbose)
        except PydanticValidationError as e:
            _fail(f"Invalid arguments: {e}", EXIT_USAGE, args.verbose)
        except ProviderConnectionError as e:
            logger.error("Could not connect to compute service", error=str(e))
            _fail(str(e), EXIT_CONNECTION, args.verbose)
        except HostnameConflictError as e:
            _fail(str(e), EXIT_HOSTNAME_CONFLICT, args.verbose)
        except (ProviderError, DomainException) as e:
            _fail(str(e), EXIT_ERROR, args.verbose)
        except Exception as e:
            logger.error("Unexpected error", error=str(e))
            _fail(f"Unexpected error: {e}", EXIT_ERROR, args.verbose)

        print(format_output(result, args.format))

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)


if __name__ == "__main__":
    main()
