import argparse
import json
import sys
from typing import List, Optional

from aistack import __version__
from aistack.aws.base.aws_handler_factory import AWSHandlerFactory
from aistack.aws.base.dry_run import aws_dry_run_context
from aistack.aws.base.stack_plan import describe_plan
from aistack.aws.exceptions.aws_exceptions import StackProvisioningError
from aistack.cli.console import print_error, print_info, print_success, print_warning
from aistack.config.stack_config.stack_config_handler import StackConfigManager
from aistack.helpers.logger import setup_logging
from aistack.helpers.utils import deep_merge, load_json_data

ACTIONS = ("provisionStack", "describePlan", "showConfig")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aistack",
        description="Provision a VPC, S3 bucket and endpoint, secret and metric alarm on AWS, then tear them down.",
    )

    # Define supported actions
    parser.add_argument("action", choices=ACTIONS, help="Action to perform.")

    # Configuration inputs
    parser.add_argument("-f", "--file", help="Path to a JSON configuration file.")
    parser.add_argument("--data", help="JSON string merged over the configuration file.")
    parser.add_argument("--region", help="AWS region; overrides every other source.")

    # Run flags
    parser.add_argument("--dry-run", action="store_true", help="Send every AWS call to moto instead of AWS.")
    parser.add_argument("--full-teardown", action="store_true",
                        help="Also release the endpoint, VPC and bucket after the teardown step.")
    parser.add_argument("--long", action="store_true", help="Display detailed responses with all the information available.")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the aistack command line.

    :param argv: Arguments without the program name; defaults to sys.argv[1:].
    :return: Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Set up logging
    logger = setup_logging(log_level=args.log_level, force=bool(args.log_level))

    try:
        if args.action == "describePlan":
            print(json.dumps({"steps": describe_plan()}, indent=2))
            return 0

        # Load input data (optional)
        overrides = {}
        if args.data:
            overrides = load_json_data(json_str=args.data)
            if not isinstance(overrides, dict):
                raise ValueError("--data must be a JSON object.")
        if args.full_teardown:
            overrides = deep_merge(overrides, {"teardown": {"full": True}})

        config = StackConfigManager.load(config_file=args.file, overrides=overrides, region=args.region)

        if args.action == "showConfig":
            response = {
                "source": StackConfigManager.get_source(),
                "config": config.model_dump(),
            }
            print(json.dumps(response, indent=2))
            return 0

        if args.action == "provisionStack":
            if args.dry_run:
                print_info("Dry run: no real AWS resources will be created.")

            with aws_dry_run_context(args.dry_run):
                stack_handler = AWSHandlerFactory.create_stack_handler(config, dry_run=args.dry_run)
                run = stack_handler.provision(dry_run=args.dry_run)

            print_success(f"Stack '{run.stackName}' run {run.runId} complete.")
            print(json.dumps(run.format_response(long=args.long), indent=2))
            return 0

        raise ValueError(f"Unsupported action: {args.action}")

    except StackProvisioningError as e:
        print_error(str(e))
        for failure in e.release_failures:
            print_warning(f"Still allocated: {failure['type']} {failure['id']} ({failure['error']})")
        response = e.to_dict()
        if e.run is not None:
            response["run"] = e.run.format_response(long=args.long)
        print(json.dumps(response, indent=2))
        return 1

    except Exception as e:
        logger.error(f"An error occurred: {e}", exc_info=True)
        print_error(str(e))
        print(json.dumps({"error": str(e)}, indent=2))
        return 1


if __name__ == "__main__":
    sys.exit(main())
