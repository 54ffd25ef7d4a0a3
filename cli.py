from src.lambdas.lambda_deployer.app import ACTIONS, run_action
import argparse
import json
import logging
import sys


class _LocalContext:
    def __init__(self, request_id):
        self.aws_request_id = request_id


def _load_event(filename: str) -> dict:
    with open(filename) as f:
        return json.load(f)


def invoke(args):
    """
    run a saved CodePipeline job event through the handler with real AWS clients
    """
    try:
        event = _load_event(args.event)
    except (OSError, ValueError) as e:
        print(f"Could not read event file {args.event}: {e}")
        sys.exit(1)

    response = run_action(args.action, event, _LocalContext(args.request_id))
    print(json.dumps(response, indent=2, default=str))
    if response.get("status") != "Succeeded":
        sys.exit(1)


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    parser = argparse.ArgumentParser(
        prog='lambda-deployer',
        description='CodePipeline action that deploys a Lambda function'
        '          artifact and promotes published versions to aliases'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands'
    )

    invoke_parser = subparsers.add_parser(
        'invoke',
        help='Run one job event locally'
    )
    invoke_parser.add_argument(
        'action',
        choices=sorted(ACTIONS),
        help='Which action to run'
    )
    invoke_parser.add_argument(
        '--event',
        required=True,
        help='Path to a CodePipeline job event JSON file'
    )
    invoke_parser.add_argument(
        '--request-id',
        default='local-invoke',
        help='Execution id reported on failure'
    )

    invoke_parser.set_defaults(func=invoke)
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == '__main__':
    main()
