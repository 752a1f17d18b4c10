import argparse
import logging
import sys

from src.adapters.token_store import FileTokenStore, InMemoryTokenStore
from src.app_shell.config import AppConfig, validate_rules
from src.components.session import AuthError
from src.domain.policy import NavigationPolicy
from src.ports.token_store import TokenStorePort
from src.rules.loader import load_rules
from src.rules.models import Rules
from src.ui.context import ServiceContext

logger = logging.getLogger("cli")


def get_rules(config: AppConfig) -> Rules:
    try:
        rules = config.apply(load_rules(config.rules_path))
        validate_rules(rules)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)
    return rules


def handle_check_rules(rules: Rules, args: argparse.Namespace) -> None:
    print(f"Rules OK: {len(rules.navigation.tabs)} tabs, {len(rules.resources)} resources.")


def handle_tabs(rules: Rules, args: argparse.Namespace) -> None:
    tabs = NavigationPolicy(rules.navigation.tabs).visible_tabs(args.role)
    if not tabs:
        print(f"No tabs for role '{args.role}'.")
        return
    for tab in tabs:
        print(f"{tab.id:<15} {tab.label}")


def handle_export(rules: Rules, config: AppConfig, args: argparse.Namespace) -> None:
    store: TokenStorePort = (
        FileTokenStore(config.token_file, rules.session.token_key)
        if config.token_file
        else InMemoryTokenStore()
    )
    ctx = ServiceContext.create(rules, store)
    try:
        if args.email:
            ctx.session.login(args.email, args.password or "")
        else:
            ctx.session.hydrate()
        if not ctx.session.is_authenticated:
            logger.error("Not signed in. Pass --email/--password or set UMS_TOKEN_FILE.")
            sys.exit(1)

        controller = ctx.controller(args.resource)
        controller.page = args.page
        if not controller.refresh():
            logger.error(f"Export failed: {controller.last_error}")
            sys.exit(1)
        print(controller.export_json())
    except AuthError as e:
        logger.error(f"Login failed: {e.message}")
        sys.exit(1)
    except KeyError as e:
        logger.error(str(e))
        sys.exit(1)
    finally:
        ctx.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="University Management System console CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("check-rules", help="Load and cross-validate the rules file")

    tabs_parser = subparsers.add_parser("tabs", help="List the screens a role can open")
    tabs_parser.add_argument("role", help="admin, student or clinic")

    export_parser = subparsers.add_parser("export", help="Print one page of a resource as JSON")
    export_parser.add_argument("resource", help="Resource name from rules.yaml, e.g. students")
    export_parser.add_argument("--page", type=int, default=1)
    export_parser.add_argument("--email", help="Log in with this account first")
    export_parser.add_argument("--password")

    args = parser.parse_args()

    config = AppConfig.from_env()
    logging.basicConfig(level=config.log_level)
    rules = get_rules(config)

    if args.command == "check-rules":
        handle_check_rules(rules, args)
    elif args.command == "tabs":
        handle_tabs(rules, args)
    elif args.command == "export":
        handle_export(rules, config, args)


if __name__ == "__main__":
    main()
