# config/tools/validate_config.py

import sys           # for exit codes
from pprint import pprint  # for structured printing

# make src discoverable if running as a script
from pathlib import Path
# __file__ is .../config/tools/validate_config.py
# parents[2] is the project root; append ROOT/src
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(PROJECT_ROOT / "src"))

from env.loader import load_navigation_config  # import our loader


def main(argv: list[str] | None = None) -> None:
    """Load and print the resolved navigation config, failing fast on errors."""
    args = sys.argv[1:] if argv is None else argv
    path = args[0] if args else None        # optional explicit config path

    try:
        cfg = load_navigation_config(path)
    except (FileNotFoundError, ValueError) as e:
        print("Navigation config validation FAILED:", file=sys.stderr)
        print(repr(e), file=sys.stderr)
        sys.exit(1)                          # non-zero exit: CI will mark as failed

    print("Navigation config validation OK.")
    print("\nSource:", cfg.source)
    print("\nNavigation:")
    pprint(cfg.navigation)
    print("\nPermissions:")
    print("  max_threat_level:", cfg.permissions.max_threat_level.name)
    pprint({name: sorted(owners) for name, owners in cfg.permissions.allowed_owners.items()})
    print("\nMonitoring:")
    pprint(cfg.monitoring)


if __name__ == "__main__":
    main()  # run main() only when script is executed directly
