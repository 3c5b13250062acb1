#!/usr/bin/env python3
"""Run every forksync test module in its own interpreter and list the failures."""

import sys
import subprocess
from pathlib import Path
from typing import List

ROOT = Path(__file__).parent

# Module -> what it covers; modules not listed here still run
DESCRIPTIONS = {
    "test_config": "Configuration loading and validation",
    "test_console": "Console output, prompts and error guidance",
    "test_sync_orchestrator": "Sync pipeline against the fake backend",
    "test_git_backend_integration": "Sync pipeline against real git repositories",
}


def discover_modules() -> List[str]:
    return sorted(path.stem for path in ROOT.glob("test_*.py"))


def run_module(module: str) -> bool:
    """Run one test module with unittest; True when it exits cleanly."""
    print(f"\n--- {module}: {DESCRIPTIONS.get(module, 'tests')} ---")
    result = subprocess.run([sys.executable, "-m", "unittest", "-v", module], cwd=ROOT)
    return result.returncode == 0


def main(argv: List[str]) -> int:
    modules = argv or discover_modules()
    missing = [module for module in modules if not (ROOT / f"{module}.py").exists()]
    failed = [module for module in modules if module not in missing and not run_module(module)]

    print(f"\n{'=' * 60}")
    print(f"forksync: {len(modules) - len(failed) - len(missing)}/{len(modules)} test modules passed")
    for module in missing:
        print(f"  missing: {module}")
    for module in failed:
        print(f"  failed:  {module} ({DESCRIPTIONS.get(module, 'tests')})")
        print(f"           rerun with: {sys.executable} -m unittest -v {module}")

    return 1 if failed or missing else 0


if __name__ == "__main__":
    try:
        sys.exit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        print("\nTest run interrupted")
        sys.exit(1)
