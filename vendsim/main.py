import argparse
import json
import os
import sys

from vendsim.config import SCRIPTS_DIR, SCRIPT_RESULTS_CSV
from vendsim.script.driver import ScriptDriver
from vendsim.simulation.engine import VendingMachineEngine
from vendsim.utils.helpers import append_script_results

DEFAULT_SCRIPTS = ["good-script", "bad-script1", "bad-script2"]


def run_scripts(paths, verbose=True, record_history=False):
    results = []
    for path in paths:
        if verbose:
            print(f"\n=== Running {path} ===")
        driver = ScriptDriver(VendingMachineEngine(verbose=verbose), debug=verbose)
        result = driver.run_file(path)
        results.append(result)

        if verbose:
            print(f"Commands executed: {result.commands_executed}")
            print(f"Checks passed: {result.checks_passed}, failed: {len(result.failed_checks)}")
            for failure in result.failed_checks:
                print(f"  - {failure}")
            if result.error:
                print(f"Stopped on error: {result.error}")
            print("PASSED" if result.passed else "FAILED")

    if record_history:
        append_script_results(results, SCRIPT_RESULTS_CSV, verbose=verbose)
    return results


def main():
    parser = argparse.ArgumentParser(description="Run vending machine test scripts")
    parser.add_argument("scripts", nargs="*",
                        help=f"Script files to run (default: the sample scripts in {SCRIPTS_DIR})")
    parser.add_argument("--quiet", action="store_true", help="Only print the final summary")
    parser.add_argument("--csv", action="store_true", help="Append results to the script history CSV")
    parser.add_argument("--json-output", action="store_true", help="Output results as JSON to stdout")

    args = parser.parse_args()

    paths = args.scripts or [os.path.join(SCRIPTS_DIR, name) for name in DEFAULT_SCRIPTS]
    verbose = not (args.quiet or args.json_output)
    results = run_scripts(paths, verbose=verbose, record_history=args.csv)

    if args.json_output:
        print(json.dumps([result.as_dict() for result in results]))
    else:
        print("\n=== Summary ===")
        for result in results:
            print(result)

    sys.exit(0 if all(result.passed for result in results) else 1)


if __name__ == "__main__":
    main()
