from collections import Counter
from typing import Optional

from vendsim.exceptions import MachineNotConstructedError, ScriptParseError, VendingMachineError
from vendsim.script.parser import Command, parse_script
from vendsim.simulation.engine import VendingMachineEngine
from vendsim.utils.helpers import summarize_delivery


class ScriptResult:
    def __init__(self, path: str):
        self.path = path
        self.commands_executed = 0
        self.checks_passed = 0
        self.failed_checks: list[str] = []
        self.error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.error is None and not self.failed_checks

    def as_dict(self) -> dict:
        return {
            "path": self.path,
            "passed": self.passed,
            "commands_executed": self.commands_executed,
            "checks_passed": self.checks_passed,
            "checks_failed": len(self.failed_checks),
            "error": self.error or "",
        }

    def __repr__(self):
        status = "PASSED" if self.passed else "FAILED"
        return (f"ScriptResult({self.path}: {status}, commands={self.commands_executed}, "
                f"checks={self.checks_passed}/{self.checks_passed + len(self.failed_checks)})")


class ScriptDriver:
    """
    Feeds parsed script commands to a VendingMachineEngine and evaluates
    the CHECK_DELIVERY and CHECK_TEARDOWN commands against what the engine
    last delivered or unloaded.

    A failed check is recorded and the script goes on. An engine error, or
    any command before the first construct, stops the script.
    """

    def __init__(self, engine: Optional[VendingMachineEngine] = None, debug: bool = False):
        self.engine = engine or VendingMachineEngine()
        self.debug = debug
        self.last_delivery: list = []
        self.last_teardown: Optional[tuple] = None

    def run_file(self, path: str) -> ScriptResult:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        return self.run_text(text, path=path)

    def run_text(self, text: str, path: str = "<script>") -> ScriptResult:
        result = ScriptResult(path)
        try:
            commands = parse_script(text)
        except ScriptParseError as e:
            result.error = f"Parse error: {e}"
            self._log(result.error)
            return result
        return self.run_commands(commands, result)

    def run_commands(self, commands: list[Command], result: Optional[ScriptResult] = None) -> ScriptResult:
        result = result or ScriptResult("<commands>")
        # Each script starts without a machine, the first command must build one
        self.engine.reset()
        self.last_delivery = []
        self.last_teardown = None

        for command in commands:
            if self.debug:
                self._log(f"line {command.line}: {command}")
            try:
                self._execute(command, result)
            except VendingMachineError as e:
                result.error = f"line {command.line}: {command.name}: {e}"
                self._log(f"Error at {result.error}")
                break
            result.commands_executed += 1

        return result

    def _execute(self, command: Command, result: ScriptResult):
        engine = self.engine
        args = command.args
        if command.name != "construct" and not engine.is_constructed:
            raise MachineNotConstructedError(f"'{command.name}' issued before the first construct.")

        if command.name == "construct":
            engine.construct(list(args[0]), args[1][0])
        elif command.name == "configure":
            engine.configure(list(args[0]), list(args[1]))
        elif command.name == "load":
            engine.load(list(args[0]), list(args[1]))
        elif command.name == "insert":
            engine.insert(args[0][0])
        elif command.name == "press":
            engine.press(args[0][0])
        elif command.name == "extract":
            self.last_delivery = engine.extract()
        elif command.name == "unload":
            self.last_teardown = engine.unload()
        elif command.name == "CHECK_DELIVERY":
            self._check_delivery(command, result)
        elif command.name == "CHECK_TEARDOWN":
            self._check_teardown(command, result)

    def _check_delivery(self, command: Command, result: ScriptResult):
        expected_value = command.args[0][0]
        expected_pops = list(command.args[0][1:])
        coin_value, pop_names = summarize_delivery(self.last_delivery)

        if coin_value == expected_value and Counter(pop_names) == Counter(expected_pops):
            result.checks_passed += 1
        else:
            self._fail(command, result,
                       f"expected {expected_value} and {expected_pops}, "
                       f"delivered {coin_value} and {pop_names}")

    def _check_teardown(self, command: Command, result: ScriptResult):
        expected_change = command.args[0][0]
        expected_payments = command.args[1][0]
        expected_pops = list(command.args[2]) if len(command.args) > 2 else []
        if self.last_teardown is None:
            self._fail(command, result, "nothing has been unloaded yet")
            return
        change, payments, pop_names = self.last_teardown

        if (change == expected_change and payments == expected_payments
                and Counter(pop_names) == Counter(expected_pops)):
            result.checks_passed += 1
        else:
            self._fail(command, result,
                       f"expected {expected_change}; {expected_payments}; {expected_pops}, "
                       f"unloaded {change}; {payments}; {pop_names}")

    def _fail(self, command: Command, result: ScriptResult, detail: str):
        message = f"line {command.line}: {command.name} failed: {detail}"
        result.failed_checks.append(message)
        self._log(message)

    def _log(self, message: str):
        if self.debug:
            print(f"[Script Driver] {message}")


def run_script(path: str, debug: bool = False) -> ScriptResult:
    return ScriptDriver(debug=debug).run_file(path)
