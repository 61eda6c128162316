from collections import Counter
from typing import Optional, Union

from vendsim.config import VERBOSE
from vendsim.exceptions import (
    InvalidConfigurationError,
    InvalidInputError,
    MachineNotConstructedError,
)
from vendsim.models.coin import Coin
from vendsim.models.product import Pop
from vendsim.models.vending_machine import VendingMachine


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class VendingMachineEngine:
    """
    Drives a single vending machine through the script commands.

    A new ``construct`` replaces the current machine as a whole; a failed
    one leaves the previous machine in place. Every other operation needs
    a machine to exist.
    """

    def __init__(self, verbose: Optional[bool] = None):
        self.verbose = VERBOSE if verbose is None else verbose
        self._machine: Optional[VendingMachine] = None

    # --- Lifecycle ---

    @property
    def is_constructed(self) -> bool:
        return self._machine is not None

    @property
    def machine(self) -> VendingMachine:
        if self._machine is None:
            raise MachineNotConstructedError("No vending machine has been constructed yet.")
        return self._machine

    def reset(self):
        """Discards the current machine, if any."""
        self._machine = None
        self._log("Machine discarded.")

    def construct(self, coin_kinds: list[int], selection_button_count: int):
        if not _is_int(selection_button_count) or selection_button_count <= 0:
            raise InvalidConfigurationError("The selection button count must be positive.")
        if not coin_kinds:
            raise InvalidConfigurationError("At least one coin kind is required.")

        for coin_kind in coin_kinds:
            if not _is_int(coin_kind) or coin_kind <= 0:
                raise InvalidConfigurationError(f"The coin kind must have a positive value, got {coin_kind!r}.")

        frequencies = Counter(coin_kinds)
        for coin_kind in coin_kinds:
            if frequencies[coin_kind] > 1:
                raise InvalidConfigurationError(
                    f"{coin_kind} is a duplicate value. You cannot have duplicate coin kinds."
                )

        self._reinitialize(VendingMachine(list(coin_kinds), selection_button_count))
        self._log(f"Constructed with coin kinds {list(coin_kinds)} and {selection_button_count} buttons.")

    def _reinitialize(self, machine: VendingMachine):
        self._machine = machine

    # --- Setup ---

    def configure(self, pop_names: list[str], pop_costs: list[int]):
        machine = self.machine
        if pop_names is None or pop_costs is None:
            raise InvalidConfigurationError("pop_names and pop_costs cannot be None.")
        if len(pop_names) != len(pop_costs):
            raise InvalidConfigurationError("The number of pop names must be equal to the number of pop costs.")
        if len(pop_names) != machine.selection_button_count:
            raise InvalidConfigurationError(
                "The number of pop names and pop costs must be equal to the number of selection buttons."
            )
        for cost in pop_costs:
            if not _is_int(cost) or cost <= 0:
                raise InvalidConfigurationError(f"Pop costs must be positive integers, got {cost!r}.")

        for button, name, cost in zip(machine.selection_buttons, pop_names, pop_costs):
            button.name = name
            button.price = cost
        self._log(f"Configured buttons: {list(zip(pop_names, pop_costs))}")

    def load(self, coin_counts: list[int], pop_counts: list[int]):
        machine = self.machine
        if coin_counts is None or pop_counts is None:
            raise InvalidConfigurationError("coin_counts and pop_counts cannot be None.")
        if len(coin_counts) != len(machine.coin_kinds):
            raise InvalidConfigurationError("The number of coin counts must be equal to the number of coin kinds.")
        if len(pop_counts) != machine.selection_button_count:
            raise InvalidConfigurationError("The number of pop counts must be equal to the number of selection buttons.")
        for count in list(coin_counts) + list(pop_counts):
            if not _is_int(count) or count < 0:
                raise InvalidConfigurationError(f"Load counts must be non-negative integers, got {count!r}.")

        for slot, value, count in zip(machine.coin_dispenser, machine.coin_kinds, coin_counts):
            slot.extend(Coin(value) for _ in range(count))

        # Pops take the button's name as it is right now
        for slot, button, count in zip(machine.pop_dispenser, machine.selection_buttons, pop_counts):
            slot.extend(Pop(button.name) for _ in range(count))
        self._log(f"Loaded coins {list(coin_counts)} and pops {list(pop_counts)}.")

    # --- Purchasing ---

    def insert(self, value: int):
        machine = self.machine
        if not _is_int(value) or value <= 0:
            raise InvalidInputError(f"The coin must have a positive value, got {value!r}.")

        coin = Coin(value)
        if machine.coin_index(value) >= 0:
            machine.current_credit += value
            machine.total_payments += value
            machine.payment_coins.append(coin)
            self._log(f"Accepted coin {value}. Credit: {machine.current_credit}")
        else:
            machine.chute_coins.append(coin)
            self._log(f"Rejected coin {value} to the delivery chute.")

    def press(self, index: int):
        machine = self.machine
        if not _is_int(index) or index < 0 or index >= machine.selection_button_count:
            raise InvalidInputError(
                f"Button {index!r} is out of range for {machine.selection_button_count} selection buttons."
            )

        button = machine.selection_buttons[index]
        slot = machine.pop_dispenser[index]
        if not slot:
            self._log(f"Button {index} pressed but it is out of stock.")
            return
        if not button.is_configured:
            self._log(f"Button {index} pressed but it has no price.")
            return
        if machine.current_credit < button.price:
            self._log(f"Button {index} pressed with credit {machine.current_credit} below price {button.price}.")
            return

        slot.pop(0)
        machine.chute_pops.append(Pop(button.name))
        change_due = machine.current_credit - button.price
        self._log(f"Dispensed '{button.name}'. Change due: {change_due}")
        self.make_change(change_due)

    def make_change(self, amount: int) -> int:
        """
        Moves change coins into the delivery chute and clears the credit.

        Coin kinds are walked from the last declared one to the first, not
        by value, so construct(1, 10, 5; ...) tries 5 before 10. Whatever
        cannot be paid out with the coins in stock is kept by the machine.
        Returns that unpaid remainder.
        """
        machine = self.machine
        for i in range(len(machine.coin_kinds) - 1, -1, -1):
            value = machine.coin_kinds[i]
            slot = machine.coin_dispenser[i]
            while slot and amount >= value:
                amount -= value
                slot.pop(0)
                machine.chute_coins.append(Coin(value))
        if amount > 0:
            self._log(f"Could not return {amount} in change.")
        machine.current_credit = 0
        return amount

    # --- Inspection ---

    def extract(self) -> list[Union[int, str]]:
        machine = self.machine
        items = [coin.value for coin in machine.chute_coins]
        items.extend(pop.name for pop in machine.chute_pops)
        machine.chute_coins.clear()
        machine.chute_pops.clear()
        return items

    def unload(self) -> tuple[int, int, list[str]]:
        machine = self.machine
        unused_coin_value = machine.stored_coin_value()
        for slot in machine.coin_dispenser:
            slot.clear()

        total_payments = machine.total_payments
        machine.payment_coins.clear()
        machine.total_payments = 0

        pop_names = [pop.name for slot in machine.pop_dispenser for pop in slot]
        for slot in machine.pop_dispenser:
            slot.clear()

        self._log(f"Unloaded {unused_coin_value} in change, {total_payments} in payments, {len(pop_names)} pops.")
        return unused_coin_value, total_payments, pop_names

    def _log(self, message: str):
        if self.verbose:
            print(f"[Vending Machine] {message}")
