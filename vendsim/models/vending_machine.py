from vendsim.models.coin import Coin
from vendsim.models.product import Pop, SelectionButton


class VendingMachine:
    """
    All the state of one constructed machine: the fixed coin kinds and
    buttons, the coin and pop dispensers, the payment ledger and the
    delivery chute. The engine is the only thing that mutates it.
    """

    def __init__(self, coin_kinds: list[int], selection_button_count: int):
        self.coin_kinds = tuple(coin_kinds)
        self.selection_button_count = selection_button_count

        # One dispenser slot per coin kind, same order as declared
        self.coin_dispenser: list[list[Coin]] = [[] for _ in self.coin_kinds]
        self.selection_buttons = [SelectionButton() for _ in range(selection_button_count)]
        self.pop_dispenser: list[list[Pop]] = [[] for _ in range(selection_button_count)]

        # Accepted coins are held here and never used as change
        self.payment_coins: list[Coin] = []
        self.current_credit = 0
        self.total_payments = 0

        self.chute_coins: list[Coin] = []
        self.chute_pops: list[Pop] = []

    def coin_index(self, value: int) -> int:
        """Index of the coin kind with this value, or -1 if the machine does not accept it."""
        try:
            return self.coin_kinds.index(value)
        except ValueError:
            return -1

    def coin_counts(self) -> list[int]:
        return [len(slot) for slot in self.coin_dispenser]

    def pop_counts(self) -> list[int]:
        return [len(slot) for slot in self.pop_dispenser]

    def stored_coin_value(self) -> int:
        return sum(coin.value for slot in self.coin_dispenser for coin in slot)

    def __repr__(self):
        button_list = '\n    '.join(
            f"[{i}] {button} stock={len(self.pop_dispenser[i])}"
            for i, button in enumerate(self.selection_buttons)
        )
        return (
            f"VendingMachine(\n"
            f"  Coin Kinds: {list(self.coin_kinds)},\n"
            f"  Coin Counts: {self.coin_counts()},\n"
            f"  Current Credit: {self.current_credit},\n"
            f"  Total Payments: {self.total_payments},\n"
            f"  Delivery Chute: {len(self.chute_coins)} coins, {len(self.chute_pops)} pops,\n"
            f"  Buttons:\n    {button_list}\n"
            f")"
        )
