from typing import Optional

import numpy as np

from vendsim.config import CLIENT_LAMBDA
from vendsim.simulation.engine import VendingMachineEngine


def simulate_customers(engine: VendingMachineEngine, clients: Optional[int] = None,
                       rng: Optional[np.random.Generator] = None) -> dict:
    """
    Sends a batch of random customers to a configured machine.

    Each customer picks a button, feeds it random accepted coins until the
    credit covers the price, presses the button and takes whatever lands in
    the delivery chute. Buttons without a price are skipped.
    """
    rng = rng or np.random.default_rng()
    machine = engine.machine
    if clients is None:
        clients = int(rng.poisson(CLIENT_LAMBDA))

    stats = {
        "clients": clients,
        "sales": 0,
        "no_sales": 0,
        "coins_inserted": 0,
        "change_returned": 0,
        "change_shortfall": 0,
    }

    priced = [i for i, button in enumerate(machine.selection_buttons) if button.is_configured]
    if not priced:
        print("No configured buttons to buy from.")
        stats["no_sales"] = clients
        return stats

    for _ in range(clients):
        index = int(rng.choice(priced))
        price = machine.selection_buttons[index].price

        while machine.current_credit < price:
            engine.insert(int(rng.choice(machine.coin_kinds)))
            stats["coins_inserted"] += 1

        credit = machine.current_credit
        stock_before = machine.pop_counts()[index]
        engine.press(index)
        delivered = engine.extract()

        if machine.pop_counts()[index] < stock_before:
            stats["sales"] += 1
            returned = sum(item for item in delivered if isinstance(item, int))
            stats["change_returned"] += returned
            stats["change_shortfall"] += credit - price - returned
        else:
            # Out of stock: the coins stay as credit for the next customer
            stats["no_sales"] += 1

    return stats
