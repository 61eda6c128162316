import argparse

import numpy as np

from vendsim.config import (
    DEMO_COIN_KINDS,
    DEMO_POP_NAMES,
    DEMO_POP_COSTS,
    DEMO_COIN_COUNTS,
    DEMO_POP_COUNTS,
)
from vendsim.simulation.engine import VendingMachineEngine
from vendsim.simulation.traffic import simulate_customers


def run_cola_example():
    print("=== Cola Purchase ===\n")
    engine = VendingMachineEngine(verbose=True)
    engine.construct([1, 5, 10], 1)
    engine.configure(["Cola"], [15])
    engine.load([3, 0, 0], [1])
    engine.insert(10)
    engine.insert(10)
    engine.press(0)

    delivered = engine.extract()
    print(f"Delivery chute: {delivered}")
    return delivered


def run_traffic(clients=None, seed=None):
    print("\n=== Customer Traffic ===\n")
    engine = VendingMachineEngine(verbose=False)
    engine.construct(DEMO_COIN_KINDS, len(DEMO_POP_NAMES))
    engine.configure(DEMO_POP_NAMES, DEMO_POP_COSTS)
    engine.load(DEMO_COIN_COUNTS, DEMO_POP_COUNTS)
    print(f"Initial Machine State:\n{engine.machine}")

    stats = simulate_customers(engine, clients=clients, rng=np.random.default_rng(seed))
    print(f"\nClients: {stats['clients']}, Sales: {stats['sales']}, No sale: {stats['no_sales']}")
    print(f"Coins inserted: {stats['coins_inserted']}, Change returned: {stats['change_returned']}, "
          f"Change kept: {stats['change_shortfall']}")

    unused, payments, pops = engine.unload()
    print(f"\nTeardown: {unused} in change, {payments} in payments, {len(pops)} pops left")
    return stats


def main():
    parser = argparse.ArgumentParser(description="Basic vending machine run")
    parser.add_argument("--clients", type=int, help="Number of customers (default: Poisson draw)")
    parser.add_argument("--seed", type=int, help="Random seed for the customer traffic")
    args = parser.parse_args()

    run_cola_example()
    run_traffic(clients=args.clients, seed=args.seed)


if __name__ == "__main__":
    main()
