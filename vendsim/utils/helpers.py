import csv
import os
from datetime import datetime


def summarize_delivery(items):
    """
    Splits what extract() returned into the total coin value and the list
    of pop names, keeping the pops in delivery order.
    """
    coin_value = 0
    pop_names = []
    for item in items:
        if isinstance(item, int) and not isinstance(item, bool):
            coin_value += item
        else:
            pop_names.append(item)
    return coin_value, pop_names


def append_script_results(results, csv_path, verbose=True):
    """Appends one row per ScriptResult to the history CSV, writing the header for a new file."""
    directory = os.path.dirname(csv_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    rows = [{"timestamp": timestamp, **result.as_dict()} for result in results]
    if not rows:
        return

    file_exists = os.path.isfile(csv_path)
    with open(csv_path, mode='a', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=rows[0].keys())
        if not file_exists:
            writer.writeheader()
        writer.writerows(rows)
    if verbose:
        print(f"Results appended to {csv_path}")
